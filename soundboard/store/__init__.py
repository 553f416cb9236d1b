"""Filesystem-backed stores: the config document and the audio asset catalog."""
