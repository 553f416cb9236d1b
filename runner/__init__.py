"""Smoke runner for a live soundboard admin server."""
