"""Pure domain logic: credentials, sessions, request auth, filenames, errors.

Nothing in here imports FastAPI, so it can be unit-tested and reused by the
smoke runner.
"""
__all__ = ["auth", "credentials", "errors", "filenames", "models", "session"]
