"""FastAPI web API for Stash."""
