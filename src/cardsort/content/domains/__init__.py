"""Bundled stimulus domain definitions."""
