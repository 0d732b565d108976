"""Deployment migrations and access checks for the CodexTitle registry."""

__version__ = "0.3.0"
