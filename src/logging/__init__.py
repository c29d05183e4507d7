"""Logging setup and deploy context."""
