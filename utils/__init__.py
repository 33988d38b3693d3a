"""Shared utilities: logging, time helpers and input validators."""
