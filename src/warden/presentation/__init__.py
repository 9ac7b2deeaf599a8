"""Presentation layer (HTTP API)."""
