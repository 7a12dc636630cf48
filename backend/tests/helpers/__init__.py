"""Shared helpers for HTTP-level tests."""
