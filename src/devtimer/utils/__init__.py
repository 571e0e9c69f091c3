"""Shared helpers for devtimer."""
