"""Persistent store adapters."""
