"""SQLite connection helpers for the key-value store and the bootstrap scripts."""

from .connections import connect, apply_schema, DEFAULT_SCHEMA

__all__ = ["connect", "apply_schema", "DEFAULT_SCHEMA"]
