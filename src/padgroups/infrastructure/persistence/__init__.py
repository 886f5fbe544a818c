"""Persistence layer: SQL engine, key-value store adapters and repositories."""
