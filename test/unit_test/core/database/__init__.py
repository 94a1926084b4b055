"""Unit tests for the database layer.

Repositories are exercised against in-memory SQLite.
"""
