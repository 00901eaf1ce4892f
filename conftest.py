"""Puts the repository root on the path so the examples can be imported by tests."""
