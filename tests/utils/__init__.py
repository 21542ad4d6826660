"""Helper utilities for testing."""
