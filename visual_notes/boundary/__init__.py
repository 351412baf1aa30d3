"""Persistence boundary."""
