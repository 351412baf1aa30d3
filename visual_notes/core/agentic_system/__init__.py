"""Agentic pipelines."""
