"""Workflow graphs."""
