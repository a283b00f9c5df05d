"""Workflow node definitions."""
