"""Configuration, logging, process execution and shared models."""
