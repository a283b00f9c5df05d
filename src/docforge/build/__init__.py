"""Document build stages."""
