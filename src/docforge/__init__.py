"""docforge - LaTeX installation and timestamped document builds."""

__version__ = "0.1.0"
