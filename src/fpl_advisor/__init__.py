"""FPL advisor: league data plus team state in, structured gameweek advice out."""

from .cli import main

__version__ = "0.1.0"

__all__ = ["__version__", "main"]
