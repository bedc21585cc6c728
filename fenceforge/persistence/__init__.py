"""
Persistence layer - the only code that touches the filesystem for directives.
"""
from .writer import Materializer

__all__ = ["Materializer"]
