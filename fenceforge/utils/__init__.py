"""
Utility modules.
"""
from .parser import DirectiveParser, parse_directives, scan_response

__all__ = ["DirectiveParser", "parse_directives", "scan_response"]
