"""
Command handlers for member-order
"""

from .reorder import AstFileProcessor, ReorderCommand

__all__ = [
    "AstFileProcessor",
    "ReorderCommand",
]
