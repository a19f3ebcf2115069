"""
member-order - dependency-first ordering of declaration members
"""

__version__ = "1.0.0"
