"""
Core modules for member ordering
"""

from .comparator import Order, by, capture, chain, prefer
from .dependency_analyzer import DependencyAnalyzer, extract_dependencies
from .names import extract_name
from .ordering import build_comparator, data_dependency
from .rewriter import DeclarationRewriter, preprocess
from .visit import visit

__all__ = [
    # Classes
    "DeclarationRewriter",
    "DependencyAnalyzer",
    "Order",
    # Functions
    "build_comparator",
    "by",
    "capture",
    "chain",
    "data_dependency",
    "extract_dependencies",
    "extract_name",
    "prefer",
    "preprocess",
    "visit",
]
