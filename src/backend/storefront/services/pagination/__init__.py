"""Pagination package - clamped page navigation for listings"""

from .paginator import Paginator

__all__ = ["Paginator"]
