"""Catalog service exceptions"""


class CatalogSourceError(Exception):
    """Raised when a catalog data collaborator fails or returns garbage"""
