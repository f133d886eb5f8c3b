"""Pastoral verse reference catalog."""

from sermon_wizard.verses.loader import (
    Verse,
    VerseCatalogValidationError,
    VerseCategory,
    get_category,
    grouped_categories,
    list_categories,
    load_verse_catalog,
)

__all__ = [
    "Verse",
    "VerseCatalogValidationError",
    "VerseCategory",
    "get_category",
    "grouped_categories",
    "list_categories",
    "load_verse_catalog",
]
