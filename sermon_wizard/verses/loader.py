"""Verse reference loader.

Loads the pastoral verse catalog from verses.yaml: groups of categories
(Hospital, Velórios, Batismo, ...), each a list of Bible references with a
one-line note. The catalog is static and validated once on first load.
"""

from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Any
from urllib.parse import quote

import yaml

_VERSES_PATH = Path(__file__).parent / "verses.yaml"

WHATSAPP_SHARE_URL = "https://wa.me/?text="


class VerseCatalogValidationError(ValueError):
    """verses.yaml is structurally invalid."""


@dataclass(frozen=True)
class Verse:
    ref: str
    text: str


@dataclass(frozen=True)
class VerseCategory:
    slug: str
    name: str
    group: str
    verses: tuple[Verse, ...]

    def as_text(self) -> str:
        """Plain-text listing: heading, then each reference followed by its note."""
        lines = [self.name.upper()]
        for verse in self.verses:
            lines.extend((verse.ref, verse.text))
        return "\n".join(lines)

    def share_text(self, link: str | None = None) -> str:
        """Text copied to the clipboard or sent over WhatsApp."""
        text = f"{self.name}\n\n{self.as_text()}"
        if link:
            text += f"\n\nAcesse: {link}"
        return text

    def whatsapp_url(self, link: str | None = None) -> str:
        return WHATSAPP_SHARE_URL + quote(self.share_text(link), safe="")


def _require_str(value: Any, where: str) -> str:
    if not isinstance(value, str) or not value.strip():
        raise VerseCatalogValidationError(f"{where} must be a non-empty string")
    return value.strip()


def _parse_catalog(data: Any) -> dict[str, VerseCategory]:
    if not isinstance(data, dict):
        raise VerseCatalogValidationError("Verse catalog must be a mapping")
    groups = data.get("groups")
    if not isinstance(groups, list) or not groups:
        raise VerseCatalogValidationError("'groups' must be a non-empty list")

    catalog: dict[str, VerseCategory] = {}
    for gi, group in enumerate(groups):
        if not isinstance(group, dict):
            raise VerseCatalogValidationError(f"groups[{gi}] must be a mapping")
        group_name = _require_str(group.get("name"), f"groups[{gi}].name")
        categories = group.get("categories")
        if not isinstance(categories, list) or not categories:
            raise VerseCatalogValidationError(f"group '{group_name}' has no categories")
        for category in categories:
            if not isinstance(category, dict):
                raise VerseCatalogValidationError(f"group '{group_name}' has a malformed category")
            slug = _require_str(category.get("slug"), f"category in '{group_name}': slug")
            if slug in catalog:
                raise VerseCatalogValidationError(f"duplicate category slug '{slug}'")
            name = _require_str(category.get("name"), f"category '{slug}': name")
            raw_verses = category.get("verses")
            if not isinstance(raw_verses, list) or not raw_verses or not all(
                isinstance(v, dict) for v in raw_verses
            ):
                raise VerseCatalogValidationError(f"category '{slug}' has no verses")
            verses = tuple(
                Verse(
                    ref=_require_str(v.get("ref"), f"category '{slug}' verse {i}: ref"),
                    text=_require_str(v.get("text"), f"category '{slug}' verse {i}: text"),
                )
                for i, v in enumerate(raw_verses)
            )
            catalog[slug] = VerseCategory(slug=slug, name=name, group=group_name, verses=verses)
    return catalog


@lru_cache(maxsize=1)
def load_verse_catalog() -> dict[str, VerseCategory]:
    """Load and validate verses.yaml, keyed by category slug in file order.

    Raises:
        FileNotFoundError: If verses.yaml is missing.
        VerseCatalogValidationError: If the catalog is structurally invalid.
    """
    try:
        with _VERSES_PATH.open(encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as exc:
        raise VerseCatalogValidationError(f"Verse catalog YAML is malformed: {exc}") from exc
    return _parse_catalog(data)


def list_categories() -> list[VerseCategory]:
    return list(load_verse_catalog().values())


def get_category(slug: str) -> VerseCategory | None:
    return load_verse_catalog().get(slug)


def grouped_categories() -> list[tuple[str, list[VerseCategory]]]:
    """Categories bundled by group, both in catalog order."""
    groups: dict[str, list[VerseCategory]] = {}
    for category in list_categories():
        groups.setdefault(category.group, []).append(category)
    return list(groups.items())
