"""Verse reference schemas."""

from __future__ import annotations

from pydantic import BaseModel


class VerseOut(BaseModel):
    ref: str
    text: str


class VerseCategorySummary(BaseModel):
    slug: str
    name: str
    count: int


class VerseGroupOut(BaseModel):
    name: str
    categories: list[VerseCategorySummary]


class VerseIndexResponse(BaseModel):
    """All categories, grouped as shown on the verses page."""

    groups: list[VerseGroupOut]


class VerseCategoryResponse(BaseModel):
    """One category with its verses and ready-to-share text."""

    slug: str
    name: str
    group: str
    verses: list[VerseOut]
    text: str
    whatsapp_url: str
