"""Verse reference API: category index and one category's verses."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Request, status

from sermon_wizard.api.deps import require_access
from sermon_wizard.config import get_settings
from sermon_wizard.schemas.verses import (
    VerseCategoryResponse,
    VerseCategorySummary,
    VerseGroupOut,
    VerseIndexResponse,
    VerseOut,
)
from sermon_wizard.verses import get_category, grouped_categories

router = APIRouter(dependencies=[Depends(require_access)])


def share_link(request: Request) -> str:
    return get_settings().share_url or str(request.base_url)


@router.get("", response_model=VerseIndexResponse)
def list_verse_categories() -> VerseIndexResponse:
    return VerseIndexResponse(
        groups=[
            VerseGroupOut(
                name=group,
                categories=[
                    VerseCategorySummary(slug=c.slug, name=c.name, count=len(c.verses))
                    for c in categories
                ],
            )
            for group, categories in grouped_categories()
        ]
    )


@router.get("/{slug}", response_model=VerseCategoryResponse)
def get_verse_category(slug: str, request: Request) -> VerseCategoryResponse:
    """Verses of one category plus the text used for copy and WhatsApp share."""
    category = get_category(slug)
    if category is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Categoria não encontrada.",
        )
    link = share_link(request)
    return VerseCategoryResponse(
        slug=category.slug,
        name=category.name,
        group=category.group,
        verses=[VerseOut(ref=v.ref, text=v.text) for v in category.verses],
        text=category.share_text(link),
        whatsapp_url=category.whatsapp_url(link),
    )
