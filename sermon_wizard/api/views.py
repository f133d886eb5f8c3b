"""HTML-serving view routes for the wizard UI."""

from __future__ import annotations

from pathlib import Path

from fastapi import APIRouter, Cookie, Depends, Request
from fastapi.responses import HTMLResponse, RedirectResponse
from fastapi.templating import Jinja2Templates

from sermon_wizard.api.deps import (
    get_session_store,
    get_wizard,
    has_access,
    set_conversation_cookie,
)
from sermon_wizard.config import get_settings
from sermon_wizard.services.wizard import SermonWizard, SessionStore
from sermon_wizard.services.wizard.steps import LONG_DURATIONS
from sermon_wizard.verses import grouped_categories

router = APIRouter()

_TEMPLATES_DIR = Path(__file__).resolve().parent.parent / "templates"
templates = Jinja2Templates(directory=str(_TEMPLATES_DIR))


@router.get("/", response_class=HTMLResponse)
def index(
    request: Request,
    allowed: bool = Depends(has_access),
    store: SessionStore = Depends(get_session_store),
    wizard: SermonWizard = Depends(get_wizard),
    conversation_id: str | None = Cookie(None),
):
    """Landing page. Every load starts a new conversation."""
    if not allowed:
        return RedirectResponse(url="/login", status_code=303)

    store.discard(conversation_id)
    session = store.create()
    response = templates.TemplateResponse(
        request,
        "index.html",
        {
            "app_name": get_settings().app_name,
            "first_question": wizard.first_question(),
            "long_durations": sorted(LONG_DURATIONS),
        },
    )
    set_conversation_cookie(response, session.conversation_id)
    return response


@router.get("/versiculos", response_class=HTMLResponse)
def verses_page(request: Request, allowed: bool = Depends(has_access)):
    """Pastoral verse reference: category buttons; verses load on demand."""
    if not allowed:
        return RedirectResponse(url="/login", status_code=303)
    return templates.TemplateResponse(
        request,
        "verses.html",
        {"app_name": get_settings().app_name, "groups": grouped_categories()},
    )


@router.get("/login", response_class=HTMLResponse)
def login_page(request: Request):
    return templates.TemplateResponse(
        request, "login.html", {"app_name": get_settings().app_name}
    )
