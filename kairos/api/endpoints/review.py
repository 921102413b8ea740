"""Review cycle endpoints: /review, /reveal and /grade."""
from __future__ import annotations

from fastapi import APIRouter, Depends, Form, Request, status
from fastapi.responses import HTMLResponse, RedirectResponse, Response
from fastapi.templating import Jinja2Templates

from kairos.api import deps
from kairos.services.review import ReviewService
from kairos.utils.exceptions import (
    ConflictError,
    ConsistencyError,
    NotFoundError,
    StorageError,
    ValidationError,
    handle_conflict_error,
    handle_consistency_error,
    handle_not_found_error,
    handle_storage_error,
    handle_validation_error,
)

router = APIRouter(tags=["review"])

ALL_REVIEWED_HTML = "<h1>All cards reviewed!</h1>"


def _back_to_review() -> RedirectResponse:
    return RedirectResponse("/review", status_code=status.HTTP_303_SEE_OTHER)


@router.get("/review", response_class=HTMLResponse)
def review(
    request: Request,
    service: ReviewService = Depends(deps.get_review_service),
    templates: Jinja2Templates = Depends(deps.get_templates),
) -> Response:
    """Show the front of the next due card."""

    try:
        card = service.select_due()
    except StorageError as exc:
        raise handle_storage_error(exc) from exc
    if card is None:
        return HTMLResponse(ALL_REVIEWED_HTML)
    return templates.TemplateResponse(request, "front.html", {"card": card})


@router.post("/reveal", response_class=HTMLResponse)
def reveal(
    request: Request,
    front: str = Form(""),
    service: ReviewService = Depends(deps.get_review_service),
    templates: Jinja2Templates = Depends(deps.get_templates),
) -> Response:
    """Show the full card, or go back to /review if it cannot be found."""

    try:
        card = service.reveal(front)
    except StorageError as exc:
        raise handle_storage_error(exc) from exc
    if card is None:
        return _back_to_review()
    return templates.TemplateResponse(request, "back.html", {"card": card})


@router.post("/grade")
def grade(
    front: str = Form(""),
    rating: str = Form(""),
    service: ReviewService = Depends(deps.get_review_service),
) -> RedirectResponse:
    """Record a rating for the card and move on to the next one."""

    try:
        service.grade(front, rating)
    except ValidationError as exc:
        raise handle_validation_error(exc) from exc
    except NotFoundError as exc:
        raise handle_not_found_error(exc) from exc
    except ConsistencyError as exc:
        raise handle_consistency_error(exc) from exc
    except ConflictError as exc:
        raise handle_conflict_error(exc) from exc
    except StorageError as exc:
        raise handle_storage_error(exc) from exc
    return _back_to_review()


@router.get("/", include_in_schema=False)
def index() -> RedirectResponse:
    return RedirectResponse("/review", status_code=status.HTTP_307_TEMPORARY_REDIRECT)


@router.get("/healthz", tags=["health"])
def healthz() -> dict[str, str]:
    return {"status": "ok"}
