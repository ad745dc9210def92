"""Shared route dependencies and domain error translation."""
import logging

from fastapi import Depends, Header, HTTPException, Request
from fastapi.responses import JSONResponse
from sqlmodel import Session

from encore.core.database import get_session
from encore.errors import (
    ConflictError,
    DomainError,
    NotFoundError,
    StoreError,
    ValidationError,
)
from encore.notifications import NotificationCenter, notification_center
from encore.store import DocumentStore, SqlDocumentStore

logger = logging.getLogger(__name__)

STATUS_BY_KIND = (
    (ValidationError, 400),
    (NotFoundError, 404),
    (ConflictError, 409),
    (StoreError, 503),
)


def get_store(session: Session = Depends(get_session)) -> DocumentStore:
    """Dependency for a document store bound to the request's session."""
    return SqlDocumentStore(session)


def get_notifier() -> NotificationCenter:
    """Dependency for the process-wide notification center."""
    return notification_center


def current_user_id(x_user_id: str | None = Header(None)) -> str:
    """
    Resolve the calling user.

    Authentication happens upstream; the gateway forwards the verified
    account id in the ``X-User-Id`` header.
    """
    if not x_user_id or not x_user_id.strip():
        raise HTTPException(status_code=401, detail="Missing X-User-Id header")
    return x_user_id.strip()


def status_for(error: DomainError) -> int:
    for kind, status_code in STATUS_BY_KIND:
        if isinstance(error, kind):
            return status_code
    return 500


async def domain_error_handler(request: Request, exc: DomainError) -> JSONResponse:
    """Render a DomainError as ``{"detail", "code"}`` with the mapped status."""
    status_code = status_for(exc)
    if status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc}")
    return JSONResponse(
        status_code=status_code,
        content={"detail": exc.message, "code": exc.code.value},
    )
