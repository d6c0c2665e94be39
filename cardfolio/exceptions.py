"""
Custom exception classes and FastAPI exception handlers.

The service layer raises domain-specific errors (like AlreadyClaimedError)
without importing HTTP concepts. The handler registered here translates
them into HTTP responses with a stable shape:

    {"detail": "<human readable message>", "error_type": "<stable kind>"}

The claim page relies on error_type to explain why a physical card did not
work (already claimed vs. not found vs. inactive), so these strings are part
of the API contract.

Exception hierarchy:
    CardfolioError (base)
    ├── NotFoundError              — card, link or user doesn't exist
    │   ├── CardNotFoundError
    │   ├── LinkNotFoundError
    │   └── UserNotFoundError
    ├── SlugConflictError          — requested slug already taken
    ├── GenerationExhaustedError   — random slug retries all collided
    ├── InvalidArgumentError       — bad count, prefix, slug format, etc.
    ├── LinkInactiveError          — link disabled by an admin
    ├── AlreadyClaimedError        — claim lost (or came after) the one winner
    ├── NotClaimableError          — ad hoc share link, never claimable
    ├── UnauthorizedError          — no or invalid credentials
    │   └── InvalidCredentialsError
    ├── ForbiddenError             — authenticated but not allowed
    ├── DuplicateUsernameError
    ├── DuplicateEmailError
    └── StoreFailureError          — wraps persistence errors
"""

import uuid

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError


# ---------------------------------------------------------------------------
# Base exception
# ---------------------------------------------------------------------------

class CardfolioError(Exception):
    """Base exception for all Cardfolio domain errors."""

    status_code: int = 400
    error_type: str = "cardfolio_error"

    def __init__(self, detail: str = "An error occurred"):
        self.detail = detail
        super().__init__(self.detail)


# ---------------------------------------------------------------------------
# Domain exceptions
# ---------------------------------------------------------------------------

class NotFoundError(CardfolioError):
    """Raised when a requested resource does not exist (or is hidden)."""

    status_code = 404
    error_type = "not_found"


class CardNotFoundError(NotFoundError):
    def __init__(self, card_id: uuid.UUID):
        self.card_id = card_id
        super().__init__(f"Business card {card_id} not found")


class LinkNotFoundError(NotFoundError):
    """
    Raised for unknown slugs and ids.

    Inactive, unbound and orphaned links also surface as this error on the
    public view path so visitors can't probe link state.
    """

    def __init__(self, identifier: str | uuid.UUID, detail: str | None = None):
        self.identifier = identifier
        super().__init__(detail or f"Public link {identifier} not found")


class UserNotFoundError(NotFoundError):
    def __init__(self, user_id: uuid.UUID):
        self.user_id = user_id
        super().__init__(f"User {user_id} not found")


class SlugConflictError(CardfolioError):
    """Raised when a requested slug is already used by another link."""

    status_code = 409
    error_type = "slug_conflict"

    def __init__(self, slug: str | None, detail: str | None = None):
        self.slug = slug
        super().__init__(detail or f"Slug '{slug}' is already taken")


class GenerationExhaustedError(CardfolioError):
    """
    Raised when every random slug attempt collided with an existing one.

    Attributes:
        attempts: How many candidates were tried for the failing slug.
    """

    status_code = 503
    error_type = "generation_exhausted"

    def __init__(self, attempts: int):
        self.attempts = attempts
        super().__init__(
            f"Could not generate a unique slug after {attempts} attempts"
        )


class InvalidArgumentError(CardfolioError):
    status_code = 400
    error_type = "invalid_argument"


class LinkInactiveError(CardfolioError):
    """Raised when claiming a link an admin has deactivated."""

    status_code = 410  # Gone — the tag exists but no longer works
    error_type = "link_inactive"

    def __init__(self, slug: str):
        self.slug = slug
        super().__init__(f"Link '{slug}' has been deactivated")


class AlreadyClaimedError(CardfolioError):
    """Raised when a pre-generated link has already been bound to a card."""

    status_code = 409
    error_type = "already_claimed"

    def __init__(self, slug: str):
        self.slug = slug
        super().__init__(f"Link '{slug}' has already been claimed")


class NotClaimableError(CardfolioError):
    """Raised when claiming an ad hoc share link (already bound at creation)."""

    status_code = 409
    error_type = "not_claimable"

    def __init__(self, slug: str):
        self.slug = slug
        super().__init__(f"Link '{slug}' is a share link and cannot be claimed")


class UnauthorizedError(CardfolioError):
    status_code = 401
    error_type = "unauthorized"

    def __init__(self, detail: str = "Could not validate credentials"):
        super().__init__(detail)


class InvalidCredentialsError(UnauthorizedError):
    """Raised when login credentials are incorrect."""

    error_type = "invalid_credentials"

    def __init__(self):
        super().__init__("Invalid username or password")


class ForbiddenError(CardfolioError):
    """Raised when a user attempts to access a resource they don't own."""

    status_code = 403
    error_type = "forbidden"

    def __init__(self, detail: str = "You do not have access to this resource"):
        super().__init__(detail)


class DuplicateUsernameError(CardfolioError):
    status_code = 409
    error_type = "duplicate_username"

    def __init__(self, username: str):
        self.username = username
        super().__init__(f"Username {username} is already taken")


class DuplicateEmailError(CardfolioError):
    status_code = 409
    error_type = "duplicate_email"

    def __init__(self, email: str):
        self.email = email
        super().__init__(f"Email {email} is already registered")


class StoreFailureError(CardfolioError):
    """Raised when the database layer fails. Never retried by the service."""

    status_code = 503
    error_type = "store_failure"

    def __init__(self, detail: str = "The data store is unavailable"):
        super().__init__(detail)


# ---------------------------------------------------------------------------
# FastAPI exception handlers
# ---------------------------------------------------------------------------

def register_exception_handlers(app: FastAPI) -> None:
    """
    Register custom exception handlers with the FastAPI application.

    Every domain error shares one handler since the status code and
    error_type live on the exception class. This is called once in main.py.
    """

    @app.exception_handler(CardfolioError)
    async def cardfolio_error_handler(
        request: Request, exc: CardfolioError
    ) -> JSONResponse:
        headers = None
        if isinstance(exc, UnauthorizedError):
            headers = {"WWW-Authenticate": "Bearer"}
        return JSONResponse(
            status_code=exc.status_code,
            content={"detail": exc.detail, "error_type": exc.error_type},
            headers=headers,
        )

    @app.exception_handler(SQLAlchemyError)
    async def store_failure_handler(
        request: Request, exc: SQLAlchemyError
    ) -> JSONResponse:
        # Errors raised outside a repository call (e.g. at commit time)
        return JSONResponse(
            status_code=StoreFailureError.status_code,
            content={
                "detail": "The data store is unavailable",
                "error_type": StoreFailureError.error_type,
            },
        )
