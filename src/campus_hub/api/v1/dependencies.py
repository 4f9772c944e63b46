"""Shared API dependencies for authentication and common functionality."""

import logging
from collections.abc import Callable
from typing import Annotated, NoReturn, TypeVar

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from campus_hub.core.settings import settings
from campus_hub.db.session import get_db
from campus_hub.models import User
from campus_hub.services.errors import CampusError, ConflictError

# Configure logger for this module
logger = logging.getLogger(__name__)

T = TypeVar("T")

# HTTP Bearer scheme for JWT authentication
bearer_scheme = HTTPBearer()

# Type alias for database session dependency
SessionDep = Annotated[Session, Depends(get_db)]


def get_current_user(
    credentials: Annotated[HTTPAuthorizationCredentials, Depends(bearer_scheme)],
    db: SessionDep,
) -> User:
    """Get the current authenticated user from JWT token.

    Args:
        credentials: HTTP Bearer token credentials
        db: Database session

    Returns:
        User object for the authenticated user

    Raises:
        HTTPException: If token is invalid or user not found
    """
    try:
        payload = jwt.decode(
            credentials.credentials,
            settings.secret_key,
            algorithms=[settings.jwt_algorithm],
        )
    except JWTError as err:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Could not validate credentials",
        ) from err

    subject = payload.get("sub")
    if subject is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Could not validate credentials",
        )

    user = db.query(User).filter(User.external_id == subject).first()
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="User not found",
        )
    return user


# Type alias for current user dependency
CurrentUserDep = Annotated[User, Depends(get_current_user)]


def raise_http(exc: CampusError) -> NoReturn:
    """Re-raise a service error as the matching HTTP error."""
    raise HTTPException(status_code=exc.status_code, detail=exc.message) from exc


def run_write(db: Session, operation: Callable[[], T]) -> T:
    """Run a service write and commit it, translating service errors.

    The session is rolled back on failure so nothing staged by the
    operation survives. A unique constraint violation from a concurrent
    writer surfaces as a 409 rather than a server error.
    """
    try:
        result = operation()
        db.commit()
    except CampusError as exc:
        db.rollback()
        raise_http(exc)
    except IntegrityError as exc:
        db.rollback()
        logger.info("Write rejected by a database constraint: %s", exc.orig)
        raise_http(ConflictError("Conflicting write; the record already exists"))
    return result
