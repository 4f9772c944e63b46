# src/campus_hub/services/errors.py
"""Domain exceptions raised by the service layer.

Endpoints translate these into HTTP responses through ``status_code``.
Scheduled jobs let them propagate to the scheduler, which logs and drops
the job.
"""

from __future__ import annotations


class CampusError(Exception):
    """Base exception for all service-layer failures."""

    status_code = 400

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ValidationError(CampusError):
    """Raised when input is empty, too long, or outside an allowed set."""

    status_code = 400


class AuthorizationError(CampusError):
    """Raised when the caller does not own the resource it tries to change."""

    status_code = 403


class NotFoundError(CampusError):
    """Raised when a referenced row does not exist."""

    status_code = 404


class ConflictError(CampusError):
    """Raised when a unique relationship already exists (or is already gone)."""

    status_code = 409
