"""Typed failures surfaced by BioForge operations.

Every operation either returns its result or raises one of these. The API layer
renders them as ``{"detail": ..., "kind": ...}`` with the matching status code.
"""

from __future__ import annotations


class BioForgeError(Exception):
    """Base class for all structured failures."""

    kind = "error"
    status_code = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def to_dict(self) -> dict[str, str]:
        return {"detail": self.message, "kind": self.kind}


class AuthenticationRequired(BioForgeError):
    """No valid credential was presented."""

    kind = "authentication_required"
    status_code = 401


class AuthorizationDenied(BioForgeError):
    """Valid credential, but the caller is neither owner nor administrator."""

    kind = "authorization_denied"
    status_code = 403


class ResourceNotFound(BioForgeError):
    """Missing resource, or an unpublished one seen through a public path."""

    kind = "resource_not_found"
    status_code = 404


class ValidationFailure(BioForgeError):
    """Missing/invalid input or an exceeded plan limit."""

    kind = "validation_failure"
    status_code = 422


class CollaboratorFailure(BioForgeError):
    """The store, the completion service or the checkout service failed."""

    kind = "collaborator_failure"
    status_code = 502
