"""Shared endpoint dependencies."""

from __future__ import annotations

from fastapi import Depends, Header

from bio_forge.core.access import AccessControl, CallerContext, get_access_control


def bearer_token(authorization: str | None) -> str | None:
    if not authorization:
        return None
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()


def get_caller(
    authorization: str | None = Header(default=None),
    access: AccessControl = Depends(get_access_control),
) -> CallerContext:
    """Authenticated caller for this request; raises AuthenticationRequired."""
    return access.context_for_token(bearer_token(authorization))
