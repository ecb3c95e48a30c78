"""
Expiry evaluation for access grants.

Status is derived from timestamps on every read rather than persisted, so a
stored grant can never disagree with the wall clock.
"""

from datetime import datetime, timedelta

from .models import AccessGrant, GrantStatus


def classify(grant: AccessGrant, now: datetime) -> GrantStatus:
    """
    Classify a grant at the given instant.

    Revocation wins over expiry. A grant is expired from ``expires_at``
    onwards: the active interval is ``[granted_at, expires_at)``.
    """
    if grant.revoked_at is not None:
        return GrantStatus.REVOKED
    if now >= grant.expires_at:
        return GrantStatus.EXPIRED
    return GrantStatus.ACTIVE


def is_active(grant: AccessGrant, now: datetime) -> bool:
    return classify(grant, now) is GrantStatus.ACTIVE


def remaining(grant: AccessGrant, now: datetime) -> timedelta:
    """Time left before expiry; zero for inactive grants."""
    if not is_active(grant, now):
        return timedelta(0)
    return grant.expires_at - now
