"""
Utility functions and flows built on the access service.
"""

import logging
from typing import Optional, List

from .access_service import TemporaryAccessService
from .evaluator import classify
from .models import GrantRequest, GrantStatus

_logger = logging.getLogger(__name__)


async def cleanup_expired_grants(
    access_service: TemporaryAccessService,
    logger=None
) -> int:
    """
    Background job to retract relationship tuples of inactive grants.

    Grants expire lazily and are kept as history, so the grant store needs no
    cleanup. Only the OpenFGA mirror, which has no notion of time, has to be
    brought in line. Revoked grants are swept too, in case the retract made
    during revocation failed. Grants already retracted by this mirror are
    skipped. Run this periodically (e.g., every minute) via a
    scheduler.

    Args:
        access_service: The access service whose mirror should be cleaned
        logger: Optional logger instance; defaults to the module logger

    Returns:
        Number of grants whose tuples were retracted
    """
    mirror = access_service.relationship_mirror
    if mirror is None:
        return 0

    logger = logger or _logger
    now = access_service.now()
    stale = [
        g for g in await access_service.list_grants()
        if classify(g, now) is not GrantStatus.ACTIVE and not mirror.is_retracted(g.id)
    ]
    cleaned = 0

    for grant in stale:
        try:
            removed = await mirror.retract(grant.id)
        except Exception as e:
            logger.error(f"Failed to retract tuples for grant {grant.id}: {e}")
            continue
        if removed:
            cleaned += 1
            logger.info(f"Retracted {removed} tuples for inactive grant: {grant.id}")

    return cleaned


async def initiate_technician_visit(
    technician_id: str,
    tenant_id: str,
    reason: str,
    granted_by: str,
    access_service: TemporaryAccessService,
    suggestion_service,
    duration_minutes: Optional[int] = None,
    camera_ids: Optional[List[str]] = None,
    site_ids: Optional[List[str]] = None
) -> dict:
    """
    Complete flow: written reason → action suggestion → grant issuance.

    This is the entry point for dispatching a technician when the
    administrator did not pick the allowed actions by hand.

    Args:
        technician_id: ID of the technician being dispatched
        tenant_id: ID of the tenant to be visited
        reason: Free-text justification for the visit
        granted_by: ID of the administrator issuing the grant
        access_service: Access service instance
        suggestion_service: ActionSuggestionService instance
        duration_minutes: Grant duration; defaults to the configured default
        camera_ids: Optional cameras to restrict the grant to
        site_ids: Optional sites to restrict the grant to

    Returns:
        Dictionary with visit context:
        {
            "grant": AccessGrant,
            "suggestion": dict,
            "technician_id": str,
            "status": str
        }

    Raises:
        ValidationError: if the suggestion is empty or the request is invalid
    """
    # 1. Suggest the minimal action set
    suggestion = await suggestion_service.suggest_actions(reason)

    # 2. Issue the grant; an empty suggestion fails validation here
    grant = await access_service.grant_temporary_access(GrantRequest(
        technician_id=technician_id,
        tenant_id=tenant_id,
        duration_minutes=(
            duration_minutes if duration_minutes is not None
            else access_service.settings.default_duration_minutes
        ),
        reason=reason,
        allowed_actions=suggestion["actions"],
        camera_ids=camera_ids or [],
        site_ids=site_ids or [],
        granted_by=granted_by
    ))

    # 3. Return visit context for the dispatcher
    return {
        "grant": grant,
        "suggestion": suggestion,
        "technician_id": technician_id,
        "status": "granted"
    }
