"""
Core service for issuing, revoking and checking technician access grants.
"""

import logging
import uuid
from datetime import datetime, timedelta, timezone
from typing import Optional, Dict, Any, List, Tuple, Callable, Iterable

from .config import AccessSettings
from .errors import (
    ValidationError,
    NotActiveError,
    GrantNotFoundError,
    TechnicianNotFoundError,
)
from .evaluator import classify, is_active
from .models import (
    AccessAction,
    AccessGrant,
    AuditEvent,
    GrantRequest,
    GrantStatus,
    Technician,
    TechnicianStatus,
    TechnicianView,
)
from .store import GrantStore, InMemoryGrantStore

logger = logging.getLogger(__name__)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def parse_actions(actions: Iterable[Any]) -> Tuple[List[AccessAction], List[str]]:
    """Split requested actions into known members and unknown leftovers."""
    known, unknown = [], []
    for action in actions:
        try:
            known.append(AccessAction(action))
        except ValueError:
            unknown.append(str(action))
    return known, unknown


def validate_grant_request(
    request: GrantRequest,
    settings: Optional[AccessSettings] = None
) -> List[Tuple[str, str]]:
    """
    Check the input constraints of a grant request.

    Returns a list of ``(field, message)`` pairs, empty when the request is
    valid. Technician and tenant existence are checked by the service.
    """
    settings = settings or AccessSettings()
    errors = []

    if not request.technician_id:
        errors.append(("technician_id", "Technician is required"))
    if not request.tenant_id:
        errors.append(("tenant_id", "Tenant is required"))

    duration = request.duration_minutes
    if not isinstance(duration, int) or isinstance(duration, bool):
        errors.append(("duration_minutes", "Duration must be a whole number of minutes"))
    elif duration < settings.min_duration_minutes:
        errors.append(("duration_minutes", f"Minimum duration is {settings.min_duration_minutes} minutes"))
    elif duration > settings.max_duration_minutes:
        errors.append(("duration_minutes", f"Maximum duration is {settings.max_duration_minutes} minutes"))

    reason = (request.reason or "").strip()
    if len(reason) < settings.min_reason_length:
        errors.append(("reason", f"Reason must have at least {settings.min_reason_length} characters"))
    elif len(reason) > settings.max_reason_length:
        errors.append(("reason", f"Reason must have at most {settings.max_reason_length} characters"))

    if not request.allowed_actions:
        errors.append(("allowed_actions", "Select at least one allowed action"))
    else:
        _, unknown = parse_actions(request.allowed_actions)
        if unknown:
            errors.append(("allowed_actions", f"Unknown actions: {', '.join(unknown)}"))

    return errors


class TemporaryAccessService:
    """
    Service for managing temporary technician access to tenants.

    This service handles:
    - Issuing time-bounded grants with a fixed set of allowed actions
    - Revoking grants before their natural expiry
    - Answering "may this technician do X on this tenant right now?"

    Grant status is always derived from the clock; nothing here expires
    grants in the background.
    """

    def __init__(
        self,
        grant_store: Optional[GrantStore] = None,
        technicians: Optional[Dict[str, Technician]] = None,
        settings: Optional[AccessSettings] = None,
        audit_store: Optional[List[AuditEvent]] = None,
        relationship_mirror: Optional[Any] = None,
        clock: Optional[Callable[[], datetime]] = None
    ):
        """
        Initialize the access service.

        Args:
            grant_store: Store with get/put/list (defaults to in-memory)
            technicians: Optional directory of technicians keyed by id. When
                given, grants are only issued to known, active technicians.
            settings: Validation limits and feature switches
            audit_store: Optional list receiving audit events
            relationship_mirror: Optional OpenFgaGrantMirror kept in step
                with issued and revoked grants
            clock: Callable returning the current aware UTC datetime
        """
        self.grant_store = grant_store if grant_store is not None else InMemoryGrantStore()
        self.technicians = technicians
        self.settings = settings or AccessSettings()
        self.audit_store = audit_store if audit_store is not None else []
        self.relationship_mirror = relationship_mirror
        self.clock = clock or utc_now

    def now(self) -> datetime:
        return self.clock()

    # ---------- issuance ----------

    async def grant_temporary_access(self, request: GrantRequest) -> AccessGrant:
        """
        Issue a new grant.

        Raises:
            ValidationError: if any input constraint is violated
        """
        errors = validate_grant_request(request, self.settings)
        if not errors:
            errors.extend(self._check_technician(request))
        if not errors and self.settings.enforce_single_active_grant:
            existing = await self.check_active_access(request.technician_id, request.tenant_id)
            if existing is not None:
                errors.append((
                    "technician_id",
                    f"Technician already has active grant {existing.id} on this tenant"
                ))
        if errors:
            logger.info(
                "Rejected grant request for technician %s on tenant %s: %s",
                request.technician_id, request.tenant_id, errors
            )
            raise ValidationError(errors)

        actions, _ = parse_actions(request.allowed_actions)
        granted_at = self.now()
        grant = AccessGrant(
            id=f"grant:{uuid.uuid4()}",
            technician_id=request.technician_id,
            tenant_id=request.tenant_id,
            granted_by=request.granted_by,
            granted_at=granted_at,
            expires_at=granted_at + timedelta(minutes=request.duration_minutes),
            duration_minutes=request.duration_minutes,
            reason=request.reason.strip(),
            allowed_actions=frozenset(actions),
            camera_ids=tuple(request.camera_ids or ()),
            site_ids=tuple(request.site_ids or ()),
        )

        if self.relationship_mirror is not None:
            await self.relationship_mirror.publish(grant)

        self.grant_store.put(grant)

        await self._log_audit_event(AuditEvent(
            timestamp=granted_at,
            event_type="grant_created",
            technician_id=grant.technician_id,
            tenant_id=grant.tenant_id,
            grant_id=grant.id,
            actor=grant.granted_by,
            decision="allowed",
            reason=grant.reason,
            metadata={
                "duration_minutes": grant.duration_minutes,
                "allowed_actions": sorted(a.value for a in grant.allowed_actions),
                "expires_at": grant.expires_at.isoformat(),
            }
        ))
        logger.info(
            "Granted %s to technician %s on tenant %s until %s",
            grant.id, grant.technician_id, grant.tenant_id, grant.expires_at.isoformat()
        )
        return grant

    def _check_technician(self, request: GrantRequest) -> List[Tuple[str, str]]:
        if self.technicians is None:
            return []
        technician = self.technicians.get(request.technician_id)
        if technician is None:
            return [("technician_id", "Unknown technician")]
        if technician.status is not TechnicianStatus.ACTIVE:
            return [("technician_id", f"Technician is {technician.status.value.lower()}")]
        if technician.assigned_tenants and request.tenant_id not in technician.assigned_tenants:
            return [("tenant_id", "Technician is not assigned to this tenant")]
        return []

    # ---------- revocation ----------

    async def revoke_temporary_access(self, grant_id: str, revoked_by: str = "") -> AccessGrant:
        """
        Revoke an active grant immediately.

        Raises:
            GrantNotFoundError: if no grant has this id
            NotActiveError: if the grant already expired or was revoked;
                the stored grant is left untouched
        """
        grant = await self.get_grant(grant_id)
        now = self.now()
        status = classify(grant, now)
        if status is not GrantStatus.ACTIVE:
            logger.warning("Revoke of %s ignored: grant is %s", grant_id, status.value)
            raise NotActiveError(grant_id, status)

        revoked = grant.revoked(now, revoked_by)
        self.grant_store.put(revoked)

        await self._log_audit_event(AuditEvent(
            timestamp=now,
            event_type="grant_revoked",
            technician_id=grant.technician_id,
            tenant_id=grant.tenant_id,
            grant_id=grant.id,
            actor=revoked_by,
            decision="revoked",
            reason="Grant revoked before expiry",
            metadata={"remaining_seconds": int((grant.expires_at - now).total_seconds())}
        ))
        logger.info("Revoked %s (technician %s, tenant %s)", grant_id, grant.technician_id, grant.tenant_id)

        if self.relationship_mirror is not None:
            await self.relationship_mirror.retract(grant.id)

        return revoked

    # ---------- queries ----------

    async def get_grant(self, grant_id: str) -> AccessGrant:
        grant = self.grant_store.get(grant_id)
        if grant is None:
            raise GrantNotFoundError(grant_id)
        return grant

    async def grant_status(self, grant_id: str) -> GrantStatus:
        return classify(await self.get_grant(grant_id), self.now())

    async def list_grants(
        self,
        technician_id: Optional[str] = None,
        tenant_id: Optional[str] = None,
        status: Optional[GrantStatus] = None
    ) -> List[AccessGrant]:
        """Grant history, newest first, optionally filtered."""
        now = self.now()
        grants = [
            g for g in self.grant_store.list()
            if (technician_id is None or g.technician_id == technician_id)
            and (tenant_id is None or g.tenant_id == tenant_id)
            and (status is None or classify(g, now) is GrantStatus(status))
        ]
        grants.sort(key=lambda g: g.granted_at, reverse=True)
        return grants

    async def list_active_grants(self) -> List[AccessGrant]:
        return await self.list_grants(status=GrantStatus.ACTIVE)

    async def check_active_access(self, technician_id: str, tenant_id: str) -> Optional[AccessGrant]:
        """Active grant for the pair, or None. Latest expiry wins if several."""
        active = await self.list_grants(
            technician_id=technician_id,
            tenant_id=tenant_id,
            status=GrantStatus.ACTIVE
        )
        if not active:
            return None
        return max(active, key=lambda g: g.expires_at)

    async def get_technician(self, technician_id: str) -> TechnicianView:
        if self.technicians is None or technician_id not in self.technicians:
            raise TechnicianNotFoundError(technician_id)

        now = self.now()
        current = [
            g for g in self.grant_store.list()
            if g.technician_id == technician_id and is_active(g, now)
        ]
        return TechnicianView(
            technician=self.technicians[technician_id],
            current_access=max(current, key=lambda g: g.expires_at) if current else None
        )

    async def check_technician_action(
        self,
        technician_id: str,
        tenant_id: str,
        action: Any,
        camera_id: Optional[str] = None,
        site_id: Optional[str] = None
    ) -> Tuple[bool, str]:
        """
        Check whether a technician may perform an action on a tenant now.

        Returns (authorized: bool, reason: str)
        """
        grant_id = None
        try:
            wanted = AccessAction(action)
        except ValueError:
            wanted = None
            reason = f"Unknown action: {action}"
        else:
            active = await self.list_grants(
                technician_id=technician_id,
                tenant_id=tenant_id,
                status=GrantStatus.ACTIVE
            )
            allowing = [g for g in active if g.allows(wanted, camera_id, site_id)]
            if allowing:
                grant = max(allowing, key=lambda g: g.expires_at)
                await self._log_audit_event(AuditEvent(
                    timestamp=self.now(),
                    event_type="action_checked",
                    technician_id=technician_id,
                    tenant_id=tenant_id,
                    grant_id=grant.id,
                    decision="allowed",
                    reason="Authorized",
                    metadata=_scope_metadata(wanted, camera_id, site_id)
                ))
                return True, "Authorized"

            if not active:
                reason = "No active grant for this tenant"
            elif any(wanted in g.allowed_actions for g in active):
                reason = "Resource is outside the grant scope"
                grant_id = active[0].id
            else:
                reason = f"Grant does not include {wanted.value}"
                grant_id = active[0].id

        await self._log_audit_event(AuditEvent(
            timestamp=self.now(),
            event_type="action_denied",
            technician_id=technician_id,
            tenant_id=tenant_id,
            grant_id=grant_id,
            decision="denied",
            reason=reason,
            metadata=_scope_metadata(wanted or action, camera_id, site_id)
        ))
        logger.warning(
            "Denied %s for technician %s on tenant %s: %s",
            getattr(wanted, "value", action), technician_id, tenant_id, reason
        )
        return False, reason

    async def _log_audit_event(self, event: AuditEvent):
        """Log an audit event."""
        self.audit_store.append(event)


def _scope_metadata(action: Any, camera_id: Optional[str], site_id: Optional[str]) -> Dict[str, Any]:
    metadata = {"action": getattr(action, "value", action)}
    if camera_id:
        metadata["camera_id"] = camera_id
    if site_id:
        metadata["site_id"] = site_id
    return metadata
