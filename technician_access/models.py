"""
Data models for technician access grants.
"""

from dataclasses import dataclass, field, replace
from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import Optional, Dict, Any, FrozenSet, List, Tuple


class AccessAction(str, Enum):
    """Capabilities a technician can be granted on a tenant."""
    INSTALL_CAMERA = "install_camera"
    TEST_CONNECTION = "test_connection"
    CONFIGURE_ONVIF = "configure_onvif"
    CONFIGURE_NETWORK = "configure_network"
    VIEW_LIVE = "view_live"
    UPLOAD_EVIDENCE = "upload_evidence"

    @classmethod
    def values(cls) -> List[str]:
        return [a.value for a in cls]


class GrantStatus(str, Enum):
    ACTIVE = "active"
    EXPIRED = "expired"
    REVOKED = "revoked"


class TechnicianStatus(str, Enum):
    ACTIVE = "ACTIVE"
    INACTIVE = "INACTIVE"
    SUSPENDED = "SUSPENDED"


@dataclass
class GrantRequest:
    """Input to grant issuance, as submitted by an administrator."""
    technician_id: str
    tenant_id: str
    duration_minutes: int
    reason: str
    allowed_actions: List[str]
    camera_ids: List[str] = field(default_factory=list)
    site_ids: List[str] = field(default_factory=list)
    granted_by: str = ""


@dataclass(frozen=True)
class AccessGrant:
    """
    A time-bounded authorization for a technician on one tenant.

    Status is never stored: see ``evaluator.classify``.
    """
    id: str
    technician_id: str
    tenant_id: str
    granted_at: datetime
    expires_at: datetime
    duration_minutes: int
    reason: str
    allowed_actions: FrozenSet[AccessAction]
    granted_by: str = ""
    camera_ids: Tuple[str, ...] = ()
    site_ids: Tuple[str, ...] = ()
    revoked_at: Optional[datetime] = None
    revoked_by: Optional[str] = None

    def revoked(self, at: datetime, by: str) -> "AccessGrant":
        return replace(self, revoked_at=at, revoked_by=by)

    def allows(self, action: AccessAction, camera_id: Optional[str] = None,
               site_id: Optional[str] = None) -> bool:
        """Scope check only; does not look at the clock."""
        if action not in self.allowed_actions:
            return False
        if camera_id and self.camera_ids and camera_id not in self.camera_ids:
            return False
        if site_id and self.site_ids and site_id not in self.site_ids:
            return False
        return True

    def to_dict(self) -> Dict[str, Any]:
        data = {
            "id": self.id,
            "technicianId": self.technician_id,
            "tenantId": self.tenant_id,
            "grantedBy": self.granted_by,
            "grantedAt": self.granted_at.isoformat(),
            "expiresAt": self.expires_at.isoformat(),
            "durationMinutes": self.duration_minutes,
            "reason": self.reason,
            "allowedActions": sorted(a.value for a in self.allowed_actions),
            "cameraIds": list(self.camera_ids),
            "siteIds": list(self.site_ids),
        }
        if self.revoked_at is not None:
            data["revokedAt"] = self.revoked_at.isoformat()
            data["revokedBy"] = self.revoked_by
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "AccessGrant":
        granted_at = _parse_timestamp(data["grantedAt"])
        expires_at = _parse_timestamp(data["expiresAt"])
        duration = data.get("durationMinutes")
        if duration is None:
            duration = int((expires_at - granted_at) / timedelta(minutes=1))
        revoked_at = data.get("revokedAt")
        revoked_by = data.get("revokedBy")
        if revoked_at:
            revoked_at = _parse_timestamp(revoked_at)
        elif data.get("isActive") is False:
            # Deactivated record with no revocation time
            revoked_at = granted_at
            revoked_by = revoked_by or ""
        return cls(
            id=data["id"],
            technician_id=data["technicianId"],
            tenant_id=data["tenantId"],
            granted_by=data.get("grantedBy", ""),
            granted_at=granted_at,
            expires_at=expires_at,
            duration_minutes=duration,
            reason=data["reason"],
            allowed_actions=frozenset(AccessAction(a) for a in data["allowedActions"]),
            camera_ids=tuple(data.get("cameraIds") or ()),
            site_ids=tuple(data.get("siteIds") or ()),
            revoked_at=revoked_at or None,
            revoked_by=revoked_by,
        )


@dataclass
class Technician:
    """A field technician who can be given temporary tenant access."""
    id: str
    name: str
    email: str = ""
    status: TechnicianStatus = TechnicianStatus.ACTIVE
    assigned_tenants: List[str] = field(default_factory=list)


@dataclass
class TechnicianView:
    technician: Technician
    current_access: Optional[AccessGrant] = None


@dataclass
class AuditEvent:
    """Represents an audit event for compliance and security tracking."""
    timestamp: datetime
    event_type: str  # "grant_created", "grant_revoked", "action_checked", "action_denied"
    technician_id: str
    tenant_id: str
    grant_id: Optional[str] = None
    actor: str = ""
    decision: str = "allowed"  # "allowed", "denied", "revoked"
    reason: str = ""
    metadata: Dict[str, Any] = None

    def __post_init__(self):
        if self.metadata is None:
            self.metadata = {}


def _parse_timestamp(value: str) -> datetime:
    parsed = datetime.fromisoformat(value.replace('Z', '+00:00'))
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed
