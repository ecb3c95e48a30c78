"""
Technician Access - Temporary, scoped tenant access for field technicians

This package issues time-bounded access grants that let a technician install,
test and configure a tenant's cameras, derives grant status from the clock,
and optionally mirrors grants into OpenFGA relationship tuples.
"""

from .access_service import TemporaryAccessService, validate_grant_request
from .action_suggestion import ActionSuggestionService
from .caching import CachedTemporaryAccessService
from .config import AccessSettings, configure_logging
from .errors import (
    AccessError,
    ValidationError,
    NotActiveError,
    GrantNotFoundError,
    TechnicianNotFoundError,
)
from .evaluator import classify, is_active, remaining
from .gateway import AccessGateway, AuthorizationError
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
from .relationships import OpenFgaGrantMirror
from .store import GrantStore, InMemoryGrantStore, JsonFileGrantStore

__version__ = "0.1.0"
__all__ = [
    "TemporaryAccessService",
    "CachedTemporaryAccessService",
    "AccessGateway",
    "AuthorizationError",
    "ActionSuggestionService",
    "OpenFgaGrantMirror",
    "AccessSettings",
    "configure_logging",
    "validate_grant_request",
    "classify",
    "is_active",
    "remaining",
    "AccessError",
    "ValidationError",
    "NotActiveError",
    "GrantNotFoundError",
    "TechnicianNotFoundError",
    "AccessAction",
    "AccessGrant",
    "AuditEvent",
    "GrantRequest",
    "GrantStatus",
    "Technician",
    "TechnicianStatus",
    "TechnicianView",
    "GrantStore",
    "InMemoryGrantStore",
    "JsonFileGrantStore",
]
