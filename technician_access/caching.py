"""
Caching layer for action checks to improve performance.
"""

from datetime import timedelta
from typing import Dict, Tuple, Optional, Any

from .access_service import TemporaryAccessService
from .models import AccessGrant, GrantRequest, GrantStatus


class CachedTemporaryAccessService(TemporaryAccessService):
    """
    Access service with caching for action checks.

    Action checks happen on every guarded tool call, so caching can
    significantly improve performance. An allowed decision is never kept past
    the expiry of the grant that produced it, and entries are invalidated
    when a grant for the same technician and tenant is issued or revoked.
    """

    def __init__(
        self,
        *args,
        cache_ttl_seconds: Optional[int] = None,
        denial_ttl_seconds: int = 10,
        **kwargs
    ):
        """
        Initialize the cached access service.

        Args:
            *args: Arguments passed to parent TemporaryAccessService
            cache_ttl_seconds: Time-to-live for allowed decisions; defaults
                to settings.cache_ttl_seconds
            denial_ttl_seconds: Time-to-live for denied decisions
            **kwargs: Keyword arguments passed to parent TemporaryAccessService
        """
        super().__init__(*args, **kwargs)
        self.cache: Dict[Tuple[str, ...], Dict[str, Any]] = {}
        self.cache_ttl = (
            cache_ttl_seconds if cache_ttl_seconds is not None
            else self.settings.cache_ttl_seconds
        )
        self.denial_ttl = denial_ttl_seconds

    async def check_technician_action(
        self,
        technician_id: str,
        tenant_id: str,
        action: Any,
        camera_id: Optional[str] = None,
        site_id: Optional[str] = None
    ) -> Tuple[bool, str]:
        """
        Check an action with caching.

        Cache keys are based on technician, tenant, action and resource.
        Denials are cached for a shorter duration so a fresh grant takes
        effect quickly even on another instance.
        """
        cache_key = (
            technician_id, tenant_id, str(getattr(action, "value", action)),
            camera_id or "", site_id or ""
        )
        now = self.now()

        # Check cache
        entry = self.cache.get(cache_key)
        if entry is not None and now < entry["expires_at"]:
            return entry["result"]

        # Cache miss - perform actual check
        result = await super().check_technician_action(
            technician_id, tenant_id, action, camera_id, site_id
        )

        if result[0]:
            expires_at = now + timedelta(seconds=self.cache_ttl)
            # Earliest deadline among the pair's grants, whichever one allowed it
            active = await self.list_grants(
                technician_id=technician_id,
                tenant_id=tenant_id,
                status=GrantStatus.ACTIVE
            )
            for grant in active:
                expires_at = min(expires_at, grant.expires_at)
        else:
            expires_at = now + timedelta(seconds=self.denial_ttl)

        self.cache[cache_key] = {"result": result, "expires_at": expires_at}
        return result

    def invalidate_pair_cache(self, technician_id: str, tenant_id: str):
        """Invalidate all cache entries for a technician on a tenant."""
        keys_to_delete = [
            k for k in self.cache.keys()
            if k[0] == technician_id and k[1] == tenant_id
        ]
        for key in keys_to_delete:
            del self.cache[key]

    async def grant_temporary_access(self, request: GrantRequest) -> AccessGrant:
        grant = await super().grant_temporary_access(request)
        self.invalidate_pair_cache(grant.technician_id, grant.tenant_id)
        return grant

    async def revoke_temporary_access(self, grant_id: str, revoked_by: str = "") -> AccessGrant:
        """Invalidate related cache entries, then revoke."""
        grant = await self.get_grant(grant_id)
        self.invalidate_pair_cache(grant.technician_id, grant.tenant_id)
        return await super().revoke_temporary_access(grant_id, revoked_by)
