"""
Access gateway that wraps technician tool calls with grant checks.
"""

from typing import Callable, Any, Dict, Optional
from functools import wraps

from .access_service import TemporaryAccessService
from .models import AccessAction


class AuthorizationError(Exception):
    """Raised when a technician action is not covered by an active grant."""

    def __init__(self, message: str, audit_entry: Dict[str, Any]):
        super().__init__(message)
        self.audit_entry = audit_entry


class AccessGateway:
    """
    Gateway that wraps technician tool calls with grant checks.

    Every camera operation a technician triggers (install, test, live view,
    evidence upload) passes through here before it touches the tenant.
    """

    def __init__(self, access_service: TemporaryAccessService):
        """
        Initialize the access gateway.

        Args:
            access_service: The access service to use for checks
        """
        self.access_service = access_service
        self.audit_log = []

    def authorized_action(
        self,
        action: AccessAction,
        camera_extractor: Optional[Callable[[Dict[str, Any]], Optional[str]]] = None,
        site_extractor: Optional[Callable[[Dict[str, Any]], Optional[str]]] = None
    ):
        """
        Decorator that wraps a tool function with a grant check.

        Args:
            action: Action the tool performs
            camera_extractor: Function to extract the camera ID from tool args
            site_extractor: Function to extract the site ID from tool args

        Example:
            @gateway.authorized_action(
                AccessAction.TEST_CONNECTION,
                camera_extractor=lambda args: args["camera_id"]
            )
            async def test_connection(camera_id: str) -> bool:
                return await cameras.ping(camera_id)
        """
        action = AccessAction(action)

        def decorator(tool_func: Callable):
            @wraps(tool_func)
            async def wrapper(
                technician_id: str,
                tenant_id: str,
                **kwargs
            ) -> Any:
                camera_id = camera_extractor(kwargs) if camera_extractor else None
                site_id = site_extractor(kwargs) if site_extractor else None

                authorized, reason = await self.access_service.check_technician_action(
                    technician_id=technician_id,
                    tenant_id=tenant_id,
                    action=action,
                    camera_id=camera_id,
                    site_id=site_id
                )

                # Audit logging (always, regardless of outcome)
                audit_entry = {
                    "timestamp": self.access_service.now().isoformat(),
                    "technician_id": technician_id,
                    "tenant_id": tenant_id,
                    "tool": tool_func.__name__,
                    "action": action.value,
                    "camera_id": camera_id,
                    "site_id": site_id,
                    "authorized": authorized,
                    "reason": reason
                }
                self.audit_log.append(audit_entry)

                if not authorized:
                    raise AuthorizationError(
                        f"Unauthorized: {reason}",
                        audit_entry=audit_entry
                    )

                return await tool_func(**kwargs)

            return wrapper
        return decorator
