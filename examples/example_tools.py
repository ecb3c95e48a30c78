"""
Example technician tools showing how to use the access gateway.
"""

from technician_access import AccessAction
from technician_access.gateway import AccessGateway


# Example camera registry (in production, this would be the VMS backend)
class CameraRegistry:
    """Mock camera registry for demonstration."""

    def __init__(self):
        self.cameras = {
            "cam-001": {"name": "Lobby", "online": True},
            "cam-002": {"name": "Parking", "online": False},
        }

    async def register(self, camera_id: str, name: str) -> bool:
        """Register a newly installed camera."""
        self.cameras[camera_id] = {"name": name, "online": False}
        return True

    async def ping(self, camera_id: str) -> bool:
        """Check whether a camera answers."""
        return self.cameras.get(camera_id, {}).get("online", False)


# Example evidence bucket (in production, object storage)
class EvidenceBucket:
    """Mock evidence storage for demonstration."""

    async def upload(self, camera_id: str, filename: str) -> str:
        print(f"[Evidence] Stored {filename} for camera {camera_id}")
        return f"evidence/{camera_id}/{filename}"


camera_registry = CameraRegistry()
evidence_bucket = EvidenceBucket()


async def example_install_camera(
    gateway: AccessGateway,
    camera_id: str,
    name: str,
    technician_id: str,
    tenant_id: str
) -> bool:
    """
    Example of an install tool guarded by the gateway.
    """
    @gateway.authorized_action(
        AccessAction.INSTALL_CAMERA,
        camera_extractor=lambda args: args["camera_id"]
    )
    async def install_camera(camera_id: str, name: str) -> bool:
        """Register a camera with the tenant."""
        return await camera_registry.register(camera_id, name)

    return await install_camera(
        technician_id=technician_id,
        tenant_id=tenant_id,
        camera_id=camera_id,
        name=name
    )


async def example_test_connection(
    gateway: AccessGateway,
    camera_id: str,
    technician_id: str,
    tenant_id: str
) -> bool:
    """
    Example of a connection test tool guarded by the gateway.
    """
    @gateway.authorized_action(
        AccessAction.TEST_CONNECTION,
        camera_extractor=lambda args: args["camera_id"]
    )
    async def test_connection(camera_id: str) -> bool:
        """Ping a camera."""
        return await camera_registry.ping(camera_id)

    return await test_connection(
        technician_id=technician_id,
        tenant_id=tenant_id,
        camera_id=camera_id
    )


async def example_upload_evidence(
    gateway: AccessGateway,
    camera_id: str,
    filename: str,
    technician_id: str,
    tenant_id: str
) -> str:
    """
    Example of an evidence upload tool guarded by the gateway.
    """
    @gateway.authorized_action(
        AccessAction.UPLOAD_EVIDENCE,
        camera_extractor=lambda args: args["camera_id"]
    )
    async def upload_evidence(camera_id: str, filename: str) -> str:
        """Upload a photo of the installation."""
        return await evidence_bucket.upload(camera_id, filename)

    return await upload_evidence(
        technician_id=technician_id,
        tenant_id=tenant_id,
        camera_id=camera_id,
        filename=filename
    )
