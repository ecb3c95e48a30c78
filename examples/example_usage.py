"""
Example usage of the technician access system.

This demonstrates the flow from an administrator's request to guarded
technician actions and early revocation.
"""

import asyncio
import logging

from openfga_sdk import OpenFgaClient, ClientConfiguration
from anthropic import Anthropic

from technician_access import (
    AccessGateway,
    AccessSettings,
    ActionSuggestionService,
    AuthorizationError,
    CachedTemporaryAccessService,
    GrantRequest,
    InMemoryGrantStore,
    JsonFileGrantStore,
    NotActiveError,
    OpenFgaGrantMirror,
    Technician,
    configure_logging,
)
from technician_access.utils import initiate_technician_visit, cleanup_expired_grants

logger = logging.getLogger("technician_access.example")


TECHNICIANS = {
    "tech-1": Technician(id="tech-1", name="Pedro", email="pedro@example.com", assigned_tenants=["tenant-a", "tenant-b"]),
    "tech-2": Technician(id="tech-2", name="Lucas", email="lucas@example.com", assigned_tenants=["tenant-a"]),
}


async def example_complete_flow():
    """
    Example of the complete flow.

    This shows:
    1. Setting up OpenFGA and Anthropic clients from the environment
    2. Creating the access service with a relationship mirror
    3. Dispatching a technician with suggested actions
    4. Using guarded tools, then revoking early
    """
    settings = AccessSettings.from_env()
    configure_logging(settings)

    configuration = ClientConfiguration(
        api_url=settings.openfga_api_url,
        store_id=settings.openfga_store_id,
    )
    openfga_client = OpenFgaClient(configuration)
    anthropic_client = Anthropic(api_key=settings.anthropic_api_key)

    store = JsonFileGrantStore(settings.store_path) if settings.store_path else InMemoryGrantStore()

    access_service = CachedTemporaryAccessService(
        grant_store=store,
        technicians=TECHNICIANS,
        settings=settings,
        relationship_mirror=OpenFgaGrantMirror(openfga_client)
    )
    suggestion_service = ActionSuggestionService(anthropic_client=anthropic_client)
    gateway = AccessGateway(access_service=access_service)

    visit = await initiate_technician_visit(
        technician_id="tech-1",
        tenant_id="tenant-a",
        reason="Install 5 cameras in the administrative wing",
        granted_by="admin-1",
        access_service=access_service,
        suggestion_service=suggestion_service
    )
    grant = visit["grant"]
    print(f"Grant issued: {grant.id} until {grant.expires_at.isoformat()}")
    print(f"Suggested actions: {visit['suggestion']['actions']}")

    from examples.example_tools import example_install_camera, example_upload_evidence

    try:
        await example_install_camera(
            gateway=gateway,
            camera_id="cam-010",
            name="Admin wing east",
            technician_id="tech-1",
            tenant_id="tenant-a"
        )
        print("Camera installed")
        await example_upload_evidence(
            gateway=gateway,
            camera_id="cam-010",
            filename="mount.jpg",
            technician_id="tech-1",
            tenant_id="tenant-a"
        )
    except AuthorizationError as e:
        print(f"Authorization failed: {e}")

    revoked = await access_service.revoke_temporary_access(grant.id, revoked_by="admin-1")
    print(f"Grant revoked at {revoked.revoked_at.isoformat()}")

    try:
        await access_service.revoke_temporary_access(grant.id, revoked_by="admin-1")
    except NotActiveError as e:
        print(f"Second revoke ignored: {e}")

    await cleanup_expired_grants(access_service, logger=logger)
    await openfga_client.close()


async def example_manual_grant():
    """
    Example of issuing a grant with hand-picked actions and no external services.
    """
    access_service = CachedTemporaryAccessService(technicians=TECHNICIANS)

    grant = await access_service.grant_temporary_access(GrantRequest(
        technician_id="tech-2",
        tenant_id="tenant-a",
        duration_minutes=60,
        reason="Replace faulty PoE switch in the garage",
        allowed_actions=["test_connection", "configure_network"],
        granted_by="admin-1"
    ))
    print(f"Grant issued: {grant.id}")

    authorized, reason = await access_service.check_technician_action(
        technician_id="tech-2",
        tenant_id="tenant-a",
        action="view_live"
    )
    print(f"Live view check: {authorized} - {reason}")


if __name__ == "__main__":
    asyncio.run(example_manual_grant())
