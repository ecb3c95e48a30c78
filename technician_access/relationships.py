"""
Mirror of access grants into an OpenFGA relationship store.

Downstream services that already speak OpenFGA (camera gateways, evidence
upload) can check ``grant:<id> -> <action> -> tenant:<id>`` without calling
this package. The grant record stays the source of truth; the tuples only
follow it.
"""

import logging
from typing import List

from openfga_sdk import OpenFgaClient, ReadRequestTupleKey
from openfga_sdk.client.models import ClientTuple, ClientWriteRequest

from .models import AccessGrant

logger = logging.getLogger(__name__)


def grant_object(grant_id: str) -> str:
    return grant_id if grant_id.startswith("grant:") else f"grant:{grant_id}"


class OpenFgaGrantMirror:
    """
    Writes and deletes the relationship tuples of a grant.

    Tuple layout per grant:
      technician:<id>  assignee  grant:<id>
      user:<admin>     grantor   grant:<id>
      grant:<id>       <action>  tenant:<id>   (one per allowed action)
    """

    def __init__(self, openfga_client: OpenFgaClient):
        self.client = openfga_client
        # Grants whose tuples are known to be gone; reset on restart
        self.retracted = set()

    def tuples_for(self, grant: AccessGrant) -> List[ClientTuple]:
        obj = grant_object(grant.id)
        tuples = [
            ClientTuple(
                user=f"technician:{grant.technician_id}",
                relation="assignee",
                object=obj
            ),
        ]
        if grant.granted_by:
            tuples.append(
                ClientTuple(
                    user=f"user:{grant.granted_by}",
                    relation="grantor",
                    object=obj
                )
            )
        for action in sorted(a.value for a in grant.allowed_actions):
            tuples.append(
                ClientTuple(
                    user=obj,
                    relation=action,
                    object=f"tenant:{grant.tenant_id}"
                )
            )
        return tuples

    async def publish(self, grant: AccessGrant) -> int:
        tuples = self.tuples_for(grant)
        await self.client.write(ClientWriteRequest(writes=tuples))
        logger.debug("Mirrored %d tuples for %s", len(tuples), grant.id)
        return len(tuples)

    def is_retracted(self, grant_id: str) -> bool:
        return grant_object(grant_id) in self.retracted

    async def retract(self, grant_id: str) -> int:
        """Delete every tuple that mentions the grant. Returns the count."""
        obj = grant_object(grant_id)

        # Tuples where the grant is the object (assignee, grantor)
        related = await self.client.read(ReadRequestTupleKey(object=obj))
        # Tuples where the grant is the user (actions on the tenant)
        scoped = await self.client.read(ReadRequestTupleKey(user=obj, object="tenant:"))

        keys = []
        for response in (related, scoped):
            for t in getattr(response, "tuples", None) or []:
                keys.append(ClientTuple(
                    user=t.key.user,
                    relation=t.key.relation,
                    object=t.key.object
                ))

        if keys:
            await self.client.write(ClientWriteRequest(deletes=keys))
        self.retracted.add(obj)
        logger.debug("Retracted %d tuples for %s", len(keys), grant_id)
        return len(keys)
