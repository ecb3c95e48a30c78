import pytest

from technician_access import OpenFgaGrantMirror, TemporaryAccessService

from conftest import make_request


@pytest.fixture
def mirrored(store, clock, openfga):
    return TemporaryAccessService(
        grant_store=store,
        clock=clock,
        relationship_mirror=OpenFgaGrantMirror(openfga)
    )


class TestOpenFgaGrantMirror:

    @pytest.mark.asyncio
    async def test_grant_writes_tuples(self, mirrored, openfga):
        grant = await mirrored.grant_temporary_access(make_request())

        assert openfga.tuples == {
            ("technician:T1", "assignee", grant.id),
            ("user:admin-1", "grantor", grant.id),
            (grant.id, "install_camera", "tenant:A"),
            (grant.id, "test_connection", "tenant:A"),
        }

    @pytest.mark.asyncio
    async def test_no_grantor_tuple_without_admin(self, mirrored, openfga):
        grant = await mirrored.grant_temporary_access(make_request(granted_by=""))

        assert ("user:", "grantor", grant.id) not in openfga.tuples
        assert len(openfga.tuples) == 3

    @pytest.mark.asyncio
    async def test_revoke_retracts_only_that_grant(self, mirrored, openfga):
        first = await mirrored.grant_temporary_access(make_request())
        second = await mirrored.grant_temporary_access(make_request(tenant_id="B"))

        await mirrored.revoke_temporary_access(first.id)

        assert all(first.id not in t for t in openfga.tuples)
        assert (second.id, "install_camera", "tenant:B") in openfga.tuples

    @pytest.mark.asyncio
    async def test_mirror_failure_on_revoke_still_revokes_locally(self, mirrored, openfga):
        grant = await mirrored.grant_temporary_access(make_request())
        openfga.fail_reads = True

        with pytest.raises(RuntimeError):
            await mirrored.revoke_temporary_access(grant.id)

        assert (await mirrored.get_grant(grant.id)).revoked_at is not None

    @pytest.mark.asyncio
    async def test_retract_unknown_grant_is_zero(self, openfga):
        mirror = OpenFgaGrantMirror(openfga)

        assert await mirror.retract("grant:missing") == 0
        assert openfga.writes == []
