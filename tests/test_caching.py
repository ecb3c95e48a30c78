import pytest

from technician_access import CachedTemporaryAccessService

from conftest import make_request


@pytest.fixture
def cached(store, clock):
    return CachedTemporaryAccessService(grant_store=store, clock=clock, cache_ttl_seconds=600)


class TestCachedChecks:

    @pytest.mark.asyncio
    async def test_allowed_decision_is_cached(self, cached):
        await cached.grant_temporary_access(make_request())

        await cached.check_technician_action("T1", "A", "install_camera")
        events = len(cached.audit_store)
        await cached.check_technician_action("T1", "A", "install_camera")

        assert len(cached.audit_store) == events

    @pytest.mark.asyncio
    async def test_cache_never_outlives_grant(self, cached, clock):
        # Grant lasts 5 minutes, cache TTL is 10 minutes
        await cached.grant_temporary_access(make_request(duration_minutes=5))
        assert (await cached.check_technician_action("T1", "A", "install_camera"))[0]

        clock.advance(minutes=5)
        allowed, reason = await cached.check_technician_action("T1", "A", "install_camera")
        assert allowed is False
        assert reason == "No active grant for this tenant"

    @pytest.mark.asyncio
    async def test_revoke_invalidates(self, cached):
        grant = await cached.grant_temporary_access(make_request())
        assert (await cached.check_technician_action("T1", "A", "install_camera"))[0]

        await cached.revoke_temporary_access(grant.id)

        assert (await cached.check_technician_action("T1", "A", "install_camera"))[0] is False

    @pytest.mark.asyncio
    async def test_new_grant_invalidates_cached_denial(self, cached):
        assert (await cached.check_technician_action("T1", "A", "install_camera"))[0] is False

        await cached.grant_temporary_access(make_request())

        assert (await cached.check_technician_action("T1", "A", "install_camera"))[0]

    @pytest.mark.asyncio
    async def test_denial_ttl(self, cached, clock, store):
        assert (await cached.check_technician_action("T1", "A", "install_camera"))[0] is False

        # Written straight to the store, bypassing invalidation
        other = CachedTemporaryAccessService(grant_store=store, clock=clock)
        await other.grant_temporary_access(make_request())

        assert (await cached.check_technician_action("T1", "A", "install_camera"))[0] is False
        clock.advance(seconds=10)
        assert (await cached.check_technician_action("T1", "A", "install_camera"))[0]

    @pytest.mark.asyncio
    async def test_other_pairs_keep_their_entries(self, cached):
        grant = await cached.grant_temporary_access(make_request())
        await cached.grant_temporary_access(make_request(tenant_id="B"))
        await cached.check_technician_action("T1", "A", "install_camera")
        await cached.check_technician_action("T1", "B", "install_camera")

        await cached.revoke_temporary_access(grant.id)

        assert [k[1] for k in cached.cache] == ["B"]
