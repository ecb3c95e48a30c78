from datetime import timedelta

from technician_access import AccessAction, AccessGrant, GrantStatus, classify, is_active, remaining

from conftest import T0


def _grant(**overrides):
    values = dict(
        id="grant:1",
        technician_id="T1",
        tenant_id="A",
        granted_at=T0,
        expires_at=T0 + timedelta(minutes=60),
        duration_minutes=60,
        reason="Install five cameras in the lobby",
        allowed_actions=frozenset({AccessAction.INSTALL_CAMERA}),
    )
    values.update(overrides)
    return AccessGrant(**values)


class TestClassify:

    def test_active_before_expiry(self):
        grant = _grant()
        assert classify(grant, T0) is GrantStatus.ACTIVE
        assert classify(grant, grant.expires_at - timedelta(milliseconds=1)) is GrantStatus.ACTIVE

    def test_expired_at_exact_boundary(self):
        grant = _grant()
        assert classify(grant, grant.expires_at) is GrantStatus.EXPIRED

    def test_expired_after_boundary(self):
        grant = _grant()
        assert classify(grant, grant.expires_at + timedelta(days=1)) is GrantStatus.EXPIRED

    def test_revoked_wins_over_active_and_expired(self):
        grant = _grant().revoked(T0 + timedelta(minutes=30), "admin-1")
        assert classify(grant, T0 + timedelta(minutes=31)) is GrantStatus.REVOKED
        assert classify(grant, grant.expires_at + timedelta(hours=1)) is GrantStatus.REVOKED

    def test_classify_does_not_mutate(self):
        grant = _grant()
        classify(grant, grant.expires_at)
        assert grant.revoked_at is None


class TestHelpers:

    def test_is_active(self):
        grant = _grant()
        assert is_active(grant, T0 + timedelta(minutes=59))
        assert not is_active(grant, T0 + timedelta(minutes=60))

    def test_remaining(self):
        grant = _grant()
        assert remaining(grant, T0 + timedelta(minutes=45)) == timedelta(minutes=15)
        assert remaining(grant, T0 + timedelta(minutes=90)) == timedelta(0)
        assert remaining(grant.revoked(T0, "x"), T0) == timedelta(0)
