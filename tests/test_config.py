from technician_access import AccessSettings


class TestAccessSettings:

    def test_defaults(self, monkeypatch):
        for name in ("TECHNICIAN_ACCESS_MIN_MINUTES", "TECHNICIAN_ACCESS_MAX_MINUTES",
                     "TECHNICIAN_ACCESS_ENFORCE_SINGLE_ACTIVE", "TECHNICIAN_ACCESS_STORE_PATH"):
            monkeypatch.delenv(name, raising=False)

        settings = AccessSettings.from_env()

        assert settings.min_duration_minutes == 5
        assert settings.max_duration_minutes == 480
        assert settings.enforce_single_active_grant is False
        assert settings.store_path is None

    def test_overrides(self, monkeypatch):
        monkeypatch.setenv("TECHNICIAN_ACCESS_MAX_MINUTES", "240")
        monkeypatch.setenv("TECHNICIAN_ACCESS_ENFORCE_SINGLE_ACTIVE", "yes")
        monkeypatch.setenv("TECHNICIAN_ACCESS_STORE_PATH", "/tmp/grants.json")

        settings = AccessSettings.from_env()

        assert settings.max_duration_minutes == 240
        assert settings.enforce_single_active_grant is True
        assert settings.store_path == "/tmp/grants.json"
