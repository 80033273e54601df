"""Settings validation and derived values."""

import pytest
from pydantic import ValidationError

from app.core.config import Settings
from app.domain.enums import AdminMatchMode


def test_defaults() -> None:
    settings = Settings(_env_file=None)
    assert settings.identity_timeout_seconds == 5.0
    assert settings.identity_max_attempts == 3
    assert settings.admin_match is AdminMatchMode.SUBSTRING
    assert settings.admin_role_code_list == ["ADMIN", "ADMINISTRATOR", "OWNER"]


def test_env_overrides(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("ADMIN_MATCH_MODE", "AllowList")
    monkeypatch.setenv("ADMIN_ROLE_CODES", "ADMIN, ,SUPERUSER")
    monkeypatch.setenv("ALLOWED_ORIGINS", "http://a.test, http://b.test")
    settings = Settings(_env_file=None)
    assert settings.admin_match is AdminMatchMode.ALLOWLIST
    assert settings.admin_role_code_list == ["ADMIN", "SUPERUSER"]
    assert settings.allowed_origin_list == ["http://a.test", "http://b.test"]


@pytest.mark.parametrize(
    "overrides",
    [
        {"admin_match_mode": "regex"},
        {"identity_timeout_seconds": 0},
        {"api_timeout_seconds": -1},
        {"identity_max_attempts": 0},
        {"telemetry_exporter": "jaeger"},
        {"telemetry_sample_rate": 1.5},
    ],
)
def test_invalid_values_rejected(overrides: dict) -> None:
    with pytest.raises(ValidationError):
        Settings(_env_file=None, **overrides)
