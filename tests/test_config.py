from __future__ import annotations

from pathlib import Path

import pytest

from wumpus_api.config import Settings, load_settings


_ENV_VARS = (
    "HOST",
    "PORT",
    "WUMPUS_NUM_CAVES",
    "WUMPUS_NUM_TUNNELS",
    "REDIS_URL",
    "WUMPUS_NOTIFICATIONS",
    "LOG_LEVEL",
)


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    # setenv first so teardown restores the prior state, including vars load_dotenv adds.
    for name in _ENV_VARS:
        monkeypatch.setenv(name, "")
        monkeypatch.delenv(name)


def test_defaults_when_environment_is_empty(tmp_path: Path) -> None:
    settings = load_settings(env_file=tmp_path / "missing.env")

    assert settings == Settings()
    assert settings.port == 3000
    assert (settings.num_caves, settings.num_tunnels) == (10, 15)
    assert settings.notifications_enabled is True


def test_environment_overrides(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setenv("PORT", "8080")
    monkeypatch.setenv("WUMPUS_NUM_CAVES", "20")
    monkeypatch.setenv("WUMPUS_NUM_TUNNELS", "30")
    monkeypatch.setenv("WUMPUS_NOTIFICATIONS", "0")
    monkeypatch.setenv("LOG_LEVEL", "debug")

    settings = load_settings(env_file=tmp_path / "missing.env")

    assert settings.port == 8080
    assert (settings.num_caves, settings.num_tunnels) == (20, 30)
    assert settings.notifications_enabled is False
    assert settings.log_level == "DEBUG"


def test_dotenv_file_is_loaded_without_overriding_real_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    env_file = tmp_path / ".env"
    env_file.write_text("PORT=4000\nREDIS_URL=redis://cache:6379/1\n")
    monkeypatch.setenv("PORT", "5000")

    settings = load_settings(env_file=env_file)

    assert settings.port == 5000
    assert settings.redis_url == "redis://cache:6379/1"


def test_non_integer_port_is_rejected(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setenv("PORT", "eighty")

    with pytest.raises(ValueError) as e:
        load_settings(env_file=tmp_path / "missing.env")

    assert "PORT" in str(e.value)
