"""Tests for the settings persistence layer."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from maestro.ai.client import DEFAULT_BASE_URL, DEFAULT_MODEL
from maestro.services.settings import SecretVault, Settings, SettingsStore, redact_secret


def _store(tmp_path: Path) -> SettingsStore:
    return SettingsStore(tmp_path / "settings.json", vault=SecretVault(key_path=tmp_path / "key"))


def test_load_returns_defaults_when_file_missing(tmp_path: Path) -> None:
    settings = _store(tmp_path).load()

    assert settings == Settings()
    assert settings.base_url == DEFAULT_BASE_URL
    assert settings.model == DEFAULT_MODEL


def test_save_and_load_roundtrip(tmp_path: Path) -> None:
    path = tmp_path / "settings.json"
    original = Settings(
        api_key="super-secret",
        model="gemini-2.5-pro",
        organization="conservatorio",
        request_timeout=15.0,
        default_headers={"X-Test": "1"},
        debug_logging=True,
        speech_lang="es-MX",
        speech_rate=1.1,
    )

    SettingsStore(path).save(original)
    reloaded = SettingsStore(path).load()

    assert reloaded == original


def test_api_key_is_encrypted_on_disk(tmp_path: Path) -> None:
    store = _store(tmp_path)

    store.save(Settings(api_key="super-secret"))

    raw = store.path.read_text(encoding="utf-8")
    payload = json.loads(raw)
    assert "super-secret" not in raw
    assert "api_key" not in payload
    assert payload["api_key_ciphertext"]
    assert payload["version"] == 1


def test_load_legacy_plaintext_api_key(tmp_path: Path) -> None:
    store = _store(tmp_path)
    store.path.write_text(json.dumps({"api_key": "legacy-key", "model": "gemini-2.0-flash"}), encoding="utf-8")

    settings = store.load()

    assert settings.api_key == "legacy-key"
    assert settings.model == "gemini-2.0-flash"
    migrated = json.loads(store.path.read_text(encoding="utf-8"))
    assert "api_key" not in migrated
    assert store.vault.decrypt(migrated["api_key_ciphertext"]) == "legacy-key"


def test_undecryptable_key_is_dropped(tmp_path: Path) -> None:
    store = _store(tmp_path)
    store.path.write_text(
        json.dumps({"api_key_ciphertext": "not-a-token", "version": 1}), encoding="utf-8"
    )

    assert store.load().api_key == ""


@pytest.mark.parametrize("body", ["{not json", "[1, 2, 3]"])
def test_unreadable_file_falls_back_to_defaults(tmp_path: Path, body: str) -> None:
    store = _store(tmp_path)
    store.path.write_text(body, encoding="utf-8")

    assert store.load() == Settings()


def test_unknown_fields_are_ignored(tmp_path: Path) -> None:
    store = _store(tmp_path)
    store.path.write_text(json.dumps({"theme": "dark", "model": "m", "version": 1}), encoding="utf-8")

    assert store.load().model == "m"


# =============================================================================
# Overrides
# =============================================================================


def test_cli_overrides_apply_over_file(tmp_path: Path) -> None:
    store = _store(tmp_path)
    store.save(Settings(model="from-file"))

    settings = store.load(overrides={"model": "from-cli", "unknown": "x"})

    assert settings.model == "from-cli"


def test_environment_beats_cli_overrides(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("MAESTRO_MODEL", "from-env")
    monkeypatch.setenv("MAESTRO_DEBUG_LOGGING", "yes")
    monkeypatch.setenv("MAESTRO_REQUEST_TIMEOUT", "12.5")

    settings = _store(tmp_path).load(overrides={"model": "from-cli"})

    assert settings.model == "from-env"
    assert settings.debug_logging is True
    assert settings.request_timeout == 12.5


def test_invalid_float_env_is_ignored(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("MAESTRO_SPEECH_RATE", "fast")

    assert _store(tmp_path).load().speech_rate == 0.9


def test_gemini_api_key_is_a_fallback(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("GEMINI_API_KEY", "from-gemini-env")
    store = _store(tmp_path)

    assert store.load().api_key == "from-gemini-env"

    store.save(Settings(api_key="stored"))
    assert store.load().api_key == "stored"

    monkeypatch.setenv("MAESTRO_API_KEY", "explicit")
    assert store.load().api_key == "explicit"


# =============================================================================
# Secrets
# =============================================================================


def test_vault_creates_key_once(tmp_path: Path) -> None:
    key_path = tmp_path / "nested" / "settings.key"
    vault = SecretVault(key_path=key_path)

    token = vault.encrypt("secret")

    assert key_path.exists()
    assert SecretVault(key_path=key_path).decrypt(token) == "secret"


def test_vault_rejects_foreign_token(tmp_path: Path) -> None:
    token = SecretVault(key_path=tmp_path / "a.key").encrypt("secret")

    with pytest.raises(ValueError):
        SecretVault(key_path=tmp_path / "b.key").decrypt(token)


@pytest.mark.parametrize(
    ("value", "expected"),
    [("", ""), ("abc", "***"), ("AIzaSy-secret", "AI*********et")],
)
def test_redact_secret(value: str, expected: str) -> None:
    assert redact_secret(value) == expected
