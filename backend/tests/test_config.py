from __future__ import annotations

import pytest

from agora.core.config import Settings
from agora.core.env import env_file_candidates, load_env_files, parse_env_line


BASE_ENV = {"DATABASE_URL": "postgresql+psycopg://u:p@localhost/agora", "AGORA_JWT_SECRET": "s"}


def test_from_env_defaults():
    settings = Settings.from_env(BASE_ENV)
    assert settings.token_ttl_hours == 24
    assert settings.cors_allow_origins == ("*",)
    assert settings.log_level == "INFO"


def test_from_env_overrides():
    env = dict(
        BASE_ENV,
        AGORA_TOKEN_TTL_HOURS="2",
        CORS_ALLOW_ORIGINS="http://localhost:3000, https://ir.example.com",
        AGORA_LOG_LEVEL="debug",
    )
    settings = Settings.from_env(env)
    assert settings.token_ttl_hours == 2
    assert settings.cors_allow_origins == ("http://localhost:3000", "https://ir.example.com")
    assert settings.log_level == "DEBUG"


@pytest.mark.parametrize(
    "env",
    [
        {"AGORA_JWT_SECRET": "s"},
        {"DATABASE_URL": "sqlite://"},
        dict(BASE_ENV, AGORA_TOKEN_TTL_HOURS="soon"),
        dict(BASE_ENV, AGORA_TOKEN_TTL_HOURS="0"),
        dict(BASE_ENV, AGORA_LOG_LEVEL="LOUD"),
    ],
)
def test_invalid_settings_fail_fast(env):
    with pytest.raises(RuntimeError):
        Settings.from_env(env)


def test_settings_are_immutable():
    settings = Settings.from_env(BASE_ENV)
    with pytest.raises(AttributeError):
        settings.jwt_secret = "other"  # type: ignore[misc]


@pytest.mark.parametrize(
    "line,expected",
    [
        ("DATABASE_URL=sqlite://", ("DATABASE_URL", "sqlite://")),
        ("export AGORA_LOG_LEVEL = debug", ("AGORA_LOG_LEVEL", "debug")),
        ('AGORA_JWT_SECRET="with # hash"', ("AGORA_JWT_SECRET", "with # hash")),
        ("CORS_ALLOW_ORIGINS=* # everyone", ("CORS_ALLOW_ORIGINS", "*")),
        ("# comment", None),
        ("", None),
        ("no_equals_sign", None),
        ("=value", None),
    ],
)
def test_parse_env_line(line, expected):
    assert parse_env_line(line) == expected


def test_env_file_loading_respects_existing_values(tmp_path):
    env_file = tmp_path / "agora.env"
    env_file.write_text("DATABASE_URL=sqlite://\nAGORA_JWT_SECRET=from-file\n", encoding="utf-8")
    environ = {"AGORA_JWT_SECRET": "from-env"}

    loaded = load_env_files([env_file, tmp_path / "missing.env"], environ=environ)

    assert loaded == [env_file]
    assert environ == {"AGORA_JWT_SECRET": "from-env", "DATABASE_URL": "sqlite://"}

    load_env_files([env_file], environ=environ, override=True)
    assert environ["AGORA_JWT_SECRET"] == "from-file"


def test_explicit_env_file_replaces_defaults(tmp_path):
    target = tmp_path / "custom.env"
    assert env_file_candidates({"AGORA_ENV_FILE": str(target)}) == [target]
    assert len(env_file_candidates({})) == 2
