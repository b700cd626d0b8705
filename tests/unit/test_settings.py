# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Unit tests for application settings."""

from datetime import timedelta
from pathlib import Path

import pytest
from pydantic import ValidationError

from learnhub.core.config.settings import (
    CookieSettings,
    CORSSettings,
    DatabaseSettings,
    JWTSettings,
    Settings,
    UploadSettings,
    clear_settings_cache,
    get_settings,
    parse_duration,
)


class TestParseDuration:
    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            ("7d", timedelta(days=7)),
            ("12h", timedelta(hours=12)),
            ("30m", timedelta(minutes=30)),
            ("2w", timedelta(weeks=2)),
            ("45", timedelta(seconds=45)),
        ],
    )
    def test_valid(self, value: str, expected: timedelta) -> None:
        assert parse_duration(value) == expected

    def test_invalid(self) -> None:
        with pytest.raises(ValueError):
            parse_duration("seven days")


class TestJWTSettings:
    def test_secret_alias(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("JWT_SECRET", "from-env")

        assert JWTSettings().secret_key.get_secret_value() == "from-env"

    def test_rejects_bad_duration(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("JWT_EXPIRES_IN", "forever")

        with pytest.raises(ValidationError):
            JWTSettings()


class TestDatabaseSettings:
    def test_url_from_components(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("DATABASE_URL", raising=False)
        monkeypatch.setenv("DB_HOST", "db.internal")
        monkeypatch.setenv("DB_PASSWORD", "secret")

        url = DatabaseSettings().url

        assert url.startswith("postgresql+asyncpg://")
        assert "secret@db.internal:5432" in url

    def test_database_url_uses_asyncpg(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("DATABASE_URL", "postgresql://u:p@host:5432/learn")

        assert DatabaseSettings().url == "postgresql+asyncpg://u:p@host:5432/learn"


class TestOtherSettings:
    def test_cookie_max_age(self) -> None:
        assert CookieSettings().max_age_seconds == 7 * 24 * 60 * 60

    def test_cors_origins_include_client_url(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("CORS_ORIGINS", "http://a.test, http://b.test")
        monkeypatch.setenv("CLIENT_URL", "http://client.test")

        assert CORSSettings().origins_list == [
            "http://a.test",
            "http://b.test",
            "http://client.test",
        ]

    def test_upload_dir_alias(self, monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
        monkeypatch.setenv("UPLOAD_DIR", str(tmp_path))

        upload = UploadSettings()

        assert upload.directory == tmp_path
        assert upload.max_file_size == 50 * 1024 * 1024
        assert upload.max_files == 5


class TestSettings:
    def test_production_requires_secret(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("ENVIRONMENT", "production")
        monkeypatch.delenv("JWT_SECRET", raising=False)
        monkeypatch.delenv("JWT_SECRET_KEY", raising=False)

        with pytest.raises(ValidationError):
            Settings(_env_file=None)

    def test_production_with_secret(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("ENVIRONMENT", "production")
        monkeypatch.setenv("JWT_SECRET", "a-real-secret")

        settings = Settings(_env_file=None)

        assert settings.is_production
        assert not settings.is_development

    def test_get_settings_is_cached(self) -> None:
        clear_settings_cache()
        try:
            assert get_settings() is get_settings()
        finally:
            clear_settings_cache()
