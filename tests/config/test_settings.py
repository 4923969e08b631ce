"""Tests for derived runtime settings."""

from tagbridge.config import settings


def test_positive_accepts_positive_numbers() -> None:
    assert settings._positive(2.5, 1.0) == 2.5  # pyright: ignore[reportPrivateUsage]
    assert settings._positive(3, 1.0) == 3.0  # pyright: ignore[reportPrivateUsage]


def test_positive_falls_back_on_invalid_values() -> None:
    positive = settings._positive  # pyright: ignore[reportPrivateUsage]
    assert positive(0, 1.1) == 1.1
    assert positive(-4, 1.1) == 1.1
    assert positive("fast", 1.1) == 1.1
    assert positive(True, 1.1) == 1.1
    assert positive(None, 1.1) == 1.1


def test_settings_are_usable_defaults() -> None:
    assert settings.MB_RATE_LIMIT_SECONDS > 0
    assert settings.MB_QUERY_TIMEOUT_SECONDS > settings.MB_POLL_INTERVAL_SECONDS
    assert settings.MB_SEARCH_ATTEMPTS >= 1
    assert settings.COVER_SIZE > 0
    assert settings.MB_APP_NAME
