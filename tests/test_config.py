"""Configuration, credential decoding and startup tests."""

from __future__ import annotations

import base64
import json

import pytest

from luckydraw import create_app
from luckydraw.config import TestingConfig, cors_origins, get_config
from luckydraw.db import create_order_store, decode_service_account
from luckydraw.errors import ConfigurationError


def _b64(text: str) -> str:
    return base64.b64encode(text.encode("utf-8")).decode("ascii")


def test_decode_service_account():
    payload = {"type": "service_account", "project_id": "promo"}

    assert decode_service_account(_b64(json.dumps(payload))) == payload


@pytest.mark.parametrize("raw", [None, "", "%%not-base64%%", _b64("not json"), _b64("[1, 2]")])
def test_decode_service_account_rejects(raw):
    with pytest.raises(ConfigurationError):
        decode_service_account(raw)


def test_missing_credential_exits():
    with pytest.raises(SystemExit) as excinfo:
        create_app({"DB_BACKEND": "firestore", "FIREBASE_SERVICE_ACCOUNT_KEY": None})

    assert excinfo.value.code == 1


def test_invalid_service_account_exits():
    raw = _b64(json.dumps({"type": "user"}))

    with pytest.raises(SystemExit):
        create_app({"DB_BACKEND": "firestore", "FIREBASE_SERVICE_ACCOUNT_KEY": raw})


def test_unknown_backend():
    with pytest.raises(ConfigurationError):
        create_order_store({"DB_BACKEND": "redis"})


def test_memory_backend_from_config():
    app = create_app({"TESTING": True, "DB_BACKEND": "memory"})

    assert app.extensions["order_store"].backend_name == "memory"
    assert app.extensions["redemption_service"].store is app.extensions["order_store"]


def test_get_config_testing(monkeypatch):
    monkeypatch.setenv("APP_ENV", "testing")

    assert get_config() is TestingConfig
    assert TestingConfig.DB_BACKEND == "memory"


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("*", "*"),
        ("", "*"),
        ("https://a.example.com, https://b.example.com", ["https://a.example.com", "https://b.example.com"]),
    ],
)
def test_cors_origins(raw, expected):
    assert cors_origins(raw) == expected
