"""
Pytest configuration and fixtures for the generate-image function tests.
"""
import json
from http import HTTPStatus
from io import BytesIO

import pytest
import requests
from PIL import Image

from src.shared.settings import DEFAULT_REFERENCE_IMAGE_URL, Settings


TARGET_URL = "https://example.com/hat.jpg"
API_KEY = "AIza-test-key-0123456789"


def make_response(status_code=200, content=b"", headers=None, reason=None):
    """Build a real requests.Response without touching the network."""
    resp = requests.Response()
    resp.status_code = status_code
    resp._content = content
    resp.headers.update(headers or {})
    resp.reason = reason if reason is not None else HTTPStatus(status_code).phrase
    resp.encoding = "utf-8"
    return resp


def json_response(payload, status_code=200):
    return make_response(
        status_code,
        json.dumps(payload).encode("utf-8"),
        headers={"Content-Type": "application/json; charset=UTF-8"},
    )


class FakeSession:
    """Stands in for requests.Session; records every call it receives."""

    def __init__(self, get_responses=None, post_response=None):
        self.get_responses = dict(get_responses or {})
        self.post_response = post_response
        self.calls = []
        self.closed = False

    def _answer(self, outcome):
        if isinstance(outcome, Exception):
            raise outcome
        return outcome

    def get(self, url, **kwargs):
        self.calls.append(("GET", url, kwargs))
        return self._answer(self.get_responses[url])

    def post(self, url, **kwargs):
        self.calls.append(("POST", url, kwargs))
        return self._answer(self.post_response)

    def close(self):
        self.closed = True


@pytest.fixture
def png_bytes():
    buf = BytesIO()
    Image.new("RGB", (2, 2), color="green").save(buf, format="PNG")
    return buf.getvalue()


@pytest.fixture
def settings():
    return Settings(api_key=API_KEY)


@pytest.fixture
def api_result():
    """A trimmed generateContent response carrying one inline image."""
    return {
        "candidates": [
            {
                "content": {
                    "role": "model",
                    "parts": [{"inlineData": {"mimeType": "image/png", "data": "aW1hZ2U="}}],
                },
                "finishReason": "STOP",
            }
        ],
        "modelVersion": "gemini-2.5-flash-image-preview",
    }


@pytest.fixture
def happy_session(api_result):
    return FakeSession(
        get_responses={
            DEFAULT_REFERENCE_IMAGE_URL: make_response(200, b"turtle-art", {"Content-Type": "image/jpeg"}),
            TARGET_URL: make_response(200, b"blank-hat", {"Content-Type": "image/png"}),
        },
        post_response=json_response(api_result),
    )


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in (
        "GEMINI_API_KEY",
        "GEMINI_MODEL",
        "GEMINI_API_BASE",
        "REFERENCE_IMAGE_URL",
        "IMAGE_FETCH_TIMEOUT",
        "GEMINI_API_TIMEOUT",
        "DIAGNOSTIC_ERRORS",
    ):
        monkeypatch.delenv(name, raising=False)
