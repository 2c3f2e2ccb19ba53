"""
CORS filter: fixed headers on every response, OPTIONS short-circuits.
"""

import pytest

from blog_api.core.cors import CORS_HEADERS


def _assert_cors(response):
    for name, value in CORS_HEADERS.items():
        assert response.headers[name] == value


@pytest.mark.parametrize("path", ["/", "/graphql", "/post-image", "/images/x.png", "/does/not/exist"])
def test_preflight_is_answered_for_any_path(client, path):
    response = client.options(path)

    assert response.status_code == 200
    assert response.content == b""
    _assert_cors(response)


def test_preflight_skips_auth_and_routes(client, settings):
    response = client.request(
        "OPTIONS",
        "/post-image",
        headers={"Authorization": "Bearer not-a-token"},
        files={"image": ("a.png", b"png-bytes", "image/png")},
    )

    assert response.status_code == 200
    assert list(settings.upload_dir.iterdir()) == []


def test_headers_on_success(client):
    response = client.get("/health")

    assert response.status_code == 200
    _assert_cors(response)


def test_headers_on_error_envelope(client):
    response = client.put("/post-image")

    assert response.status_code == 401
    _assert_cors(response)
