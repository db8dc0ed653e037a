import json
import re

from app import create_app


def _client():
    app = create_app("TestingConfig")
    return app.test_client()


def test_home_lists_plugins():
    client = _client()
    response = client.get("/")
    assert response.status_code == 200
    body = response.get_data(as_text=True)
    match = re.search(
        r'<script id="app-state" type="application/json">(.+?)</script>', body, re.S
    )
    assert match is not None
    state = json.loads(match.group(1))
    titles = [item["title"] for item in state.get("manifests", [])]
    assert "Scientific Calculator" in titles
    hrefs = [item["href"] for item in state["manifests"]]
    assert "/scientific_calculator/" in hrefs
    assert state.get("page") == "home"
    assert response.headers.get("Content-Security-Policy")


def test_responses_carry_request_id():
    client = _client()
    response = client.get("/", headers={"X-Request-ID": "abc123"})
    assert response.headers["X-Request-ID"] == "abc123"
    generated = client.get("/api/scientific_calculator/layout")
    assert len(generated.headers["X-Request-ID"]) == 32


def test_unknown_page_renders_not_found():
    client = _client()
    response = client.get("/does-not-exist")
    assert response.status_code == 404
    assert "404" in response.get_data(as_text=True)


def test_site_settings_come_from_config_file():
    app = create_app("TestingConfig")
    assert app.config["SITE_SETTINGS"]["title"] == "Calculator Workbench"
    assert app.config["MAX_CONTENT_LENGTH"] == 1024 * 1024
    assert app.config["PLUGIN_SETTINGS"]["scientific_calculator"]["max_expression_length"] == 1024


def test_security_headers_restrict_pages_to_own_origin():
    client = _client()
    response = client.get("/scientific_calculator/")
    assert response.headers["X-Content-Type-Options"] == "nosniff"
    policy = response.headers["Content-Security-Policy"]
    assert "default-src 'self'" in policy
    assert "frame-ancestors 'none'" in policy
    assert "unsafe-inline" not in policy
