"""
Test fixtures for the flow definition engine.

Provides sample definitions, a temporary definitions directory, a registry
over it and a FastAPI TestClient wired to that registry.
"""

import copy
import json
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from oauth_flow_engine.core import FlowRegistry
from oauth_flow_engine.server.app import create_app


DEVICE_GRANT = {
    "id": "device-grant",
    "name": "Device Grant",
    "configType": "device-grant-flow",
    "steps": [
        {"number": 1, "id": "s1", "title": "Get Code"},
        {"number": 2, "id": "s2", "title": "Poll"},
    ],
}


def write_flow(directory: Path, flow_id: str, document) -> Path:
    """Write a definition file; strings are written verbatim."""
    path = directory / f"{flow_id}.json"
    text = document if isinstance(document, str) else json.dumps(document, indent=2)
    path.write_text(text, encoding="utf-8")
    return path


@pytest.fixture
def device_grant() -> dict:
    return copy.deepcopy(DEVICE_GRANT)


@pytest.fixture
def full_flow() -> dict:
    """A definition exercising every renderer region."""
    return {
        "id": "full-flow",
        "name": "Full Flow",
        "subtitle": "Everything at once",
        "state": "testing",
        "documentation": {"url": "https://example.com/docs", "label": "Docs"},
        "configType": "full-flow",
        "configSections": [
            {"id": "okta", "title": "Okta", "fields": ["oktaDomain", "authServer"]},
            {"id": "client", "title": "Client", "fields": ["clientId", "clientAuth", "scopes", "notes", "mode"]},
        ],
        "configFields": [
            {"id": "oktaDomain", "label": "Okta Domain", "type": "text", "required": True},
            {"id": "authServer", "label": "Auth Server", "type": "auth-server-picker"},
            {"id": "clientId", "label": "Client ID", "type": "password"},
            {"id": "clientAuth", "label": "Client Auth", "type": "client-auth-toggle"},
            {"id": "scopes", "label": "Scopes", "type": "scope-selector"},
            {"id": "notes", "label": "Notes", "type": "textarea"},
            {
                "id": "mode",
                "label": "Mode",
                "type": "select",
                "options": [{"value": "a", "label": "Mode A"}, {"value": "b", "label": "Mode B"}],
            },
        ],
        "steps": [
            {
                "number": 1,
                "id": "request",
                "title": "Request",
                "description": "Ask for a code",
                "actor": "device",
                "button": {"label": "Go", "actionType": "api"},
                "endpoints": [{"template": "{domain}/device/authorize", "previewId": "ep-1"}],
                "curl": {
                    "method": "POST",
                    "urlTemplate": "{{config.oktaDomain}}/{{basePath}}/device/authorize",
                    "headers": {"Accept": "application/json"},
                    "bodyParams": [{"name": "client_id", "source": "config.clientId"}],
                },
                "deviceCodeDisplay": True,
            },
            {
                "number": 2,
                "id": "approve",
                "title": "Approve",
                "actor": "user",
                "initiallyLocked": True,
                "info": "Use your phone",
                "button": {"label": "Open", "actionType": "openUrl", "showAsQR": True},
            },
            {
                "number": 3,
                "id": "poll",
                "title": "Poll",
                "actor": "server",
                "initiallyLocked": True,
                "button": {"label": "Poll", "actionType": "poll"},
                "stopButton": {"id": "btn-stop-polling", "label": "Stop Polling"},
            },
        ],
        "tokenDisplay": {
            "show": True,
            "containerId": "token-details",
            "tabs": [{"id": "access", "label": "Access Token"}],
        },
    }


@pytest.fixture
def definitions_dir(tmp_path, device_grant) -> Path:
    """Directory with one valid definition."""
    directory = tmp_path / "definitions"
    directory.mkdir()
    write_flow(directory, "device-grant", device_grant)
    return directory


@pytest.fixture
def registry(definitions_dir) -> FlowRegistry:
    return FlowRegistry(definitions_dir)


@pytest.fixture
def client(registry) -> TestClient:
    app = create_app(registry=registry)
    return TestClient(app)
