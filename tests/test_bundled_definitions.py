"""The definitions shipped with the package must stay valid and renderable."""

import json

import pytest

from oauth_flow_engine import settings
from oauth_flow_engine.core import FlowRegistry, FlowRenderer, validate_flow

BUNDLED = sorted(settings.bundled_definitions_dir.glob("*.json"))


def test_definitions_are_bundled():
    assert [path.stem for path in BUNDLED] == ["auth-code-flow", "device-grant-flow", "token-exchange-flow"]


@pytest.mark.parametrize("path", BUNDLED, ids=lambda p: p.stem)
def test_bundled_definition_is_valid(path):
    flow = json.loads(path.read_text(encoding="utf-8"))

    report = validate_flow(flow)

    assert report.errors == []
    assert report.warnings == []
    assert flow["id"] == path.stem


@pytest.mark.parametrize("path", BUNDLED, ids=lambda p: p.stem)
def test_bundled_definition_renders(path):
    flow = FlowRegistry(settings.bundled_definitions_dir).load(path.stem).flow

    html = FlowRenderer(flow).render_full_page()

    assert 'class="stepper"' in html
    assert "<script" not in html
