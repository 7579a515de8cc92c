"""cURL previews for flow steps.

A step's ``curl`` block describes the request the step will make:

{
    "method": "POST",
    "urlTemplate": "{{config.oktaDomain}}/{{basePath}}/device/authorize",
    "headers": {"Content-Type": "application/x-www-form-urlencoded"},
    "bodyParams": [
        {"name": "client_id", "source": "config.clientId"},
        {"name": "scope", "value": "openid profile"}
    ]
}

Placeholders resolve against a nested mapping such as
``{"config": {...}, "state": {...}}``. Anything that cannot be resolved is
left visible (``{{...}}`` in URLs, ``<NAME>`` for body parameters) so the
preview reads as a template until the flow has the values.
"""

from __future__ import annotations

import re
from typing import Any

from .definition import CurlSpec
from .markup import escape_html

DEFAULT_BASE_PATH = "oauth2/v1"
URL_PENDING = "<URL will appear after previous step completes>"

_PLACEHOLDER = re.compile(r"\{\{\s*([\w.]+)\s*\}\}")
_DATA_LINE = re.compile(r"""^-d\s+['"](.+)['"]$""")
_TRAILING_BACKSLASH = re.compile(r"(\s)(\\)(\s*)$")


def resolve_path(values: dict[str, Any] | None, path: str) -> Any:
    """Look up a dotted path (``config.clientId``) in nested mappings."""
    current: Any = values or {}
    for part in path.split("."):
        if not isinstance(current, dict) or part not in current:
            return None
        current = current[part]
    return current


def interpolate_template(template: str, values: dict[str, Any] | None) -> str:
    """Replace ``{{name}}`` / ``{{a.b}}`` placeholders; unknown ones are kept."""

    def replace(m: re.Match) -> str:
        value = resolve_path(values, m.group(1))
        if value is None or value == "":
            return m.group(0)
        return str(value)

    return _PLACEHOLDER.sub(replace, template or "")


def build_curl_command(
    spec: CurlSpec | dict[str, Any],
    values: dict[str, Any] | None = None,
) -> str:
    """Build a multi-line cURL command (or just the URL) from a step's curl spec."""
    if isinstance(spec, dict):
        spec = CurlSpec.from_dict(spec)

    context = {"basePath": DEFAULT_BASE_PATH, **(values or {})}
    url = interpolate_template(spec.url_template, context)

    if spec.show_as_url:
        return url or URL_PENDING

    parts = [f"curl --request {spec.method.upper()}", f'  --url "{url}"']
    for key, value in spec.headers.items():
        parts.append(f'  -H "{key}: {interpolate_template(value, context)}"')

    for param in spec.body_params:
        value = param.value
        if param.source:
            value = resolve_path(context, param.source)
        if value is None or value == "":
            value = f"<{param.name.upper()}>"
        else:
            value = interpolate_template(str(value), context)
        parts.append(f'  -d "{param.name}={value}"')

    return " \\\n".join(parts)


def format_curl(command: str) -> str:
    """
    Format a cURL command as HTML with syntax-highlighting spans.

    Every piece of the command is escaped; a final ``-d 'a=1&b=2'`` line is
    split into one parameter per line.
    """
    output_lines = []

    for line in command.split("\n"):
        trimmed = line.strip()

        if trimmed.startswith("#"):
            output_lines.append(f'<span class="curl-comment">{escape_html(line)}</span>')
            continue

        data_match = _DATA_LINE.match(trimmed)
        if data_match:
            params = data_match.group(1).split("&")
            for idx, param in enumerate(params):
                continuation = "" if idx == len(params) - 1 else ' <span class="curl-flag">\\</span>'
                output_lines.append(
                    f'  <span class="curl-flag">-d</span> '
                    f"<span class=\"curl-data\">'{escape_html(param)}'</span>{continuation}"
                )
            continue

        formatted = escape_html(line)

        if trimmed.startswith("curl "):
            formatted = re.sub(r"^(\s*)(curl)(\s)", r'\1<span class="curl-cmd">\2</span>\3', formatted)
            formatted = re.sub(
                r"(-X|--request)\s+(\S+)",
                r'<span class="curl-flag">\1</span> <span class="curl-flag">\2</span>',
                formatted,
                count=1,
            )
            formatted = re.sub(r"'(https?://[^']+)'", r"'<span class=\"curl-url\">\1</span>'", formatted, count=1)
            formatted = re.sub(r'"(https?://[^"]+)"', r'"<span class="curl-url">\1</span>"', formatted, count=1)
        elif trimmed.startswith("-H "):
            formatted = re.sub(
                r"(-H)\s+'([^']+)'",
                r"<span class=\"curl-flag\">\1</span> <span class=\"curl-data\">'\2'</span>",
                formatted,
            )
            formatted = re.sub(
                r'(-H)\s+"([^"]+)"',
                r'<span class="curl-flag">\1</span> <span class="curl-data">"\2"</span>',
                formatted,
            )
        elif trimmed.startswith("--url "):
            formatted = re.sub(
                r"(--url)\s+'([^']+)'",
                r"<span class=\"curl-flag\">\1</span> '<span class=\"curl-url\">\2</span>'",
                formatted,
            )
            formatted = re.sub(
                r'(--url)\s+"([^"]+)"',
                r'<span class="curl-flag">\1</span> "<span class="curl-url">\2</span>"',
                formatted,
            )
            formatted = re.sub(
                r"(--url)\s+([^\s<]\S*)",
                r'<span class="curl-flag">\1</span> <span class="curl-url">\2</span>',
                formatted,
            )
        elif trimmed.startswith("-d "):
            formatted = re.sub(
                r"(-d)\s+'([^']*)'",
                r"<span class=\"curl-flag\">\1</span> <span class=\"curl-data\">'\2'</span>",
                formatted,
            )
            formatted = re.sub(
                r'(-d)\s+"([^"]*)"',
                r'<span class="curl-flag">\1</span> <span class="curl-data">"\2"</span>',
                formatted,
            )
        else:
            output_lines.append(formatted)
            continue

        formatted = _TRAILING_BACKSLASH.sub(r'\1<span class="curl-flag">\2</span>\3', formatted)
        output_lines.append(formatted)

    return "\n".join(output_lines)
