"""HTML escaping helpers shared by the renderer and cURL formatter."""

from __future__ import annotations

import html
from typing import Any


def escape_html(value: Any) -> str:
    """Escape text for use as element content. ``None`` renders as empty."""
    if value is None:
        return ""
    return html.escape(str(value), quote=False)


def escape_attr(value: Any) -> str:
    """Escape text for use inside a double- or single-quoted attribute value."""
    if value is None:
        return ""
    return html.escape(str(value), quote=True)
