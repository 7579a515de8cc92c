"""Typed view over JSON flow definitions.

Flow definitions are stored and exchanged as plain JSON documents. The
registry hands those documents around untouched; the renderer and the
validator read them through the dataclasses below, built with
``FlowDefinition.from_dict()``.

Document shape (abridged):
{
    "id": "device-grant-flow",
    "name": "Device Authorization Grant",
    "configType": "device-grant-flow",
    "configSections": [{"id": "okta", "title": "Okta", "fields": ["oktaDomain"]}],
    "configFields": [{"id": "oktaDomain", "label": "Okta Domain", "type": "text"}],
    "steps": [{"number": 1, "id": "request-code", "title": "Request Device Code"}]
}
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class FieldType(Enum):
    """Known configuration field kinds."""
    TEXT = "text"
    PASSWORD = "password"
    TEXTAREA = "textarea"
    SELECT = "select"
    AUTH_SERVER_PICKER = "auth-server-picker"
    SCOPE_SELECTOR = "scope-selector"
    CLIENT_AUTH_TOGGLE = "client-auth-toggle"

    @classmethod
    def is_known(cls, value: Any) -> bool:
        return value in cls._value2member_map_

    @classmethod
    def from_value(cls, value: Any) -> "FieldType":
        """Resolve a ``type`` string; anything unrecognised renders as text."""
        if cls.is_known(value):
            return cls(value)
        return cls.TEXT


class ActionType(Enum):
    """What a step's primary button does when clicked (client side)."""
    API = "api"
    OPEN_URL = "openUrl"
    POLL = "poll"
    OAUTH = "oauth"
    SUB_FUNCTIONS = "subFunctions"


class FlowState(Enum):
    """Advisory lifecycle marker; no transitions are enforced."""
    DRAFT = "draft"
    TESTING = "testing"
    READY = "ready"


# actor -> CSS class used by the stylesheet shared with the hand-written flows
ACTOR_CLASSES = {
    "device": "actor-app",
    "user": "actor-agent",
    "agent": "actor-agent",
    "server": "actor-server",
    "app": "actor-app",
}

ACTOR_ICONS = {
    "book": "\U0001F4D6",
    "tv": "\U0001F4FA",
    "user": "\U0001F464",
    "server": "\U0001F5A5\uFE0F",
    "key": "\U0001F511",
    "lock": "\U0001F512",
    "link": "\U0001F517",
}
DEFAULT_ICON = "\U0001F4C4"


def _as_list(value: Any) -> list:
    return value if isinstance(value, list) else []


def _as_dict(value: Any) -> dict:
    return value if isinstance(value, dict) else {}


def is_present(value: Any) -> bool:
    """Presence the way stored JSON is read: empty arrays and objects count as set."""
    if isinstance(value, (list, dict)):
        return True
    return value not in (None, "", 0)


def normalize_config_fields(raw: Any) -> dict[str, dict[str, Any]]:
    """
    Return ``configFields`` as a mapping of field id to field document.

    Definitions may use either a mapping keyed by field id or a list of
    field objects that carry their own ``id``. Entries that are not objects
    (or list entries without an id) are ignored.
    """
    if isinstance(raw, dict):
        return {
            str(field_id): {**spec, "id": str(field_id)}
            for field_id, spec in raw.items()
            if isinstance(spec, dict)
        }
    fields: dict[str, dict[str, Any]] = {}
    for spec in _as_list(raw):
        if isinstance(spec, dict) and spec.get("id"):
            fields[str(spec["id"])] = spec
    return fields


@dataclass
class FieldOption:
    value: str
    label: str

    @classmethod
    def from_dict(cls, data: Any) -> "FieldOption":
        if not isinstance(data, dict):
            return cls(value=str(data), label=str(data))
        value = data.get("value", "")
        return cls(value=str(value), label=str(data.get("label") or value))


@dataclass
class FieldSpec:
    """One configuration input collected before running a flow."""
    id: str
    label: str = ""
    type: str = "text"
    required: bool = False
    placeholder: str = ""
    default: Any = None
    options: list[FieldOption] | None = None
    rows: int | None = None

    @property
    def kind(self) -> FieldType:
        return FieldType.from_value(self.type)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "FieldSpec":
        options = data.get("options")
        return cls(
            id=str(data["id"]),
            label=str(data.get("label") or data["id"]),
            type=str(data.get("type") or "text"),
            required=bool(data.get("required", False)),
            placeholder=str(data.get("placeholder") or ""),
            default=data.get("default"),
            options=[FieldOption.from_dict(o) for o in options] if isinstance(options, list) else None,
            rows=data.get("rows"),
        )


@dataclass
class ConfigSection:
    id: str
    title: str = ""
    fields: list[str] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ConfigSection":
        return cls(
            id=str(data.get("id", "")),
            title=str(data.get("title") or ""),
            fields=[str(f) for f in _as_list(data.get("fields"))],
        )


@dataclass
class ButtonSpec:
    label: str = ""
    action_type: str | None = None
    hidden: bool = False
    show_as_qr: bool = False
    url_source: str | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ButtonSpec":
        return cls(
            label=str(data.get("label") or ""),
            action_type=data.get("actionType"),
            hidden=bool(data.get("hidden", False)),
            show_as_qr=bool(data.get("showAsQR", False)),
            url_source=data.get("urlSource") or data.get("urlSourceExpression"),
        )


@dataclass
class StopButtonSpec:
    id: str
    label: str = "Stop"

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "StopButtonSpec":
        return cls(id=str(data.get("id") or "btn-stop"), label=str(data.get("label") or "Stop"))


@dataclass
class EndpointSpec:
    template: str
    preview_id: str = ""
    label: str = ""

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "EndpointSpec":
        return cls(
            template=str(data.get("template") or ""),
            preview_id=str(data.get("previewId") or ""),
            label=str(data.get("label") or ""),
        )


@dataclass
class BodyParam:
    """A form parameter of a cURL preview; ``source`` is a lookup expression."""
    name: str
    value: Any = None
    source: str | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "BodyParam":
        return cls(name=str(data.get("name", "")), value=data.get("value"), source=data.get("source"))


@dataclass
class CurlSpec:
    method: str = "POST"
    url_template: str = ""
    headers: dict[str, str] = field(default_factory=dict)
    body_params: list[BodyParam] = field(default_factory=list)
    show_as_url: bool = False
    show_as_qr: bool = False

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "CurlSpec":
        return cls(
            method=str(data.get("method") or "POST"),
            url_template=str(data.get("urlTemplate") or ""),
            headers={str(k): str(v) for k, v in _as_dict(data.get("headers")).items()},
            body_params=[BodyParam.from_dict(p) for p in _as_list(data.get("bodyParams")) if isinstance(p, dict)],
            show_as_url=bool(data.get("showAsUrl") or data.get("showAsUrlOnly")),
            show_as_qr=bool(data.get("showAsQR", False)),
        )


@dataclass
class StepSpec:
    """One UI step within a flow."""
    number: int
    id: str
    title: str
    description: str = ""
    info: str | None = None
    actor: str | None = None
    actor_label: str | None = None
    actor_icon: str | None = None
    initially_locked: bool = False
    button: ButtonSpec | None = None
    stop_button: StopButtonSpec | None = None
    endpoints: list[EndpointSpec] = field(default_factory=list)
    curl: CurlSpec | None = None
    device_code_display: bool = False

    @property
    def actor_class(self) -> str:
        return ACTOR_CLASSES.get(self.actor or "", f"actor-{self.actor}")

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "StepSpec":
        button = data.get("button")
        stop_button = data.get("stopButton")
        curl = data.get("curl")
        return cls(
            number=data.get("number"),
            id=str(data.get("id") or ""),
            title=str(data.get("title") or ""),
            description=str(data.get("description") or ""),
            info=data.get("info") or None,
            actor=data.get("actor") or None,
            actor_label=data.get("actorLabel") or None,
            actor_icon=data.get("actorIcon") or None,
            initially_locked=bool(data.get("initiallyLocked", False)),
            button=ButtonSpec.from_dict(button) if isinstance(button, dict) else None,
            stop_button=StopButtonSpec.from_dict(stop_button) if isinstance(stop_button, dict) else None,
            endpoints=[EndpointSpec.from_dict(e) for e in _as_list(data.get("endpoints")) if isinstance(e, dict)],
            curl=CurlSpec.from_dict(curl) if isinstance(curl, dict) else None,
            device_code_display=bool(data.get("deviceCodeDisplay", False)),
        )


@dataclass
class TokenTab:
    id: str
    label: str


@dataclass
class TokenDisplaySpec:
    show: bool = False
    container_id: str = "token-details"
    tabs: list[TokenTab] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "TokenDisplaySpec":
        return cls(
            show=bool(data.get("show", False)),
            container_id=str(data.get("containerId") or "token-details"),
            tabs=[
                TokenTab(id=str(t.get("id", "")), label=str(t.get("label") or t.get("id", "")))
                for t in _as_list(data.get("tabs"))
                if isinstance(t, dict)
            ],
        )


@dataclass
class Documentation:
    url: str
    label: str = "Documentation"


@dataclass
class FlowDefinition:
    """Typed, read-only projection of a flow definition document."""
    id: str
    name: str
    config_type: str = ""
    subtitle: str | None = None
    description: str | None = None
    icon: str | None = None
    category: str | None = None
    tags: list[str] = field(default_factory=list)
    status: str | None = None
    state: str = FlowState.DRAFT.value
    documentation: Documentation | None = None
    config_sections: list[ConfigSection] = field(default_factory=list)
    config_fields: dict[str, FieldSpec] = field(default_factory=dict)
    has_config: bool = False
    steps: list[StepSpec] = field(default_factory=list)
    token_display: TokenDisplaySpec | None = None
    custom_handlers: dict[str, Any] = field(default_factory=dict)
    state_schema: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "FlowDefinition":
        docs = data.get("documentation")
        token_display = data.get("tokenDisplay")
        raw_sections = data.get("configSections")
        raw_fields = data.get("configFields")
        return cls(
            id=str(data.get("id") or ""),
            name=str(data.get("name") or ""),
            config_type=str(data.get("configType") or ""),
            subtitle=data.get("subtitle") or None,
            description=data.get("description") or None,
            icon=data.get("icon") or None,
            category=data.get("category") or None,
            tags=[str(t) for t in _as_list(data.get("tags"))],
            status=data.get("status"),
            state=data.get("state") or FlowState.DRAFT.value,
            documentation=(
                Documentation(url=str(docs["url"]), label=str(docs.get("label") or "Documentation"))
                if isinstance(docs, dict) and docs.get("url") else None
            ),
            config_sections=[ConfigSection.from_dict(s) for s in _as_list(raw_sections) if isinstance(s, dict)],
            config_fields={
                field_id: FieldSpec.from_dict(spec)
                for field_id, spec in normalize_config_fields(raw_fields).items()
            },
            has_config=bool(raw_sections) and bool(raw_fields),
            steps=[StepSpec.from_dict(s) for s in _as_list(data.get("steps")) if isinstance(s, dict)],
            token_display=TokenDisplaySpec.from_dict(token_display) if isinstance(token_display, dict) else None,
            custom_handlers=_as_dict(data.get("customHandlers")),
            state_schema=_as_dict(data.get("stateSchema")),
        )


SUMMARY_FIELDS = (
    "id",
    "name",
    "subtitle",
    "description",
    "icon",
    "category",
    "tags",
    "status",
    "state",
    "documentation",
)


@dataclass
class FlowSummary:
    """Display metadata for bulk listings (never steps or fields)."""
    id: str
    name: str
    subtitle: Any = None
    description: Any = None
    icon: Any = None
    category: Any = None
    tags: Any = None
    status: Any = None
    state: str = FlowState.DRAFT.value
    documentation: Any = None

    @classmethod
    def from_flow(cls, flow: dict[str, Any]) -> "FlowSummary":
        values = {key: flow.get(key) for key in SUMMARY_FIELDS}
        values["id"] = str(values["id"])
        values["name"] = str(values["name"])
        values["state"] = str(values["state"]) if is_present(values["state"]) else FlowState.DRAFT.value
        return cls(**values)

    def to_dict(self) -> dict[str, Any]:
        return {key: getattr(self, key) for key in SUMMARY_FIELDS}
