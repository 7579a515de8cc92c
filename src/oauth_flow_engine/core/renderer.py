"""
HTML rendering of flow definitions.

FlowRenderer turns one definition into the fragments the simulator page is
assembled from: header, configuration panel, step cards, token panel and
the shared modals. Rendering is pure; nothing here reads files or state
beyond the definition it was given.

Usage:
    renderer = FlowRenderer(flow_document)
    html = renderer.render_full_page()
"""

from __future__ import annotations

from typing import Any, Callable

from .curl import build_curl_command, format_curl
from .definition import (
    ACTOR_ICONS,
    DEFAULT_ICON,
    FieldOption,
    FieldSpec,
    FieldType,
    FlowDefinition,
    FlowState,
    StepSpec,
)
from .markup import escape_attr, escape_html

DEFAULT_SCOPES = "openid profile email offline_access"
DEFAULT_TEXTAREA_ROWS = 2
QR_PLACEHOLDER_SRC = "/api/utility/qr/url/BLANK_PLACEHOLDER?size=150"

AUTH_SERVER_OPTIONS = [
    FieldOption("org", "Org Authorization Server (v1)"),
    FieldOption("default", "Default Custom Auth Server"),
    FieldOption("custom", "Custom Auth Server ID"),
]
AUTH_SERVER_DEFAULT = "default"

CLIENT_AUTH_OPTIONS = [
    FieldOption("secret", "Client Secret"),
    FieldOption("private_key", "Private Key JWT"),
    FieldOption("pkce", "PKCE (Public Client)"),
]

NO_CONFIG_HTML = "<p>No configuration required.</p>"
NO_STEPS_HTML = "<p>No steps defined.</p>"


def _join(parts: list[str]) -> str:
    return "\n".join(p for p in parts if p)


class FlowRenderer:
    """Renders one flow definition to HTML strings."""

    def __init__(self, flow: FlowDefinition | dict[str, Any]):
        if isinstance(flow, dict):
            flow = FlowDefinition.from_dict(flow)
        self.flow = flow

        self._field_renderers: dict[FieldType, Callable[[FieldSpec], str]] = {
            FieldType.TEXT: self._render_text_input,
            FieldType.PASSWORD: self._render_text_input,
            FieldType.TEXTAREA: self._render_textarea,
            FieldType.SELECT: self._render_select,
            FieldType.AUTH_SERVER_PICKER: self._render_auth_server_picker,
            FieldType.SCOPE_SELECTOR: self._render_scope_selector,
            FieldType.CLIENT_AUTH_TOGGLE: self._render_client_auth_toggle,
        }

    # =========================================================================
    # Header
    # =========================================================================

    def render_header(self) -> str:
        flow = self.flow

        doc_link = ""
        if flow.documentation:
            label = flow.documentation.label
            doc_link = (
                f'<a href="{escape_attr(flow.documentation.url)}" target="_blank" '
                f'class="doc-link" title="{escape_attr(label)}">{escape_html(label)}</a>'
            )

        options = [
            f'<option value="{state.value}"{" selected" if flow.state == state.value else ""}>'
            f"{state.value.capitalize()}</option>"
            for state in FlowState
        ]
        state_selector = _join([
            '<div class="flow-state-selector" id="flow-state-selector" hidden>',
            "<label>State:</label>",
            '<select id="flow-state-select">',
            *options,
            "</select>",
            "</div>",
        ])

        subtitle = f'<p class="subtitle">{escape_html(flow.subtitle)}</p>' if flow.subtitle else ""

        return _join([
            '<nav class="breadcrumb">',
            '<a href="/">← All Flows</a>',
            state_selector,
            doc_link,
            "</nav>",
            "<header>",
            f"<h1>{escape_html(flow.name)}</h1>",
            subtitle,
            "</header>",
        ])

    # =========================================================================
    # Configuration panel
    # =========================================================================

    def render_config_panel(self) -> str:
        flow = self.flow
        if not flow.has_config:
            return NO_CONFIG_HTML

        parts = ['<div class="config-fields">']
        for index, section in enumerate(flow.config_sections):
            if index > 0:
                parts.append(
                    '<div class="config-section-divider">'
                    f"<span>{escape_html(section.title)}</span></div>"
                )
            for field_id in section.fields:
                spec = flow.config_fields.get(field_id)
                if spec is not None:
                    parts.append(self.render_field(spec))

        parts.extend([
            '<div class="config-actions">',
            '<button class="btn btn-primary btn-small" id="save-config-btn">Save to Browser</button>',
            '<button class="btn btn-primary btn-small" id="save-server-btn">Save to Server</button>',
            '<button class="btn btn-secondary btn-small" id="clear-config-btn">Clear Saved</button>',
            "</div>",
            "</div>",
        ])
        return _join(parts)

    def render_field(self, spec: FieldSpec) -> str:
        """Render one labelled config row; unknown types become text inputs."""
        render_input = self._field_renderers[spec.kind]
        optional = "" if spec.required else ' <span class="label-optional">(optional)</span>'

        domain_link = ""
        if spec.id == "oktaDomain":
            domain_link = (
                ' <a href="#" id="okta-domain-link" class="domain-link" target="_blank" '
                'hidden title="Open Okta Admin Console">Open ↗</a>'
            )

        return _join([
            '<div class="config-row">',
            f'<label for="cfg-{escape_attr(spec.id)}">{escape_html(spec.label)}{optional}{domain_link}</label>',
            render_input(spec),
            "</div>",
        ])

    @staticmethod
    def _input_attrs(spec: FieldSpec) -> str:
        attrs = f'id="cfg-{escape_attr(spec.id)}" name="{escape_attr(spec.id)}"'
        if spec.placeholder:
            attrs += f' placeholder="{escape_attr(spec.placeholder)}"'
        if spec.required:
            attrs += " required"
        return attrs

    def _render_text_input(self, spec: FieldSpec) -> str:
        input_type = "password" if spec.kind is FieldType.PASSWORD else "text"
        value = ""
        if spec.default is not None and spec.kind is not FieldType.PASSWORD:
            value = f' value="{escape_attr(spec.default)}"'
        return f'<input type="{input_type}" {self._input_attrs(spec)}{value}>'

    def _render_textarea(self, spec: FieldSpec) -> str:
        rows = spec.rows or DEFAULT_TEXTAREA_ROWS
        content = escape_html(spec.default) if spec.default is not None else ""
        return f'<textarea {self._input_attrs(spec)} rows="{escape_attr(rows)}">{content}</textarea>'

    @staticmethod
    def _render_options(options: list[FieldOption], selected: Any) -> str:
        selected = None if selected is None else str(selected)
        return "".join(
            f'<option value="{escape_attr(opt.value)}"{" selected" if opt.value == selected else ""}>'
            f"{escape_html(opt.label)}</option>"
            for opt in options
        )

    def _render_select(self, spec: FieldSpec) -> str:
        options = self._render_options(spec.options or [], spec.default)
        return f"<select {self._input_attrs(spec)}>{options}</select>"

    def _render_auth_server_picker(self, spec: FieldSpec) -> str:
        selected = spec.default if spec.default is not None else AUTH_SERVER_DEFAULT
        options = self._render_options(spec.options or AUTH_SERVER_OPTIONS, selected)
        return _join([
            '<div class="redirect-uri-group">',
            f'<select id="cfg-{escape_attr(spec.id)}" name="{escape_attr(spec.id)}">{options}</select>',
            '<input type="text" id="cfg-authorizationServerId" placeholder="Custom Auth Server ID" hidden>',
            '<span class="auth-server-preview" id="auth-server-preview"></span>',
            "</div>",
        ])

    def _render_scope_selector(self, spec: FieldSpec) -> str:
        scopes = spec.default or DEFAULT_SCOPES
        return _join([
            '<div class="scope-selector" id="scope-selector">',
            '<div class="scope-tiles" id="scope-tiles">',
            '<span class="scope-loading" id="scope-loading">'
            "Configure Okta Domain and Auth Server to load scopes</span>",
            "</div>",
            '<div class="scope-custom-input">',
            '<input type="text" id="scope-custom-input" placeholder="Add custom scope...">',
            '<button type="button" class="btn btn-small btn-secondary" id="scope-add-btn">Add</button>',
            "</div>",
            f'<input type="hidden" id="cfg-{escape_attr(spec.id)}" name="{escape_attr(spec.id)}" '
            f'value="{escape_attr(scopes)}">',
            "</div>",
        ])

    def _render_client_auth_toggle(self, spec: FieldSpec) -> str:
        radios = [
            '<label class="radio-option">'
            f'<input type="radio" name="{escape_attr(spec.id)}" value="{escape_attr(opt.value)}"'
            f'{" checked" if i == 0 else ""}> {escape_html(opt.label)}</label>'
            for i, opt in enumerate(spec.options or CLIENT_AUTH_OPTIONS)
        ]
        return _join([
            f'<div class="client-auth-toggle" id="cfg-{escape_attr(spec.id)}">',
            *radios,
            "</div>",
        ])

    # =========================================================================
    # Steps
    # =========================================================================

    def render_steps(self) -> str:
        if not self.flow.steps:
            return NO_STEPS_HTML
        return _join([self.render_step(step) for step in self.flow.steps])

    def render_step(self, step: StepSpec | dict[str, Any]) -> str:
        """Render one step card followed by its (hidden) add-step container."""
        if isinstance(step, dict):
            step = StepSpec.from_dict(step)
        num = escape_attr(step.number)

        step_class = "step locked" if step.initially_locked else "step"

        return _join([
            f'<div class="{step_class}" id="step-{num}">',
            self._render_edit_controls(num),
            '<div class="step-header">',
            f'<span class="step-number">{escape_html(step.number)}</span>',
            '<div class="step-info">',
            self._render_actor_badge(step),
            f"<h3>{escape_html(step.title)}</h3>",
            f"<p>{escape_html(step.description)}</p>",
            *[
                f'<div class="step-option"><code class="uri-template" id="{escape_attr(ep.preview_id)}">'
                f"{escape_html(ep.template)}</code></div>"
                for ep in step.endpoints
            ],
            f'<p class="step-info-text">{escape_html(step.info)}</p>' if step.info else "",
            self._render_inline_device_code(num) if step.device_code_display else "",
            "</div>",
            self._render_actions(step, num),
            "</div>",
            self._render_curl(step, num),
            f'<div class="step-result" id="result-{num}"></div>',
            "</div>",
            f'<div class="add-step-container" data-after="{num}" hidden>'
            f'<button class="btn btn-secondary btn-small add-step-btn" data-after="{num}">'
            "+ Add Step After</button></div>",
        ])

    @staticmethod
    def _render_actor_badge(step: StepSpec) -> str:
        if not step.actor:
            return ""
        icon = ""
        if step.actor_icon:
            icon = ACTOR_ICONS.get(step.actor_icon, DEFAULT_ICON) + " "
        label = step.actor_label or step.actor
        return f'<span class="actor {escape_attr(step.actor_class)}">{icon}{escape_html(label)}</span>'

    @staticmethod
    def _render_edit_controls(num: str) -> str:
        return _join([
            '<div class="step-edit-controls" hidden>',
            f'<button class="btn btn-secondary btn-small step-move-btn" data-step="{num}" '
            'data-direction="up" title="Move up">&#9650;</button>',
            f'<button class="btn btn-secondary btn-small step-move-btn" data-step="{num}" '
            'data-direction="down" title="Move down">&#9660;</button>',
            f'<button class="btn btn-secondary btn-small step-edit-btn" data-step="{num}" '
            'title="Edit step">&#9998;</button>',
            "</div>",
        ])

    @staticmethod
    def _render_actions(step: StepSpec, num: str) -> str:
        button_html = ""
        button = step.button
        if button and not button.hidden:
            if button.show_as_qr:
                button_html = (
                    f'<div class="button-qr-display" id="btn-qr-{num}">'
                    f'<img src="{QR_PLACEHOLDER_SRC}" alt="QR Code (waiting for URL)" '
                    f'class="button-qr-image" id="btn-qr-img-{num}"></div>'
                )
            elif step.initially_locked:
                button_html = (
                    f'<button class="btn btn-secondary" id="btn-step-{num}" disabled>'
                    f"{escape_html(button.label)}</button>"
                )
            else:
                button_html = (
                    f'<button class="btn btn-primary" id="btn-step-{num}">'
                    f"{escape_html(button.label)}</button>"
                )

        stop_html = ""
        if step.stop_button:
            stop_html = (
                f'<button class="btn btn-secondary btn-small" id="{escape_attr(step.stop_button.id)}" hidden>'
                f"{escape_html(step.stop_button.label)}</button>"
            )

        return f'<div class="step-action-group">{button_html}{stop_html}</div>'

    @staticmethod
    def _render_curl(step: StepSpec, num: str) -> str:
        if step.curl is None:
            return ""

        preview = format_curl(build_curl_command(step.curl))
        qr_html = ""
        if step.curl.show_as_qr:
            qr_html = (
                f'<div class="curl-qr-display" id="curl-qr-{num}">'
                f'<img src="{QR_PLACEHOLDER_SRC}" alt="QR Code (waiting for URL)" '
                f'class="curl-qr-image" id="curl-qr-img-{num}"></div>'
            )

        return _join([
            '<details class="curl-section">',
            "<summary>cURL Command</summary>",
            '<div class="curl-with-qr">',
            f'<pre class="curl-box" id="curl-{num}">{preview}</pre>',
            qr_html,
            "</div>",
            "</details>",
        ])

    @staticmethod
    def _render_inline_device_code(num: str) -> str:
        return _join([
            f'<div class="device-code-display-inline" id="device-code-display-{num}" hidden>',
            '<div class="device-code-content">',
            '<div class="user-code-section">',
            '<div class="user-code-label">Enter this code:</div>',
            f'<div class="user-code" id="user-code-{num}">--------</div>',
            '<div class="verification-uri">',
            "<span>at</span>",
            f'<a href="#" id="verification-uri-{num}" target="_blank">-</a>',
            "</div>",
            "</div>",
            "</div>",
            "</div>",
        ])

    # =========================================================================
    # Token panel and static shells
    # =========================================================================

    def render_token_display(self) -> str:
        display = self.flow.token_display
        if display is None or not display.show:
            return ""

        tabs = [
            f'<button class="token-tab" data-tab="{escape_attr(tab.id)}">{escape_html(tab.label)}</button>'
            for tab in display.tabs
        ]
        return _join([
            f'<div class="token-details" id="{escape_attr(display.container_id)}" hidden>',
            "<h3>Token Details</h3>",
            '<div class="token-tabs">',
            *tabs,
            "</div>",
            '<div class="token-content" id="token-content"></div>',
            "</div>",
        ])

    def render_device_code_display(self) -> str:
        return DEVICE_CODE_DISPLAY_HTML

    def render_dialog_modal(self) -> str:
        return DIALOG_MODAL_HTML

    def render_configs_modal(self) -> str:
        return CONFIGS_MODAL_HTML

    def render_step_edit_modal(self) -> str:
        return STEP_EDIT_MODAL_HTML

    # =========================================================================
    # Composition
    # =========================================================================

    def render_stepper(self) -> str:
        return _join([
            '<div class="stepper">',
            '<div class="stepper-header">',
            f"<span>{escape_html(self.flow.name)}</span>",
            '<div class="stepper-actions">',
            '<button id="export-flow-btn" class="btn btn-secondary btn-small" hidden '
            'title="Export flow definition">Export</button>',
            '<button id="view-logs-btn" class="btn btn-secondary btn-small">View Logs</button>',
            '<button id="reset-btn" class="btn btn-secondary btn-small">Reset</button>',
            '<label class="edit-toggle" title="Toggle edit mode">',
            '<input type="checkbox" id="edit-mode-toggle">',
            '<span class="edit-toggle-slider"></span>',
            '<span class="edit-toggle-label">Edit</span>',
            "</label>",
            "</div>",
            "</div>",
            self.render_steps(),
            "</div>",
        ])

    def render_full_page(self) -> str:
        """Every fragment in page order."""
        return _join([
            self.render_header(),
            '<details class="config-panel" id="config-panel" open>',
            "<summary>",
            'Configuration <span class="config-status" id="config-status"></span>',
            '<button class="btn-icon" id="load-saved-btn" title="Load saved configuration">&#128193;</button>',
            "</summary>",
            self.render_config_panel(),
            "</details>",
            self.render_device_code_display(),
            self.render_stepper(),
            self.render_token_display(),
            self.render_dialog_modal(),
            self.render_configs_modal(),
            self.render_step_edit_modal(),
        ])


DEVICE_CODE_DISPLAY_HTML = _join([
    '<div class="device-code-display" id="device-code-display" hidden>',
    '<div class="user-code-label">Enter this code:</div>',
    '<div class="user-code" id="user-code-value">--------</div>',
    '<div class="verification-uri">',
    "<span>at</span>",
    '<a href="#" id="verification-uri-link" target="_blank">-</a>',
    "</div>",
    "</div>",
])

DIALOG_MODAL_HTML = _join([
    '<div class="modal-overlay" id="dialog-modal" hidden>',
    '<div class="modal modal-dialog">',
    '<div class="modal-header"><h3 id="dialog-title">Message</h3></div>',
    '<div class="modal-body">',
    '<p id="dialog-message"></p>',
    '<input type="text" id="dialog-input" class="dialog-input" hidden>',
    "</div>",
    '<div class="modal-footer">',
    '<button class="btn btn-secondary btn-small" id="dialog-cancel" hidden>Cancel</button>',
    '<button class="btn btn-primary btn-small" id="dialog-ok">OK</button>',
    "</div>",
    "</div>",
    "</div>",
])

CONFIGS_MODAL_HTML = _join([
    '<div class="modal-overlay" id="configs-modal" hidden>',
    '<div class="modal">',
    '<div class="modal-header">',
    "<h3>Saved Configurations</h3>",
    '<button class="btn-icon" id="close-modal-btn" title="Close">&times;</button>',
    "</div>",
    '<div class="modal-body" id="configs-list"><div class="loading">Loading...</div></div>',
    "</div>",
    "</div>",
])


# Step editor: (tab id, tab label) in display order
STEP_EDIT_TABS = [
    ("basic", "Basic"),
    ("button", "Button"),
    ("endpoints", "Endpoints"),
    ("curl", "cURL"),
    ("api", "API"),
    ("polling", "Polling"),
    ("success", "On Success"),
    ("subfunctions", "Sub Functions"),
]


def _edit_input(input_id: str, label: str, placeholder: str = "") -> str:
    return (
        f'<div class="config-row"><label for="{input_id}">{label}</label>'
        f'<input type="text" id="{input_id}" placeholder="{escape_attr(placeholder)}"></div>'
    )


def _edit_checkbox(input_id: str, label: str, checked: bool = False) -> str:
    return (
        f'<div class="config-row"><label><input type="checkbox" id="{input_id}"'
        f'{" checked" if checked else ""}> {label}</label></div>'
    )


def _edit_select(input_id: str, label: str, options: list[tuple[str, str]]) -> str:
    rendered = "".join(f'<option value="{value}">{text}</option>' for value, text in options)
    return (
        f'<div class="config-row"><label for="{input_id}">{label}</label>'
        f'<select id="{input_id}">{rendered}</select></div>'
    )


def _edit_list(list_id: str, heading: str, add_id: str, add_label: str) -> str:
    return _join([
        f"<h4>{heading}</h4>",
        f'<div id="{list_id}" class="editable-list"></div>',
        f'<button class="btn btn-small btn-secondary" id="{add_id}">{add_label}</button>',
    ])


_HTTP_METHODS = [("GET", "GET"), ("POST", "POST"), ("PUT", "PUT"), ("DELETE", "DELETE")]

STEP_EDIT_PANELS = {
    "basic": [
        _edit_input("step-edit-id", "Step ID", "unique-step-id"),
        _edit_input("step-edit-title", "Title", "Step title"),
        '<div class="config-row"><label for="step-edit-description">Description</label>'
        '<textarea id="step-edit-description" rows="3" placeholder="Step description"></textarea></div>',
        _edit_select(
            "step-edit-actor", "Actor",
            [("", "None"), ("device", "Device"), ("user", "User"), ("agent", "Agent"),
             ("server", "Server"), ("app", "App")],
        ),
        _edit_input("step-edit-actor-label", "Actor Label", "Display name"),
        _edit_select(
            "step-edit-actor-icon", "Actor Icon",
            [("", "Default")] + [(name, name.upper() if name == "tv" else name.capitalize())
                                 for name in ACTOR_ICONS if name != "book"],
        ),
        '<div class="config-row"><label for="step-edit-info">Info Text '
        '<span class="label-optional">(optional)</span></label>'
        '<textarea id="step-edit-info" rows="2" placeholder="Additional info shown below description">'
        "</textarea></div>",
        _edit_checkbox("step-edit-locked", "Initially Locked"),
    ],
    "button": [
        "<h4>Primary Button</h4>",
        _edit_checkbox("step-edit-button-visible", "Show Button", checked=True),
        _edit_checkbox("step-edit-button-show-as-qr", "Replace Button with QR Code"),
        _edit_input("step-edit-button-label", "Button Label", "Button text"),
        _edit_select(
            "step-edit-button-action", "Action Type",
            [("", "None"), ("api", "API Call"), ("openUrl", "Open URL"), ("poll", "Start Polling"),
             ("oauth", "OAuth Popup"), ("subFunctions", "Sub Functions")],
        ),
        _edit_input("step-edit-button-url-source", "URL Source Expression",
                    "state.verificationUri || config.redirectUri"),
        '<h4>Stop Button <span class="label-optional">(for polling steps)</span></h4>',
        _edit_input("step-edit-stop-label", "Stop Button Label", "Stop Polling"),
        _edit_input("step-edit-stop-id", "Stop Button ID", "btn-stop-polling"),
    ],
    "endpoints": [
        _edit_list("step-edit-endpoints-list", "Endpoint Previews", "step-edit-add-endpoint", "+ Add Endpoint"),
    ],
    "curl": [
        _edit_select("step-edit-curl-method", "HTTP Method", [("", "None (no cURL)")] + _HTTP_METHODS),
        _edit_input("step-edit-curl-url", "URL Template", "{{oktaDomain}}{{basePath}}/token"),
        _edit_list("step-edit-curl-headers-list", "Headers", "step-edit-add-curl-header", "+ Add Header"),
        _edit_list("step-edit-curl-body-list", "Body Parameters", "step-edit-add-curl-body", "+ Add Parameter"),
        "<h4>Display Options</h4>",
        _edit_checkbox("step-edit-curl-show-as-url", "Show as URL only (hide full cURL command)"),
        _edit_checkbox("step-edit-curl-show-as-qr", "Show QR code for URL"),
    ],
    "api": [
        _edit_input("step-edit-api-endpoint", "API Endpoint", "/api/device/authorize"),
        _edit_select("step-edit-api-method", "Method", [("", "None (no API call)")] + _HTTP_METHODS),
        _edit_list("step-edit-api-results-list", "Store Results", "step-edit-add-api-result", "+ Add Mapping"),
    ],
    "polling": [
        _edit_input("step-edit-poll-endpoint", "Polling Endpoint", "/api/device/token"),
        _edit_select("step-edit-poll-method", "Method", [("", "None (no polling)")] + _HTTP_METHODS[:2]),
        _edit_input("step-edit-poll-interval", "Interval Source", "state.pollingInterval"),
        "<h4>Conditions</h4>",
        _edit_input("step-edit-poll-success", "Success Condition", "response.access_token"),
        _edit_input("step-edit-poll-pending", "Pending Condition", "response.error === 'authorization_pending'"),
        _edit_input("step-edit-poll-slowdown", "Slow Down Condition", "response.error === 'slow_down'"),
        _edit_input("step-edit-poll-expired", "Expired Condition", "response.error === 'expired_token'"),
        _edit_input("step-edit-poll-denied", "Denied Condition", "response.error === 'access_denied'"),
        _edit_list("step-edit-poll-results-list", "Store Results on Success",
                   "step-edit-add-poll-result", "+ Add Mapping"),
    ],
    "success": [
        "<h4>Unlock Steps</h4>",
        _edit_input("step-edit-unlock-steps", "Steps to Unlock (comma-separated numbers)", "2, 3"),
        "<h4>UI Actions</h4>",
        _edit_checkbox("step-edit-show-device-code", "Show Device Code Display"),
        _edit_checkbox("step-edit-show-token", "Show Token Display"),
        _edit_select(
            "step-edit-result-type", "Display Type",
            [("", "Default (text)"), ("device-code-display", "Device Code Display"),
             ("token-display", "Token Display"), ("json", "JSON")],
        ),
    ],
    "subfunctions": [
        '<div class="subfn-info"><p>Sub functions are reusable server-side operations that can be '
        'chained together. Set "Action Type" to "Sub Functions" on the Button tab to use these.</p></div>',
        '<div class="panel-header"><h4>Function Chain</h4>'
        '<button class="btn btn-small btn-secondary" id="step-edit-add-subfn">+ Add Function</button></div>',
        '<div id="step-edit-subfn-list" class="subfn-list"></div>',
        '<div class="subfn-help"><h4>Available Functions</h4>'
        '<div id="subfn-available-list" class="subfn-available">'
        '<p class="loading">Loading available functions...</p></div></div>',
    ],
}


def _render_step_edit_modal() -> str:
    tabs = [
        f'<button class="step-edit-tab{" active" if i == 0 else ""}" data-tab="{tab_id}">{label}</button>'
        for i, (tab_id, label) in enumerate(STEP_EDIT_TABS)
    ]
    panels = [
        _join([
            f'<div class="step-edit-panel{" active" if i == 0 else ""}" id="step-edit-panel-{tab_id}">',
            *STEP_EDIT_PANELS[tab_id],
            "</div>",
        ])
        for i, (tab_id, _label) in enumerate(STEP_EDIT_TABS)
    ]
    return _join([
        '<div class="modal-overlay" id="step-edit-modal" hidden>',
        '<div class="modal modal-full">',
        '<div class="modal-header">',
        '<h3>Edit Step <span id="step-edit-number"></span></h3>',
        '<button class="btn-icon" id="close-step-edit-btn" title="Close">&times;</button>',
        "</div>",
        '<div class="modal-body step-edit-body">',
        '<div class="step-edit-tabs">',
        *tabs,
        "</div>",
        *panels,
        "</div>",
        '<div class="modal-footer">',
        '<button class="btn btn-danger btn-small" id="step-edit-delete">Delete Step</button>',
        '<div class="modal-footer-right">',
        '<button class="btn btn-secondary btn-small" id="step-edit-cancel">Cancel</button>',
        '<button class="btn btn-primary btn-small" id="step-edit-save">Save Changes</button>',
        "</div>",
        "</div>",
        "</div>",
        "</div>",
    ])


STEP_EDIT_MODAL_HTML = _render_step_edit_modal()
