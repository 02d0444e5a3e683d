"""Branding document exchanged with the editor UI.

The sub-resources (prompt settings, branding, template, theme) are kept
as plain JSON objects so that fields the management API adds later are
round-tripped untouched.
"""
from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any

from .errors import DocumentError

THEME_ID_FIELD = "themeId"
LOGO_URL_FIELD = "logo_url"

DEFAULT_BRANDING_COLORS: dict[str, str] = {
    "primary": "#0059d6",
    "page_background": "#000000",
}


@dataclass(frozen=True)
class ThemeText:
    bold: bool
    size: float


@dataclass(frozen=True)
class ThemeBorders:
    button_border_radius: float
    button_border_weight: float
    buttons_style: str
    input_border_radius: float
    input_border_weight: float
    inputs_style: str
    show_widget_shadow: bool
    widget_border_weight: float
    widget_corner_radius: float


@dataclass(frozen=True)
class ThemeColors:
    base_focus_color: str
    base_hover_color: str
    body_text: str
    error: str
    header: str
    icons: str
    input_background: str
    input_border: str
    input_filled_text: str
    input_labels_placeholders: str
    links_focused_components: str
    primary_button: str
    primary_button_label: str
    secondary_button_border: str
    secondary_button_label: str
    success: str
    widget_background: str
    widget_border: str


@dataclass(frozen=True)
class ThemeFonts:
    body_text: ThemeText
    buttons_text: ThemeText
    font_url: str
    input_labels: ThemeText
    links: ThemeText
    links_style: str
    reference_text_size: float
    subtitle: ThemeText
    title: ThemeText


@dataclass(frozen=True)
class ThemePageBackground:
    background_color: str
    background_image_url: str
    page_layout: str


@dataclass(frozen=True)
class ThemeWidget:
    header_text_alignment: str
    logo_height: float
    logo_position: str
    logo_url: str
    social_buttons_layout: str


@dataclass(frozen=True)
class ThemeDescriptor:
    """Visual style of the Universal Login pages."""

    borders: ThemeBorders
    colors: ThemeColors
    fonts: ThemeFonts
    page_background: ThemePageBackground
    widget: ThemeWidget

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


# Used whenever the tenant has no theme yet.
DEFAULT_THEME = ThemeDescriptor(
    borders=ThemeBorders(
        button_border_radius=3,
        button_border_weight=1,
        buttons_style="rounded",
        input_border_radius=3,
        input_border_weight=1,
        inputs_style="rounded",
        show_widget_shadow=True,
        widget_border_weight=0,
        widget_corner_radius=5,
    ),
    colors=ThemeColors(
        base_focus_color="#635dff",
        base_hover_color="#000000",
        body_text="#1e212a",
        error="#d03c38",
        header="#1e212a",
        icons="#65676e",
        input_background="#ffffff",
        input_border="#c9cace",
        input_filled_text="#000000",
        input_labels_placeholders="#65676e",
        links_focused_components="#635dff",
        primary_button="#635dff",
        primary_button_label="#ffffff",
        secondary_button_border="#c9cace",
        secondary_button_label="#1e212a",
        success="#13a688",
        widget_background="#ffffff",
        widget_border="#c9cace",
    ),
    fonts=ThemeFonts(
        body_text=ThemeText(bold=False, size=87.5),
        buttons_text=ThemeText(bold=False, size=100.0),
        font_url="",
        input_labels=ThemeText(bold=False, size=100.0),
        links=ThemeText(bold=True, size=87.5),
        links_style="normal",
        reference_text_size=16.0,
        subtitle=ThemeText(bold=False, size=87.5),
        title=ThemeText(bold=False, size=150.0),
    ),
    page_background=ThemePageBackground(
        background_color="#000000",
        background_image_url="",
        page_layout="center",
    ),
    widget=ThemeWidget(
        header_text_alignment="center",
        logo_height=52.0,
        logo_position="center",
        logo_url="",
        social_buttons_layout="bottom",
    ),
)


@dataclass
class TenantData:
    """Read-only tenant details shown by the editor."""

    friendly_name: str = ""
    enabled_locales: list[str] = field(default_factory=list)
    domain: str = ""

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> TenantData:
        locales = data.get("enabled_locales") or []
        if not isinstance(locales, list):
            raise DocumentError("tenant.enabled_locales must be a list")
        return cls(
            friendly_name=str(data.get("friendly_name") or ""),
            enabled_locales=[str(locale) for locale in locales],
            domain=str(data.get("domain") or ""),
        )


def _object_field(data: dict[str, Any], key: str) -> dict[str, Any]:
    value = data.get(key)
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise DocumentError(f"'{key}' must be a JSON object")
    return value


@dataclass
class CompositeDocument:
    """Full branding snapshot exchanged between the bridge and the UI."""

    connected: bool = False
    authentication_profile: dict[str, Any] = field(default_factory=dict)
    branding: dict[str, Any] = field(default_factory=dict)
    templates: dict[str, Any] = field(default_factory=dict)
    themes: dict[str, Any] = field(default_factory=dict)
    tenant: TenantData = field(default_factory=TenantData)
    custom_text: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {
            "connected": self.connected,
            "authentication_profile": self.authentication_profile,
            "branding": self.branding,
            "templates": self.templates,
            "themes": self.themes,
            "tenant": asdict(self.tenant),
            "custom_text": self.custom_text,
        }

    @classmethod
    def from_dict(cls, data: Any) -> CompositeDocument:
        """Decode a document received from the UI.

        Raises DocumentError when the payload is not shaped like a
        document.
        """
        if not isinstance(data, dict):
            raise DocumentError("document must be a JSON object")
        connected = data.get("connected", False)
        if not isinstance(connected, bool):
            raise DocumentError("'connected' must be a boolean")
        return cls(
            connected=connected,
            authentication_profile=_object_field(data, "authentication_profile"),
            branding=_object_field(data, "branding"),
            templates=_object_field(data, "templates"),
            themes=_object_field(data, "themes"),
            tenant=TenantData.from_dict(_object_field(data, "tenant")),
            custom_text=_object_field(data, "custom_text"),
        )
