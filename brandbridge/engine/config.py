"""Configuration loaded from environment variables.

All settings have sensible defaults. Override via BRANDBRIDGE_* env vars,
a YAML file (see yaml_config.py) or CLI flags, in that order.
"""
from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field

logger = logging.getLogger(__name__)


DEFAULT_UI_ORIGIN = "http://localhost:5173"
DEFAULT_TEXT_URL = (
    "https://cdn.auth0.com/ulp/react-components/development/languages/"
    "{locale}/prompts.json"
)
# Only "login" is enabled for now; the remaining prompt areas are not yet
# supported by the editor UI.
DEFAULT_PROMPTS = ("login",)


def _split_list(raw: str) -> list[str]:
    return [item.strip() for item in raw.split(",") if item.strip()]


@dataclass
class BridgeConfig:
    """Branding bridge configuration."""

    # Management API access
    domain: str | None = None
    access_token: str | None = field(default=None, repr=False)
    http_timeout_seconds: float = 600.0

    # Local editor UI. The websocket port is appended as ?ws_port=<port>.
    ui_origin: str = DEFAULT_UI_ORIGIN
    ui_url: str = DEFAULT_UI_ORIGIN
    host: str = "127.0.0.1"
    max_message_bytes: int = 1_000_000

    # Custom text
    locale: str = "en"
    prompts: list[str] = field(default_factory=lambda: list(DEFAULT_PROMPTS))
    default_text_url: str = DEFAULT_TEXT_URL

    # Logging
    log_level: str = "INFO"

    def default_text_url_for_locale(self) -> str:
        return self.default_text_url.format(locale=self.locale)

    @classmethod
    def from_env(cls) -> BridgeConfig:
        """Load configuration from BRANDBRIDGE_* environment variables."""
        bridge_vars = sorted(
            k for k in os.environ if k.startswith("BRANDBRIDGE_")
        )
        if bridge_vars:
            # Values are omitted: the access token lives here too.
            logger.info(
                "BridgeConfig.from_env: env overrides: %s",
                ", ".join(bridge_vars),
            )
        else:
            logger.debug("BridgeConfig.from_env: no BRANDBRIDGE_* env vars set")

        prompts_raw = os.getenv("BRANDBRIDGE_PROMPTS")
        config = cls(
            domain=os.getenv("BRANDBRIDGE_DOMAIN") or None,
            access_token=os.getenv("BRANDBRIDGE_ACCESS_TOKEN") or None,
            http_timeout_seconds=float(os.getenv(
                "BRANDBRIDGE_HTTP_TIMEOUT", str(cls.http_timeout_seconds)
            )),
            ui_origin=os.getenv("BRANDBRIDGE_UI_ORIGIN", cls.ui_origin),
            ui_url=os.getenv("BRANDBRIDGE_UI_URL", cls.ui_url),
            max_message_bytes=int(os.getenv(
                "BRANDBRIDGE_MAX_MESSAGE_BYTES", str(cls.max_message_bytes)
            )),
            locale=os.getenv("BRANDBRIDGE_LOCALE", cls.locale),
            prompts=(
                _split_list(prompts_raw)
                if prompts_raw is not None
                else list(DEFAULT_PROMPTS)
            ),
            default_text_url=os.getenv(
                "BRANDBRIDGE_DEFAULT_TEXT_URL", cls.default_text_url
            ),
            log_level=os.getenv("BRANDBRIDGE_LOG_LEVEL", cls.log_level),
        )
        logger.info(
            "BridgeConfig.from_env: domain=%s locale=%s prompts=%s ui=%s",
            config.domain or "<unset>", config.locale,
            ",".join(config.prompts), config.ui_url,
        )
        return config
