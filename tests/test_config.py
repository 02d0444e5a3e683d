"""Tests for env, YAML and CLI configuration layering."""
from __future__ import annotations

import asyncio
import os
from unittest.mock import AsyncMock, patch

import pytest

from brandbridge.app import build_parser, main, resolve_config
from brandbridge.engine.config import DEFAULT_TEXT_URL, BridgeConfig
from brandbridge.engine.yaml_config import load_yaml_config


def test_defaults():
    config = BridgeConfig()
    assert config.ui_origin == "http://localhost:5173"
    assert config.max_message_bytes == 1_000_000
    assert config.locale == "en"
    assert config.prompts == ["login"]
    assert config.default_text_url_for_locale() == DEFAULT_TEXT_URL.format(locale="en")


def test_from_env_reads_overrides():
    env = {
        "BRANDBRIDGE_DOMAIN": "acme.example.com",
        "BRANDBRIDGE_ACCESS_TOKEN": "secret",
        "BRANDBRIDGE_LOCALE": "fr",
        "BRANDBRIDGE_PROMPTS": "login, signup,",
        "BRANDBRIDGE_MAX_MESSAGE_BYTES": "2048",
    }
    with patch.dict(os.environ, env, clear=False):
        config = BridgeConfig.from_env()

    assert config.domain == "acme.example.com"
    assert config.access_token == "secret"
    assert config.locale == "fr"
    assert config.prompts == ["login", "signup"]
    assert config.max_message_bytes == 2048


def test_access_token_is_not_in_repr():
    assert "secret" not in repr(BridgeConfig(access_token="secret"))


def test_yaml_overlays_base(tmp_path):
    path = tmp_path / "brandbridge.yaml"
    path.write_text(
        "bridge:\n"
        "  domain: yaml.example.com\n"
        "  ui_origin: http://localhost:3000\n"
        "custom_text:\n"
        "  locale: de\n"
        "  prompts: [login, signup]\n",
        encoding="utf-8",
    )
    base = BridgeConfig(access_token="from-env", max_message_bytes=10)

    config = load_yaml_config(path, base=base)

    assert config.domain == "yaml.example.com"
    assert config.ui_origin == "http://localhost:3000"
    assert config.locale == "de"
    assert config.prompts == ["login", "signup"]
    assert config.access_token == "from-env"
    assert config.max_message_bytes == 10


def test_yaml_rejects_bad_prompts(tmp_path):
    path = tmp_path / "brandbridge.yaml"
    path.write_text("custom_text:\n  prompts: login\n", encoding="utf-8")

    with pytest.raises(ValueError):
        load_yaml_config(path)


def test_cli_flags_override_env_and_yaml(tmp_path):
    path = tmp_path / "brandbridge.yaml"
    path.write_text("bridge:\n  domain: yaml.example.com\n", encoding="utf-8")
    args = build_parser().parse_args([
        "customize", "--config", str(path), "--token", "t",
        "--prompt", "login", "--prompt", "signup", "--locale", "es",
    ])

    with patch.dict(os.environ, {"BRANDBRIDGE_DOMAIN": "env.example.com"}, clear=False):
        config = resolve_config(args)

    assert config.domain == "yaml.example.com"
    assert config.access_token == "t"
    assert config.prompts == ["login", "signup"]
    assert config.locale == "es"


def test_main_requires_domain_and_token(capsys):
    with patch.dict(os.environ, {}, clear=True):
        assert main(["customize"]) == 2
    assert "domain and access token are required" in capsys.readouterr().err


def test_main_reports_timeouts_with_exit_code_1(tmp_path):
    env = {"BRANDBRIDGE_DOMAIN": "acme.example.com", "BRANDBRIDGE_ACCESS_TOKEN": "t"}
    with patch.dict(os.environ, env, clear=False), \
         patch("brandbridge.app._configure_logging", return_value=tmp_path / "bridge.log"), \
         patch("brandbridge.app._run_customize", AsyncMock(side_effect=asyncio.TimeoutError())):
        assert main(["customize"]) == 1
