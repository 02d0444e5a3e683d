"""Tests for writing an edited branding document back to the tenant."""
from __future__ import annotations

import pytest

from brandbridge.engine.config import BridgeConfig
from brandbridge.engine.errors import DocumentError, GatewayError
from brandbridge.engine.models import CompositeDocument, TenantData
from brandbridge.engine.persister import persist_data

from .fakes import FakeGateway


def _document(**overrides) -> CompositeDocument:
    fields = dict(
        connected=True,
        authentication_profile={"universal_login_experience": "new"},
        branding={"colors": {"primary": "#222222"}, "logo_url": "https://x/logo.png"},
        templates={"body": "<html>edited</html>"},
        themes={"themeId": "theme-from-ui", "colors": {"primary_button": "#00ff00"}},
        tenant=TenantData(friendly_name="Acme", enabled_locales=["en"], domain="acme"),
        custom_text={"login": {"login": {"title": "Hello"}}},
    )
    fields.update(overrides)
    return CompositeDocument(**fields)


@pytest.mark.asyncio
async def test_persist_writes_every_sub_resource():
    gateway = FakeGateway()

    await persist_data(gateway, _document(), BridgeConfig())

    assert gateway.writes_for("set_universal_login_template") == [("<html>edited</html>",)]
    assert gateway.writes_for("update_prompt_settings") == [
        ({"universal_login_experience": "new"},),
    ]
    assert gateway.writes_for("update_theme") == [
        ("theme-1", {"colors": {"primary_button": "#00ff00"}}),
    ]
    assert gateway.writes_for("update_branding") == [
        ({"colors": {"primary": "#222222"}},),
    ]
    assert gateway.writes_for("set_custom_text") == [
        ("login", "en", {"login": {"title": "Hello"}}),
    ]


@pytest.mark.asyncio
async def test_theme_is_created_when_tenant_has_none():
    gateway = FakeGateway()
    gateway.default_theme = None

    await persist_data(gateway, _document())

    assert gateway.writes_for("create_theme") == [
        ({"colors": {"primary_button": "#00ff00"}},),
    ]
    assert gateway.writes_for("update_theme") == []


@pytest.mark.asyncio
async def test_received_document_is_not_mutated():
    document = _document()

    await persist_data(FakeGateway(), document)

    assert document.themes["themeId"] == "theme-from-ui"
    assert document.branding["logo_url"] == "https://x/logo.png"


@pytest.mark.asyncio
async def test_empty_custom_text_entries_are_skipped():
    gateway = FakeGateway()
    document = _document(custom_text={"login": {}, "signup": {"signup": {"title": "Join"}}})

    await persist_data(gateway, document, BridgeConfig(locale="fr"))

    assert gateway.writes_for("set_custom_text") == [
        ("signup", "fr", {"signup": {"title": "Join"}}),
    ]


@pytest.mark.asyncio
async def test_non_object_custom_text_is_rejected():
    gateway = FakeGateway()

    with pytest.raises(DocumentError):
        await persist_data(gateway, _document(custom_text={"login": ["x"]}))


@pytest.mark.asyncio
async def test_failed_template_write_does_not_roll_back_theme():
    gateway = FakeGateway()
    gateway.delays["set_universal_login_template"] = 0.02
    gateway.failures["set_universal_login_template"] = GatewayError(
        500, "PUT", "branding/templates/universal-login", "boom",
    )

    with pytest.raises(GatewayError) as excinfo:
        await persist_data(gateway, _document())

    assert excinfo.value.path == "branding/templates/universal-login"
    assert gateway.writes_for("update_theme") == [
        ("theme-1", {"colors": {"primary_button": "#00ff00"}}),
    ]
    assert gateway.default_theme["colors"] == {"primary_button": "#00ff00"}
    # Nothing tried to undo the theme write.
    assert gateway.calls.count("update_theme") == 1


@pytest.mark.asyncio
async def test_first_failure_is_returned_after_all_writes_ran():
    gateway = FakeGateway()
    gateway.failures["update_branding"] = GatewayError(400, "PATCH", "branding", "bad")
    gateway.delays["set_custom_text"] = 0.02

    with pytest.raises(GatewayError, match="PATCH branding"):
        await persist_data(gateway, _document())

    assert gateway.writes_for("set_custom_text") == [
        ("login", "en", {"login": {"title": "Hello"}}),
    ]


@pytest.mark.asyncio
@pytest.mark.parametrize("templates", [{}, {"body": None}])
async def test_missing_template_body_is_rejected_before_any_write(templates):
    gateway = FakeGateway()

    with pytest.raises(DocumentError, match="templates.body"):
        await persist_data(gateway, _document(templates=templates))

    assert gateway.writes == []


@pytest.mark.asyncio
async def test_empty_template_body_is_written():
    gateway = FakeGateway()

    await persist_data(gateway, _document(templates={"body": ""}))

    assert gateway.writes_for("set_universal_login_template") == [("",)]
