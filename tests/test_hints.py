"""
Unit tests for HintService.
"""

import pytest

from cascading.cascade_map import build_cascade_map
from cascading.hints import HintService


CASCADE_MAP = build_cascade_map({
    "Category": {
        "Bug": {"Priority": ["1"], "HINT": "Bugs need a priority"},
        "Feature": {"Priority": "All"},
    },
})


@pytest.mark.asyncio
async def test_hint_returns_configured_text():
    assert await HintService().hint_field_value(CASCADE_MAP, "Category", "Bug") == "Bugs need a priority"


@pytest.mark.asyncio
async def test_no_hint_for_value_without_hint_key():
    assert await HintService().hint_field_value(CASCADE_MAP, "Category", "Feature") is None


@pytest.mark.asyncio
async def test_no_hint_for_unknown_field_or_value():
    service = HintService()
    assert await service.hint_field_value(CASCADE_MAP, "Area", "UI") is None
    assert await service.hint_field_value(CASCADE_MAP, "Category", "Epic") is None
    assert await service.hint_field_value(CASCADE_MAP, "Category", "") is None


@pytest.mark.asyncio
async def test_disabled_service_emits_nothing():
    received = []
    service = HintService(notifier=lambda *args: received.append(args))
    service.set_enabled(False)
    assert await service.hint_field_value(CASCADE_MAP, "Category", "Bug") is None
    assert received == []


@pytest.mark.asyncio
async def test_async_notifier_is_awaited():
    received = []

    async def notifier(field_name, field_value, hint):
        received.append((field_name, field_value, hint))

    await HintService(notifier=notifier).hint_field_value(CASCADE_MAP, "Category", "Bug")
    assert received == [("Category", "Bug", "Bugs need a priority")]


def test_enablement_is_per_instance():
    first, second = HintService(), HintService()
    first.set_enabled(False)
    assert first.enabled is False
    assert second.enabled is True
