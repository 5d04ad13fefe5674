"""Tests for three-tier model resolution."""

from typing import Dict, Optional

import pytest

from paper_llm.models.prompt_template import PromptScene, PromptTemplate
from paper_llm.providers.types import ModelConfig
from paper_llm.services.model_resolver import ModelResolver
from paper_llm.services.scene_defaults_service import InMemorySceneDefaults


class FakeModelStore:
    def __init__(self, *models: ModelConfig):
        self.models: Dict[str, ModelConfig] = {m.id: m for m in models}

    async def get_model(self, model_id: str) -> Optional[ModelConfig]:
        return self.models.get(model_id)

    async def get_default_model(self) -> Optional[ModelConfig]:
        candidates = [m for m in self.models.values() if m.is_default and m.is_enabled]
        return min(candidates, key=lambda m: m.id) if candidates else None


def _model(model_id, enabled=True, default=False):
    return ModelConfig(id=model_id, provider_ref="p", model_id=model_id, is_enabled=enabled, is_default=default)


def _template(bound=None):
    return PromptTemplate(id="t", name="Chat", scene=PromptScene.PAPER_CHAT, bound_model_id=bound)


@pytest.mark.asyncio
async def test_bound_model_wins_over_scene_and_global_default():
    store = FakeModelStore(_model("A"), _model("B"), _model("C", default=True))
    scene_defaults = InMemorySceneDefaults({PromptScene.PAPER_CHAT: "B"})
    resolver = ModelResolver(store, scene_defaults)

    resolved = await resolver.resolve(_template(bound="A"), PromptScene.PAPER_CHAT)

    assert resolved.id == "A"


@pytest.mark.asyncio
async def test_disabled_scene_default_falls_through_to_global():
    store = FakeModelStore(_model("B", enabled=False), _model("C", default=True))
    resolver = ModelResolver(store, InMemorySceneDefaults({PromptScene.PAPER_CHAT: "B"}))

    resolved = await resolver.resolve(_template(), PromptScene.PAPER_CHAT)

    assert resolved.id == "C"


@pytest.mark.asyncio
async def test_enabled_scene_default_beats_global():
    store = FakeModelStore(_model("B"), _model("C", default=True))
    resolver = ModelResolver(store, InMemorySceneDefaults({PromptScene.TRANSLATION: "B"}))

    assert (await resolver.resolve(None, PromptScene.TRANSLATION)).id == "B"
    assert (await resolver.resolve(None, PromptScene.SUMMARY)).id == "C"


@pytest.mark.asyncio
async def test_disabled_bound_model_and_deleted_scene_model_are_skipped():
    store = FakeModelStore(_model("A", enabled=False), _model("C", default=True))
    resolver = ModelResolver(store, InMemorySceneDefaults({PromptScene.PAPER_CHAT: "deleted"}))

    resolved = await resolver.resolve(_template(bound="A"), PromptScene.PAPER_CHAT)

    assert resolved.id == "C"


@pytest.mark.asyncio
async def test_global_default_picks_lowest_id():
    store = FakeModelStore(_model("zeta", default=True), _model("alpha", default=True), _model("beta"))
    resolver = ModelResolver(store, InMemorySceneDefaults())

    assert (await resolver.resolve(None, PromptScene.SUMMARY)).id == "alpha"


@pytest.mark.asyncio
async def test_nothing_configured_returns_none():
    store = FakeModelStore(_model("A"), _model("D", enabled=False, default=True))
    resolver = ModelResolver(store, InMemorySceneDefaults())

    assert await resolver.resolve(_template(), PromptScene.PAPER_CHAT) is None


@pytest.mark.asyncio
async def test_set_and_clear_scene_defaults():
    store = FakeModelStore(_model("A"), _model("B"))
    scene_defaults = InMemorySceneDefaults()
    resolver = ModelResolver(store, scene_defaults)

    resolver.set_scene_default(store.models["A"], PromptScene.SUMMARY)
    resolver.set_scene_default(store.models["B"], PromptScene.TRANSLATION)
    assert (await resolver.resolve(None, PromptScene.SUMMARY)).id == "A"

    resolver.set_scene_default(None, PromptScene.SUMMARY)
    assert scene_defaults.get(PromptScene.SUMMARY) is None
    assert scene_defaults.get(PromptScene.TRANSLATION) == "B"

    resolver.clear_all_scene_defaults()
    assert scene_defaults.all() == {}
