"""
Model resolution for prompt scenes.

Tiers, first hit wins:
1. the model pinned on the template (``bound_model_id``), if enabled
2. the scene default, re-fetched by ID and still enabled
3. the global default (enabled ``is_default`` model with the lowest ID)

A scene default pointing at a deleted or disabled model counts as unset.
"""
import logging
from typing import Optional, Protocol

from ..models.prompt_template import PromptScene, PromptTemplate
from ..providers.types import ModelConfig
from .scene_defaults_service import SceneDefaultsRepository

logger = logging.getLogger(__name__)


class ModelStore(Protocol):
    async def get_model(self, model_id: str) -> Optional[ModelConfig]:
        ...

    async def get_default_model(self) -> Optional[ModelConfig]:
        ...


class ModelResolver:
    """Three-tier model resolver; ``None`` means the LLM is not configured."""

    def __init__(self, model_store: ModelStore, scene_defaults: SceneDefaultsRepository):
        self._model_store = model_store
        self._scene_defaults = scene_defaults

    async def resolve(
        self,
        template: Optional[PromptTemplate],
        scene: PromptScene,
    ) -> Optional[ModelConfig]:
        if template is not None and template.bound_model_id:
            bound = await self._enabled_model(template.bound_model_id)
            if bound is not None:
                return bound

        scene_model = await self.scene_default(scene)
        if scene_model is not None:
            return scene_model

        return await self._model_store.get_default_model()

    async def scene_default(self, scene: PromptScene) -> Optional[ModelConfig]:
        model_id = self._scene_defaults.get(scene)
        if not model_id:
            return None
        model = await self._enabled_model(model_id)
        if model is None:
            logger.info(f"Scene default for '{scene.value}' points to unavailable model '{model_id}'")
        return model

    def set_scene_default(self, model: Optional[ModelConfig], scene: PromptScene) -> None:
        """Assign ``model`` to ``scene``; ``None`` clears the override."""
        if model is None:
            self._scene_defaults.clear(scene)
        else:
            self._scene_defaults.set(scene, model.id)

    def clear_all_scene_defaults(self) -> None:
        self._scene_defaults.clear_all()

    async def _enabled_model(self, model_id: str) -> Optional[ModelConfig]:
        model = await self._model_store.get_model(model_id)
        if model is None or not model.is_enabled:
            return None
        return model
