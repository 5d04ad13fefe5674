"""
Provider and model configuration service

Loads, saves and queries provider / model records kept in
``config/local/models_config.yaml``. API keys never land in this file;
providers only carry a ``credential_ref`` into the secret store.
"""
import logging
from pathlib import Path
from typing import List, Optional

import aiofiles
import yaml

from ..models.model_config import ModelsConfig
from ..paths import ensure_parent, models_config_path
from ..providers.builtin import get_all_builtin_providers
from ..providers.types import ModelCapabilities, ModelConfig, ProviderConfig, ProviderType

logger = logging.getLogger(__name__)


class ModelConfigService:
    """YAML-backed repository of provider and model configs."""

    def __init__(self, config_path: Optional[Path] = None):
        """
        Args:
            config_path: Path to models_config.yaml, defaults to config/local/models_config.yaml
        """
        self.config_path = Path(config_path) if config_path else models_config_path()
        self._ensure_config_exists()

    def _ensure_config_exists(self):
        """Create an empty config file when none exists yet."""
        if not self.config_path.exists():
            ensure_parent(self.config_path)
            with open(self.config_path, 'w', encoding='utf-8') as f:
                yaml.safe_dump(self._get_default_config(), f, allow_unicode=True, sort_keys=False)

    def _get_default_config(self) -> dict:
        return {"providers": [], "models": []}

    async def load_config(self) -> ModelsConfig:
        async with aiofiles.open(self.config_path, 'r', encoding='utf-8') as f:
            content = await f.read()
        data = yaml.safe_load(content) or {}
        data.setdefault("providers", [])
        data.setdefault("models", [])
        return ModelsConfig(**data)

    async def save_config(self, config: ModelsConfig):
        temp_path = self.config_path.with_suffix('.yaml.tmp')
        async with aiofiles.open(temp_path, 'w', encoding='utf-8') as f:
            content = yaml.safe_dump(
                config.model_dump(mode='json'),
                allow_unicode=True,
                sort_keys=False
            )
            await f.write(content)
        temp_path.replace(self.config_path)

    # ==================== Providers ====================

    async def get_providers(self, enabled_only: bool = False) -> List[ProviderConfig]:
        config = await self.load_config()
        providers = sorted(config.providers, key=lambda p: (p.sort_order, p.id))
        if enabled_only:
            providers = [p for p in providers if p.is_enabled]
        return providers

    async def get_provider(self, provider_id: str) -> Optional[ProviderConfig]:
        config = await self.load_config()
        for provider in config.providers:
            if provider.id == provider_id:
                return provider
        return None

    async def add_provider(self, provider: ProviderConfig):
        config = await self.load_config()
        if any(p.id == provider.id for p in config.providers):
            raise ValueError(f"Provider with id '{provider.id}' already exists")
        config.providers.append(provider)
        await self.save_config(config)

    async def update_provider(self, provider_id: str, updated: ProviderConfig):
        config = await self.load_config()
        for i, provider in enumerate(config.providers):
            if provider.id == provider_id:
                config.providers[i] = updated
                await self.save_config(config)
                return
        raise ValueError(f"Provider with id '{provider_id}' not found")

    async def delete_provider(self, provider_id: str):
        """Delete a provider together with every model it owns."""
        config = await self.load_config()
        original_count = len(config.providers)
        config.providers = [p for p in config.providers if p.id != provider_id]
        if len(config.providers) == original_count:
            raise ValueError(f"Provider with id '{provider_id}' not found")
        removed = [m.id for m in config.models if m.provider_ref == provider_id]
        config.models = [m for m in config.models if m.provider_ref != provider_id]
        if removed:
            logger.info(f"Deleted {len(removed)} model(s) owned by provider '{provider_id}'")
        await self.save_config(config)

    # ==================== Models ====================

    async def get_models(self, provider_id: Optional[str] = None) -> List[ModelConfig]:
        config = await self.load_config()
        if provider_id is None:
            return config.models
        return [m for m in config.models if m.provider_ref == provider_id]

    async def get_model(self, model_id: str) -> Optional[ModelConfig]:
        """Look a model up by its config ID (not the vendor model name)."""
        config = await self.load_config()
        for model in config.models:
            if model.id == model_id:
                return model
        return None

    async def add_model(self, model: ModelConfig):
        config = await self.load_config()
        if any(m.id == model.id for m in config.models):
            raise ValueError(f"Model with id '{model.id}' already exists")
        if not any(p.id == model.provider_ref for p in config.providers):
            raise ValueError(f"Provider with id '{model.provider_ref}' not found")
        config.models.append(model)
        await self.save_config(config)

    async def update_model(self, model_id: str, updated: ModelConfig):
        config = await self.load_config()
        for i, model in enumerate(config.models):
            if model.id == model_id:
                config.models[i] = updated
                await self.save_config(config)
                return
        raise ValueError(f"Model with id '{model_id}' not found")

    async def delete_model(self, model_id: str):
        config = await self.load_config()
        original_count = len(config.models)
        config.models = [m for m in config.models if m.id != model_id]
        if len(config.models) == original_count:
            raise ValueError(f"Model with id '{model_id}' not found")
        await self.save_config(config)

    async def get_default_model(self) -> Optional[ModelConfig]:
        """
        Global default model.

        Several models may carry ``is_default``; the enabled one with the
        lowest ID wins so the choice is stable across loads.
        """
        config = await self.load_config()
        candidates = [m for m in config.models if m.is_default and m.is_enabled]
        if not candidates:
            return None
        return min(candidates, key=lambda m: m.id)

    async def set_default_model(self, model_id: str):
        """Flag exactly one model as the global default."""
        config = await self.load_config()
        if not any(m.id == model_id for m in config.models):
            raise ValueError(f"Model with id '{model_id}' not found")
        config.models = [
            m.model_copy(update={"is_default": m.id == model_id}) for m in config.models
        ]
        await self.save_config(config)

    # ==================== Seeding ====================

    async def seed_from_presets(self) -> int:
        """
        Add a disabled provider (plus its preset models) for every built-in
        preset not yet present.

        Returns:
            Number of providers added
        """
        config = await self.load_config()
        seeded = {p.provider_id for p in config.providers if p.provider_id}
        existing_ids = {p.id for p in config.providers}
        added = 0

        for order, definition in enumerate(get_all_builtin_providers().values()):
            if definition.id in seeded or definition.id in existing_ids:
                continue
            config.providers.append(ProviderConfig(
                id=definition.id,
                name=definition.name,
                provider_type=definition.provider_type,
                base_url=definition.base_url,
                credential_ref=f"{definition.id}_api_key",
                is_enabled=False,
                sort_order=order,
                provider_id=definition.id,
            ))
            for model_def in definition.builtin_models:
                config.models.append(ModelConfig(
                    id=f"{definition.id}:{model_def.id}",
                    provider_ref=definition.id,
                    model_id=model_def.id,
                    display_name=model_def.name,
                    capabilities=self._preset_capabilities(definition.provider_type),
                ))
            added += 1

        if added:
            logger.info(f"Seeded {added} preset provider(s)")
            await self.save_config(config)
        return added

    @staticmethod
    def _preset_capabilities(provider_type: ProviderType) -> ModelCapabilities:
        # Gemini and Claude accept PDF documents natively.
        if provider_type in (ProviderType.GOOGLE, ProviderType.ANTHROPIC):
            return ModelCapabilities(image_input=True, pdf_input=True)
        return ModelCapabilities()
