"""
Scene-level model preferences

Maps each ``PromptScene`` to the config ID of the model the user assigned
to it. Only the ID is stored; resolution re-fetches the model every time.
"""
import logging
from pathlib import Path
from typing import Dict, Optional, Protocol, runtime_checkable

import yaml

from ..models.prompt_template import PromptScene
from ..paths import ensure_parent, scene_defaults_path

logger = logging.getLogger(__name__)


@runtime_checkable
class SceneDefaultsRepository(Protocol):
    def get(self, scene: PromptScene) -> Optional[str]:
        ...

    def set(self, scene: PromptScene, model_id: str) -> None:
        ...

    def clear(self, scene: PromptScene) -> None:
        ...

    def clear_all(self) -> None:
        ...

    def all(self) -> Dict[PromptScene, str]:
        ...


class InMemorySceneDefaults:
    """Process-local scene defaults."""

    def __init__(self, initial: Optional[Dict[PromptScene, str]] = None):
        self._defaults: Dict[PromptScene, str] = dict(initial or {})

    def get(self, scene: PromptScene) -> Optional[str]:
        return self._defaults.get(scene)

    def set(self, scene: PromptScene, model_id: str) -> None:
        self._defaults[scene] = model_id

    def clear(self, scene: PromptScene) -> None:
        self._defaults.pop(scene, None)

    def clear_all(self) -> None:
        self._defaults.clear()

    def all(self) -> Dict[PromptScene, str]:
        return dict(self._defaults)


class YamlSceneDefaults:
    """
    Scene defaults persisted to ``scene_defaults.yaml``::

        scene_defaults:
          paperChat: openai:gpt-4o

    Unknown scene keys in the file are ignored.
    """

    def __init__(self, path: Optional[Path] = None):
        self.path = Path(path) if path else scene_defaults_path()

    def _load(self) -> Dict[PromptScene, str]:
        if not self.path.exists():
            return {}
        with open(self.path, 'r', encoding='utf-8') as f:
            data = yaml.safe_load(f) or {}

        defaults: Dict[PromptScene, str] = {}
        for key, model_id in (data.get("scene_defaults") or {}).items():
            try:
                scene = PromptScene(key)
            except ValueError:
                logger.warning(f"Ignoring unknown scene '{key}' in {self.path}")
                continue
            if model_id:
                defaults[scene] = str(model_id)
        return defaults

    def _write(self, defaults: Dict[PromptScene, str]) -> None:
        ensure_parent(self.path)
        payload = {"scene_defaults": {scene.value: model_id for scene, model_id in defaults.items()}}
        temp_path = self.path.with_suffix('.yaml.tmp')
        with open(temp_path, 'w', encoding='utf-8') as f:
            yaml.safe_dump(payload, f, allow_unicode=True, sort_keys=False)
        temp_path.replace(self.path)

    def get(self, scene: PromptScene) -> Optional[str]:
        return self._load().get(scene)

    def set(self, scene: PromptScene, model_id: str) -> None:
        defaults = self._load()
        defaults[scene] = model_id
        self._write(defaults)

    def clear(self, scene: PromptScene) -> None:
        defaults = self._load()
        if defaults.pop(scene, None) is not None:
            self._write(defaults)

    def clear_all(self) -> None:
        if self.path.exists():
            self._write({})

    def all(self) -> Dict[PromptScene, str]:
        return self._load()
