"""
Secret stores for provider API keys.

Provider configs only carry a credential reference; the router looks the
secret up through one of these stores right before each request.
"""
import logging
from pathlib import Path
from typing import Dict, Optional, Protocol, runtime_checkable

import yaml

from ..paths import ensure_parent, local_keys_config_path

logger = logging.getLogger(__name__)


@runtime_checkable
class SecretStore(Protocol):
    """Read access to secrets by key. Missing keys return None, never raise."""

    def retrieve(self, key: str) -> Optional[str]:
        ...


class InMemorySecretStore:
    """Dictionary-backed store, used in tests and for ephemeral sessions."""

    def __init__(self, secrets: Optional[Dict[str, str]] = None):
        self._secrets = dict(secrets or {})

    def retrieve(self, key: str) -> Optional[str]:
        return self._secrets.get(key)

    def save(self, key: str, value: str) -> None:
        self._secrets[key] = value

    def delete(self, key: str) -> None:
        self._secrets.pop(key, None)


class YamlSecretStore:
    """
    Keys stored in ``keys_config.yaml``::

        keys:
          <credential_ref>: <api key>

    The file is re-read on every lookup so no secret stays in memory
    between requests.
    """

    def __init__(self, keys_path: Optional[Path] = None):
        self.keys_path = Path(keys_path) if keys_path else local_keys_config_path()

    def _load(self) -> Dict[str, str]:
        if not self.keys_path.exists():
            return {}
        try:
            with open(self.keys_path, 'r', encoding='utf-8') as f:
                data = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as e:
            logger.warning(f"Failed to read keys config {self.keys_path}: {e}")
            return {}
        keys = data.get("keys") or {}
        return {str(k): str(v) for k, v in keys.items() if v is not None}

    def retrieve(self, key: str) -> Optional[str]:
        if not key:
            return None
        return self._load().get(key)

    def save(self, key: str, value: str) -> None:
        keys = self._load()
        keys[key] = value
        self._write(keys)

    def delete(self, key: str) -> None:
        keys = self._load()
        if keys.pop(key, None) is not None:
            self._write(keys)

    def _write(self, keys: Dict[str, str]) -> None:
        ensure_parent(self.keys_path)
        temp_path = self.keys_path.with_suffix('.yaml.tmp')
        with open(temp_path, 'w', encoding='utf-8') as f:
            yaml.safe_dump({"keys": keys}, f, allow_unicode=True, sort_keys=False)
        temp_path.replace(self.keys_path)
