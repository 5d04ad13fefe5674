"""Tests for scene default repositories and the YAML secret store."""

import yaml

from paper_llm.models.prompt_template import PromptScene
from paper_llm.services.scene_defaults_service import (
    InMemorySceneDefaults,
    SceneDefaultsRepository,
    YamlSceneDefaults,
)
from paper_llm.services.secret_store import InMemorySecretStore, SecretStore, YamlSecretStore


def test_yaml_scene_defaults_round_trip(temp_config_dir):
    path = temp_config_dir / "scene_defaults.yaml"
    repo = YamlSceneDefaults(path)

    repo.set(PromptScene.PAPER_CHAT, "openai:gpt-4o")
    repo.set(PromptScene.TRANSLATION, "deepseek:deepseek-chat")

    reopened = YamlSceneDefaults(path)
    assert reopened.get(PromptScene.PAPER_CHAT) == "openai:gpt-4o"
    assert reopened.all() == {
        PromptScene.PAPER_CHAT: "openai:gpt-4o",
        PromptScene.TRANSLATION: "deepseek:deepseek-chat",
    }
    assert yaml.safe_load(path.read_text(encoding="utf-8"))["scene_defaults"]["paperChat"] == "openai:gpt-4o"

    reopened.clear(PromptScene.PAPER_CHAT)
    assert repo.get(PromptScene.PAPER_CHAT) is None

    repo.clear_all()
    assert repo.all() == {}


def test_yaml_scene_defaults_ignores_unknown_scenes(temp_config_dir):
    path = temp_config_dir / "scene_defaults.yaml"
    path.write_text(yaml.safe_dump({"scene_defaults": {"mindMap": "x", "summary": "y"}}), encoding="utf-8")

    assert YamlSceneDefaults(path).all() == {PromptScene.SUMMARY: "y"}


def test_missing_file_means_no_defaults(temp_config_dir):
    repo = YamlSceneDefaults(temp_config_dir / "absent.yaml")

    assert repo.get(PromptScene.SUMMARY) is None
    repo.clear_all()
    assert not (temp_config_dir / "absent.yaml").exists()


def test_repositories_satisfy_protocols(temp_config_dir):
    assert isinstance(InMemorySceneDefaults(), SceneDefaultsRepository)
    assert isinstance(YamlSceneDefaults(temp_config_dir / "s.yaml"), SceneDefaultsRepository)
    assert isinstance(InMemorySecretStore(), SecretStore)
    assert isinstance(YamlSecretStore(temp_config_dir / "k.yaml"), SecretStore)


def test_yaml_secret_store(temp_config_dir):
    path = temp_config_dir / "keys_config.yaml"
    store = YamlSecretStore(path)

    assert store.retrieve("openai_api_key") is None
    store.save("openai_api_key", "sk-1")
    store.save("deepseek_api_key", "sk-2")
    assert YamlSecretStore(path).retrieve("openai_api_key") == "sk-1"

    store.delete("openai_api_key")
    assert store.retrieve("openai_api_key") is None
    assert store.retrieve("deepseek_api_key") == "sk-2"
    assert store.retrieve("") is None
