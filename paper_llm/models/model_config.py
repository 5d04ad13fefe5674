"""
Provider and model configuration file model
"""
from typing import List

from pydantic import BaseModel, Field

from ..providers.types import ModelConfig, ProviderConfig


class ModelsConfig(BaseModel):
    """Contents of ``models_config.yaml``."""
    providers: List[ProviderConfig] = Field(default_factory=list)
    models: List[ModelConfig] = Field(default_factory=list)
