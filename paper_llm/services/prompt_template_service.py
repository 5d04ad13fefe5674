"""
Prompt template configuration management service
"""
import logging
from pathlib import Path
from typing import List, Optional

import aiofiles
import yaml

from ..models.prompt_template import OutputFormat, PromptScene, PromptTemplate, PromptTemplatesConfig
from ..paths import ensure_parent, prompt_templates_config_path

logger = logging.getLogger(__name__)


BUILTIN_TEMPLATES: List[dict] = [
    {
        "id": "builtin-insight",
        "name": "核心见解",
        "scene": PromptScene.INSIGHT_GENERATION,
        "system_prompt": "你是一位专业的学术论文助手，擅长提炼研究论文的核心贡献。",
        "user_prompt_template": (
            "请阅读以下论文信息，用中文总结其核心见解：研究问题、方法、主要结论。\n\n"
            "标题：{{title}}\n作者：{{authors}}\n分类：{{categories}}\n\n摘要：{{abstract}}"
        ),
        "temperature": 0.5,
        "max_tokens": 1500,
    },
    {
        "id": "builtin-innovation",
        "name": "创新点提取",
        "scene": PromptScene.INNOVATION_EXTRACT,
        "system_prompt": "你是一位严谨的审稿人，擅长识别论文相对已有工作的创新之处。",
        "user_prompt_template": (
            "请列出论文《{{title}}》的主要创新点，每条说明其与已有方法的区别。\n\n{{full_text}}"
        ),
        "temperature": 0.4,
        "max_tokens": 2000,
    },
    {
        "id": "builtin-formula",
        "name": "公式解析",
        "scene": PromptScene.FORMULA_ANALYSIS,
        "system_prompt": "你是一位数学功底扎实的研究助理，擅长逐项解释公式含义。",
        "user_prompt_template": (
            "请解释论文《{{title}}》中的以下公式，说明每个符号的含义及其在方法中的作用：\n\n{{selected_text}}"
        ),
        "temperature": 0.2,
        "max_tokens": 2000,
    },
    {
        "id": "builtin-translation",
        "name": "全文翻译",
        "scene": PromptScene.TRANSLATION,
        "system_prompt": "你是一位专业的学术翻译，保留专业术语的英文原文并附中文解释。",
        "user_prompt_template": "请将以下内容翻译为中文，保持 Markdown 结构不变：\n\n{{full_text}}",
        "temperature": 0.2,
        "max_tokens": 8000,
    },
    {
        "id": "builtin-summary",
        "name": "摘要总结",
        "scene": PromptScene.SUMMARY,
        "system_prompt": "你是一位学术论文助手，回答简洁准确。",
        "user_prompt_template": "请用三到五句话总结论文《{{title}}》：\n\n{{abstract}}",
        "output_format": OutputFormat.PLAIN_TEXT,
        "temperature": 0.3,
        "max_tokens": 800,
    },
]


class PromptTemplateService:
    """Prompt template repository backed by ``prompt_templates_config.yaml``."""

    def __init__(self, config_path: Optional[Path] = None):
        self.config_path = Path(config_path) if config_path else prompt_templates_config_path()
        self._ensure_config_exists()

    def _ensure_config_exists(self):
        """Ensure configuration file exists, create default if not."""
        if not self.config_path.exists():
            ensure_parent(self.config_path)
            with open(self.config_path, 'w', encoding='utf-8') as f:
                yaml.safe_dump(self._get_default_config(), f, allow_unicode=True, sort_keys=False)

    def _get_default_config(self) -> dict:
        return {"templates": []}

    async def load_config(self) -> PromptTemplatesConfig:
        async with aiofiles.open(self.config_path, 'r', encoding='utf-8') as f:
            content = await f.read()
            data = yaml.safe_load(content) or {}
            if "templates" not in data:
                data["templates"] = []
            return PromptTemplatesConfig(**data)

    async def save_config(self, config: PromptTemplatesConfig):
        temp_path = self.config_path.with_suffix('.yaml.tmp')
        async with aiofiles.open(temp_path, 'w', encoding='utf-8') as f:
            content = yaml.safe_dump(
                config.model_dump(mode='json'),
                allow_unicode=True,
                sort_keys=False
            )
            await f.write(content)
        temp_path.replace(self.config_path)

    async def seed_builtin_templates(self) -> int:
        """
        Insert the built-in templates unless any built-in already exists.

        The check is coarse on purpose: a user who deleted or edited one
        built-in does not get it back on the next start.

        Returns:
            Number of templates inserted
        """
        config = await self.load_config()
        if any(t.is_built_in for t in config.templates):
            return 0

        for index, entry in enumerate(BUILTIN_TEMPLATES):
            config.templates.append(PromptTemplate(**entry, is_built_in=True, sort_order=index))
        await self.save_config(config)
        logger.info(f"Seeded {len(BUILTIN_TEMPLATES)} built-in prompt templates")
        return len(BUILTIN_TEMPLATES)

    # ==================== Template Management ====================

    async def get_templates(self, scene: Optional[PromptScene] = None) -> List[PromptTemplate]:
        config = await self.load_config()
        templates = sorted(config.templates, key=lambda t: t.sort_order)
        if scene is not None:
            templates = [t for t in templates if t.scene == scene]
        return templates

    async def get_template(self, template_id: str) -> Optional[PromptTemplate]:
        config = await self.load_config()
        for template in config.templates:
            if template.id == template_id:
                return template
        return None

    async def add_template(self, template: PromptTemplate):
        config = await self.load_config()
        if any(t.id == template.id for t in config.templates):
            raise ValueError(f"Template with id '{template.id}' already exists")
        config.templates.append(template)
        await self.save_config(config)

    async def update_template(self, template_id: str, updated: PromptTemplate):
        config = await self.load_config()
        for i, template in enumerate(config.templates):
            if template.id == template_id:
                config.templates[i] = updated
                await self.save_config(config)
                return
        raise ValueError(f"Template with id '{template_id}' not found")

    async def delete_template(self, template_id: str):
        config = await self.load_config()
        target = next((t for t in config.templates if t.id == template_id), None)
        if target is None:
            raise ValueError(f"Template with id '{template_id}' not found")
        if target.is_built_in:
            raise ValueError(f"Built-in template '{template_id}' cannot be deleted")
        config.templates = [t for t in config.templates if t.id != template_id]
        await self.save_config(config)
