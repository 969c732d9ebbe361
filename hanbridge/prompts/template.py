"""
Prompt Templates - Markdown prompt files with YAML frontmatter

    ---
    name: scorer
    role: scorer            # model role in config/models.yaml
    ---
    Compare {{ source_language }} ...
"""

import re
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

_FRONTMATTER_PATTERN = re.compile(r'^---\s*\n(.*?)\n---\s*\n', re.DOTALL)
_VARIABLE_PATTERN = re.compile(r'\{\{\s*(\w+)\s*\}\}')

PROMPTS_DIR = Path(__file__).parent


class PromptTemplate:
    """Prompt body plus frontmatter metadata"""

    def __init__(self, raw: str):
        match = _FRONTMATTER_PATTERN.match(raw)
        if match:
            self.metadata: Dict[str, Any] = yaml.safe_load(match.group(1)) or {}
            self.content = raw[match.end():]
        else:
            self.metadata = {}
            self.content = raw

    def render(self, **variables: Any) -> str:
        """
        Substitute {{ name }} placeholders.

        Values are inserted verbatim (user text may contain backslashes).
        Placeholders without a value are left as they are.
        """
        def replace(match: re.Match) -> str:
            key = match.group(1)
            return str(variables[key]) if key in variables else match.group(0)

        return _VARIABLE_PATTERN.sub(replace, self.content)


class PromptTemplateLoader:
    """
    Loads templates from a prompts directory (this package by default).

    Usage:
        loader = PromptTemplateLoader()
        prompt = loader.load("translator").render(source_language="Korean", target_language="English")
    """

    def __init__(self, prompts_dir: Optional[str] = None):
        self.prompts_dir = Path(prompts_dir) if prompts_dir else PROMPTS_DIR

    @lru_cache(maxsize=32)
    def load(self, name: str) -> PromptTemplate:
        """
        Raises:
            FileNotFoundError: No <name>.md, <name> or <name>.txt in prompts_dir
        """
        for path in (
            self.prompts_dir / f"{name}.md",
            self.prompts_dir / name,
            self.prompts_dir / f"{name}.txt",
        ):
            if path.is_file():
                return PromptTemplate(path.read_text(encoding="utf-8"))

        raise FileNotFoundError(f"Prompt template '{name}' not found in {self.prompts_dir}")

    def list_templates(self) -> List[str]:
        return sorted(path.stem for path in self.prompts_dir.glob("*.md"))

    def clear_cache(self):
        self.load.cache_clear()


_default_loader: Optional[PromptTemplateLoader] = None


def get_template_loader(prompts_dir: Optional[str] = None) -> PromptTemplateLoader:
    """Shared loader for the package prompts"""
    global _default_loader
    if _default_loader is None:
        _default_loader = PromptTemplateLoader(prompts_dir)
    return _default_loader


def load_prompt(name: str, **variables: Any) -> str:
    """Load and render in one call"""
    return get_template_loader().load(name).render(**variables)
