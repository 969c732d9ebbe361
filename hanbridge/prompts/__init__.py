"""
Prompt templates and template loader
"""

from .template import (
    PromptTemplate,
    PromptTemplateLoader,
    get_template_loader,
    load_prompt,
)

__all__ = [
    "PromptTemplate",
    "PromptTemplateLoader",
    "get_template_loader",
    "load_prompt",
]
