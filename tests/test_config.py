"""
Tests for settings loading and prompt templates.
"""
from pathlib import Path

import pytest

from hanbridge.prompts import PromptTemplate, PromptTemplateLoader, load_prompt
from hanbridge.utils import config as config_module
from hanbridge.utils.config import AssistantSettings, ConfigLoader, load_settings


@pytest.fixture
def config_dir(tmp_path: Path) -> Path:
    (tmp_path / "settings.yaml").write_text(
        "provider: bedrock\n"
        "timeout_seconds: 12\n"
        "formality_languages: [ko, en]\n"
        "enable_generative_helper: true\n"
        "profiles_path: /tmp/hanbridge-profiles.json\n",
        encoding="utf-8"
    )
    return tmp_path


class TestSettings:

    def test_file_values(self, config_dir):
        settings = load_settings(str(config_dir), environ={})

        assert settings.provider == "bedrock"
        assert settings.timeout_seconds == 12.0
        assert settings.formality_languages == ["ko", "en"]
        assert settings.enable_generative_helper is True
        assert settings.profiles_path == Path("/tmp/hanbridge-profiles.json")

    def test_environment_overrides(self, config_dir):
        settings = load_settings(str(config_dir), environ={
            "HANBRIDGE_PROVIDER": "DeepL",
            "HANBRIDGE_TIMEOUT_SECONDS": "5",
            "DEEPL_API_KEY": "secret",
        })

        assert settings.provider == "deepl"
        assert settings.timeout_seconds == 5.0
        assert settings.has_api_key is True

    def test_missing_file_uses_defaults(self, tmp_path):
        settings = load_settings(str(tmp_path), environ={})

        assert settings.provider == "deepl"
        assert settings.formality_languages == ["ko"]
        assert settings.has_api_key is False

    def test_unknown_provider_rejected(self):
        with pytest.raises(ValueError, match="Unsupported provider"):
            AssistantSettings(provider="google")

    def test_non_positive_timeout_rejected(self):
        with pytest.raises(ValueError):
            AssistantSettings(timeout_seconds=0)

    def test_missing_config_raises(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            ConfigLoader(str(tmp_path)).load("models")


class TestPromptTemplates:

    def test_frontmatter_metadata(self):
        template = PromptTemplateLoader().load("scorer")

        assert template.metadata["role"] == "scorer"
        assert not template.content.startswith("---")

    def test_render_keeps_backslashes(self):
        template = PromptTemplate("Translate to {{ target_language }}")

        assert template.render(target_language=r"C:\new") == r"Translate to C:\new"

    def test_unknown_variables_left_in_place(self):
        template = PromptTemplate("{{ a }} and {{ b }}")

        assert template.render(a="x") == "x and {{ b }}"

    def test_list_templates(self):
        names = PromptTemplateLoader().list_templates()

        assert {"translator", "scorer", "alternatives", "variation", "rule_transformer"} <= set(names)

    def test_missing_template(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            PromptTemplateLoader(str(tmp_path)).load("nope")

    def test_load_prompt_renders_languages(self):
        prompt = load_prompt("translator", source_language="Korean", target_language="English")

        assert "Korean" in prompt
        assert "{{ source_language }}" not in prompt


def test_default_settings_share_one_loader(monkeypatch):
    monkeypatch.setattr(config_module, "_default_loader", None)

    load_settings(environ={})
    loader = config_module.get_config_loader()
    load_settings(environ={})

    assert config_module.get_config_loader() is loader
    assert loader.config_dir == config_module.PROJECT_ROOT / "config"
