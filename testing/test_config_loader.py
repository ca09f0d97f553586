"""
Tests for configuration loading and validation.
"""

import pytest

from card_lens.config import (
    ConfigLoader,
    ConfigLoadError,
    ConfigValidationError,
    DEFAULT_CARD_KEYWORDS,
    ExtractorConfig,
    SystemConfig,
)


def write_config(tmp_path, text: str):
    config_dir = tmp_path / "config"
    config_dir.mkdir()
    (config_dir / "system.yaml").write_text(text, encoding="utf-8")
    return ConfigLoader(tmp_path)


class TestModels:
    """Defaults and validation."""

    def test_defaults(self):
        config = SystemConfig()

        assert config.debug is False
        assert config.api_port == 8080
        assert config.extractor.recognized_keywords == list(DEFAULT_CARD_KEYWORDS)
        assert config.extractor.envelope_field == "data"
        assert config.extractor.decode_base64 is True

    def test_keywords_normalized(self):
        config = ExtractorConfig(recognized_keywords=[" CHARA ", "chara", "", "Persona"])
        assert config.recognized_keywords == ["chara", "persona"]

    def test_rejects_non_positive_limit(self):
        with pytest.raises(ValueError):
            ExtractorConfig(max_inflated_bytes=0)

    def test_unknown_keys_ignored(self):
        assert SystemConfig(something_else=True).debug is False


class TestConfigLoader:
    """YAML loading."""

    def test_missing_file_uses_defaults(self, tmp_path):
        config = ConfigLoader(tmp_path).load_system_config()
        assert config == SystemConfig()

    def test_loads_yaml(self, tmp_path):
        loader = write_config(tmp_path, """
debug: true
api_port: 9090
extractor:
  recognized_keywords: [chara, ccv3]
  max_inflated_bytes: 1024
""")
        config = loader.load_system_config()

        assert config.debug is True
        assert config.api_port == 9090
        assert config.extractor.recognized_keywords == ["chara", "ccv3"]
        assert config.extractor.max_inflated_bytes == 1024

    def test_empty_file_uses_defaults(self, tmp_path):
        assert write_config(tmp_path, "").load_system_config() == SystemConfig()

    def test_invalid_yaml(self, tmp_path):
        loader = write_config(tmp_path, "debug: [unclosed")
        with pytest.raises(ConfigLoadError):
            loader.load_system_config()

    def test_non_mapping_yaml(self, tmp_path):
        loader = write_config(tmp_path, "- just\n- a list\n")
        with pytest.raises(ConfigLoadError):
            loader.load_system_config()

    def test_validation_error_is_formatted(self, tmp_path):
        loader = write_config(tmp_path, "api_port: 70000\n")
        with pytest.raises(ConfigValidationError) as exc_info:
            loader.load_system_config()

        assert "api_port" in str(exc_info.value)
        assert exc_info.value.file_path.name == "system.yaml"
