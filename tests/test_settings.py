"""Tests for styletokens.config.settings."""

from pathlib import Path

import pytest
import yaml

from styletokens.config.settings import TokenSettings
from styletokens.errors import ErrorCode, StyleTokensError


class TestTokenSettings:
    def test_defaults(self):
        settings = TokenSettings()
        assert settings.prefix == ""
        assert settings.css_vars_root == ":root"
        assert settings.sanitize_policy == "escape"
        assert settings.default_palette == ""
        assert settings.palette_scopes == []
        assert settings.log_level == "WARNING"
        assert settings.log_file == ""

    def test_from_file_reads_yaml(self, tmp_path):
        path = tmp_path / "styletokens.yaml"
        path.write_text(
            "css_vars_prefix: '--ck-'\n"
            "css_vars_root: ':host'\n"
            "sanitize_policy: Replace\n"
            "palette_scopes: [red, blue]\n"
            "log_level: debug\n",
            encoding="utf-8",
        )

        settings = TokenSettings.from_file(path)

        assert settings.prefix == "ck"
        assert settings.css_vars_root == ":host"
        assert settings.sanitize_policy == "replace"
        assert settings.palette_scopes == ["red", "blue"]
        assert settings.log_level == "DEBUG"

    def test_invalid_values_fall_back_to_defaults(self):
        settings = TokenSettings({"sanitize_policy": "shout", "log_level": 3, "css_vars_root": "  "})
        assert settings.sanitize_policy == "escape"
        assert settings.log_level == "WARNING"
        assert settings.css_vars_root == ":root"

    def test_prefix_setter_cleans_value(self):
        settings = TokenSettings({"css_vars_prefix": "old"})
        settings.prefix = "  --chakra- "
        assert settings.prefix == "chakra"

    def test_sanitize_policy_setter_rejects_unknown(self):
        settings = TokenSettings()
        with pytest.raises(StyleTokensError) as excinfo:
            settings.sanitize_policy = "shout"
        assert excinfo.value.code is ErrorCode.CONFIG_INVALID

    def test_save_writes_valid_yaml(self, tmp_path):
        settings = TokenSettings({"prefix": "ck", "default_palette": "red"})
        path = settings.save(tmp_path / "out" / "styletokens.yaml")

        data = yaml.safe_load(path.read_text(encoding="utf-8"))
        assert data["prefix"] == "ck"
        assert data["default_palette"] == "red"
        assert TokenSettings.from_file(path).to_dict() == settings.to_dict()

    def test_from_file_missing(self, tmp_path):
        with pytest.raises(StyleTokensError) as excinfo:
            TokenSettings.from_file(tmp_path / "missing.yaml")
        assert excinfo.value.code is ErrorCode.CONFIG_MISSING

    def test_from_file_invalid_yaml(self, tmp_path):
        path = tmp_path / "bad.yaml"
        path.write_text("prefix: [unclosed\n", encoding="utf-8")
        with pytest.raises(StyleTokensError) as excinfo:
            TokenSettings.from_file(path)
        assert excinfo.value.code is ErrorCode.CONFIG_INVALID

    def test_from_file_non_mapping(self, tmp_path: Path):
        path = tmp_path / "list.yaml"
        path.write_text("- a\n- b\n", encoding="utf-8")
        with pytest.raises(StyleTokensError):
            TokenSettings.from_file(path)
