import logging

import pytest
import yaml

from rigretarget.config import (
    DEFAULT_CONFIG_PATH,
    BuildOptions,
    ConfigError,
    load_config,
    load_config_dict,
    options_from_dict,
)
from rigretarget.resolution.strategies import STRATEGY_ORDER


class TestBuildOptions:
    """Test option defaults and validation."""

    def test_defaults(self):
        options = BuildOptions()
        assert options.strategies == tuple(STRATEGY_ORDER)
        assert not options.keep_disabled_after_build
        assert options.shallow_armature_policy == "warn"
        assert options.strip_leading_segments == ()

    def test_unknown_values(self):
        with pytest.raises(ConfigError):
            BuildOptions(strategies=("guess",))
        with pytest.raises(ConfigError):
            BuildOptions(shallow_armature_policy="random")

    def test_without_strategies(self):
        options = BuildOptions().without_strategies(["canonical_slot", "suffix_path"])
        assert options.strategies == ("flat_name", "exact_path", "normalized_path")
        with pytest.raises(ConfigError):
            options.without_strategies(["guess"])


class TestLoadConfig:
    """Test reading options from YAML."""

    def test_packaged_default(self):
        assert DEFAULT_CONFIG_PATH.exists()
        assert load_config() == BuildOptions()

    def test_override_file(self, tmp_path):
        path = tmp_path / "build.yaml"
        path.write_text(
            "strategies: [flat_name, exact_path]\n"
            "keep_disabled_after_build: true\n"
            "shallow_armature_policy: deepest\n"
            "strip_leading_segments: [Wrapper]\n"
        )
        options = load_config(path)
        assert options.strategies == ("flat_name", "exact_path")
        assert options.keep_disabled_after_build
        assert options.shallow_armature_policy == "deepest"
        assert options.strip_leading_segments == ("Wrapper",)

    def test_partial_and_empty_files(self, tmp_path):
        path = tmp_path / "build.yaml"
        path.write_text("keep_disabled_after_build: true\n")
        options = load_config(path)
        assert options.strategies == tuple(STRATEGY_ORDER)
        assert options.keep_disabled_after_build

        path.write_text("")
        assert load_config(path) == BuildOptions()

    def test_unknown_policy(self, tmp_path):
        path = tmp_path / "build.yaml"
        path.write_text("shallow_armature_policy: random\n")
        with pytest.raises(ConfigError, match="random"):
            load_config(path)

    @pytest.mark.parametrize(
        "data",
        [
            {"keep_disabled_after_build": "false"},
            {"keep_disabled_after_build": 0},
            {"strategies": "flat_name"},
            {"strategies": ["flat_name", 3]},
            {"strip_leading_segments": "Wrapper"},
            {"shallow_armature_policy": ["warn"]},
        ],
    )
    def test_wrongly_typed_values(self, data):
        with pytest.raises(ConfigError):
            options_from_dict(data)

    def test_quoted_bool_in_file(self, tmp_path):
        path = tmp_path / "build.yaml"
        path.write_text('keep_disabled_after_build: "false"\n')
        with pytest.raises(ConfigError, match="keep_disabled_after_build"):
            load_config(path)

    def test_unknown_key_warns(self, caplog):
        with caplog.at_level(logging.WARNING):
            options_from_dict({"colour": "red"})
        assert "colour" in caplog.text

    def test_not_a_mapping(self, tmp_path):
        path = tmp_path / "build.yaml"
        path.write_text("- flat_name\n")
        with pytest.raises(ConfigError):
            load_config_dict(path)

    def test_bad_yaml(self, tmp_path, caplog):
        path = tmp_path / "build.yaml"
        path.write_text("strategies: [flat_name\n")
        with caplog.at_level(logging.ERROR):
            with pytest.raises(yaml.YAMLError):
                load_config(path)
        assert "Error parsing YAML" in caplog.text

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_config(tmp_path / "nope.yaml")
