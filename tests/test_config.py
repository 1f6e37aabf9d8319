"""Tests for gridroute.config module."""

import pytest

from gridroute.config import (
    CONFIG_FILENAMES,
    KNOWN_KEYS,
    Config,
    ConfigError,
    _find_project_config,
    generate_template,
    get_config_paths,
    tomllib,
)
from gridroute.exceptions import ConfigurationError, GridRouteError


class TestConfigDefaults:
    """Tests for default configuration."""

    def test_defaults(self, isolated_config):
        config = Config.load()
        assert config.defaults.format == "grid"
        assert config.defaults.seed is None
        assert config.genetic.population_size == 1000
        assert config.fitness.collision == 100.0
        assert config.router.step_bonus == 0.5
        assert config.search.iterations == 10000
        assert config.get_source("genetic.population_size") == "default"

    def test_as_dict_lists_known_keys(self, isolated_config):
        data = Config.load().as_dict()
        assert set(data) == set(KNOWN_KEYS)
        for section, keys in KNOWN_KEYS.items():
            assert set(data[section]) == keys


class TestConfigLoading:
    """Tests for reading config files."""

    def test_project_config(self, isolated_config):
        path = isolated_config / CONFIG_FILENAMES[0]
        path.write_text(
            "[genetic]\npopulation_size = 50\n\n[router]\nstep_bonus = 1.0\n\n"
            '[defaults]\nformat = "json"\nseed = 9\n'
        )

        config = Config.load()

        assert config.genetic.population_size == 50
        assert config.genetic.generations == 100
        assert config.router.step_bonus == 1.0
        assert config.defaults.format == "json"
        assert config.defaults.seed == 9
        assert config.get_source("genetic.population_size") == str(path)

    def test_search_from_subdirectory(self, isolated_config):
        (isolated_config / "gridroute.toml").write_text("[search]\niterations = 7\n")
        nested = isolated_config / "a" / "b"
        nested.mkdir(parents=True)
        assert Config.load(nested).search.iterations == 7

    def test_search_stops_at_git_root(self, isolated_config):
        nested = isolated_config / "inner"
        nested.mkdir()
        (nested / ".git").mkdir()
        (isolated_config / "gridroute.toml").write_text("[search]\niterations = 7\n")
        assert _find_project_config(nested) is None

    def test_project_overrides_user(self, isolated_config, monkeypatch):
        user = isolated_config / "user.toml"
        user.write_text("[fitness]\nlength = 1.0\nsegment_count = 2.0\n")
        monkeypatch.setattr("gridroute.config.USER_CONFIG_PATH", user)
        (isolated_config / ".gridroute.toml").write_text("[fitness]\nlength = 0.5\n")

        config = Config.load()

        assert config.fitness.length == 0.5
        assert config.fitness.segment_count == 2.0
        assert config.get_source("fitness.segment_count") == str(user)

    def test_unknown_keys_warn(self, isolated_config):
        (isolated_config / ".gridroute.toml").write_text(
            "[genetic]\npopulation = 10\n\n[plotting]\ncolor = true\n"
        )
        with pytest.warns(UserWarning, match="Unknown config key"):
            config = Config.load()
        assert config.genetic.population_size == 1000

    def test_section_must_be_table(self, isolated_config):
        (isolated_config / ".gridroute.toml").write_text("genetic = 5\n")
        with pytest.raises(ConfigError, match="must be a table"):
            Config.load()

    def test_invalid_toml(self, isolated_config):
        (isolated_config / ".gridroute.toml").write_text("[genetic\n")
        with pytest.raises(ConfigError, match="Invalid TOML"):
            Config.load()

    def test_config_paths(self, isolated_config):
        assert get_config_paths() == {"user": None, "project": None}


class TestTemplate:
    """Tests for the generated template."""

    def test_template_parses(self):
        data = tomllib.loads(generate_template())
        assert set(data) == set(KNOWN_KEYS)

    def test_template_mentions_every_key(self):
        template = generate_template()
        for keys in KNOWN_KEYS.values():
            for key in keys:
                assert f"# {key} =" in template


class TestConfigError:
    """Tests for the config error type."""

    def test_is_a_configuration_error(self):
        assert issubclass(ConfigError, ConfigurationError)
        assert issubclass(ConfigError, GridRouteError)
        assert str(ConfigError("Invalid TOML in x.toml")) == "Invalid TOML in x.toml"
