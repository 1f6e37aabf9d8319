"""
Configuration file support for gridroute.

Provides hierarchical configuration loading from:
1. Project config: .gridroute.toml or gridroute.toml in the project root
2. User config: ~/.config/gridroute/config.toml

CLI arguments override config file values, and project config overrides user config.
"""

import sys
import warnings
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from gridroute.exceptions import ConfigurationError
from gridroute.individual import FitnessWeights
from gridroute.optim.genetic import GeneticConfig
from gridroute.optim.random_search import RandomSearchConfig
from gridroute.router import RouterConfig

if sys.version_info >= (3, 11):
    import tomllib
else:
    try:
        import tomli as tomllib
    except ImportError:
        tomllib = None  # type: ignore[assignment]

# Config file names to search for in project directories
CONFIG_FILENAMES = [".gridroute.toml", "gridroute.toml"]

# User-level config path
USER_CONFIG_PATH = Path.home() / ".config" / "gridroute" / "config.toml"

# All known config keys for validation
KNOWN_KEYS = {
    "defaults": {"format", "verbose", "quiet", "seed"},
    "router": {"collision_factor", "boundary_factor", "arrival_factor", "step_bonus", "max_steps"},
    "fitness": {"collision", "length", "segment_count"},
    "genetic": {
        "population_size",
        "generations",
        "crossover_rate",
        "mutation_rate",
        "tournament_size",
    },
    "search": {"iterations", "workers"},
}


@dataclass
class DefaultsConfig:
    """Default options for CLI commands."""

    format: str = "grid"
    verbose: bool = False
    quiet: bool = False
    seed: int | None = None


@dataclass
class Config:
    """Merged configuration from all sources."""

    defaults: DefaultsConfig = field(default_factory=DefaultsConfig)
    router: RouterConfig = field(default_factory=RouterConfig)
    fitness: FitnessWeights = field(default_factory=FitnessWeights)
    genetic: GeneticConfig = field(default_factory=GeneticConfig)
    search: RandomSearchConfig = field(default_factory=RandomSearchConfig)

    # Track which file each setting came from (for --show)
    _sources: dict = field(default_factory=dict, repr=False)

    @classmethod
    def load(cls, start_dir: Path | None = None) -> "Config":
        """
        Load configuration with precedence: project > user > defaults.

        Args:
            start_dir: Directory to start searching from (default: current directory)

        Returns:
            Merged configuration object
        """
        if start_dir is None:
            start_dir = Path.cwd()

        config = cls()
        sources: dict[str, str] = {}

        # Load user config first (lower precedence)
        if USER_CONFIG_PATH.exists():
            user_data = _load_toml_file(USER_CONFIG_PATH)
            if user_data:
                _merge_config(config, user_data, str(USER_CONFIG_PATH), sources)

        # Load project config (higher precedence)
        project_config = _find_project_config(start_dir)
        if project_config:
            project_data = _load_toml_file(project_config)
            if project_data:
                _merge_config(config, project_data, str(project_config), sources)

        config._sources = sources
        return config

    def get_source(self, key: str) -> str:
        """Get the source file for a config key."""
        return self._sources.get(key, "default")

    def as_dict(self) -> dict[str, dict[str, Any]]:
        """Known settings grouped by section."""
        result = {}
        for section, keys in KNOWN_KEYS.items():
            values = getattr(self, section)
            result[section] = {key: getattr(values, key) for key in sorted(keys)}
        return result


class ConfigError(ConfigurationError):
    """A config file could not be read or merged."""

    pass


def _find_project_config(start_dir: Path) -> Path | None:
    """
    Find project config by walking up the directory tree.

    Stops at .git directory or filesystem root.
    """
    current = start_dir.resolve()

    while True:
        for filename in CONFIG_FILENAMES:
            config_path = current / filename
            if config_path.is_file():
                return config_path

        # Stop at .git directory (project root)
        if (current / ".git").exists():
            break

        parent = current.parent
        if parent == current:
            break
        current = parent

    return None


def _load_toml_file(path: Path) -> dict[str, Any] | None:
    """
    Load a TOML file safely.

    Returns:
        Parsed TOML data or None when no TOML parser is available

    Raises:
        ConfigError: If TOML is invalid or unreadable
    """
    if tomllib is None:
        warnings.warn(
            "tomli package not installed. Config file support requires 'pip install tomli' for Python < 3.11.",
            stacklevel=2,
        )
        return None

    try:
        with open(path, "rb") as f:
            return tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ConfigError(f"Invalid TOML in {path}: {e}") from e
    except OSError as e:
        raise ConfigError(f"Cannot read config file {path}: {e}") from e


def _merge_config(
    config: Config, data: dict[str, Any], source: str, sources: dict[str, str]
) -> None:
    """
    Merge loaded config data into Config object.

    Args:
        config: Config object to update
        data: Raw config data from TOML
        source: Source file path (for tracking)
        sources: Dict to update with source info
    """
    for key in data:
        if key not in KNOWN_KEYS:
            warnings.warn(f"Unknown config key '{key}' in {source}", stacklevel=3)

    for section, known in KNOWN_KEYS.items():
        if section not in data:
            continue
        section_data = data[section]
        if not isinstance(section_data, dict):
            raise ConfigError(f"Config section '{section}' in {source} must be a table")
        _warn_unknown_keys(section_data, known, section, source)

        target = getattr(config, section)
        for key in known:
            if key in section_data:
                setattr(target, key, section_data[key])
                sources[f"{section}.{key}"] = source


def _warn_unknown_keys(data: dict[str, Any], known: set[str], section: str, source: str) -> None:
    """Warn about unknown keys in a config section."""
    for key in data:
        if key not in known:
            warnings.warn(f"Unknown config key '{section}.{key}' in {source}", stacklevel=4)


def generate_template() -> str:
    """
    Generate a template config file with all options documented.

    Returns:
        Template TOML string
    """
    return """# gridroute configuration file
# Place as .gridroute.toml in project root or ~/.config/gridroute/config.toml for user defaults

[defaults]
# Output format: grid, coords, json
# format = "grid"

# Enable verbose logging by default
# verbose = false

# Suppress progress bars by default
# quiet = false

# Seed for reproducible runs (random search then runs single-threaded)
# seed = 1

[router]
# Weight of a step into a cell claimed by another wire
# collision_factor = 0.1

# Weight of a step off the grid
# boundary_factor = 0.0

# Distance factor of a step landing on the target pin
# arrival_factor = 10.0

# Straightness bonus per consumed cell
# step_bonus = 0.5

# Abort a single walk after this many steps (unset = no limit)
# max_steps = 100000

[fitness]
# collision = 100.0
# length = 0.2
# segment_count = 0.1

[genetic]
# population_size = 1000
# generations = 100
# crossover_rate = 0.8
# mutation_rate = 0.03
# tournament_size = 20

[search]
# iterations = 10000

# Worker threads (unset = half the logical CPUs)
# workers = 4
"""


def get_config_paths() -> dict[str, Path | None]:
    """
    Get paths to config files that would be loaded.

    Returns:
        Dict with 'user' and 'project' keys
    """
    project_config = _find_project_config(Path.cwd())

    return {
        "user": USER_CONFIG_PATH if USER_CONFIG_PATH.exists() else None,
        "project": project_config,
    }
