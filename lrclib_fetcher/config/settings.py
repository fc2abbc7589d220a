"""
Configuration management for lrclib-fetcher

Settings come from YAML files and environment variables and are grouped
into one dataclass per concern:
- Search behaviour (title-only fallback, synced lyrics preference)
- File handling (recursion, skipping and overwriting existing lyrics)
- Batch processing (batch size, delay between batches)
- Network access to the LRCLIB API
- Logging output

Precedence, lowest to highest: dataclass defaults, the first YAML config file
found, then `LRCLIB_*` environment variables (also read from a `.env` file).
The environment variable names match the ones used by the Docker image.
"""

import os
import yaml
from pathlib import Path
from typing import Dict, Any, Optional, List
from dataclasses import dataclass, field
from dotenv import load_dotenv

# A local .env file may supply LRCLIB_* overrides
load_dotenv()


DEFAULT_AUDIO_EXTENSIONS = ['.mp3', '.flac', '.m4a', '.ogg', '.wav', '.wma']

_TRUE_VALUES = {'1', 'true', 'yes', 'on'}
_FALSE_VALUES = {'0', 'false', 'no', 'off'}


@dataclass
class SearchConfig:
    """
    Lyrics search behaviour

    allow_title_only_search enables the last, loosest search tier (track title
    only). prefer_synced makes the resolver keep looking for timestamped
    lyrics when a tier only returns plain text.
    """
    allow_title_only_search: bool = False
    prefer_synced: bool = True


@dataclass
class FileConfig:
    """
    Music directory scanning and lyrics file handling
    """
    recursive: bool = True
    skip_existing: bool = True
    overwrite_existing: bool = False
    extensions: List[str] = field(default_factory=lambda: list(DEFAULT_AUDIO_EXTENSIONS))


@dataclass
class BatchConfig:
    """
    Batch processing settings

    Files are processed `size` at a time in parallel, with a fixed pause of
    `delay_ms` milliseconds between batches to stay polite with LRCLIB.
    """
    size: int = 5
    delay_ms: int = 1000


@dataclass
class NetworkConfig:
    """
    LRCLIB API access settings

    retry_attempts counts total attempts per file, so 1 means no retry.
    not_found_is_empty treats an HTTP 404 from the lookup endpoint as
    "no candidate" instead of a fetch error.
    """
    base_url: str = "https://lrclib.net"
    request_timeout: int = 30
    retry_attempts: int = 1
    retry_delay: float = 1.0
    not_found_is_empty: bool = False


@dataclass
class LoggingConfig:
    """
    Log level, optional rotating log file and terminal formatting

    A relative `file` is placed in the user config directory.
    """
    level: str = "INFO"
    file: str = ""
    max_size: str = "10MB"
    backup_count: int = 3
    console_output: bool = True
    colored_output: bool = True


def parse_bool(value: Any) -> bool:
    """
    Parse a boolean from a config or environment value

    Args:
        value: bool, int or string such as "true", "0", "yes", "off"

    Returns:
        Parsed boolean

    Raises:
        ValueError: If the value is not a recognizable boolean
    """
    if isinstance(value, bool):
        return value
    if isinstance(value, int):
        return value != 0

    text = str(value).strip().lower()
    if text in _TRUE_VALUES:
        return True
    if text in _FALSE_VALUES:
        return False
    raise ValueError(f"Invalid boolean value: {value!r}")


class Settings:
    """
    All lyrics-fetcher configuration

    Each section is exposed as a dataclass attribute (settings.search, settings.files,
    settings.batch, settings.network, settings.logging).
    """

    def __init__(self, config_path: Optional[str] = None):
        """
        Args:
            config_path: Explicit YAML file, tried before the default locations
        """
        self.config_path = config_path
        self.config_dir = Path.home() / ".lrclib-fetcher"

        self.search = SearchConfig()
        self.files = FileConfig()
        self.batch = BatchConfig()
        self.network = NetworkConfig()
        self.logging = LoggingConfig()

        self._load_config()
        self._load_environment_variables()

    def _sections(self) -> Dict[str, Any]:
        return {
            'search': self.search,
            'files': self.files,
            'batch': self.batch,
            'network': self.network,
            'logging': self.logging,
        }

    def _load_config(self) -> None:
        """
        Read the first YAML config that exists

        Order: explicit path, ~/.lrclib-fetcher/config.yaml, config/config.yaml,
        then ./config.yaml. An unreadable file is reported and the next is tried.
        """
        config_paths = [
            self.config_path,
            self.config_dir / "config.yaml",
            Path("config/config.yaml"),
            Path("config.yaml")
        ]

        config_data = {}
        for path in config_paths:
            if path and Path(path).exists():
                try:
                    with open(path, encoding="utf-8") as handle:
                        config_data = yaml.safe_load(handle) or {}
                    break
                except (OSError, yaml.YAMLError) as e:
                    print(f"Warning: could not read config {path}: {e}")

        self._apply_config(config_data)

    def _apply_config(self, config_data: Dict[str, Any]) -> None:
        """
        Copy known keys from parsed YAML onto the section dataclasses

        Unknown sections and keys are ignored.
        """
        if not isinstance(config_data, dict):
            return

        sections = self._sections()
        for name, values in config_data.items():
            section = sections.get(name)
            if section is None or not isinstance(values, dict):
                continue
            for key, value in values.items():
                if hasattr(section, key):
                    setattr(section, key, value)

    def _load_environment_variables(self) -> None:
        """
        Load configuration overrides from LRCLIB_* environment variables

        Malformed values are reported and skipped so that a typo in the
        environment does not prevent startup.
        """
        env_mappings = {
            'LRCLIB_RECURSIVE': lambda v: setattr(self.files, 'recursive', parse_bool(v)),
            'LRCLIB_SKIP_EXISTING': lambda v: setattr(self.files, 'skip_existing', parse_bool(v)),
            'LRCLIB_OVERWRITE': lambda v: setattr(self.files, 'overwrite_existing', parse_bool(v)),
            'LRCLIB_BATCH_SIZE': lambda v: setattr(self.batch, 'size', int(v)),
            'LRCLIB_DELAY': lambda v: setattr(self.batch, 'delay_ms', int(v)),
            'LRCLIB_TITLE_ONLY': lambda v: setattr(self.search, 'allow_title_only_search', parse_bool(v)),
            'LRCLIB_PREFER_SYNCED': lambda v: setattr(self.search, 'prefer_synced', parse_bool(v)),
            'LRCLIB_LOG_LEVEL': lambda v: setattr(self.logging, 'level', v.upper()),
            'LRCLIB_LOG_FILE': lambda v: setattr(self.logging, 'file', v),
            'LRCLIB_API_URL': lambda v: setattr(self.network, 'base_url', v),
        }

        for env_var, setter in env_mappings.items():
            value = os.environ.get(env_var)
            if value:
                try:
                    setter(value)
                except ValueError as e:
                    print(f"Warning: Ignoring {env_var}: {e}")

    def get_config_directory(self) -> Path:
        """
        User config directory with ~ expanded
        """
        return self.config_dir.expanduser()

    def search_options(self):
        """
        Build resolver search options from the search section

        Returns:
            LyricSearchOptions reflecting the current configuration
        """
        from ..lyrics.models import LyricSearchOptions

        return LyricSearchOptions(
            allow_title_only_search=bool(self.search.allow_title_only_search),
            prefer_synced=bool(self.search.prefer_synced),
        )

    def save_config(self, path: Optional[str] = None) -> Path:
        """
        Write every section to YAML

        Args:
            path: Destination file, or config.yaml in the user config directory

        Returns:
            Path the configuration was written to

        Raises:
            OSError: If the configuration cannot be saved
        """
        target = Path(path) if path else self.get_config_directory() / "config.yaml"

        config_data = {
            name: self._dataclass_to_dict(section)
            for name, section in self._sections().items()
        }

        target.parent.mkdir(parents=True, exist_ok=True)
        with open(target, 'w', encoding='utf-8') as f:
            yaml.safe_dump(config_data, f, default_flow_style=False, indent=2)
        return target

    def _dataclass_to_dict(self, obj) -> Dict[str, Any]:
        """Convert a settings dataclass to a plain dictionary for YAML output"""
        result = {}
        for key, value in obj.__dict__.items():
            result[key] = list(value) if isinstance(value, list) else value
        return result

    def get_validation_errors(self) -> List[str]:
        """
        Collect configuration problems

        Returns:
            List of human-readable error messages, empty when valid
        """
        errors = []

        if not isinstance(self.batch.size, int) or self.batch.size < 1:
            errors.append(f"Batch size must be a positive integer: {self.batch.size}")

        if not isinstance(self.batch.delay_ms, int) or self.batch.delay_ms < 0:
            errors.append(f"Batch delay must be a non-negative integer: {self.batch.delay_ms}")

        if not isinstance(self.network.retry_attempts, int) or self.network.retry_attempts < 1:
            errors.append(f"Retry attempts must be at least 1: {self.network.retry_attempts}")

        if not str(self.network.base_url).startswith(('http://', 'https://')):
            errors.append(f"Invalid API base URL: {self.network.base_url}")

        if str(self.logging.level).upper() not in ['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']:
            errors.append(f"Invalid log level: {self.logging.level}")

        if not self.files.extensions:
            errors.append("At least one audio extension must be configured")

        return errors

    def validate(self) -> bool:
        """
        Print any configuration problems and report whether there were none
        """
        errors = self.get_validation_errors()

        if errors:
            print("Invalid configuration:")
            for error in errors:
                print(f"  * {error}")
            return False

        return True

    def __str__(self) -> str:
        sections = [
            f"Title-only: {'on' if self.search.allow_title_only_search else 'off'}",
            f"Prefer synced: {'on' if self.search.prefer_synced else 'off'}",
            f"Batch: {self.batch.size} every {self.batch.delay_ms}ms",
            f"API: {self.network.base_url}",
        ]
        return "Settings(" + ", ".join(sections) + ")"


# Shared instance used by the CLI and library helpers
settings = Settings()


def get_settings() -> Settings:
    """
    Shared Settings instance
    """
    return settings


def reload_settings(config_path: Optional[str] = None) -> Settings:
    """
    Replace the shared instance with one freshly read from disk and environment

    Args:
        config_path: Explicit YAML file to load first
    """
    global settings
    settings = Settings(config_path)
    return settings
