"""
deskvfs Configuration Loader

Configuration management for the engine:
- JSON configuration file loading
- Validation of paths and policies
- Default value handling
- Dot-notation runtime access
"""

import json
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, Optional

from deskvfs.exceptions import ConfigValidationError


TRASH_COLLISION_POLICIES = ('suffix', 'replace', 'reject')


@dataclass
class FilesystemConfig:
    """Virtual filesystem settings."""
    home: str = "/home/victxrlarixs/"
    desktop: str = "/home/victxrlarixs/Desktop/"
    trash: str = "/home/victxrlarixs/.Trash/"
    settings: str = "/home/victxrlarixs/settings/"
    owner: str = "victxrlarixs"
    file_permissions: str = "rw-r--r--"
    folder_permissions: str = "rwxr-xr-x"
    trash_collision: str = "suffix"
    strict_mutations: bool = False


@dataclass
class HydrationConfig:
    """Background content hydration settings."""
    enabled: bool = True
    resource_dir: Optional[str] = None


@dataclass
class LoggingConfig:
    """Logging configuration settings."""
    level: str = "INFO"
    log_file: Optional[str] = None
    console_output: bool = True
    use_colors: bool = True


@dataclass
class EngineConfig:
    """Engine identification settings."""
    name: str = "deskvfs"
    version: str = "1.0.0"


@dataclass
class Config:
    """
    Main configuration container.

    Every section has defaults, so Config() alone is a working setup.
    """
    engine: EngineConfig = field(default_factory=EngineConfig)
    filesystem: FilesystemConfig = field(default_factory=FilesystemConfig)
    hydration: HydrationConfig = field(default_factory=HydrationConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


_SECTIONS = {
    'engine': EngineConfig,
    'filesystem': FilesystemConfig,
    'hydration': HydrationConfig,
    'logging': LoggingConfig,
}


def validate_config(config: Config) -> None:
    """
    Check cross-field constraints.

    Raises:
        ConfigValidationError: On the first violated constraint
    """
    fs = config.filesystem

    for key in ('home', 'desktop', 'trash', 'settings'):
        value = getattr(fs, key)
        if not value.startswith('/') or not value.endswith('/'):
            raise ConfigValidationError(
                f"Folder path must be absolute and end with '/': {value}",
                key=f"filesystem.{key}"
            )

    for key in ('desktop', 'trash', 'settings'):
        value = getattr(fs, key)
        if value == fs.home or not value.startswith(fs.home):
            raise ConfigValidationError(
                f"Path must live under home {fs.home}: {value}",
                key=f"filesystem.{key}"
            )

    if fs.trash_collision not in TRASH_COLLISION_POLICIES:
        raise ConfigValidationError(
            f"Unknown trash collision policy: {fs.trash_collision}",
            key="filesystem.trash_collision"
        )

    for key in ('file_permissions', 'folder_permissions'):
        value = getattr(fs, key)
        if not is_permission_string(value):
            raise ConfigValidationError(
                f"Invalid permission string: {value}",
                key=f"filesystem.{key}"
            )

    if config.logging.level.upper() not in ('DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'):
        raise ConfigValidationError(
            f"Unknown log level: {config.logging.level}",
            key="logging.level"
        )


def is_permission_string(value: str) -> bool:
    """Check for a 9-character rwx string such as 'rw-r--r--'."""
    if len(value) != 9:
        return False
    return all(ch in (expected, '-') for ch, expected in zip(value, 'rwxrwxrwx'))


class ConfigLoader:
    """
    Configuration loader.

    Example:
        >>> loader = ConfigLoader()
        >>> config = loader.load('deskvfs.json')
        >>> config.filesystem.home
        '/home/victxrlarixs/'
    """

    def __init__(self, config: Optional[Config] = None):
        self._config = config or Config()
        self._loaded = config is not None

    def load(self, config_path: str) -> Config:
        """
        Load configuration from a JSON file.

        Args:
            config_path: Path to the configuration file

        Returns:
            Config object with loaded settings

        Raises:
            ConfigValidationError: If the file cannot be loaded, parsed or validated
        """
        path = Path(config_path)

        if not path.exists():
            raise ConfigValidationError(f"Configuration file not found: {config_path}")

        try:
            with open(path, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            raise ConfigValidationError(f"Invalid JSON in configuration file: {e}")
        except OSError as e:
            raise ConfigValidationError(f"Cannot read configuration file: {e}")

        return self.load_dict(data)

    def load_dict(self, data: dict[str, Any]) -> Config:
        """Build and validate a Config from already-parsed data."""
        if not isinstance(data, dict):
            raise ConfigValidationError("Configuration root must be an object")

        config = self._parse_config(data)
        validate_config(config)

        self._config = config
        self._loaded = True
        return self._config

    def _parse_config(self, data: dict[str, Any]) -> Config:
        """Parse configuration data into Config object."""
        config = Config()

        for section_name, section_cls in _SECTIONS.items():
            if section_name not in data:
                continue

            section_data = data[section_name]
            if not isinstance(section_data, dict):
                raise ConfigValidationError(
                    f"Section must be an object: {section_name}",
                    key=section_name
                )

            known = {f.name for f in fields(section_cls)}
            unknown = set(section_data) - known
            if unknown:
                raise ConfigValidationError(
                    f"Unknown keys in section {section_name}: {', '.join(sorted(unknown))}",
                    key=section_name
                )

            defaults = getattr(config, section_name)
            values = {name: section_data.get(name, getattr(defaults, name)) for name in known}
            setattr(config, section_name, section_cls(**values))

        return config

    @property
    def loaded(self) -> bool:
        return self._loaded

    @property
    def config(self) -> Config:
        """Get the current configuration."""
        return self._config

    def get(self, key: str, default: Any = None) -> Any:
        """
        Get a configuration value by dot-notation key.

        Args:
            key: Dot-notation key (e.g., 'filesystem.trash')
            default: Default value if key not found

        Returns:
            Configuration value or default
        """
        obj: Any = self._config

        for part in key.split('.'):
            if hasattr(obj, part):
                obj = getattr(obj, part)
            else:
                return default

        return obj

    def set(self, key: str, value: Any) -> None:
        """
        Set a configuration value at runtime.

        The whole configuration is re-validated; on failure the old value
        is put back and ConfigValidationError is raised.
        """
        parts = key.split('.')
        obj: Any = self._config

        for part in parts[:-1]:
            if hasattr(obj, part):
                obj = getattr(obj, part)
            else:
                raise ConfigValidationError(f"Invalid configuration key: {key}", key=key)

        final_key = parts[-1]
        if not hasattr(obj, final_key):
            raise ConfigValidationError(f"Invalid configuration key: {key}", key=key)

        previous = getattr(obj, final_key)
        setattr(obj, final_key, value)
        try:
            validate_config(self._config)
        except ConfigValidationError:
            setattr(obj, final_key, previous)
            raise

    def to_dict(self) -> dict[str, Any]:
        """Convert configuration to dictionary."""
        return {
            section: dict(vars(getattr(self._config, section)))
            for section in _SECTIONS
        }
