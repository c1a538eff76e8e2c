"""Configuration management for FatFileFinder."""

import logging
from pathlib import Path
from typing import Optional
from dataclasses import dataclass, field
import configparser

from .models import SizeFormat


@dataclass
class ScanConfig:
    """Scanning configuration settings."""
    size_format: str = SizeFormat.UNITS.value
    first_match: bool = False
    follow_symlinks: bool = True


@dataclass
class ActionsConfig:
    """Archive and relocation settings."""
    holding_dir_name: str = "FatFileFinder"
    temp_root: Optional[Path] = None  # None means the system temp directory
    compression_level: int = 9


@dataclass
class LoggingConfig:
    """Logging configuration settings."""
    level: str = "WARNING"
    format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    file_enabled: bool = False
    file_path: Optional[Path] = None
    file_max_size_mb: int = 10
    file_backup_count: int = 5
    console_enabled: bool = True

    def __post_init__(self):
        if self.file_path is None:
            self.file_path = Path.home() / ".fatfilefinder" / "logs" / "fatfilefinder.log"


@dataclass
class AppConfig:
    """Main application configuration."""
    scan: ScanConfig = field(default_factory=ScanConfig)
    actions: ActionsConfig = field(default_factory=ActionsConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    # Application metadata
    app_name: str = "FatFileFinder"
    version: str = "0.1.0"


class ConfigManager:
    """Manages application configuration from an INI file."""

    def __init__(self, config_file: Optional[Path] = None):
        """
        Initialize configuration manager.

        Args:
            config_file: Path to configuration file. If None, uses default location.
        """
        if config_file is None:
            config_file = Path.home() / ".fatfilefinder" / "config.ini"

        self.config_file = Path(config_file)
        self.config = AppConfig()
        self.logger = logging.getLogger(__name__)

        # Load configuration from file if it exists
        if self.config_file.exists():
            self.load_from_file()
        else:
            # Create default configuration file
            self.save_to_file()

    def load_from_file(self) -> None:
        """Load configuration from INI file."""
        try:
            parser = configparser.ConfigParser(interpolation=None)
            parser.read(self.config_file)
        except configparser.Error as e:
            self.logger.error(f"Error loading configuration from {self.config_file}: {e}")
            return

        if 'scan' in parser:
            scan_section = parser['scan']
            self._load_value(scan_section, 'size_format',
                             lambda key: SizeFormat(scan_section.get(key).strip().lower()).value,
                             self.config.scan)
            self._load_value(scan_section, 'first_match', scan_section.getboolean,
                             self.config.scan)
            self._load_value(scan_section, 'follow_symlinks', scan_section.getboolean,
                             self.config.scan)

        if 'actions' in parser:
            actions_section = parser['actions']
            if actions_section.get('holding_dir_name', '').strip():
                self.config.actions.holding_dir_name = actions_section.get('holding_dir_name').strip()
            if 'temp_root' in actions_section:
                temp_root = actions_section.get('temp_root').strip()
                self.config.actions.temp_root = Path(temp_root) if temp_root else None
            self._load_value(actions_section, 'compression_level',
                             lambda key: _compression_level(actions_section.getint(key)),
                             self.config.actions)

        if 'logging' in parser:
            log_section = parser['logging']
            if 'level' in log_section:
                self.config.logging.level = log_section.get('level')
            if 'format' in log_section:
                self.config.logging.format = log_section.get('format')
            if 'file_path' in log_section:
                self.config.logging.file_path = Path(log_section.get('file_path'))
            self._load_value(log_section, 'file_enabled', log_section.getboolean,
                             self.config.logging)
            self._load_value(log_section, 'file_max_size_mb', log_section.getint,
                             self.config.logging)
            self._load_value(log_section, 'file_backup_count', log_section.getint,
                             self.config.logging)
            self._load_value(log_section, 'console_enabled', log_section.getboolean,
                             self.config.logging)

        self.logger.info(f"Configuration loaded from {self.config_file}")

    def _load_value(self, section, key, reader, target) -> None:
        """Read one typed value, keeping the default when it is invalid."""
        if key not in section:
            return
        try:
            setattr(target, key, reader(key))
        except ValueError as e:
            self.logger.warning(
                f"Invalid value for [{section.name}] {key} in {self.config_file}: {e}; "
                f"using {getattr(target, key)!r}"
            )

    def save_to_file(self) -> None:
        """Save current configuration to INI file."""
        try:
            # Ensure config directory exists
            self.config_file.parent.mkdir(parents=True, exist_ok=True)

            parser = configparser.ConfigParser(interpolation=None)

            parser['scan'] = {
                'size_format': self.config.scan.size_format,
                'first_match': str(self.config.scan.first_match),
                'follow_symlinks': str(self.config.scan.follow_symlinks)
            }

            parser['actions'] = {
                'holding_dir_name': self.config.actions.holding_dir_name,
                'temp_root': str(self.config.actions.temp_root or ''),
                'compression_level': str(self.config.actions.compression_level)
            }

            parser['logging'] = {
                'level': self.config.logging.level,
                'format': self.config.logging.format,
                'file_enabled': str(self.config.logging.file_enabled),
                'file_path': str(self.config.logging.file_path),
                'file_max_size_mb': str(self.config.logging.file_max_size_mb),
                'file_backup_count': str(self.config.logging.file_backup_count),
                'console_enabled': str(self.config.logging.console_enabled)
            }

            with open(self.config_file, 'w') as f:
                parser.write(f)

            self.logger.info(f"Configuration saved to {self.config_file}")

        except OSError as e:
            self.logger.error(f"Error saving configuration to {self.config_file}: {e}")

    def get_config(self) -> AppConfig:
        """Get the current configuration."""
        return self.config


def _compression_level(level: int) -> int:
    if not 0 <= level <= 9:
        raise ValueError(f"compression level must be between 0 and 9, got {level}")
    return level


# Global configuration instance
_config_manager = None


def get_config() -> AppConfig:
    """Get the global application configuration."""
    global _config_manager
    if _config_manager is None:
        _config_manager = ConfigManager()
    return _config_manager.get_config()


def setup_config(config_file: Optional[Path] = None) -> ConfigManager:
    """
    Set up global configuration.

    Args:
        config_file: Optional path to configuration file

    Returns:
        ConfigManager instance
    """
    global _config_manager
    _config_manager = ConfigManager(config_file)
    return _config_manager
