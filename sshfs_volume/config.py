"""
SSHFS Volume Manager Configuration Module
Supports loading from:
1. INI config file (/etc/sshfs-volume/plugin.conf)
2. Environment variables (override config file)
3. Default values (fallback)
"""

import os
import logging
from configparser import ConfigParser, Error as ConfigParserError
from typing import Dict, Any, Optional

from sshfs_volume.exceptions import ConfigurationException

logger = logging.getLogger(__name__)


class PluginConfig:
    """Volume manager configuration"""

    # Default configuration file path
    CONFIG_FILE = '/etc/sshfs-volume/plugin.conf'
    ENV_PREFIX = 'SSHFS_VOLUME_'

    # Default values
    DEFAULTS = {
        'root': '/mnt',
        'sshfs_bin': 'sshfs',
        'umount_bin': 'umount',
        'mount_timeout': '0',
        'lock_timeout': '0',
        'log_level': 'INFO',
        'log_format': 'json',
    }

    LOG_FORMATS = ('json', 'text')
    STATE_FILE = 'sshfs-state.json'

    def __init__(self, config_data: Optional[Dict[str, Any]] = None,
                 config_file: Optional[str] = None):
        """
        Resolve configuration with priority: env var > config file > default.

        Args:
            config_data: Values read from a config file
            config_file: Path the values were read from (for diagnostics)
        """
        config_data = config_data or {}
        self.config_file = config_file

        def resolve(key):
            return os.environ.get(
                self.ENV_PREFIX + key.upper(),
                config_data.get(key, self.DEFAULTS[key])
            )

        self.root = resolve('root')
        self.sshfs_bin = resolve('sshfs_bin')
        self.umount_bin = resolve('umount_bin')
        self.log_level = resolve('log_level').upper()
        self.log_format = resolve('log_format').lower()
        self.mount_timeout = self._parse_number('mount_timeout', resolve('mount_timeout'))
        self.lock_timeout = self._parse_number('lock_timeout', resolve('lock_timeout'))

    @staticmethod
    def _parse_number(key: str, value: Any) -> float:
        try:
            return float(value)
        except (TypeError, ValueError):
            raise ConfigurationException(f"{key} must be a number, got {value!r}")

    @classmethod
    def from_file(cls, config_file: Optional[str] = None) -> 'PluginConfig':
        """
        Load configuration from an INI file.

        Expected format:
        [plugin]
        root = /mnt
        sshfs_bin = /usr/bin/sshfs
        mount_timeout = 60
        log_level = INFO
        """
        config_file = config_file or cls.CONFIG_FILE
        return cls(cls._load_ini_file(config_file), config_file=config_file)

    @classmethod
    def _load_ini_file(cls, config_file: str) -> Dict[str, Any]:
        config_data = {}

        if not os.path.exists(config_file):
            logger.warning(f"Config file not found: {config_file}, using defaults")
            return config_data

        parser = ConfigParser()
        try:
            parser.read(config_file)
        except ConfigParserError as e:
            raise ConfigurationException(f"Failed to parse config file {config_file}: {e}")

        # [plugin] wins over [DEFAULT]
        section = 'plugin' if parser.has_section('plugin') else 'DEFAULT'
        for key, value in parser.items(section):
            config_data[key] = value

        logger.info(f"Loaded {len(config_data)} config parameters from {config_file}")
        return config_data

    @property
    def volumes_dir(self) -> str:
        return os.path.join(self.root, 'volumes')

    @property
    def state_dir(self) -> str:
        return os.path.join(self.root, 'state')

    @property
    def state_path(self) -> str:
        return os.path.join(self.state_dir, self.STATE_FILE)

    def validate(self):
        """
        Validate configuration.

        Raises:
            ConfigurationException if configuration is invalid
        """
        if not os.path.isabs(self.root):
            raise ConfigurationException(f"root must be an absolute path, got {self.root!r}")

        if self.mount_timeout < 0:
            raise ConfigurationException("mount_timeout must not be negative")

        if self.lock_timeout < 0:
            raise ConfigurationException("lock_timeout must not be negative")

        if self.log_format not in self.LOG_FORMATS:
            raise ConfigurationException(
                f"log_format must be one of {', '.join(self.LOG_FORMATS)}, got {self.log_format!r}"
            )

        logger.debug("Configuration validated successfully")

    def to_dict(self) -> Dict[str, Any]:
        return {
            'root': self.root,
            'volumes_dir': self.volumes_dir,
            'state_path': self.state_path,
            'sshfs_bin': self.sshfs_bin,
            'umount_bin': self.umount_bin,
            'mount_timeout': self.mount_timeout,
            'lock_timeout': self.lock_timeout,
            'log_level': self.log_level,
            'log_format': self.log_format,
        }
