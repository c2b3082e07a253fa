# sshfs_volume/__init__.py
"""
SSHFS Volume Manager

Tracks named volumes backed by sshfs remote targets and coordinates their
creation, reference-counted mounting, unmounting and removal, persisting
volume metadata in a JSON snapshot that survives restarts.

Key Features:
- Mount tool runs once per first consumer; later consumers share the mount
- Unmount only when the last consumer releases the volume
- Atomic snapshot writes (temporary file + rename)
- Typed responses for every lifecycle operation

Example:
    >>> from sshfs_volume import PluginConfig, VolumeService
    >>>
    >>> service = VolumeService.from_config(PluginConfig.from_file())
    >>> service.create('data', {'sshcmd': 'user@host:/srv'})
    >>> response = service.mount('data')
    >>> print(response.mountpoint)
"""

from .config import PluginConfig

from .exceptions import (
    PluginException,
    VolumeNotFoundException,
    VolumeInUseException,
    MissingRequiredOptionException,
    InvalidOptionException,
    DuplicateRemoteTargetException,
    VolumeIOException,
    MountException,
    UnmountException,
    CorruptStateException,
    PersistenceException,
    LockTimeoutException,
    ConfigurationException
)

from .models import (
    VolumeRecord,
    VolumeResponse
)

from .services import (
    VolumeRegistry,
    VolumeService
)

__version__ = '1.0.0'

__all__ = [
    # Configuration
    'PluginConfig',

    # Exceptions
    'PluginException',
    'VolumeNotFoundException',
    'VolumeInUseException',
    'MissingRequiredOptionException',
    'InvalidOptionException',
    'DuplicateRemoteTargetException',
    'VolumeIOException',
    'MountException',
    'UnmountException',
    'CorruptStateException',
    'PersistenceException',
    'LockTimeoutException',
    'ConfigurationException',

    # Models
    'VolumeRecord',
    'VolumeResponse',

    # Services
    'VolumeRegistry',
    'VolumeService',

    # Version
    '__version__',
]


def get_version():
    """Get the current version of the package."""
    return __version__
