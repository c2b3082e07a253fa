"""Utilities package"""

from sshfs_volume.utils.logger import get_logger, setup_logging
from sshfs_volume.utils.validators import (
    validate_port,
    validate_remote_target,
    validate_volume_name,
)

__all__ = [
    'get_logger',
    'setup_logging',
    'validate_port',
    'validate_remote_target',
    'validate_volume_name',
]
