"""Data models package"""

from sshfs_volume.models.schemas import (
    VolumeRecord,
    VolumeResponse,
    parse_create_options,
)

__all__ = [
    'VolumeRecord',
    'VolumeResponse',
    'parse_create_options',
]
