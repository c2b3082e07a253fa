"""Services package"""

from sshfs_volume.services.orchestrator import MountOrchestrator
from sshfs_volume.services.state_store import StateStore
from sshfs_volume.services.volume_registry import VolumeRegistry
from sshfs_volume.services.volume_service import VolumeService

__all__ = ['MountOrchestrator', 'StateStore', 'VolumeRegistry', 'VolumeService']
