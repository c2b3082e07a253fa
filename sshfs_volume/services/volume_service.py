"""Volume lifecycle service - the operation surface used by the plugin server"""

from typing import Any, Callable, Mapping, Optional

from sshfs_volume.config import PluginConfig
from sshfs_volume.exceptions import PluginException
from sshfs_volume.models import VolumeResponse
from sshfs_volume.services.volume_registry import VolumeRegistry
from sshfs_volume.utils.logger import get_logger

LOG = get_logger(__name__)


class VolumeService:
    """Create/remove/mount/unmount/inspect volumes with typed responses"""

    def __init__(self, registry: VolumeRegistry):
        self.registry = registry

    @classmethod
    def from_config(cls, config: PluginConfig) -> 'VolumeService':
        """
        Build the service from configuration.

        Raises:
            ConfigurationException: If the configuration is invalid
            CorruptStateException: If the persisted snapshot is unreadable
        """
        config.validate()
        return cls(VolumeRegistry.load(config))

    def _call(self, operation: str, name: Optional[str],
              action: Callable[[], VolumeResponse]) -> VolumeResponse:
        try:
            return action()
        except PluginException as e:
            LOG.error(f"{operation} failed for volume {name}: {e}")
            return VolumeResponse(success=False, message=str(e), error_code=e.code)
        except Exception as e:
            LOG.error(f"{operation} failed for volume {name}: {e}", exc_info=True)
            return VolumeResponse(success=False, message=str(e), error_code='internal_error')

    def create(self, name: str, options: Optional[Mapping[str, Any]] = None) -> VolumeResponse:
        """Handle create request"""
        def action():
            record = self.registry.create(name, options)
            return VolumeResponse(
                success=True,
                message=f'Volume {name} created',
                mountpoint=record.mount_point
            )
        return self._call('create', name, action)

    def remove(self, name: str) -> VolumeResponse:
        """Handle remove request"""
        def action():
            self.registry.remove(name)
            return VolumeResponse(success=True, message=f'Volume {name} removed')
        return self._call('remove', name, action)

    def path(self, name: str) -> VolumeResponse:
        """Handle path request"""
        def action():
            return VolumeResponse(
                success=True,
                message=f'Path of volume {name}',
                mountpoint=self.registry.path(name)
            )
        return self._call('path', name, action)

    def mount(self, name: str) -> VolumeResponse:
        """Handle mount request"""
        def action():
            mountpoint = self.registry.mount(name)
            return VolumeResponse(
                success=True,
                message=f'Volume {name} mounted',
                mountpoint=mountpoint
            )
        return self._call('mount', name, action)

    def unmount(self, name: str) -> VolumeResponse:
        """Handle unmount request"""
        def action():
            self.registry.unmount(name)
            return VolumeResponse(success=True, message=f'Unmount processed for volume {name}')
        return self._call('unmount', name, action)

    def get(self, name: str) -> VolumeResponse:
        """Handle get request"""
        def action():
            volume = self.registry.get(name)
            return VolumeResponse(
                success=True,
                message=f'Volume {name}',
                mountpoint=volume['mountpoint'],
                volume=volume
            )
        return self._call('get', name, action)

    def list(self) -> VolumeResponse:
        """Handle list request"""
        def action():
            volumes = self.registry.list()
            return VolumeResponse(
                success=True,
                message=f'{len(volumes)} volumes',
                volumes=volumes
            )
        return self._call('list', None, action)

    def capabilities(self) -> VolumeResponse:
        return VolumeResponse(
            success=True,
            message='Capabilities',
            capabilities=self.registry.capabilities()
        )
