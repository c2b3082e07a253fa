"""Base mount driver interface"""

from abc import ABC, abstractmethod
from sshfs_volume.models import VolumeRecord


class BaseMountDriver(ABC):
    """Abstract base class for mount drivers"""

    @abstractmethod
    def mount(self, record: VolumeRecord) -> str:
        """
        Attach the record's remote target at its mount point.

        Args:
            record: Volume to mount; its mount point directory must exist

        Returns:
            Combined tool output

        Raises:
            MountException: If the mount tool fails
        """
        pass

    @abstractmethod
    def unmount(self, mount_point: str) -> str:
        """
        Detach whatever is mounted at mount_point.

        Returns:
            Combined tool output

        Raises:
            UnmountException: If the unmount tool fails
        """
        pass

    @abstractmethod
    def is_mounted(self, mount_point: str) -> bool:
        """Check if path is currently mounted."""
        pass
