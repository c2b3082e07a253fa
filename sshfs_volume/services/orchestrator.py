"""Mount orchestrator - reference-counted mount/unmount of volume records"""

import os

from sshfs_volume.drivers import BaseMountDriver
from sshfs_volume.exceptions import UnmountException, VolumeIOException
from sshfs_volume.models import VolumeRecord
from sshfs_volume.utils.logger import get_logger

LOG = get_logger(__name__)


class MountOrchestrator:
    """
    Translates reference-count transitions into mount tool invocations.

    The caller must hold the registry's exclusive lock: the external
    mount runs at most once per 0->1 transition only because no other
    mount or unmount can interleave with it.
    """

    def __init__(self, driver: BaseMountDriver):
        self.driver = driver

    def mount(self, record: VolumeRecord) -> str:
        """
        Add a consumer, mounting the remote target for the first one.

        Returns:
            The volume's mount point

        Raises:
            VolumeIOException: If the mount point cannot be prepared
            MountException: If the mount tool fails; the count is unchanged
        """
        if record.reference_count == 0:
            self._ensure_mount_point(record)

            if self.driver.is_mounted(record.mount_point):
                LOG.warning(f"{record.mount_point} is already mounted, adopting it for {record.name}")
            else:
                self.driver.mount(record)
            record.needs_cleanup = False
        else:
            LOG.info(f"Reusing existing mount for {record.name} "
                     f"({record.reference_count} active)")

        record.reference_count += 1
        return record.mount_point

    def unmount(self, record: VolumeRecord):
        """
        Release a consumer, unmounting after the last one.

        The count is decremented before the unmount tool runs; a tool
        failure leaves it at 0, flags the record for cleanup and raises.

        Raises:
            UnmountException: If the unmount tool fails
        """
        released_from = record.reference_count
        record.reference_count -= 1

        if record.reference_count > 0:
            LOG.info(f"{record.name} still has {record.reference_count} active consumers")
            return

        record.reference_count = 0
        if released_from <= 0 and not self.driver.is_mounted(record.mount_point):
            LOG.warning(f"{record.name} has no consumers and nothing is mounted "
                        f"at {record.mount_point}")
            record.needs_cleanup = False
            return

        try:
            self.driver.unmount(record.mount_point)
        except UnmountException as e:
            record.needs_cleanup = True
            e.volume = record.name
            LOG.error(f"Unmount of {record.name} failed, flagged for cleanup: {e}")
            raise
        record.needs_cleanup = False

    def cleanup(self, record: VolumeRecord):
        """
        Detach a leftover mount of an unreferenced volume.

        Must run before the mount point directory is deleted so the
        removal never descends into the remote filesystem.

        Raises:
            UnmountException: If the leftover mount cannot be detached
        """
        if not self.driver.is_mounted(record.mount_point):
            record.needs_cleanup = False
            return

        LOG.warning(f"{record.mount_point} is still mounted, detaching before removal")
        try:
            self.driver.unmount(record.mount_point)
        except UnmountException as e:
            record.needs_cleanup = True
            e.volume = record.name
            raise
        record.needs_cleanup = False

    def _ensure_mount_point(self, record: VolumeRecord):
        path = record.mount_point
        if os.path.lexists(path):
            if not os.path.isdir(path) or os.path.islink(path):
                raise VolumeIOException(
                    f"{path} already exist and it's not a directory",
                    volume=record.name, operation='mount'
                )
            return

        LOG.info(f"Creating mount directory: {path}")
        try:
            os.makedirs(path, mode=0o755, exist_ok=True)
        except OSError as e:
            raise VolumeIOException(
                f"Failed to create mount directory {path}: {e}",
                volume=record.name, operation='mount'
            )
