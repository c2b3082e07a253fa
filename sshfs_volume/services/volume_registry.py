"""Volume registry - authoritative name -> volume map with locking and persistence"""

import hashlib
import os
import shutil
from typing import Any, Dict, List, Mapping, Optional

from sshfs_volume.config import PluginConfig
from sshfs_volume.drivers import SSHFSDriver
from sshfs_volume.exceptions import (
    DuplicateRemoteTargetException, InvalidOptionException,
    MissingRequiredOptionException, VolumeInUseException,
    VolumeIOException, VolumeNotFoundException
)
from sshfs_volume.lock_manager import ReadWriteLock
from sshfs_volume.models import VolumeRecord, parse_create_options
from sshfs_volume.models.schemas import utc_timestamp
from sshfs_volume.services.orchestrator import MountOrchestrator
from sshfs_volume.services.state_store import StateStore
from sshfs_volume.utils.logger import get_logger
from sshfs_volume.utils.validators import (
    validate_port, validate_remote_target, validate_volume_name
)

LOG = get_logger(__name__)

CAPABILITIES = {'scope': 'local'}


def mount_point_for(volumes_dir: str, remote_target: str) -> str:
    """Mount point derived from the remote target alone."""
    digest = hashlib.md5(remote_target.encode('utf-8'), usedforsecurity=False).hexdigest()
    return os.path.join(volumes_dir, digest)


class VolumeRegistry:
    """
    Single source of truth for volume records.

    Reads take the lock shared. create/remove/mount/unmount take it
    exclusively for their whole duration, including the mount tool and
    the snapshot write, so independent volumes serialize behind one
    another. Reference counts live only in memory: after a restart no
    consumer holds a volume.
    """

    def __init__(self, volumes_dir: str, store: StateStore,
                 orchestrator: MountOrchestrator,
                 lock: Optional[ReadWriteLock] = None,
                 volumes: Optional[Dict[str, VolumeRecord]] = None):
        self.volumes_dir = volumes_dir
        self.store = store
        self.orchestrator = orchestrator
        self.lock = lock or ReadWriteLock()
        self._volumes = volumes if volumes is not None else {}

    @classmethod
    def load(cls, config: PluginConfig) -> 'VolumeRegistry':
        """
        Build a registry from configuration and the persisted snapshot.

        Raises:
            CorruptStateException: If the snapshot exists but is unreadable
        """
        LOG.info(f"Loading volume registry from {config.state_path}")
        store = StateStore(config.state_path)
        driver = SSHFSDriver(
            sshfs_bin=config.sshfs_bin,
            umount_bin=config.umount_bin,
            timeout=config.mount_timeout
        )
        return cls(
            volumes_dir=config.volumes_dir,
            store=store,
            orchestrator=MountOrchestrator(driver),
            lock=ReadWriteLock(timeout=config.lock_timeout),
            volumes=store.load()
        )

    def _lookup(self, name: str, operation: str) -> VolumeRecord:
        try:
            return self._volumes[name]
        except KeyError:
            raise VolumeNotFoundException(
                f"volume {name} not found", volume=name, operation=operation
            )

    def create(self, name: str, options: Optional[Mapping[str, Any]] = None) -> VolumeRecord:
        """
        Register (or re-register) a volume.

        Raises:
            MissingRequiredOptionException: If 'sshcmd' is absent or empty
            InvalidOptionException: If the name, target or port is malformed
            DuplicateRemoteTargetException: If another volume uses the target
            VolumeInUseException: If re-creating a volume that is mounted
            UnmountException, VolumeIOException: If the target changed and
                the old mount point cannot be released
            PersistenceException: If the snapshot write fails
        """
        LOG.info(f"Creating volume {name} with options {sorted((options or {}).keys())}")

        if not validate_volume_name(name):
            raise InvalidOptionException(
                f"invalid volume name {name!r}", volume=name, operation='create'
            )

        parsed = parse_create_options(options)
        remote_target = parsed['remote_target']
        if not remote_target:
            raise MissingRequiredOptionException(
                "'sshcmd' option required", volume=name, operation='create'
            )
        if not validate_remote_target(remote_target):
            raise InvalidOptionException(
                f"'sshcmd' must look like [user@]host:[path], got {remote_target!r}",
                volume=name, operation='create'
            )
        if parsed['port'] is not None and not validate_port(parsed['port']):
            raise InvalidOptionException(
                f"'port' must be a number between 1 and 65535, got {parsed['port']!r}",
                volume=name, operation='create'
            )

        record = VolumeRecord(
            name=name,
            mount_point=mount_point_for(self.volumes_dir, remote_target),
            created_at=utc_timestamp(),
            **parsed
        )

        with self.lock.acquire_write('create'):
            for other in self._volumes.values():
                if other.name != name and other.remote_target == remote_target:
                    raise DuplicateRemoteTargetException(
                        f"remote target {remote_target} is already used by volume {other.name}",
                        volume=name, operation='create'
                    )

            existing = self._volumes.get(name)
            if existing is not None and existing.reference_count:
                raise VolumeInUseException(
                    f"volume {name} is currently used by a container",
                    volume=name, operation='create'
                )
            if existing is not None and existing.mount_point != record.mount_point:
                LOG.info(f"Target of {name} changed, releasing {existing.mount_point}")
                self._release_mount_point(existing, 'create')

            self._volumes[name] = record
            self.store.save(self._volumes)

        LOG.info(f"Created volume {name} at {record.mount_point}")
        return record

    def remove(self, name: str):
        """
        Remove a volume and its mount point directory.

        Raises:
            VolumeNotFoundException, VolumeInUseException, UnmountException,
            VolumeIOException, PersistenceException
        """
        LOG.info(f"Removing volume {name}")

        with self.lock.acquire_write('remove'):
            record = self._lookup(name, 'remove')

            if record.reference_count != 0:
                raise VolumeInUseException(
                    f"volume {name} is currently used by a container",
                    volume=name, operation='remove'
                )

            self._release_mount_point(record, 'remove')

            del self._volumes[name]
            self.store.save(self._volumes)

        LOG.info(f"Removed volume {name}")

    def _release_mount_point(self, record: VolumeRecord, operation: str):
        """Detach any leftover mount, then delete the mount point directory."""
        self.orchestrator.cleanup(record)
        try:
            shutil.rmtree(record.mount_point)
        except FileNotFoundError:
            pass
        except OSError as e:
            raise VolumeIOException(
                f"Failed to remove {record.mount_point}: {e}",
                volume=record.name, operation=operation
            )

    def path(self, name: str) -> str:
        with self.lock.acquire_read('path'):
            return self._lookup(name, 'path').mount_point

    def get(self, name: str) -> Dict[str, Any]:
        with self.lock.acquire_read('get'):
            return self._lookup(name, 'get').to_view()

    def list(self) -> List[Dict[str, Any]]:
        with self.lock.acquire_read('list'):
            return [record.to_summary() for record in self._volumes.values()]

    def mount(self, name: str) -> str:
        """
        Add a consumer to a volume, mounting it if it is the first.

        Returns:
            The volume's mount point

        Raises:
            VolumeNotFoundException, VolumeIOException, MountException
        """
        LOG.info(f"Mounting volume {name}")

        with self.lock.acquire_write('mount'):
            record = self._lookup(name, 'mount')
            mount_point = self.orchestrator.mount(record)
            LOG.info(f"Volume {name} mounted at {mount_point} "
                     f"({record.reference_count} active)")
            return mount_point

    def unmount(self, name: str):
        """
        Release a consumer of a volume, unmounting after the last one.

        Raises:
            VolumeNotFoundException, UnmountException
        """
        LOG.info(f"Unmounting volume {name}")

        with self.lock.acquire_write('unmount'):
            record = self._lookup(name, 'unmount')
            self.orchestrator.unmount(record)
            LOG.info(f"Volume {name} released ({record.reference_count} active)")

    def reference_count(self, name: str) -> int:
        with self.lock.acquire_read('reference_count'):
            return self._lookup(name, 'reference_count').reference_count

    def capabilities(self) -> Dict[str, str]:
        return dict(CAPABILITIES)

    def __len__(self):
        with self.lock.acquire_read('len'):
            return len(self._volumes)

    def __contains__(self, name):
        with self.lock.acquire_read('contains'):
            return name in self._volumes
