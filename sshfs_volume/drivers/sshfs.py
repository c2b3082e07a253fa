"""SSHFS mount driver implementation"""

import subprocess
from typing import List, Optional

from sshfs_volume.drivers.base import BaseMountDriver
from sshfs_volume.exceptions import MountException, UnmountException
from sshfs_volume.models import VolumeRecord
from sshfs_volume.utils.logger import get_logger

LOG = get_logger(__name__)

HOST_KEY_CHECK_FLAG = '-oStrictHostKeyChecking=no'
CREDENTIAL_FLAGS = ['-o', 'workaround=rename', '-o', 'password_stdin']


class SSHFSDriver(BaseMountDriver):
    """Driver for mounting remote directories with sshfs."""

    def __init__(self, sshfs_bin: str = 'sshfs', umount_bin: str = 'umount',
                 timeout: Optional[float] = None, mounts_file: str = '/proc/mounts'):
        """
        Args:
            sshfs_bin: sshfs executable
            umount_bin: umount executable
            timeout: Seconds before a mount/unmount call is treated as failed
                     (None or 0 waits forever)
            mounts_file: Kernel mount table
        """
        self.sshfs_bin = sshfs_bin
        self.umount_bin = umount_bin
        self.timeout = timeout or None
        self.mounts_file = mounts_file

    def build_mount_command(self, record: VolumeRecord) -> List[str]:
        """
        Build the sshfs argument vector for a volume.

        The credential is never part of the vector; it is piped to stdin.
        """
        cmd = [self.sshfs_bin, record.remote_target, HOST_KEY_CHECK_FLAG]

        if record.port:
            cmd.extend(['-p', record.port])

        if record.credential:
            cmd.extend(CREDENTIAL_FLAGS)

        for option in record.extra_options:
            cmd.extend(['-o', option])

        cmd.append(record.mount_point)
        return cmd

    def mount(self, record: VolumeRecord) -> str:
        """
        Mount the volume's remote target.

        Args:
            record: Volume to mount

        Returns:
            Combined sshfs output

        Raises:
            MountException: On non-zero exit, timeout or missing binary
        """
        cmd = self.build_mount_command(record)
        LOG.info(f"Mounting {record.remote_target} at {record.mount_point}")
        LOG.debug(f"Executing: {' '.join(cmd)}")

        kwargs = {
            'stdout': subprocess.PIPE,
            'stderr': subprocess.STDOUT,
            'text': True,
            'timeout': self.timeout,
        }
        if record.credential:
            kwargs['input'] = record.credential
        else:
            kwargs['stdin'] = subprocess.DEVNULL

        try:
            result = subprocess.run(cmd, **kwargs)
        except subprocess.TimeoutExpired as e:
            raise MountException(
                f"sshfs timed out after {self.timeout} seconds cmd: [{' '.join(cmd)}]",
                volume=record.name, operation='mount',
                output=_decode(e.output), command=cmd
            )
        except OSError as e:
            raise MountException(
                f"sshfs could not be executed: {e} cmd: [{' '.join(cmd)}]",
                volume=record.name, operation='mount', command=cmd
            )

        if result.returncode != 0:
            output = (result.stdout or '').strip()
            raise MountException(
                f"sshfs command execute failed: exit status {result.returncode} "
                f"({output}) cmd: [{' '.join(cmd)}]",
                volume=record.name, operation='mount',
                output=output, command=cmd
            )

        LOG.info(f"Successfully mounted {record.remote_target} at {record.mount_point}")
        return result.stdout or ''

    def unmount(self, mount_point: str) -> str:
        """
        Unmount a mount point.

        Raises:
            UnmountException: On non-zero exit, timeout or missing binary
        """
        cmd = [self.umount_bin, mount_point]
        LOG.info(f"Unmounting {mount_point}")

        try:
            result = subprocess.run(
                cmd,
                stdin=subprocess.DEVNULL,
                stdout=subprocess.PIPE,
                stderr=subprocess.STDOUT,
                text=True,
                timeout=self.timeout
            )
        except subprocess.TimeoutExpired as e:
            raise UnmountException(
                f"Unmount of {mount_point} timed out after {self.timeout} seconds",
                operation='unmount', output=_decode(e.output), command=cmd
            )
        except OSError as e:
            raise UnmountException(
                f"{self.umount_bin} could not be executed: {e}",
                operation='unmount', command=cmd
            )

        if result.returncode != 0:
            output = (result.stdout or '').strip()
            raise UnmountException(
                f"Unmount of {mount_point} failed: exit status {result.returncode} ({output})",
                operation='unmount', output=output, command=cmd
            )

        LOG.info(f"Successfully unmounted {mount_point}")
        return result.stdout or ''

    def _mount_entries(self):
        try:
            with open(self.mounts_file, 'r') as f:
                for line in f:
                    parts = line.split()
                    if len(parts) >= 4:
                        yield parts
        except OSError as e:
            LOG.warning(f"Cannot read {self.mounts_file}: {e}")

    def is_mounted(self, mount_point: str) -> bool:
        """Check whether mount_point appears in the kernel mount table."""
        return any(parts[1] == mount_point for parts in self._mount_entries())


def _decode(output) -> str:
    if output is None:
        return ''
    if isinstance(output, bytes):
        return output.decode('utf-8', errors='replace')
    return output
