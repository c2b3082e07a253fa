"""Shared fixtures for volume manager tests"""

import logging
import os
import threading
import time

import pytest

from sshfs_volume.drivers import BaseMountDriver
from sshfs_volume.exceptions import MountException, UnmountException
from sshfs_volume.services import (
    MountOrchestrator, StateStore, VolumeRegistry, VolumeService
)


class FakeDriver(BaseMountDriver):
    """Records mount tool calls instead of running sshfs."""

    def __init__(self, fail_mount=False, fail_unmount=False, delay=0):
        self.fail_mount = fail_mount
        self.fail_unmount = fail_unmount
        self.delay = delay
        self.mount_calls = []
        self.unmount_calls = []
        self.mounted = set()
        self._lock = threading.Lock()

    def mount(self, record):
        if self.delay:
            time.sleep(self.delay)
        with self._lock:
            self.mount_calls.append(record.name)
            if self.fail_mount:
                raise MountException(
                    'sshfs command execute failed: exit status 1 (connection refused)',
                    operation='mount', output='connection refused',
                    command=['sshfs', record.remote_target, record.mount_point]
                )
            self.mounted.add(record.mount_point)
        return ''

    def unmount(self, mount_point):
        with self._lock:
            self.unmount_calls.append(mount_point)
            if self.fail_unmount:
                raise UnmountException(
                    f'Unmount of {mount_point} failed: exit status 32 (target is busy)',
                    operation='unmount', output='target is busy'
                )
            self.mounted.discard(mount_point)
        return ''

    def is_mounted(self, mount_point):
        return mount_point in self.mounted


@pytest.fixture
def volumes_dir(tmp_path):
    return str(tmp_path / 'volumes')


@pytest.fixture
def state_path(tmp_path):
    return str(tmp_path / 'state' / 'sshfs-state.json')


@pytest.fixture
def driver():
    return FakeDriver()


@pytest.fixture
def registry(volumes_dir, state_path, driver):
    return VolumeRegistry(
        volumes_dir=volumes_dir,
        store=StateStore(state_path),
        orchestrator=MountOrchestrator(driver)
    )


@pytest.fixture
def service(registry):
    return VolumeService(registry)


@pytest.fixture
def clean_env(monkeypatch):
    """Drop any SSHFS_VOLUME_* variables from the environment."""
    for key in list(os.environ):
        if key.startswith('SSHFS_VOLUME_'):
            monkeypatch.delenv(key)


@pytest.fixture
def reset_package_logger():
    """Undo setup_logging so later tests are not bound to a closed stream."""
    yield
    logger = logging.getLogger('sshfs_volume')
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    logger.setLevel(logging.NOTSET)
    logger.propagate = True
