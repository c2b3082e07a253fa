"""
Unit tests for the volume lifecycle service responses
"""

from unittest.mock import patch

from sshfs_volume.exceptions import PersistenceException
from sshfs_volume.services import MountOrchestrator, StateStore, VolumeRegistry, VolumeService

from tests.conftest import FakeDriver


class TestVolumeService:

    def test_create_and_get(self, service):
        response = service.create('vol', {'sshcmd': 'user@host:/srv', 'password': 'pw'})

        assert response.success is True
        assert response.mountpoint

        response = service.get('vol')
        assert response.success is True
        assert response.volume['name'] == 'vol'
        assert response.mountpoint == response.volume['mountpoint']
        assert 'pw' not in str(response.to_dict())

    def test_create_missing_sshcmd(self, service):
        response = service.create('vol', {'port': '22'})

        assert response.success is False
        assert response.error_code == 'missing_option'
        assert 'sshcmd' in response.message

    def test_mount_path_unmount_remove(self, service):
        created = service.create('vol', {'sshcmd': 'user@host:/srv'})

        mounted = service.mount('vol')
        assert mounted.success is True
        assert mounted.mountpoint == created.mountpoint
        assert service.path('vol').mountpoint == created.mountpoint

        busy = service.remove('vol')
        assert busy.success is False
        assert busy.error_code == 'in_use'

        assert service.unmount('vol').success is True
        assert service.remove('vol').success is True

        missing = service.get('vol')
        assert missing.success is False
        assert missing.error_code == 'not_found'
        assert 'vol' in missing.message

    def test_list(self, service):
        service.create('a', {'sshcmd': 'host:/a'})
        service.create('b', {'sshcmd': 'host:/b'})

        response = service.list()

        assert response.success is True
        assert sorted(v['name'] for v in response.volumes) == ['a', 'b']
        assert response.to_dict()['volumes']

    def test_list_empty(self, service):
        response = service.list()

        assert response.success is True
        assert response.volumes == []

    def test_capabilities(self, service):
        response = service.capabilities()

        assert response.success is True
        assert response.capabilities == {'scope': 'local'}

    def test_mount_failure_reports_tool_output(self, volumes_dir, state_path):
        registry = VolumeRegistry(volumes_dir, StateStore(state_path),
                                  MountOrchestrator(FakeDriver(fail_mount=True)))
        service = VolumeService(registry)
        service.create('vol', {'sshcmd': 'host:/srv'})

        response = service.mount('vol')

        assert response.success is False
        assert response.error_code == 'mount_failed'
        assert 'connection refused' in response.message
        assert registry.reference_count('vol') == 0

    def test_unmount_failure(self, volumes_dir, state_path):
        registry = VolumeRegistry(volumes_dir, StateStore(state_path),
                                  MountOrchestrator(FakeDriver(fail_unmount=True)))
        service = VolumeService(registry)
        service.create('vol', {'sshcmd': 'host:/srv'})
        service.mount('vol')

        response = service.unmount('vol')

        assert response.success is False
        assert response.error_code == 'unmount_failed'
        assert service.get('vol').volume['status']['needs_cleanup'] is True

    def test_persistence_failure(self, service):
        with patch.object(service.registry.store, 'save',
                          side_effect=PersistenceException('Failed to save state: disk full')):
            response = service.create('vol', {'sshcmd': 'host:/srv'})

        assert response.success is False
        assert response.error_code == 'persistence_failed'
        assert service.path('vol').success is True

    def test_unexpected_error_is_contained(self, service):
        with patch.object(service.registry, 'list', side_effect=RuntimeError('boom')):
            response = service.list()

        assert response.success is False
        assert response.error_code == 'internal_error'
        assert response.message == 'boom'
