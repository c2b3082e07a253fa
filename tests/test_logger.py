"""
Unit tests for logging setup
"""

import io
import json

import pytest

from sshfs_volume.utils.logger import get_logger, setup_logging


@pytest.mark.usefixtures('reset_package_logger')
class TestSetupLogging:

    def test_json_format(self):
        stream = io.StringIO()
        setup_logging('INFO', 'json', stream=stream)

        get_logger('sshfs_volume.services.volume_registry').info('Created volume data')

        entry = json.loads(stream.getvalue().strip())
        assert entry['message'] == 'Created volume data'
        assert entry['levelname'] == 'INFO'
        assert entry['name'] == 'sshfs_volume.services.volume_registry'

    def test_text_format_and_level(self):
        stream = io.StringIO()
        setup_logging('warning', 'text', stream=stream)

        logger = get_logger('sshfs_volume.drivers.sshfs')
        logger.info('hidden')
        logger.warning('shown')

        output = stream.getvalue()
        assert 'hidden' not in output
        assert ' - WARNING - shown' in output

    def test_repeated_setup_replaces_handler(self):
        first, second = io.StringIO(), io.StringIO()
        setup_logging('INFO', 'text', stream=first)
        logger = setup_logging('INFO', 'text', stream=second)

        get_logger('sshfs_volume.config').info('once')

        assert len(logger.handlers) == 1
        assert first.getvalue() == ''
        assert 'once' in second.getvalue()
