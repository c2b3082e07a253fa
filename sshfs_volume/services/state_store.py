"""Durable JSON snapshot of the volume registry"""

import json
import os
from typing import Dict

from sshfs_volume.exceptions import CorruptStateException, PersistenceException
from sshfs_volume.models import VolumeRecord
from sshfs_volume.utils.logger import get_logger

LOG = get_logger(__name__)

STATE_VERSION = 1


class StateStore:
    """Reads and atomically rewrites the registry snapshot file."""

    def __init__(self, path: str):
        self.path = path
        self.tmp_path = path + '.tmp'

    def load(self) -> Dict[str, VolumeRecord]:
        """
        Load volumes from the snapshot.

        Returns:
            Mapping of volume name to record; empty if no snapshot exists yet

        Raises:
            CorruptStateException: If the file is unreadable or malformed
        """
        try:
            with open(self.path, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except FileNotFoundError:
            LOG.warning(f"No state found at {self.path}")
            return {}
        except (OSError, ValueError) as e:
            raise CorruptStateException(f"Failed to read state {self.path}: {e}")

        if not isinstance(data, dict):
            raise CorruptStateException(f"State {self.path} is not a JSON object")

        if _is_versioned(data):
            entries = data['volumes']
        else:
            # Legacy flat {name: volume} layout
            entries = data

        volumes = {}
        for name, entry in entries.items():
            if not isinstance(entry, dict):
                raise CorruptStateException(f"Volume {name} in {self.path} is not an object")
            try:
                volumes[name] = VolumeRecord.from_dict(name, entry)
            except KeyError as e:
                raise CorruptStateException(f"Volume {name} in {self.path} is missing {e}")

        LOG.info(f"Loaded {len(volumes)} volumes from {self.path}")
        return volumes

    def save(self, volumes: Dict[str, VolumeRecord]):
        """
        Write the snapshot to a temporary file and rename it into place.

        A crash mid-write leaves the previous snapshot intact.

        Raises:
            PersistenceException: If serializing or writing fails
        """
        data = {
            'version': STATE_VERSION,
            'volumes': {name: record.to_dict() for name, record in volumes.items()},
        }

        try:
            payload = json.dumps(data, indent=2, sort_keys=True)
            os.makedirs(os.path.dirname(self.path), mode=0o755, exist_ok=True)

            fd = os.open(self.tmp_path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
            with os.fdopen(fd, 'w', encoding='utf-8') as f:
                f.write(payload)
                f.flush()
                os.fsync(f.fileno())

            os.replace(self.tmp_path, self.path)
        except (OSError, TypeError, ValueError) as e:
            self._discard_tmp()
            raise PersistenceException(f"Failed to save state {self.path}: {e}")

        LOG.debug(f"Saved {len(volumes)} volumes to {self.path}")

    def _discard_tmp(self):
        try:
            os.unlink(self.tmp_path)
        except FileNotFoundError:
            pass
        except OSError as e:
            LOG.warning(f"Could not remove {self.tmp_path}: {e}")


def _is_versioned(data: dict) -> bool:
    # A legacy snapshot may hold a volume named 'version'
    version = data.get('version')
    return (isinstance(version, int) and not isinstance(version, bool)
            and isinstance(data.get('volumes'), dict))
