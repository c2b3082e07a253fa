"""Data schemas for volume records and lifecycle responses"""

from dataclasses import asdict, dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Mapping, Optional

OPTION_REMOTE_TARGET = 'sshcmd'
OPTION_CREDENTIAL = 'password'
OPTION_PORT = 'port'

# Keys of the legacy flat snapshot layout
LEGACY_KEYS = ('Sshcmd', 'Password', 'Port', 'Options', 'Mountpoint')


def parse_create_options(options: Optional[Mapping[str, Any]]) -> Dict[str, Any]:
    """
    Split create options into known fields and pass-through mount options.

    Unknown keys become ``key=value``, or plain ``key`` when the value
    is empty, in the mapping's iteration order.

    Args:
        options: Options supplied with the create request

    Returns:
        Dictionary with remote_target, credential, port and extra_options
    """
    parsed = {
        'remote_target': '',
        'credential': None,
        'port': None,
        'extra_options': [],
    }

    for key, value in (options or {}).items():
        value = '' if value is None else str(value)
        if key == OPTION_REMOTE_TARGET:
            parsed['remote_target'] = value
        elif key == OPTION_CREDENTIAL:
            parsed['credential'] = value or None
        elif key == OPTION_PORT:
            parsed['port'] = value or None
        elif value:
            parsed['extra_options'].append(f"{key}={value}")
        else:
            parsed['extra_options'].append(key)

    return parsed


def utc_timestamp() -> str:
    return datetime.now(timezone.utc).isoformat()


@dataclass
class VolumeRecord:
    """One registered volume backed by an sshfs remote target"""
    name: str
    remote_target: str
    mount_point: str
    credential: Optional[str] = field(default=None, repr=False)
    port: Optional[str] = None
    extra_options: List[str] = field(default_factory=list)
    created_at: Optional[str] = None

    # Runtime state, never persisted
    reference_count: int = field(default=0, compare=False)
    needs_cleanup: bool = field(default=False, compare=False)

    def to_dict(self) -> Dict[str, Any]:
        """Snapshot form of the record (includes the credential)."""
        return {
            'remote_target': self.remote_target,
            'credential': self.credential,
            'port': self.port,
            'extra_options': list(self.extra_options),
            'mount_point': self.mount_point,
            'created_at': self.created_at,
        }

    @classmethod
    def from_dict(cls, name: str, data: Dict[str, Any]) -> 'VolumeRecord':
        if any(key in data for key in LEGACY_KEYS):
            return cls(
                name=name,
                remote_target=data['Sshcmd'],
                mount_point=data['Mountpoint'],
                credential=data.get('Password') or None,
                port=data.get('Port') or None,
                extra_options=list(data.get('Options') or []),
            )

        return cls(
            name=name,
            remote_target=data['remote_target'],
            mount_point=data['mount_point'],
            credential=data.get('credential'),
            port=data.get('port'),
            extra_options=list(data.get('extra_options') or []),
            created_at=data.get('created_at'),
        )

    def to_view(self) -> Dict[str, Any]:
        """Descriptor safe to log or return to callers (no credential)."""
        return {
            'name': self.name,
            'mountpoint': self.mount_point,
            'created_at': self.created_at,
            'status': {
                'remote_target': self.remote_target,
                'port': self.port,
                'options': list(self.extra_options),
                'authenticated': self.credential is not None,
                'reference_count': self.reference_count,
                'needs_cleanup': self.needs_cleanup,
            },
        }

    def to_summary(self) -> Dict[str, Any]:
        """Name/mount point pair used by list"""
        return {
            'name': self.name,
            'mountpoint': self.mount_point,
            'needs_cleanup': self.needs_cleanup,
        }


@dataclass
class VolumeResponse:
    """Lifecycle API response schema"""
    success: bool
    message: str
    mountpoint: Optional[str] = None
    volume: Optional[Dict[str, Any]] = None
    volumes: Optional[List[Dict[str, Any]]] = None
    capabilities: Optional[Dict[str, str]] = None
    error_code: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {key: value for key, value in asdict(self).items() if value is not None}
