"""Validation utilities for volume create options"""

import re

VOLUME_NAME_PATTERN = r'^[A-Za-z0-9][A-Za-z0-9_.-]*$'


def validate_volume_name(name: str) -> bool:
    """Validate volume name format"""
    return bool(name) and bool(re.match(VOLUME_NAME_PATTERN, name))


def validate_port(port: str) -> bool:
    """Validate a remote port override (decimal, 1-65535)"""
    if not port or not port.isdigit():
        return False
    return 1 <= int(port) <= 65535


def validate_remote_target(remote_target: str) -> bool:
    """Validate sshfs remote target format ([user@]host:[path])"""
    pattern = r'^[^:\s]+:.*$'
    return bool(re.match(pattern, remote_target))
