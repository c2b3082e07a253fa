"""Mount drivers package"""

from sshfs_volume.drivers.base import BaseMountDriver
from sshfs_volume.drivers.sshfs import SSHFSDriver

__all__ = ['BaseMountDriver', 'SSHFSDriver']
