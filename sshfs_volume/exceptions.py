"""
Custom exceptions for the SSHFS volume manager
"""

from typing import List, Optional


class PluginException(Exception):
    """Base exception for the volume manager"""

    code = 'error'

    def __init__(self, message: str, volume: Optional[str] = None,
                 operation: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.volume = volume
        self.operation = operation

    def __str__(self):
        return self.message


class VolumeNotFoundException(PluginException):
    """Exception raised when a volume name is not registered"""
    code = 'not_found'


class VolumeInUseException(PluginException):
    """Exception raised when a volume is still referenced by a consumer"""
    code = 'in_use'


class MissingRequiredOptionException(PluginException):
    """Exception raised when create is called without a remote target"""
    code = 'missing_option'


class InvalidOptionException(PluginException):
    """Exception raised when a create option fails validation"""
    code = 'invalid_option'


class DuplicateRemoteTargetException(PluginException):
    """Exception raised when another volume already owns the remote target"""
    code = 'duplicate_target'


class VolumeIOException(PluginException):
    """Exception raised for filesystem or directory operation failures"""
    code = 'io_error'


class _ToolException(PluginException):

    def __init__(self, message: str, volume: Optional[str] = None,
                 operation: Optional[str] = None, output: str = '',
                 command: Optional[List[str]] = None):
        super().__init__(message, volume=volume, operation=operation)
        self.output = output
        self.command = command or []


class MountException(_ToolException):
    """Exception raised when the mount tool fails"""
    code = 'mount_failed'


class UnmountException(_ToolException):
    """Exception raised when the unmount tool fails"""
    code = 'unmount_failed'


class CorruptStateException(PluginException):
    """Exception raised when the persisted snapshot cannot be read"""
    code = 'corrupt_state'


class PersistenceException(PluginException):
    """Exception raised when writing the snapshot fails after a mutation"""
    code = 'persistence_failed'


class LockTimeoutException(PluginException):
    """Exception raised when the registry lock cannot be acquired in time"""
    code = 'lock_timeout'


class ConfigurationException(PluginException):
    """Exception raised for configuration errors"""
    code = 'configuration_error'
