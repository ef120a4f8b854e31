"""Exception hierarchy shared by the core pipeline and the CLI."""


class FullsendError(Exception):
    """Base exception for fullsend errors."""
    pass


class InvalidRootError(FullsendError):
    """Raised when the provided root directory is invalid."""
    pass


class ConfigFileError(FullsendError):
    """Raised when a config file cannot be read or does not validate."""
    pass


class OutputError(FullsendError):
    """Raised when the bundle cannot be delivered (file or clipboard)."""
    pass
