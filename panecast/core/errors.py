"""Domain-specific errors for panecast."""


class PanecastError(Exception):
    """Base error for panecast."""


class ConfigValidationError(PanecastError):
    """Raised when a config file or in-memory config does not conform to schema or semantics."""


class ConfigLoadError(PanecastError):
    """Raised when reading a config source fails."""


class HostError(PanecastError):
    """Base host error."""


class HostUnavailableError(HostError):
    """Raised when the multiplexer binary or session cannot be reached."""


class HostCommandError(HostError):
    """Raised when a multiplexer command exits unsuccessfully."""
