"""Exception hierarchy for Noted."""


class NotedError(Exception):
    """Base class for Noted errors."""


class HomeDirectoryError(NotedError):
    """Raised when the user's home directory cannot be determined."""


class InputValidationError(NotedError):
    """Raised when typed input (path, vault name) is empty or invalid."""


class VaultFilesystemError(NotedError):
    """Raised when a vault directory or its sidecar file cannot be written."""


class VaultCancelledError(NotedError):
    """Raised when the user cancels vault selection."""


class RegistryError(NotedError):
    """Raised when the vault registry is unreadable or a lookup fails."""
