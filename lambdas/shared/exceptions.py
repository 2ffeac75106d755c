"""Custom exceptions for the LW roster."""


class RosterError(Exception):
    """Base exception for all roster errors."""

    def __init__(self, message: str = "An error occurred") -> None:
        """Initialize exception with message.

        Args:
            message: Error message
        """
        self.message = message
        super().__init__(self.message)


class DecodeError(RosterError):
    """JSON input is malformed or does not match the character schema."""

    def __init__(self, reason: str) -> None:
        """Initialize decode error.

        Args:
            reason: Human-readable description of what was wrong with the input
        """
        self.reason = reason
        super().__init__(f"Malformed character data: {reason}")


class RosterLoadError(DecodeError):
    """The seed roster could not be decoded, so no roster exists."""


class IndexOutOfRangeError(RosterError, IndexError):
    """A record getter was called with an index outside the roster."""

    def __init__(self, index: int, count: int) -> None:
        """Initialize index error.

        Args:
            index: The requested position
            count: Number of records in the roster at the time of the call
        """
        self.index = index
        self.count = count
        super().__init__(f"Index {index} out of range for roster of {count}")


class BoundaryError(RosterError):
    """Host misused the boundary query surface."""


class StaleBufferError(BoundaryError):
    """Buffer handle is unknown or was invalidated by a mutation."""

    def __init__(self, handle: int) -> None:
        """Initialize stale buffer error.

        Args:
            handle: The handle the host tried to read
        """
        self.handle = handle
        super().__init__(f"Buffer handle {handle} is not valid")


class ConfigurationError(RosterError):
    """Configuration or environment error."""

    def __init__(self, message: str, config_key: str | None = None) -> None:
        """Initialize configuration error.

        Args:
            message: Error message
            config_key: Optional configuration key that caused the error
        """
        self.config_key = config_key
        super().__init__(message)
