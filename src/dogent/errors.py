"""Exception hierarchy for the dogent agent."""


class DogentError(Exception):
    """Base class for all dogent errors."""


class ConfigError(DogentError):
    """The agent configuration is unusable. Not retried."""


class TransportError(DogentError):
    """Writing to the transport failed."""


class NotConnectedError(TransportError):
    """No transport is currently open."""

    def __init__(self, message: str = "connection not established"):
        super().__init__(message)


class FrameDecodeError(DogentError):
    """An inbound frame could not be decoded."""


class CommandExecutionError(DogentError):
    """A command could not be run or exited unsuccessfully.

    Args:
        message: Description of the failure.
        output: Whatever the command printed before failing, if anything.
    """

    def __init__(self, message: str, output: str = ""):
        super().__init__(message)
        self.output = output
