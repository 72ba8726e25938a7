class TopflowError(Exception):
    """Base class for exceptions in the topflow package."""

    pass


class ValidationError(TopflowError):
    """Exception raised for errors during option validation."""

    pass


class ConfigurationError(TopflowError):
    """Exception raised for configuration-related errors."""

    pass


class ParsingError(TopflowError):
    """Exception raised for errors during file parsing."""

    pass


class MalformedCountError(ParsingError):
    """Exception raised when a molecule count cannot be parsed as an integer."""

    pass


class DisposedError(TopflowError):
    """Exception raised when a topology is accessed after dispose()."""

    pass
