import codecs
from dataclasses import dataclass, replace

from topflow.exceptions import ValidationError
from topflow.utils import logger


@dataclass(frozen=True)
class ParserOptions:
    """
    Options shared by every ITP/TOP reader in the package.

    Attributes:
        strict_counts (bool): If True, a molecule count that does not parse as an integer raises
            MalformedCountError. If False, the count is logged and treated as 0. Defaults to True.
        pace_delay (float): Pause in seconds inserted between sections by the paced async
            serializer. Defaults to 0.005.
        encoding (str): Text encoding used when a line source is a file path. Defaults to "utf-8".
    """

    strict_counts: bool = True
    pace_delay: float = 0.005
    encoding: str = "utf-8"

    def __post_init__(self) -> None:
        """
        Validates the options after initialization.

        Raises:
            ValidationError: If `pace_delay` is negative or not a number.
            ValidationError: If `encoding` is not a known codec.
        """
        if isinstance(self.pace_delay, bool) or not isinstance(self.pace_delay, int | float):
            raise ValidationError(f"pace_delay must be a number of seconds, got {self.pace_delay!r}.")
        if self.pace_delay < 0:
            raise ValidationError(f"pace_delay must be non-negative, got {self.pace_delay}.")
        try:
            codecs.lookup(self.encoding)
        except LookupError as e:
            raise ValidationError(f"Unknown encoding: '{self.encoding}'.") from e

        if self.pace_delay > 1:
            logger.warning(f"pace_delay of {self.pace_delay} s per section will make paced output very slow.")

    # --- Fluent API --- #

    def set_strict_counts(self, strict_counts: bool) -> "ParserOptions":
        """Returns a copy with strict count parsing switched on or off."""
        logger.debug(f"Setting strict_counts to: {strict_counts}")
        return replace(self, strict_counts=strict_counts)

    def set_pace_delay(self, pace_delay: float) -> "ParserOptions":
        """Returns a copy with a new delay (in seconds) between paced output sections."""
        return replace(self, pace_delay=pace_delay)

    def set_encoding(self, encoding: str) -> "ParserOptions":
        """Returns a copy reading file paths with a different text encoding."""
        return replace(self, encoding=encoding)


DEFAULT_OPTIONS = ParserOptions()
