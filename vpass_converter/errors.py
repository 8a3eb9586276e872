"""Error taxonomy for the Vpass statement converter.

Every error is fatal to a run. Stages wrap the underlying exception with
``raise ... from exc`` and ``str()`` walks the cause chain, so a single log
line is enough to fix the source file and re-run.
"""

from __future__ import annotations


class ConvertError(RuntimeError):
    """Base class for all conversion failures."""

    def __str__(self) -> str:
        parts = [super().__str__()]
        cause = self.__cause__
        while cause is not None:
            # ConvertError の __str__ は自身の cause も辿るのでそこで打ち切る
            parts.append(str(cause) if str(cause) else type(cause).__name__)
            if isinstance(cause, ConvertError):
                break
            cause = cause.__cause__
        return ": ".join(parts)


class ConfigError(ConvertError):
    """A required CLI flag is missing."""


class SourceIOError(ConvertError):
    """Opening, reading, creating or writing a file failed."""


class DecodeError(ConvertError):
    """The source bytes are not valid Shift-JIS."""


class MalformedCSVError(ConvertError):
    """Unbalanced quoting or an inconsistent field count."""


class FieldParseError(ConvertError):
    """A field could not be parsed; carries the 1-based row and raw text."""

    def __init__(self, row: int, field: str, raw: str):
        super().__init__(f'failed to convert {field} text "{raw}": line {row}')
        self.row = row
        self.field = field
        self.raw = raw
