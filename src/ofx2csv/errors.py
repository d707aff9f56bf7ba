from __future__ import annotations

from pathlib import Path
from typing import Union


class OfxError(Exception):
    """Base de todos los errores del conversor."""


class SourceUnavailable(OfxError):
    def __init__(self, path: Union[str, Path], reason: str):
        self.path = Path(path)
        self.reason = reason
        super().__init__(f"Error reading the OFX file {self.path}: {reason}")


class SinkUnavailable(OfxError):
    def __init__(self, path: Union[str, Path], reason: str):
        self.path = Path(path)
        self.reason = reason
        super().__init__(f"Error saving to CSV {self.path}: {reason}")


class DateParseFailure(OfxError):
    def __init__(self, value: str):
        self.value = value
        super().__init__(f"Error parsing date: {value!r}")


class LineError(OfxError):
    """Error atado a una línea concreta del OFX (numeración desde 1)."""

    def __init__(self, line_number: int, line: str, message: str):
        self.line_number = line_number
        self.line = line
        super().__init__(f"line {line_number}: {message}: {line!r}")


class AmountParseFailure(LineError):
    def __init__(self, line_number: int, line: str, value: str):
        self.value = value
        super().__init__(line_number, line, f"invalid amount {value!r}")


class MalformedStructure(LineError):
    pass
