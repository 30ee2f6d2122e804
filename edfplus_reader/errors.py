from enum import Enum
from typing import Optional

BAD_FIELD_PLACEHOLDER = "BAD!"


class EdfStatus(Enum):
    SUCCESS = 0
    # Status not yet available, e.g. before a reader was opened
    VOID = 1
    FILE_OPEN_ERROR = 2
    FILE_CONTENTS_ERROR = 3
    TIME_ERROR = 4
    DATE_ERROR = 5
    INVALID_SIGNAL = 6
    INVALID_SAMPLE = 7
    NOT_READY = 8


class FormatError(ValueError):
    def __init__(self, field: str, reason: str):
        self.field = field
        self.reason = reason
        super().__init__(f"Malformed field {field!r}: {reason}")


class EdfError(Exception):
    status = EdfStatus.VOID

    def __repr__(self):
        return f"{type(self).__name__}(status={self.status}, message={str(self)!r})"


class FileOpenError(EdfError):
    status = EdfStatus.FILE_OPEN_ERROR

    def __init__(self, path: str, reason: str):
        self.path = path
        super().__init__(f"Could not open {path}: {reason}")


class FileContentsError(EdfError):
    status = EdfStatus.FILE_CONTENTS_ERROR

    def __init__(self, message: str, offset: Optional[int] = None):
        self.offset = offset
        super().__init__(
            message if offset is None else f"{message} (byte offset {offset})"
        )


class FieldError(EdfError):
    """
    A header sub-field failed validation. Recoverable: the reader stays usable and
    ``placeholder`` holds the value to show in place of the bad field.
    """

    def __init__(self, field: str, value: str):
        self.field = field
        self.value = value
        self.placeholder = BAD_FIELD_PLACEHOLDER
        super().__init__(f"Invalid {field} {value!r}")


class TimeError(FieldError):
    status = EdfStatus.TIME_ERROR

    def __init__(self, value: str):
        super().__init__("start time", value)


class DateError(FieldError):
    status = EdfStatus.DATE_ERROR

    def __init__(self, value: str):
        super().__init__("start date", value)


class InvalidSignalRequested(EdfError):
    status = EdfStatus.INVALID_SIGNAL

    def __init__(self, signal: object, number_of_signals: int):
        self.signal = signal
        self.number_of_signals = number_of_signals
        super().__init__(
            f"Signal {signal!r} requested, valid signals are 0..{number_of_signals - 1}"
        )


class InvalidSampleRequested(EdfError):
    status = EdfStatus.INVALID_SAMPLE

    def __init__(self, sample: object):
        self.sample = sample
        super().__init__(f"Sample index {sample!r} is not a non-negative integer")


class NotReady(EdfError):
    status = EdfStatus.NOT_READY

    def __init__(self, state: object):
        self.state = state
        super().__init__(f"Reader is not ready (state={state})")
