import datetime
import numbers
import os
from enum import Enum
from pathlib import Path
from typing import BinaryIO, Dict, List, Optional, Tuple

from edfplus_reader.errors import (
    DateError,
    EdfStatus,
    FileContentsError,
    FileOpenError,
    FormatError,
    InvalidSignalRequested,
    NotReady,
    TimeError,
)
from edfplus_reader.fields import (
    decimal_ascii_to_float,
    decimal_ascii_to_int,
    is_valid_date,
    is_valid_time,
    parse_start_datetime,
    trim_field,
)
from edfplus_reader.model import (
    GENERAL_HEADER_LAYOUT,
    GENERAL_HEADER_SIZE,
    SIGNAL_HEADER_LAYOUT,
    SIGNAL_HEADER_SIZE,
    SAMPLE_SIZE,
    UNKNOWN_NUMBER_OF_DATA_RECORDS,
    EdfReaderConfig,
    GeneralHeader,
    HeaderSummary,
    SignalHeader,
)
from edfplus_reader.utils import LOGGER


class EdfReaderState(Enum):
    NONE = 0
    GENERAL_HEADER = 1
    SIGNAL_HEADER = 2
    READY = 3
    ERROR = 4
    CLOSED = 5


class EdfHeaderReader:
    """
    Reads the header record of an EDF+ file and keeps the file open for sample access.

    The per-signal part of the header is stored column-major on disk: all labels, then
    all transducer types and so on, each column holding ``ns`` fixed-width values. The
    reader keeps it that way (``self._columns``) and assembles ``SignalHeader`` objects
    on request.
    """

    def __init__(self, path: Path | str, config: Optional[EdfReaderConfig] = None):
        self._path = Path(path)
        self._config = config or EdfReaderConfig()
        self._reset(EdfReaderState.NONE)

    def _reset(self, state: EdfReaderState):
        self._state = state
        self._stream: Optional[BinaryIO] = None
        self._general_header: Optional[GeneralHeader] = None
        self._columns: Dict[str, List[str]] = {}
        self._number_of_signals = 0
        self._number_of_data_records = UNKNOWN_NUMBER_OF_DATA_RECORDS
        self._samples_per_record: List[int] = []
        self._warnings: List[str] = []

    def __enter__(self) -> "EdfHeaderReader":
        if self._state == EdfReaderState.NONE:
            self.open()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()

    def __repr__(self):
        return f"EdfHeaderReader(path={self._path}, state={self._state})"

    @property
    def path(self) -> Path:
        return self._path

    @property
    def state(self) -> EdfReaderState:
        return self._state

    @property
    def is_ready(self) -> bool:
        return self._state == EdfReaderState.READY

    @property
    def warnings(self) -> List[str]:
        return list(self._warnings)

    def open(self) -> "EdfHeaderReader":
        match self._state:
            case EdfReaderState.READY:
                return self
            case EdfReaderState.NONE:
                pass
            case _:
                raise NotReady(self._state)
        try:
            self._stream = open(self._path, "rb")
        except OSError as e:
            self._reset(EdfReaderState.ERROR)
            LOGGER.error(f"Could not open file: {e}", self._path.name)
            raise FileOpenError(str(self._path), e.strerror or str(e)) from e
        try:
            self._state = EdfReaderState.GENERAL_HEADER
            self._read_general_header()
            self._state = EdfReaderState.SIGNAL_HEADER
            self._read_signal_headers()
        except OSError as e:
            self._fail(e)
            raise FileContentsError(f"I/O error while reading header: {e}") from e
        except Exception as e:
            self._fail(e)
            raise
        self._state = EdfReaderState.READY
        LOGGER.debug(
            f"Header read: {self._number_of_signals} signals, "
            f"{self._number_of_data_records} data records of {self.record_size_in_bytes()} bytes",
            self._path.name,
        )
        if self._config.check_consistency:
            for warning in self._check_consistency():
                self._warnings.append(warning)
                LOGGER.debug(f"Consistency warning: {warning}", self._path.name)
        return self

    def _fail(self, error: Exception):
        # Nothing decoded so far survives a failed open
        self._stream.close()
        self._reset(EdfReaderState.ERROR)
        LOGGER.error(f"Could not read header: {error}", self._path.name)

    def close(self) -> None:
        if self._stream is not None:
            self._stream.close()
            self._stream = None
        if self._state != EdfReaderState.ERROR:
            self._state = EdfReaderState.CLOSED

    def _read_exact(self, size: int, what: str) -> bytes:
        offset = self._stream.tell()
        data = self._stream.read(size)
        if len(data) < size:
            raise FileContentsError(
                f"Unexpected end of file in {what}: expected {size} bytes, got {len(data)}",
                offset,
            )
        return data

    def _read_general_header(self):
        data = self._read_exact(GENERAL_HEADER_SIZE, "general header")
        fields = {}
        position = 0
        for name, width in GENERAL_HEADER_LAYOUT:
            fields[name] = trim_field(data[position : position + width])
            position += width
        self._general_header = GeneralHeader(**fields)

        number_of_signals = self._parse_int(
            self._general_header.number_of_signals, "number of signals"
        )
        if number_of_signals <= 0:
            raise FileContentsError(
                f"Number of signals must be positive, got {number_of_signals}"
            )
        if number_of_signals > self._config.max_signals:
            raise FileContentsError(
                f"Number of signals {number_of_signals} exceeds the maximum of {self._config.max_signals}"
            )
        self._number_of_signals = number_of_signals

        number_of_data_records = self._parse_int(
            self._general_header.number_of_data_records, "number of data records"
        )
        if number_of_data_records < UNKNOWN_NUMBER_OF_DATA_RECORDS:
            raise FileContentsError(
                f"Invalid number of data records {number_of_data_records}"
            )
        self._number_of_data_records = number_of_data_records

    def _read_signal_headers(self):
        ns = self._number_of_signals
        columns = {}
        for name, width in SIGNAL_HEADER_LAYOUT:
            data = self._read_exact(ns * width, f"signal header field '{name}'")
            columns[name] = [
                trim_field(data[i * width : (i + 1) * width]) for i in range(ns)
            ]
        samples_per_record = []
        for i, value in enumerate(columns["samples_per_record"]):
            samples = self._parse_int(value, f"number of samples of signal {i}")
            if samples <= 0:
                raise FileContentsError(
                    f"Number of samples of signal {i} must be positive, got {samples}"
                )
            samples_per_record.append(samples)
        self._columns = columns
        self._samples_per_record = samples_per_record

    @staticmethod
    def _parse_int(value: str, what: str) -> int:
        try:
            return decimal_ascii_to_int(value)
        except FormatError as e:
            raise FileContentsError(f"Invalid {what}: {e.reason} ({value!r})") from e

    def _check_consistency(self) -> List[str]:
        warnings = []
        header_size = self.header_size_in_bytes()
        try:
            declared = decimal_ascii_to_int(self._general_header.header_bytes)
            if declared != header_size:
                warnings.append(
                    f"Declared header size {declared} does not match {header_size} bytes for {self._number_of_signals} signals"
                )
        except FormatError as e:
            warnings.append(f"Declared header size is not numeric: {e.reason}")
        try:
            decimal_ascii_to_float(self._general_header.duration)
        except FormatError as e:
            warnings.append(f"Data record duration is not numeric: {e.reason}")

        data_size = os.fstat(self._stream.fileno()).st_size - header_size
        record_size = self.record_size_in_bytes()
        if self._number_of_data_records == UNKNOWN_NUMBER_OF_DATA_RECORDS:
            if data_size % record_size != 0:
                warnings.append(
                    f"Data region of {data_size} bytes is not a whole number of {record_size} byte records"
                )
        else:
            expected = self._number_of_data_records * record_size
            if data_size < expected:
                warnings.append(
                    f"File is truncated: {self._number_of_data_records} data records need {expected} bytes, "
                    f"only {data_size} available"
                )
            elif data_size > expected:
                warnings.append(
                    f"File has {data_size - expected} bytes after the last declared data record"
                )
        return warnings

    def _ensure_ready(self):
        if self._state != EdfReaderState.READY:
            raise NotReady(self._state)

    def _check_signal(self, signal: int) -> int:
        self._ensure_ready()
        if (
            isinstance(signal, bool)
            or not isinstance(signal, numbers.Integral)
            or not 0 <= signal < self._number_of_signals
        ):
            raise InvalidSignalRequested(signal, self._number_of_signals)
        return int(signal)

    def _column(self, name: str, signal: int) -> str:
        index = self._check_signal(signal)
        return self._columns[name][index]

    @property
    def general_header(self) -> GeneralHeader:
        self._ensure_ready()
        return self._general_header

    def version(self) -> str:
        return self.general_header.version

    def local_patient_id(self) -> str:
        return self.general_header.local_patient_id

    def local_recording_id(self) -> str:
        return self.general_header.local_recording_id

    def start_time(self) -> str:
        value = self.general_header.start_time
        if not is_valid_time(value):
            raise TimeError(value)
        return value

    def start_date(self) -> str:
        value = self.general_header.start_date
        if not is_valid_date(value):
            raise DateError(value)
        return value

    def start_time_or_placeholder(self) -> Tuple[str, EdfStatus]:
        try:
            return self.start_time(), EdfStatus.SUCCESS
        except TimeError as e:
            return e.placeholder, e.status

    def start_date_or_placeholder(self) -> Tuple[str, EdfStatus]:
        try:
            return self.start_date(), EdfStatus.SUCCESS
        except DateError as e:
            return e.placeholder, e.status

    def start_datetime(self) -> datetime.datetime:
        date = self.start_date()
        time = self.start_time()
        try:
            return parse_start_datetime(date, time)
        except ValueError as e:
            raise DateError(date) from e

    def header_byte_length(self) -> int:
        value = self.general_header.header_bytes
        try:
            return decimal_ascii_to_int(value)
        except FormatError as e:
            raise FileContentsError(f"Invalid header size: {e.reason} ({value!r})") from e

    def number_of_signals(self) -> int:
        self._ensure_ready()
        return self._number_of_signals

    def number_of_data_records(self) -> int:
        self._ensure_ready()
        return self._number_of_data_records

    def has_known_number_of_data_records(self) -> bool:
        return self.number_of_data_records() != UNKNOWN_NUMBER_OF_DATA_RECORDS

    def duration_seconds(self) -> float:
        value = self.general_header.duration
        try:
            return decimal_ascii_to_float(value)
        except FormatError as e:
            raise FileContentsError(
                f"Invalid data record duration: {e.reason} ({value!r})"
            ) from e

    def signal_label(self, signal: int) -> str:
        return self._column("label", signal)

    def transducer_type(self, signal: int) -> str:
        return self._column("transducer_type", signal)

    def physical_dimension(self, signal: int) -> str:
        return self._column("physical_dimension", signal)

    def physical_minimum(self, signal: int) -> str:
        return self._column("physical_minimum", signal)

    def physical_maximum(self, signal: int) -> str:
        return self._column("physical_maximum", signal)

    def digital_minimum(self, signal: int) -> str:
        return self._column("digital_minimum", signal)

    def digital_maximum(self, signal: int) -> str:
        return self._column("digital_maximum", signal)

    def prefiltering(self, signal: int) -> str:
        return self._column("prefiltering", signal)

    def number_of_samples(self, signal: int) -> int:
        return self._samples_per_record[self._check_signal(signal)]

    def total_samples(self, signal: int) -> Optional[int]:
        samples = self.number_of_samples(signal)
        if not self.has_known_number_of_data_records():
            return None
        return samples * self._number_of_data_records

    def sampling_frequency(self, signal: int) -> float:
        samples = self.number_of_samples(signal)
        duration = self.duration_seconds()
        if duration <= 0:
            raise FileContentsError(f"Data record duration must be positive, got {duration}")
        return samples / duration

    def signal_header(self, signal: int) -> SignalHeader:
        index = self._check_signal(signal)
        return SignalHeader(
            index=index,
            label=self._columns["label"][index],
            transducer_type=self._columns["transducer_type"][index],
            physical_dimension=self._columns["physical_dimension"][index],
            physical_minimum=self._columns["physical_minimum"][index],
            physical_maximum=self._columns["physical_maximum"][index],
            digital_minimum=self._columns["digital_minimum"][index],
            digital_maximum=self._columns["digital_maximum"][index],
            prefiltering=self._columns["prefiltering"][index],
            samples_per_record=self._samples_per_record[index],
            reserved=self._columns["reserved"][index],
        )

    def signal_headers(self) -> List[SignalHeader]:
        return [self.signal_header(i) for i in range(self.number_of_signals())]

    def header_size_in_bytes(self) -> int:
        self._ensure_ready()
        return GENERAL_HEADER_SIZE + self._number_of_signals * SIGNAL_HEADER_SIZE

    def data_offset(self) -> int:
        return self.header_size_in_bytes()

    def record_size_in_bytes(self) -> int:
        self._ensure_ready()
        return SAMPLE_SIZE * sum(self._samples_per_record)

    def summary(self) -> HeaderSummary:
        try:
            start = self.start_datetime().isoformat()
        except (DateError, TimeError):
            start = None
        return HeaderSummary(
            path=str(self._path),
            general_header=self.general_header,
            signals=self.signal_headers(),
            data_offset=self.data_offset(),
            record_size_in_bytes=self.record_size_in_bytes(),
            warnings=self.warnings,
            start=start,
        )

    def read_exact_at(self, offset: int, size: int) -> bytes:
        """
        Seek to ``offset`` and read exactly ``size`` bytes. A short read raises
        ``FileContentsError`` but leaves the reader usable.
        """
        self._ensure_ready()
        try:
            self._stream.seek(offset)
            data = self._stream.read(size)
        except (OverflowError, ValueError) as e:
            # offset does not fit into the platform file offset type
            raise FileContentsError(f"Seek past end of file: {e}", offset) from e
        except OSError as e:
            raise FileContentsError(f"I/O error: {e}", offset) from e
        if len(data) < size:
            raise FileContentsError(
                f"Read past end of file: expected {size} bytes, got {len(data)}",
                offset,
            )
        return data


def open_edf(path: Path | str, config: Optional[EdfReaderConfig] = None) -> EdfHeaderReader:
    return EdfHeaderReader(path, config).open()
