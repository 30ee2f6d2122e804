from dataclasses import dataclass
from typing import Optional, List, Tuple

from dataclasses_json import dataclass_json

# (name, width in bytes) in on-disk order
GENERAL_HEADER_LAYOUT: List[Tuple[str, int]] = [
    ("version", 8),
    ("local_patient_id", 80),
    ("local_recording_id", 80),
    ("start_date", 8),
    ("start_time", 8),
    ("header_bytes", 8),
    ("reserved", 44),
    ("number_of_data_records", 8),
    ("duration", 8),
    ("number_of_signals", 4),
]
GENERAL_HEADER_SIZE = sum(width for _, width in GENERAL_HEADER_LAYOUT)

# Each entry is one column of ns fixed-width values, stored one after another
SIGNAL_HEADER_LAYOUT: List[Tuple[str, int]] = [
    ("label", 16),
    ("transducer_type", 80),
    ("physical_dimension", 8),
    ("physical_minimum", 8),
    ("physical_maximum", 8),
    ("digital_minimum", 8),
    ("digital_maximum", 8),
    ("prefiltering", 80),
    ("samples_per_record", 8),
    ("reserved", 32),
]
SIGNAL_HEADER_SIZE = sum(width for _, width in SIGNAL_HEADER_LAYOUT)

SAMPLE_ENCODING = "<h"
SAMPLE_SIZE = 2
UNKNOWN_NUMBER_OF_DATA_RECORDS = -1


@dataclass_json
@dataclass(frozen=True)
class GeneralHeader:
    version: str
    local_patient_id: str
    local_recording_id: str
    start_date: str
    start_time: str
    header_bytes: str
    reserved: str
    number_of_data_records: str
    duration: str
    number_of_signals: str


@dataclass_json
@dataclass(frozen=True)
class SignalHeader:
    index: int
    label: str
    transducer_type: str
    physical_dimension: str
    physical_minimum: str
    physical_maximum: str
    digital_minimum: str
    digital_maximum: str
    prefiltering: str
    samples_per_record: int
    reserved: str = ""


@dataclass(frozen=True)
class EdfReaderConfig:
    """
    max_signals:
      Upper bound for the declared number of signals; larger values are treated as corrupt
      so a damaged count field cannot trigger huge header reads.
    check_consistency:
      Compare declared sizes against the actual file after opening and record mismatches
      as warnings.
    """

    max_signals: int = 10000
    check_consistency: bool = True


@dataclass_json
@dataclass
class HeaderSummary:
    path: str
    general_header: GeneralHeader
    signals: List[SignalHeader]
    data_offset: int
    record_size_in_bytes: int
    warnings: List[str]
    start: Optional[str] = None
