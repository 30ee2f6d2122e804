import struct
from pathlib import Path
from typing import Dict, List, Optional, Sequence


def _pad(value, width: int) -> bytes:
    encoded = str(value).encode("ascii")
    assert len(encoded) <= width, f"{value!r} does not fit into {width} bytes"
    return encoded.ljust(width, b" ")


def build_header(
    samples_per_record: Sequence[int],
    number_of_data_records: int = 2,
    labels: Optional[Sequence[str]] = None,
    start_date: str = "19.05.14",
    start_time: str = "11.49.30",
    duration: str = "1",
    header_bytes: Optional[int] = None,
    number_of_signals: Optional[str] = None,
    overrides: Optional[Dict[str, List[str]]] = None,
) -> bytes:
    ns = len(samples_per_record)
    labels = labels or [f"EEG {i}" for i in range(ns)]
    columns = {
        "label": (16, labels),
        "transducer_type": (80, ["AgAgCl electrode"] * ns),
        "physical_dimension": (8, ["uV"] * ns),
        "physical_minimum": (8, ["-500"] * ns),
        "physical_maximum": (8, ["500"] * ns),
        "digital_minimum": (8, ["-2048"] * ns),
        "digital_maximum": (8, ["2047"] * ns),
        "prefiltering": (80, ["HP:0.1Hz LP:75Hz"] * ns),
        "samples_per_record": (8, [str(s) for s in samples_per_record]),
        "reserved": (32, [""] * ns),
    }
    for name, values in (overrides or {}).items():
        columns[name] = (columns[name][0], values)
    general = b"".join(
        [
            _pad("0", 8),
            _pad("X M 01-JAN-1970 Patient", 80),
            _pad("Startdate 19-MAY-2014 X X X", 80),
            _pad(start_date, 8),
            _pad(start_time, 8),
            _pad(header_bytes if header_bytes is not None else 256 + ns * 256, 8),
            _pad("EDF+C", 44),
            _pad(number_of_data_records, 8),
            _pad(duration, 8),
            _pad(number_of_signals if number_of_signals is not None else ns, 4),
        ]
    )
    signals = b"".join(
        _pad(value, width) for width, values in columns.values() for value in values
    )
    return general + signals


def sample_value(signal: int, index: int) -> int:
    """Deterministic, signal dependent value for sample ``index`` counted across the file."""
    return (signal * 1000 + index * 7) % 65536 - 32768


def build_records(samples_per_record: Sequence[int], number_of_data_records: int) -> bytes:
    chunks = []
    for record in range(number_of_data_records):
        for signal, count in enumerate(samples_per_record):
            values = [sample_value(signal, record * count + k) for k in range(count)]
            chunks.append(struct.pack(f"<{count}h", *values))
    return b"".join(chunks)


def write_edf(
    path: Path,
    samples_per_record: Sequence[int] = (4, 6),
    number_of_data_records: int = 3,
    records_on_disk: Optional[int] = None,
    declared_records: Optional[int] = None,
    **header_kwargs,
) -> Path:
    header = build_header(
        samples_per_record,
        number_of_data_records=(
            declared_records if declared_records is not None else number_of_data_records
        ),
        **header_kwargs,
    )
    records = build_records(
        samples_per_record,
        records_on_disk if records_on_disk is not None else number_of_data_records,
    )
    path.write_bytes(header + records)
    return path
