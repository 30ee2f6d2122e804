import numbers
import struct
from typing import Iterator, List, Optional

import numpy as np

from edfplus_reader.errors import FileContentsError, InvalidSampleRequested, NotReady
from edfplus_reader.model import SAMPLE_ENCODING, SAMPLE_SIZE
from edfplus_reader.parser.edf import EdfHeaderReader


class SampleLocator:
    """
    Random access to the samples stored in the data records of an open EDF+ file.

    Each data record holds, for every signal in order, ``number_of_samples(i)`` little
    endian int16 values. Sample ``n`` of signal ``i`` therefore lives at::

        data_offset + (n // spr[i]) * record_size + signal_offset[i] + 2 * (n % spr[i])

    where ``signal_offset[i]`` is the byte size of all signals before ``i`` within one
    record. The per-signal offsets are computed once per reader.
    """

    def __init__(self, reader: EdfHeaderReader):
        self._reader = reader
        self._signal_offsets: Optional[List[int]] = None

    @property
    def reader(self) -> EdfHeaderReader:
        return self._reader

    def _ensure_layout(self) -> List[int]:
        if not self._reader.is_ready:
            raise NotReady(self._reader.state)
        if self._signal_offsets is None:
            offsets = []
            current = 0
            for i in range(self._reader.number_of_signals()):
                offsets.append(current)
                current += SAMPLE_SIZE * self._reader.number_of_samples(i)
            self._signal_offsets = offsets
        return self._signal_offsets

    def signal_offset_in_record(self, signal: int) -> int:
        offsets = self._ensure_layout()
        # validates the index
        self._reader.number_of_samples(signal)
        return offsets[signal]

    def offset(self, signal: int, sample: int) -> int:
        offsets = self._ensure_layout()
        samples_per_record = self._reader.number_of_samples(signal)
        if (
            isinstance(sample, bool)
            or not isinstance(sample, numbers.Integral)
            or sample < 0
        ):
            raise InvalidSampleRequested(sample)
        record, within_record = divmod(int(sample), samples_per_record)
        return (
            self._reader.data_offset()
            + record * self._reader.record_size_in_bytes()
            + offsets[signal]
            + SAMPLE_SIZE * within_record
        )

    def sample(self, signal: int, sample: int) -> int:
        offset = self.offset(signal, sample)
        total = self._reader.total_samples(signal)
        if total is not None and sample >= total:
            raise FileContentsError(
                f"Sample {sample} of signal {signal} is beyond the {total} samples declared in the header",
                offset,
            )
        data = self._reader.read_exact_at(offset, SAMPLE_SIZE)
        return struct.unpack(SAMPLE_ENCODING, data)[0]

    def samples(self, signal: int) -> "SignalSamples":
        self._ensure_layout()
        self._reader.number_of_samples(signal)
        return SignalSamples(self, int(signal))

    def read_record(self, signal: int, record: int) -> List[int]:
        """Read the samples of one signal from a single data record."""
        samples_per_record = self._reader.number_of_samples(signal)
        offset = self.offset(signal, record * samples_per_record)
        data = self._reader.read_exact_at(offset, SAMPLE_SIZE * samples_per_record)
        return list(struct.unpack(f"<{samples_per_record}h", data))

    def read_signal(self, signal: int) -> np.ndarray:
        return np.fromiter(self.samples(signal), dtype=np.int16)


class SignalSamples:
    """
    Every sample of one signal in file order. Iterating again restarts from the first
    data record; nothing is cached between iterations.
    """

    def __init__(self, locator: SampleLocator, signal: int):
        self._locator = locator
        self._signal = signal

    def __len__(self) -> int:
        total = self._locator.reader.total_samples(self._signal)
        if total is None:
            raise TypeError("Number of data records is unknown")
        return total

    def __iter__(self) -> Iterator[int]:
        reader = self._locator.reader
        if reader.has_known_number_of_data_records():
            for record in range(reader.number_of_data_records()):
                yield from self._locator.read_record(self._signal, record)
            return
        # Unknown record count: read until the data region runs out at a record boundary
        record = 0
        while True:
            try:
                values = self._locator.read_record(self._signal, record)
            except FileContentsError:
                return
            yield from values
            record += 1
