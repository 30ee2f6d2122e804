from pathlib import Path

import numpy as np
import pytest

from edfplus_reader.errors import (
    EdfStatus,
    FileContentsError,
    InvalidSampleRequested,
    InvalidSignalRequested,
    NotReady,
)
from edfplus_reader.locator import SampleLocator
from edfplus_reader.parser.edf import EdfHeaderReader, open_edf
from edfplus_reader.tests.helpers import sample_value, write_edf


def test_offset_formula_for_two_signals(edf_file: Path) -> None:
    with open_edf(edf_file) as reader:
        locator = SampleLocator(reader)
        header_bytes = 256 + 2 * 256
        assert locator.offset(1, 0) == header_bytes + 8
        assert locator.offset(0, 0) == header_bytes
        assert locator.offset(0, 3) == header_bytes + 6
        # sample 4 of signal 0 is the first sample of the second record
        assert locator.offset(0, 4) == header_bytes + 20
        assert locator.offset(1, 7) == header_bytes + 20 + 8 + 2
        assert locator.signal_offset_in_record(0) == 0
        assert locator.signal_offset_in_record(1) == 8


def test_sample_values_match_file_order(edf_file: Path) -> None:
    with open_edf(edf_file) as reader:
        locator = SampleLocator(reader)
        for signal in range(reader.number_of_signals()):
            total = reader.total_samples(signal)
            assert total == reader.number_of_samples(signal) * 3
            for n in range(total):
                assert locator.sample(signal, n) == sample_value(signal, n)


def test_one_past_the_end_fails(edf_file: Path) -> None:
    with open_edf(edf_file) as reader:
        locator = SampleLocator(reader)
        for signal in range(reader.number_of_signals()):
            with pytest.raises(FileContentsError) as e:
                locator.sample(signal, reader.total_samples(signal))
            assert e.value.status == EdfStatus.FILE_CONTENTS_ERROR
        # The reader stays usable after a failed read
        assert locator.sample(1, 0) == sample_value(1, 0)


def test_read_past_end_of_truncated_file(tmp_path: Path) -> None:
    path = write_edf(tmp_path / "short.edf", number_of_data_records=3, records_on_disk=2)
    with open_edf(path) as reader:
        locator = SampleLocator(reader)
        assert locator.sample(0, 7) == sample_value(0, 7)
        with pytest.raises(FileContentsError):
            locator.sample(0, 8)
        assert locator.sample(1, 11) == sample_value(1, 11)


def test_negative_sample_index(edf_file: Path) -> None:
    with open_edf(edf_file) as reader:
        locator = SampleLocator(reader)
        with pytest.raises(InvalidSampleRequested):
            locator.sample(0, -1)
        with pytest.raises(InvalidSampleRequested):
            locator.sample(0, 1.5)


@pytest.mark.parametrize("signal", [2, -1])
def test_invalid_signal(edf_file: Path, signal: int) -> None:
    with open_edf(edf_file) as reader:
        locator = SampleLocator(reader)
        with pytest.raises(InvalidSignalRequested):
            locator.sample(signal, 0)
        with pytest.raises(InvalidSignalRequested):
            locator.samples(signal)
        with pytest.raises(InvalidSignalRequested):
            locator.signal_offset_in_record(signal)


def test_not_ready(edf_file: Path) -> None:
    reader = EdfHeaderReader(edf_file)
    locator = SampleLocator(reader)
    with pytest.raises(NotReady):
        locator.sample(0, 0)
    with pytest.raises(NotReady):
        locator.samples(0)
    reader.open()
    assert locator.sample(0, 0) == sample_value(0, 0)
    reader.close()
    with pytest.raises(NotReady):
        locator.sample(0, 0)


def test_samples_are_lazy_and_restartable(edf_file: Path) -> None:
    with open_edf(edf_file) as reader:
        locator = SampleLocator(reader)
        samples = locator.samples(1)
        assert len(samples) == 18
        first = list(samples)
        second = list(samples)
        assert first == second == [sample_value(1, n) for n in range(18)]
        iterator = iter(samples)
        assert next(iterator) == sample_value(1, 0)
        # Random access in between does not disturb a running iteration
        assert locator.sample(0, 5) == sample_value(0, 5)
        assert next(iterator) == sample_value(1, 1)


def test_samples_with_unknown_number_of_records(tmp_path: Path) -> None:
    path = write_edf(tmp_path / "unknown.edf", declared_records=-1, number_of_data_records=4)
    with open_edf(path) as reader:
        locator = SampleLocator(reader)
        samples = locator.samples(0)
        with pytest.raises(TypeError):
            len(samples)
        assert list(samples) == [sample_value(0, n) for n in range(16)]
        assert locator.sample(0, 15) == sample_value(0, 15)
        with pytest.raises(FileContentsError):
            locator.sample(0, 16)


def test_read_record(edf_file: Path) -> None:
    with open_edf(edf_file) as reader:
        locator = SampleLocator(reader)
        assert locator.read_record(1, 2) == [sample_value(1, 12 + k) for k in range(6)]
        with pytest.raises(FileContentsError):
            locator.read_record(1, 3)


def test_read_signal(edf_file: Path) -> None:
    with open_edf(edf_file) as reader:
        values = SampleLocator(reader).read_signal(0)
    assert values.dtype == np.int16
    np.testing.assert_array_equal(values, [sample_value(0, n) for n in range(12)])


def test_zero_declared_records_rejects_reads(tmp_path: Path) -> None:
    path = write_edf(tmp_path / "empty.edf", samples_per_record=(2,), number_of_data_records=0)
    with open_edf(path) as reader:
        assert list(SampleLocator(reader).samples(0)) == []
        with pytest.raises(FileContentsError):
            SampleLocator(reader).sample(0, 0)


def test_extreme_sample_values(tmp_path: Path) -> None:
    path = write_edf(
        tmp_path / "extremes.edf",
        samples_per_record=(2,),
        declared_records=-1,
        number_of_data_records=0,
    )
    with open(path, "ab") as f:
        f.write(b"\x00\x80\xff\x7f")
    with open_edf(path) as reader:
        locator = SampleLocator(reader)
        assert locator.sample(0, 0) == -32768
        assert locator.sample(0, 1) == 32767


def test_independent_readers_on_same_file(edf_file: Path) -> None:
    with open_edf(edf_file) as first, open_edf(edf_file) as second:
        first_locator = SampleLocator(first)
        second_locator = SampleLocator(second)
        iterator = iter(first_locator.samples(0))
        assert next(iterator) == sample_value(0, 0)
        assert second_locator.sample(1, 17) == sample_value(1, 17)
        assert next(iterator) == sample_value(0, 1)


@pytest.mark.parametrize("sample", [2**40, 2**62, 2**70])
def test_sample_far_beyond_end_with_unknown_number_of_records(
    tmp_path: Path, sample: int
) -> None:
    path = write_edf(tmp_path / "unknown.edf", declared_records=-1)
    with open_edf(path) as reader:
        locator = SampleLocator(reader)
        with pytest.raises(FileContentsError):
            locator.sample(0, sample)
        assert locator.sample(0, 0) == sample_value(0, 0)
