from pathlib import Path

import pytest

from edfplus_reader.tests.helpers import write_edf


@pytest.fixture
def edf_file(tmp_path: Path) -> Path:
    return write_edf(tmp_path / "recording.edf")
