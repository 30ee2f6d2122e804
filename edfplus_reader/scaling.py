from dataclasses import dataclass
from typing import Union

import numpy as np

from edfplus_reader.errors import FileContentsError, FormatError
from edfplus_reader.fields import decimal_ascii_to_float
from edfplus_reader.model import SignalHeader


@dataclass(frozen=True)
class Calibration:
    physical_minimum: float
    physical_maximum: float
    digital_minimum: float
    digital_maximum: float

    @staticmethod
    def from_signal_header(header: SignalHeader) -> "Calibration":
        values = {}
        for name in (
            "physical_minimum",
            "physical_maximum",
            "digital_minimum",
            "digital_maximum",
        ):
            raw = getattr(header, name)
            try:
                values[name] = decimal_ascii_to_float(raw)
            except FormatError as e:
                raise FileContentsError(
                    f"Invalid {name.replace('_', ' ')} of signal {header.index}: {e.reason} ({raw!r})"
                ) from e
        if values["digital_maximum"] == values["digital_minimum"]:
            raise FileContentsError(
                f"Signal {header.index} has an empty digital range"
            )
        return Calibration(**values)

    @property
    def gain(self) -> float:
        return (self.physical_maximum - self.physical_minimum) / (
            self.digital_maximum - self.digital_minimum
        )

    @property
    def offset(self) -> float:
        return self.physical_maximum - self.gain * self.digital_maximum

    def to_physical(
        self, digital: Union[int, np.ndarray]
    ) -> Union[float, np.ndarray]:
        if isinstance(digital, np.ndarray):
            return digital.astype(np.float64) * self.gain + self.offset
        return float(digital) * self.gain + self.offset
