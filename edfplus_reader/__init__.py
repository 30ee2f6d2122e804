from edfplus_reader.errors import (
    DateError,
    EdfError,
    EdfStatus,
    FileContentsError,
    FileOpenError,
    FormatError,
    InvalidSampleRequested,
    InvalidSignalRequested,
    NotReady,
    TimeError,
)
from edfplus_reader.locator import SampleLocator, SignalSamples
from edfplus_reader.model import EdfReaderConfig, GeneralHeader, SignalHeader
from edfplus_reader.parser.edf import EdfHeaderReader, EdfReaderState, open_edf
