"""Validating client for the audiowaveform command line tool."""
from .client import AudiowaveformClient, BINARY_NAME
from .core.options import Flag, KeyValue, WaveformOptions, build_arguments
from .errors import (
    AudiowaveformError,
    ClientStateError,
    ConfigError,
    DiscoveryError,
    InvalidOptionError,
    LookupFailedError,
    NotFoundError,
    ProcessFailedError,
    ProcessTimeoutError,
    WaveformDataError,
)
from .services.locator import BinaryLocator, StaticLocator, WhereisLocator, WhichLocator
from .waveform_data import WaveformData, load_waveform

__version__ = '0.1.0'

__all__ = [
    'AudiowaveformClient',
    'AudiowaveformError',
    'BINARY_NAME',
    'BinaryLocator',
    'ClientStateError',
    'ConfigError',
    'DiscoveryError',
    'Flag',
    'InvalidOptionError',
    'KeyValue',
    'LookupFailedError',
    'NotFoundError',
    'ProcessFailedError',
    'ProcessTimeoutError',
    'StaticLocator',
    'WaveformData',
    'WaveformDataError',
    'WaveformOptions',
    'WhereisLocator',
    'WhichLocator',
    'build_arguments',
    'load_waveform',
]
