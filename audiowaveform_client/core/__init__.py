"""Pure option handling for the audiowaveform command line."""
from .options import (
    Flag,
    KeyValue,
    Option,
    OptionRule,
    RULES,
    RULES_BY_FIELD,
    WaveformOptions,
    build_arguments,
    file_extension,
    render,
)

__all__ = [
    'Flag',
    'KeyValue',
    'Option',
    'OptionRule',
    'RULES',
    'RULES_BY_FIELD',
    'WaveformOptions',
    'build_arguments',
    'file_extension',
    'render',
]
