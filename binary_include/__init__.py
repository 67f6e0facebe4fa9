from .config import VERSION as __version__
from .config import Config, NumberFormat
from .emitter import (
    OnlyDefinition,
    PackError,
    ShortReadError,
    Sink,
    SplitDefinition,
    WriteError,
    emit,
    resolve_placement,
)
from .naming import Convention, Symbols, derive_symbol, header_guard, make_symbols

__all__ = [
    "__version__",
    "Config",
    "Convention",
    "NumberFormat",
    "OnlyDefinition",
    "PackError",
    "ShortReadError",
    "Sink",
    "SplitDefinition",
    "Symbols",
    "WriteError",
    "derive_symbol",
    "emit",
    "header_guard",
    "make_symbols",
    "resolve_placement",
]
