"""
Identifier derivation for the emitted symbols.

A file name like ``my-file.bin`` becomes ``my_file_bin`` (snake),
``myFileBin`` (camel) or ``MY_FILE_BIN`` (macro). Only ASCII letters and
digits survive; the result never starts with a digit.
"""
from __future__ import annotations

import enum
import string
from dataclasses import dataclass
from typing import Optional

from .config import MAX_SYMBOL_LENGTH, SIZE_SUFFIX, SIZE_SUFFIX_CAMEL, SIZE_SUFFIX_MACRO, Config


_ALNUM = frozenset(string.ascii_letters + string.digits)


class Convention(enum.Enum):
    SNAKE = "snake"
    CAMEL = "camel"
    MACRO = "macro"


@dataclass(frozen=True)
class Symbols:
    symbol: str
    macro: Optional[str] = None


def _fix_leading_digit(symbol: str) -> str:
    if not symbol:
        return "_"
    if symbol[0].isdigit():
        return "_" + symbol[1:]
    return symbol


def _snake(name: str, upper: bool, max_length: int) -> str:
    out = []
    for ch in name[:max_length]:
        if ch in _ALNUM:
            out.append(ch.upper() if upper else ch.lower())
        else:
            out.append("_")
    return "".join(out)


def _camel(name: str, max_length: int) -> str:
    out = []
    next_upper = False
    for ch in name:
        if len(out) >= max_length:
            break
        if ch in _ALNUM:
            out.append(ch.upper() if next_upper else ch.lower())
            next_upper = False
        else:
            # separators are dropped, the next kept character is capitalized
            next_upper = True
    return "".join(out)


def derive_symbol(name: str, convention: Convention, max_length: int = MAX_SYMBOL_LENGTH) -> str:
    if convention is Convention.CAMEL:
        symbol = _camel(name, max_length)
    else:
        symbol = _snake(name, convention is Convention.MACRO, max_length)
    return _fix_leading_digit(symbol)


def make_symbols(name: str, config: Config) -> Symbols:
    convention = Convention.CAMEL if config.camel_case else Convention.SNAKE
    symbol = derive_symbol(name, convention, config.max_symbol_length)
    macro = None
    if config.macro_size:
        macro = derive_symbol(name, Convention.MACRO, config.max_symbol_length)
    return Symbols(symbol=symbol, macro=macro)


def size_name(symbols: Symbols, config: Config) -> str:
    suffix = SIZE_SUFFIX_CAMEL if config.camel_case else SIZE_SUFFIX
    return symbols.symbol + suffix


def size_macro(symbols: Symbols) -> str:
    if symbols.macro is None:
        raise ValueError(f"No macro symbol derived for '{symbols.symbol}'")
    return symbols.macro + SIZE_SUFFIX_MACRO


def header_guard(basename: str, max_length: int = MAX_SYMBOL_LENGTH) -> str:
    """Include-guard token: the header's base name upper-cased, dots as '_'."""
    return basename[:max_length].upper().replace(".", "_")
