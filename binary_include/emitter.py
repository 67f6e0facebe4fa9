"""
Writes one input file as C source text into the open sinks.

The placement decides where the definition (the initialized byte literal)
goes. With two sinks the declaration sink only receives ``extern`` forward
declarations so that both files can be compiled together.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import BinaryIO, Iterator, List, Optional, TextIO, Union

from .config import DATA_INDENT, DATA_TYPE, SIZE_TYPE, Config, NumberFormat
from .naming import Symbols, size_macro, size_name


READ_CHUNK = 64 * 1024

TEXT_ESCAPES = {
    ord("\n"): "\\n",
    ord("\r"): "\\r",
    ord("\a"): "\\a",
    ord("\b"): "\\b",
    ord("\f"): "\\f",
    ord("\t"): "\\t",
    ord("\v"): "\\v",
    ord('"'): '\\"',
    ord("\\"): "\\\\",
}
TEXT_LINE_BREAKS = (ord("\n"), ord("\r"))

# bytes >= 0x80 go out as lone surrogates, which the surrogateescape
# error handler of the sinks writes back as the original byte
RAW_BYTE_BASE = 0xDC00


class PackError(Exception):
    pass


class WriteError(PackError):
    def __init__(self, stage: str):
        super().__init__(f"Failed to write the {stage}!")
        self.stage = stage


class ShortReadError(PackError):
    def __init__(self, expected: int, got: int):
        super().__init__(f"Failed to read the input: expected {expected} bytes, got {got}!")
        self.expected = expected
        self.got = got


@dataclass(frozen=True)
class Sink:
    stream: TextIO
    cxx: bool = False


@dataclass(frozen=True)
class OnlyDefinition:
    sink: Sink


@dataclass(frozen=True)
class SplitDefinition:
    definition: Sink
    declaration: Sink


Placement = Union[OnlyDefinition, SplitDefinition]


def resolve_placement(output: Optional[Sink], header: Optional[Sink]) -> Placement:
    """The output sink holds the definition whenever both are present."""
    if output is not None and header is not None:
        return SplitDefinition(definition=output, declaration=header)
    if output is not None:
        return OnlyDefinition(output)
    if header is not None:
        return OnlyDefinition(header)
    raise ValueError("At least one of the output or header sinks is required")


def _sinks(placement: Placement) -> List[Sink]:
    if isinstance(placement, SplitDefinition):
        return [placement.definition, placement.declaration]
    return [placement.sink]


def _write(sink: Sink, text: str, stage: str) -> None:
    try:
        sink.stream.write(text)
    except (OSError, UnicodeError) as e:
        raise WriteError(stage) from e


def _flush(sink: Sink) -> None:
    # buffered sinks only report a full disk once flushed
    try:
        sink.stream.flush()
    except OSError as e:
        raise WriteError("data") from e


def _iter_input(source: BinaryIO, length: int) -> Iterator[bytes]:
    remaining = length
    while remaining > 0:
        chunk = source.read(min(READ_CHUNK, remaining))
        if not chunk:
            raise ShortReadError(length, length - remaining)
        remaining -= len(chunk)
        yield chunk


def write_data_numerical(source: BinaryIO, sink: Sink, length: int, config: Config) -> None:
    fmt = "{:d}" if config.number_format is NumberFormat.DECIMAL else "0x{:02x}"
    wrap = ",\n" + DATA_INDENT
    first = True
    n = 0
    for chunk in _iter_input(source, length):
        parts = []
        for byte in chunk:
            if not first:
                if not config.single_line and n >= config.items_per_line:
                    parts.append(wrap)
                    n = 0
                else:
                    parts.append(", ")
            parts.append(fmt.format(byte))
            first = False
            n += 1
        _write(sink, "".join(parts), "data")


def _raw_char(byte: int) -> str:
    return chr(RAW_BYTE_BASE + byte) if byte >= 0x80 else chr(byte)


def write_data_text(source: BinaryIO, sink: Sink, length: int, config: Config) -> None:
    split = '"\n' + DATA_INDENT + '"'
    for chunk in _iter_input(source, length):
        parts = []
        for byte in chunk:
            parts.append(TEXT_ESCAPES.get(byte) or _raw_char(byte))
            # \r\n splits twice, leaving an empty "" segment in between
            if not config.single_line and byte in TEXT_LINE_BREAKS:
                parts.append(split)
        _write(sink, "".join(parts), "data")


def write_data(source: BinaryIO, sink: Sink, length: int, config: Config) -> None:
    if config.text:
        write_data_text(source, sink, length, config)
    else:
        write_data_numerical(source, sink, length, config)


def _opening(config: Config) -> str:
    if config.text:
        return ' "' if config.single_line else "\n" + DATA_INDENT + '"'
    if config.single_line:
        return " { "
    if not config.allman:
        return " {\n" + DATA_INDENT
    return "\n{\n" + DATA_INDENT


def _closing(config: Config) -> str:
    if config.text:
        return '";\n\n'
    return " };\n\n" if config.single_line else "\n};\n\n"


def _comment_text(name: str) -> str:
    # a name must not end the comment early or spill onto the next line
    return name.replace("*/", "*\\/").replace("\r", "\\r").replace("\n", "\\n")


def write_name_comment(sink: Sink, name: str) -> None:
    name = _comment_text(name)
    comment = f"// {name}\n" if sink.cxx else f"/* {name} */\n"
    _write(sink, comment, "file name comment")


def write_size(placement: Placement, symbols: Symbols, length: int, config: Config) -> None:
    if config.macro_size:
        # a macro has no declaration/definition split, it lives in the header role
        if isinstance(placement, SplitDefinition):
            target = placement.declaration
        else:
            target = placement.sink
        _write(target, f"#define {size_macro(symbols)} {length}\n", "size definition")
        return

    decl = f"const {SIZE_TYPE} {size_name(symbols, config)}"
    if isinstance(placement, SplitDefinition):
        _write(placement.definition, f"{decl} = {length};\n", "size definition")
        _write(placement.declaration, f"extern {decl};\n", "size definition")
    else:
        _write(placement.sink, f"{decl} = {length};\n", "size definition")


def write_array(
    source: BinaryIO,
    placement: Placement,
    symbols: Symbols,
    length: int,
    config: Config,
) -> None:
    dim = size_macro(symbols) if config.macro_size else str(length)
    decl = f"const {DATA_TYPE} {symbols.symbol}[{dim}]"

    target = placement.definition if isinstance(placement, SplitDefinition) else placement.sink
    _write(target, decl + " =" + _opening(config), "definition")
    write_data(source, target, length, config)
    _write(target, _closing(config), "closure")

    if isinstance(placement, SplitDefinition):
        _write(placement.declaration, f"extern {decl};\n\n", "closure")


def emit(
    source: BinaryIO,
    length: int,
    placement: Placement,
    symbols: Symbols,
    name: str,
    config: Config,
) -> None:
    """
    Emit one input file: name comment, size, then the data literal.

    Reads exactly `length` bytes from `source`. Raises WriteError when a sink
    write fails and ShortReadError when the input ends early; in both cases
    the sinks keep whatever was written so far.
    """
    if length < 0:
        raise ValueError(f"Bad length {length}, expected >= 0")

    for sink in _sinks(placement):
        write_name_comment(sink, name)
    write_size(placement, symbols, length, config)
    write_array(source, placement, symbols, length, config)
    for sink in _sinks(placement):
        _flush(sink)
