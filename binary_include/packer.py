from __future__ import annotations

import io
import os
import sys
from contextlib import ExitStack
from pathlib import Path
from typing import BinaryIO, List, Optional, Sequence, TextIO, Tuple, Union

from .config import WARNING_COMMENT, Config
from .emitter import PackError, Placement, Sink, emit, resolve_placement
from .filetype import check_filetype
from .naming import header_guard, make_symbols


PathLike = Union[str, Path]

EXIT_OK = 0
EXIT_USAGE = 1
EXIT_MISSING = 2
EXIT_OPEN_OUTPUT = 3
EXIT_SETUP_WRITE = 4
EXIT_OPEN_INPUT = 4
EXIT_EMIT = 5

# names are written as UTF-8; raw text-mode bytes come back through
# surrogateescape as the same single byte
SINK_ENCODING = "utf-8"
SINK_ERRORS = "surrogateescape"


def _error(msg: str) -> None:
    print(msg, file=sys.stderr)


def measure(source: BinaryIO) -> int:
    """Byte length of an open input, leaving it rewound to the start."""
    length = source.seek(0, io.SEEK_END)
    source.seek(0)
    return length


def process(filename: PathLike, name: str, placement: Placement, config: Config) -> int:
    """
    Emit one input file. Returns 0 on success, else an exit status.

    Errors are reported on stderr and never propagate: the caller moves on
    to the next file.
    """
    symbols = make_symbols(name, config)
    try:
        source = open(filename, "rb")
    except OSError:
        _error(f"Failed to open the input file: {filename}!")
        return EXIT_OPEN_INPUT

    with source:
        try:
            emit(source, measure(source), placement, symbols, name, config)
        except PackError as e:
            _error(f"{e} ({filename})")
            return EXIT_EMIT
        except OSError as e:
            _error(f"Failed to read the input file: {filename}! ({e})")
            return EXIT_EMIT
    return EXIT_OK


def process_all(files: Sequence[PathLike], placement: Placement, config: Config) -> int:
    retval = EXIT_OK
    for filename in files:
        rv = process(filename, os.path.basename(filename), placement, config)
        if rv != EXIT_OK and retval == EXIT_OK:
            retval = rv
    return retval


def resolve_roles(
    output: Optional[PathLike], header: Optional[PathLike]
) -> Tuple[Optional[PathLike], Optional[PathLike], bool, bool]:
    """
    Returns: (output, header, output_cxx, header_cxx)

    A lone output that looks like a header takes the header role.
    """
    output_cxx = header_cxx = False
    if output is not None:
        is_header, output_cxx = check_filetype(output)
        if header is None and is_header:
            return None, output, False, output_cxx
    if header is not None:
        _is_header, header_cxx = check_filetype(header)
    return output, header, output_cxx, header_cxx


def _open_sink(path: PathLike) -> TextIO:
    return open(path, "w", encoding=SINK_ENCODING, errors=SINK_ERRORS, newline="\n")


def _prologue(stream: TextIO, config: Config, include: Optional[str], guard: Optional[str]) -> None:
    if config.warning:
        stream.write(WARNING_COMMENT + "\n\n")
    if include is not None:
        stream.write(f'#include "{include}"\n\n')
    if guard is not None:
        stream.write(f"#ifndef {guard}\n#define {guard}\n\n")
    stream.flush()


def run(
    files: Sequence[PathLike],
    output: Optional[PathLike],
    header: Optional[PathLike],
    config: Config,
) -> int:
    """Generate the output and/or header from all input files."""
    if not files:
        _error("No files specified, at least one has to be specified!")
        return EXIT_MISSING
    if output is None and header is None:
        _error("No output file specified!")
        return EXIT_MISSING

    output, header, output_cxx, header_cxx = resolve_roles(output, header)
    header_basename = os.path.basename(header) if header is not None else None

    close_failures: List[PathLike] = []
    retval = EXIT_OK

    with ExitStack() as stack:
        output_sink = header_sink = None

        if output is not None:
            try:
                stream = _open_sink(output)
            except OSError:
                _error(f"Failed to open the output file: {output}!")
                return EXIT_OPEN_OUTPUT
            stack.callback(_close_sink, stream, output, close_failures)
            try:
                _prologue(stream, config, header_basename, None)
            except (OSError, UnicodeError):
                _error("Failed to write the warning comment or include!")
                return EXIT_SETUP_WRITE
            output_sink = Sink(stream, output_cxx)

        if header is not None:
            try:
                stream = _open_sink(header)
            except OSError:
                _error(f"Failed to open the header file: {header}!")
                return EXIT_OPEN_OUTPUT
            stack.callback(_close_sink, stream, header, close_failures)
            # the guard is closed whatever happens to the files below
            stack.callback(_close_guard, stream)
            header_sink = Sink(stream, header_cxx)
            try:
                _prologue(stream, config, None, header_guard(header_basename, config.max_symbol_length))
            except (OSError, UnicodeError):
                _error("Failed to write the warning comment or header guard!")
                retval = EXIT_SETUP_WRITE

        if retval == EXIT_OK:
            placement = resolve_placement(output_sink, header_sink)
            retval = process_all(files, placement, config)

    if close_failures and retval == EXIT_OK:
        retval = EXIT_EMIT
    return retval


def _close_guard(stream: TextIO) -> None:
    try:
        stream.write("#endif\n")
    except OSError:
        _error("Failed to write the header guard!")


def _close_sink(stream: TextIO, path: PathLike, failures: List[PathLike]) -> None:
    try:
        stream.close()
    except OSError:
        _error(f"Failed to close the file: {path}!")
        failures.append(path)
