from __future__ import annotations

import argparse
import sys
from typing import NoReturn, Optional, Sequence

from .config import REPOSITORY, VERSION, Config, NumberFormat
from .packer import EXIT_OK, EXIT_USAGE, run


EPILOG = """\
Examples:
  %(prog)s -o foo.h bar.bin
  %(prog)s -o foo.h file1 file2
  %(prog)s -o foo.c -d foo.h bar.bin
"""


class _ArgumentParser(argparse.ArgumentParser):
    # bad parameters exit with 1, 2 is kept for missing files/output
    def error(self, message: str) -> NoReturn:
        self.print_usage(sys.stderr)
        self.exit(EXIT_USAGE, f"{self.prog}: error: {message}\n")


def build_parser() -> argparse.ArgumentParser:
    ap = _ArgumentParser(
        prog="binary-include",
        description="Convert binary files into C/C++ arrays to include in a program.",
        epilog=EPILOG,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    ap.add_argument("files", nargs="*", metavar="FILE", help="Input files to embed")
    ap.add_argument("-o", "--output", help="Output file (can be source or header)")
    ap.add_argument("-d", "--header", help="Header file (won't be created otherwise)")
    ap.add_argument(
        "-w",
        "--no-warning",
        action="store_true",
        help="Suppress the auto-generated warning comment in output",
    )
    ap.add_argument(
        "-a",
        "--no-allman",
        action="store_true",
        help="Disable the Allman style of indentation and use the K&R",
    )
    ap.add_argument(
        "-f",
        "--decimal",
        action="store_true",
        help="Format byte data as decimal rather than hexadecimal",
    )
    ap.add_argument("-t", "--text", action="store_true", help="Write data as text rather than byte per byte")
    ap.add_argument("-m", "--macro", action="store_true", help="Create the size definition as a macro")
    ap.add_argument("-c", "--camel-case", action="store_true", help="Use camel case for names instead of snake case")
    ap.add_argument("-s", "--single-line", action="store_true", help="Put all the data on a single line")
    ap.add_argument(
        "-v",
        "--version",
        action="version",
        version=f"%(prog)s version {VERSION}\n{REPOSITORY}",
    )
    return ap


def config_from_args(args: argparse.Namespace) -> Config:
    return Config(
        number_format=NumberFormat.DECIMAL if args.decimal else NumberFormat.HEX,
        macro_size=args.macro,
        camel_case=args.camel_case,
        allman=not args.no_allman,
        text=args.text,
        single_line=args.single_line,
        warning=not args.no_warning,
    )


def main(argv: Optional[Sequence[str]] = None) -> int:
    if argv is None:
        argv = sys.argv[1:]

    ap = build_parser()
    if not argv:
        ap.print_help()
        return EXIT_OK

    args = ap.parse_args(argv)
    return run(args.files, args.output, args.header, config_from_args(args))


if __name__ == "__main__":
    raise SystemExit(main())
