from __future__ import annotations

import enum
from dataclasses import dataclass


VERSION = "1.0"
REPOSITORY = "https://github.com/RubisetCie/binary-include"

# matches FILENAME_MAX on glibc
MAX_SYMBOL_LENGTH = 4096

DATA_PER_LINE = 16
DATA_INDENT = "    "
DATA_TYPE = "unsigned char"
SIZE_TYPE = "unsigned int"
SIZE_SUFFIX = "_size"
SIZE_SUFFIX_CAMEL = "Size"
SIZE_SUFFIX_MACRO = "_SIZE"

WARNING_COMMENT = (
    "/*\n"
    " * This file has been automatically generated by binary-include.\n"
    " * Do not edit it: any change will be lost when it is generated again.\n"
    " */"
)


class NumberFormat(enum.Enum):
    HEX = "hex"
    DECIMAL = "decimal"


@dataclass(frozen=True)
class Config:
    number_format: NumberFormat = NumberFormat.HEX
    macro_size: bool = False  # size as a #define instead of a const
    camel_case: bool = False
    allman: bool = True
    text: bool = False  # data as a quoted string, line by line
    single_line: bool = False
    warning: bool = True
    items_per_line: int = DATA_PER_LINE
    max_symbol_length: int = MAX_SYMBOL_LENGTH
