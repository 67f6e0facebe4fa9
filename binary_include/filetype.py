from __future__ import annotations

from pathlib import Path
from typing import Tuple, Union


def check_filetype(path: Union[str, Path]) -> Tuple[bool, bool]:
    """
    Returns: (is_header, is_cxx)

    An extension starting with 'h' is a header. A second letter 'p' or 'x'
    marks C++ (.hpp, .hxx, .cpp, .cxx).
    """
    name = Path(path).name
    dot = name.rfind(".")
    if dot < 0:
        return False, False

    ext = name[dot + 1:]
    if not ext:
        return False, False

    is_header = ext[0] in ("h", "H")
    is_cxx = len(ext) > 1 and ext[1] in ("p", "P", "x", "X")
    return is_header, is_cxx
