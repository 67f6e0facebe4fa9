import io
import re

import pytest

from binary_include.config import Config, NumberFormat
from binary_include.emitter import (
    OnlyDefinition,
    ShortReadError,
    Sink,
    SplitDefinition,
    WriteError,
    emit,
    resolve_placement,
)
from binary_include.naming import make_symbols


LOGO = bytes([0x89, 0x50, 0x4E])


def run_single(data, config, name="logo.png", cxx=False):
    out = io.StringIO()
    emit(io.BytesIO(data), len(data), OnlyDefinition(Sink(out, cxx)), make_symbols(name, config), name, config)
    return out.getvalue()


def run_split(data, config, name="logo.png"):
    src, hdr = io.StringIO(), io.StringIO()
    placement = SplitDefinition(definition=Sink(src), declaration=Sink(hdr))
    emit(io.BytesIO(data), len(data), placement, make_symbols(name, config), name, config)
    return src.getvalue(), hdr.getvalue()


def parse_numbers(text):
    body = text[text.index("{") + 1:text.rindex("}")]
    return bytes(int(tok, 0) for tok in re.findall(r"0x[0-9a-f]{2}|\d+", body))


class FailingStream(io.StringIO):
    def __init__(self, fail_on):
        super().__init__()
        self.fail_on = fail_on

    def write(self, s):
        if self.fail_on in s:
            raise OSError("disk full")
        return super().write(s)


def test_logo_single_output():
    config = Config(warning=False)
    out = run_single(LOGO, config)
    assert out == (
        "/* logo.png */\n"
        "const unsigned int logo_png_size = 3;\n"
        "const unsigned char logo_png[3] =\n{\n    0x89, 0x50, 0x4e\n};\n\n"
    )


def test_cxx_comment():
    assert run_single(LOGO, Config(), cxx=True).startswith("// logo.png\n")


def test_split_definition_and_declaration():
    src, hdr = run_split(LOGO, Config())
    assert src == (
        "/* logo.png */\n"
        "const unsigned int logo_png_size = 3;\n"
        "const unsigned char logo_png[3] =\n{\n    0x89, 0x50, 0x4e\n};\n\n"
    )
    assert hdr == (
        "/* logo.png */\n"
        "extern const unsigned int logo_png_size;\n"
        "extern const unsigned char logo_png[3];\n\n"
    )


def test_split_macro_goes_to_declaration():
    src, hdr = run_split(LOGO, Config(macro_size=True, allman=False))
    assert src == "/* logo.png */\nconst unsigned char logo_png[LOGO_PNG_SIZE] = {\n    0x89, 0x50, 0x4e\n};\n\n"
    assert hdr == "/* logo.png */\n#define LOGO_PNG_SIZE 3\nextern const unsigned char logo_png[LOGO_PNG_SIZE];\n\n"


def test_single_sink_macro():
    out = run_single(LOGO, Config(macro_size=True, single_line=True, camel_case=True))
    assert out == (
        "/* logo.png */\n"
        "#define LOGO_PNG_SIZE 3\n"
        "const unsigned char logoPng[LOGO_PNG_SIZE] = { 0x89, 0x50, 0x4e };\n\n"
    )


@pytest.mark.parametrize("macro_size", [False, True])
@pytest.mark.parametrize("text", [False, True])
def test_split_exactly_one_body(macro_size, text):
    src, hdr = run_split(b"hello\nworld", Config(macro_size=macro_size, text=text))
    assert "logo_png[" in src and "] =" in src
    assert "extern" not in src
    assert "] =" not in hdr
    assert "{" not in hdr and '"' not in hdr
    assert re.search(r"extern const unsigned char logo_png\[\w+\];\n\n$", hdr)


@pytest.mark.parametrize("macro_size", [False, True])
@pytest.mark.parametrize("text", [False, True])
def test_single_sink_never_extern(macro_size, text):
    out = run_single(b"hello", Config(macro_size=macro_size, text=text))
    assert "extern" not in out
    assert "logo_png[" in out and "] =" in out


@pytest.mark.parametrize("single_line", [False, True])
@pytest.mark.parametrize("number_format", list(NumberFormat))
def test_numeric_round_trip(single_line, number_format):
    data = bytes(range(256)) + bytes(range(255, -1, -3))
    config = Config(single_line=single_line, number_format=number_format)
    out = run_single(data, config)
    assert parse_numbers(out) == data
    if single_line:
        assert out.count("\n") == 4


def test_wrapping_every_n_items():
    config = Config(items_per_line=2, allman=False)
    out = run_single(bytes([1, 2, 3, 4, 5]), config, name="d")
    assert out.endswith(" = {\n    0x01, 0x02,\n    0x03, 0x04,\n    0x05\n};\n\n")


def test_decimal_format():
    out = run_single(LOGO, Config(number_format=NumberFormat.DECIMAL, single_line=True))
    assert "{ 137, 80, 78 };" in out


def test_text_escapes_single_line():
    data = b'\n\r\a\b\f\t\v"\\' + b"xyz\x00\xff"
    out = run_single(data, Config(text=True, single_line=True), name="t")
    assert out.endswith(
        'const unsigned char t[14] = "\\n\\r\\a\\b\\f\\t\\v\\"\\\\xyz\x00\udcff";\n\n'
    )


def test_text_splits_on_line_breaks():
    out = run_single(b'ab\n"c\\', Config(text=True), name="t")
    assert out.endswith('const unsigned char t[6] =\n    "ab\\n"\n    "\\"c\\\\";\n\n')


def test_text_crlf_splits_twice():
    out = run_single(b"a\r\nb", Config(text=True), name="t")
    assert 'a\\r"\n    "\\n"\n    "b";' in out


def test_idempotent():
    config = Config(text=True, macro_size=True)
    data = bytes(range(64)) * 3
    assert run_split(data, config) == run_split(data, config)
    assert run_single(data, config) == run_single(data, config)


def test_empty_input():
    out = run_single(b"", Config(single_line=True), name="e")
    assert out.endswith("const unsigned char e[0] = {  };\n\n")


def test_short_read():
    out = io.StringIO()
    config = Config()
    with pytest.raises(ShortReadError) as exc:
        emit(io.BytesIO(b"abc"), 5, OnlyDefinition(Sink(out)), make_symbols("x", config), "x", config)
    assert exc.value.expected == 5
    assert exc.value.got == 3


def test_write_failure_aborts_remaining_steps():
    config = Config()
    hdr = io.StringIO()
    src = FailingStream(fail_on="const unsigned int")
    placement = SplitDefinition(definition=Sink(src), declaration=Sink(hdr))
    with pytest.raises(WriteError) as exc:
        emit(io.BytesIO(LOGO), 3, placement, make_symbols("logo.png", config), "logo.png", config)
    assert exc.value.stage == "size definition"
    assert hdr.getvalue() == "/* logo.png */\n"


def test_resolve_placement():
    a, b = Sink(io.StringIO()), Sink(io.StringIO())
    assert resolve_placement(a, b) == SplitDefinition(definition=a, declaration=b)
    assert resolve_placement(a, None) == OnlyDefinition(a)
    assert resolve_placement(None, b) == OnlyDefinition(b)
    with pytest.raises(ValueError):
        resolve_placement(None, None)


def utf8_sink(buffer):
    return Sink(io.TextIOWrapper(buffer, encoding="utf-8", errors="surrogateescape", newline="\n"))


def test_text_high_bytes_written_verbatim():
    buffer = io.BytesIO()
    sink = utf8_sink(buffer)
    config = Config(text=True, single_line=True)
    emit(io.BytesIO(b"\xe9t\x80"), 3, OnlyDefinition(sink), make_symbols("t", config), "t", config)
    assert buffer.getvalue().endswith(b'const unsigned char t[3] = "\xe9t\x80";\n\n')


def test_non_latin_name_in_comment():
    buffer = io.BytesIO()
    sink = utf8_sink(buffer)
    config = Config()
    emit(io.BytesIO(LOGO), 3, OnlyDefinition(sink), make_symbols("日本.bin", config), "日本.bin", config)
    assert buffer.getvalue().startswith("/* 日本.bin */\nconst unsigned int ___bin_size = 3;\n".encode("utf-8"))


def test_unencodable_name_is_a_write_error():
    config = Config()
    sink = utf8_sink(io.BytesIO())
    with pytest.raises(WriteError) as exc:
        emit(io.BytesIO(LOGO), 3, OnlyDefinition(sink), make_symbols("\ud800.bin", config), "\ud800.bin", config)
    assert exc.value.stage == "file name comment"


@pytest.mark.parametrize(
    "name, cxx, expected",
    [
        ("a*/b.bin", False, "/* a*\\/b.bin */\n"),
        ("a\nb.bin", True, "// a\\nb.bin\n"),
        ("a\r\nb.bin", False, "/* a\\r\\nb.bin */\n"),
    ],
)
def test_name_comment_stays_on_one_line(name, cxx, expected):
    out = run_single(LOGO, Config(), name=name, cxx=cxx)
    assert out.startswith(expected)


class FlushFailingStream(io.StringIO):
    def flush(self):
        raise OSError("No space left on device")


def test_flush_failure_is_a_write_error():
    config = Config()
    placement = OnlyDefinition(Sink(FlushFailingStream()))
    with pytest.raises(WriteError) as exc:
        emit(io.BytesIO(LOGO), 3, placement, make_symbols("logo.png", config), "logo.png", config)
    assert exc.value.stage == "data"
