import io

import pytest

from xvkit.printf import fprintf, printf, render


@pytest.mark.parametrize("value", [0, 42, -5, 2147483647, -2147483648])
def test_decimal_signed(value):
    assert render("%d", value) == str(value)
    assert render("%ld", value) == str(value)
    assert render("%lld", value) == str(value)


def test_decimal_wraps_to_32_bits():
    assert render("%d", 2**32 + 7) == "7"


def test_unsigned_of_negative():
    assert render("%u", -1) == "4294967295"


def test_hex_is_upper_case():
    assert render("%x", 255) == "FF"


@pytest.mark.parametrize("value", [0, 1, 0x1234ABCD, 0xFFFFFFFF])
def test_hex_round_trip(value):
    for spec in ("%x", "%lx", "%llx"):
        out = render(spec, value)
        assert int(out, 16) == value
        assert out == out.upper()


@pytest.mark.parametrize("value", [0, 0x80000000, 0x3FFFFFF000, 0xFFFFFFFFFFFFFFFF])
def test_pointer_round_trip(value):
    out = render("%p", value)
    assert out.startswith("0x")
    assert len(out) == 18
    assert int(out, 16) == value


def test_pointer_zero():
    assert render("%p", 0) == "0x0000000000000000"


def test_strings():
    assert render("%s", None) == "(null)"
    assert render("cat: cannot open %s\n", "foo") == "cat: cannot open foo\n"


def test_percent_and_unknown():
    assert render("100%%") == "100%"
    assert render("%c", 65) == "%c"
    assert render("%llq") == "%llq"


def test_trailing_percent_is_dropped():
    assert render("abc%") == "abc"


def test_mixed_directives():
    assert render("%s %d %d %d\n", "name", 2, 3, 4) == "name 2 3 4\n"


def test_missing_argument():
    with pytest.raises(TypeError):
        render("%d")


def test_fprintf_writes_to_stream():
    buf = io.StringIO()
    fprintf(buf, "%s: read %d bytes\n", "t", 4)
    assert buf.getvalue() == "t: read 4 bytes\n"


def test_printf_writes_to_stdout(capsys):
    printf("hello %s\n", "world")
    assert capsys.readouterr().out == "hello world\n"