from bundlescope.services.formatting import format_bytes, format_kb, format_mb, percent_bar, tail


def test_format_bytes_outputs() -> None:
    assert format_bytes(0) == "0 B"
    assert format_bytes(1) == "1 B"
    assert format_bytes(1024) == "1.0 KB"
    assert format_bytes(1024 * 1024) == "1.0 MB"
    assert format_bytes(3 * 1024**3) == "3.0 GB"


def test_fixed_point_units() -> None:
    assert format_kb(1536) == "1.50"
    assert format_mb(1024 * 1024) == "1.00"


def test_tail_keeps_end() -> None:
    assert tail("node_modules/lodash/index.js", 8) == "index.js"
    assert tail("a.js", 8) == "a.js"


def test_percent_bar() -> None:
    assert percent_bar(10) == "█████"
    assert percent_bar(0) == ""
