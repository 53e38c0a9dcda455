"""
Tests for glasscut/lines.py: cut payloads and line rendering.

Run: python3 test_lines.py
From: python/
"""

from glasscut.lines import (
    EMPTY_DOCUMENT_HTML,
    build_cut_payload,
    describe_cut,
    render_lines_html,
    truncate,
)
from glasscut.models import ParagraphRecord

RECORDS = [
    ParagraphRecord(text="Hello world", markup="Hello <strong>world</strong>"),
    ParagraphRecord(text="Second line", markup="<em>Second</em> line"),
    ParagraphRecord(text="Third & last", markup="Third &amp; last"),
]


def _expect_value_error(func, *args):
    try:
        func(*args)
    except ValueError as e:
        return str(e)
    raise AssertionError(f"Expected ValueError from {func.__name__}{args}")


def test_single_line_cut():
    payload = build_cut_payload(RECORDS, 0)
    assert payload.start == 0 and payload.end == 1
    assert payload.count == 1
    assert payload.text == "Hello world"
    assert payload.html == "Hello <strong>world</strong>"
    print("PASS: test_single_line_cut")


def test_multi_line_cut_joins_flavours():
    payload = build_cut_payload(RECORDS, 1, 2)
    assert payload.text == "Second line\nThird & last"
    assert payload.html == "<em>Second</em> line<br>Third &amp; last"
    assert payload.end == 3
    print("PASS: test_multi_line_cut_joins_flavours")


def test_cut_clamped_at_end():
    payload = build_cut_payload(RECORDS, 2, 5)
    assert payload.start == 2 and payload.end == 3
    assert payload.count == 1
    print("PASS: test_cut_clamped_at_end")


def test_cut_errors():
    assert "No document" in _expect_value_error(build_cut_payload, [], 0)
    assert "out of range" in _expect_value_error(build_cut_payload, RECORDS, 3)
    assert "out of range" in _expect_value_error(build_cut_payload, RECORDS, -1)
    assert "at least 1" in _expect_value_error(build_cut_payload, RECORDS, 0, 0)
    print("PASS: test_cut_errors")


def test_render_lines_html():
    html = render_lines_html(RECORDS[:2])
    assert html == (
        '<div class="line" data-index="0"><span>Hello <strong>world</strong></span></div>'
        '<div class="line" data-index="1"><span><em>Second</em> line</span></div>'
    )
    print("PASS: test_render_lines_html")


def test_render_empty_document():
    assert render_lines_html([]) == EMPTY_DOCUMENT_HTML
    print("PASS: test_render_empty_document")


def test_truncate():
    assert truncate("short") == "short"
    assert truncate("x" * 40) == "x" * 40
    assert truncate("x" * 41) == "x" * 40 + "..."
    assert truncate("abcdef", limit=3) == "abc..."
    print("PASS: test_truncate")


def test_describe_cut():
    assert describe_cut(build_cut_payload(RECORDS, 0), RECORDS) == 'Copied line 1: "Hello world"'
    assert describe_cut(build_cut_payload(RECORDS, 1, 2), RECORDS) == "Copied lines 2-3 (2 lines)"
    print("PASS: test_describe_cut")


if __name__ == "__main__":
    tests = [
        test_single_line_cut,
        test_multi_line_cut_joins_flavours,
        test_cut_clamped_at_end,
        test_cut_errors,
        test_render_lines_html,
        test_render_empty_document,
        test_truncate,
        test_describe_cut,
    ]

    passed = 0
    failed = 0
    for test in tests:
        try:
            test()
            passed += 1
        except Exception as e:
            print(f"FAIL: {test.__name__}: {e}")
            import traceback
            traceback.print_exc()
            failed += 1

    print(f"\n{'='*60}")
    print(f"Results: {passed} passed, {failed} failed out of {len(tests)} tests")
    if failed == 0:
        print("ALL TESTS PASSED")
    else:
        print("SOME TESTS FAILED")
