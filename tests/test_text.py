from docsift.extractor.text import extract_text
from docsift.extractor.types import ContentOperation
from fakes import FakeDocument, FakePage, text_document, tj


def test_text_in_page_then_operator_order():
    assert extract_text(text_document(["A", "B"], ["C"])) == "ABC"


def test_no_text_show_operators_gives_empty_string():
    ops = [ContentOperation("re", (0, 0, 10, 10)), ContentOperation("f")]
    assert extract_text(FakeDocument([FakePage(operations=ops)])) == ""
    assert extract_text(FakeDocument([])) == ""


def test_only_text_show_operators_contribute():
    ops = [
        ContentOperation("BT"),
        ContentOperation("Tf", ("/F1", 12)),
        ContentOperation("Td", (72, 700)),
        *tj("Hello"),
        ContentOperation("T*"),
        *tj(" world"),
        ContentOperation("ET"),
    ]
    assert extract_text(FakeDocument([FakePage(operations=ops)])) == "Hello world"


def test_tj_array_skips_kerning_numbers():
    ops = [ContentOperation("TJ", (["Ke", -120, "rn", 30.5, "ing"],))]
    assert extract_text(FakeDocument([FakePage(operations=ops)])) == "Kerning"


def test_quote_operators_use_string_operands_only():
    ops = [
        ContentOperation("'", ("next line",)),
        ContentOperation('"', (1.5, 0.2, " spaced")),
    ]
    assert extract_text(FakeDocument([FakePage(operations=ops)])) == "next line spaced"


def test_byte_string_operands_decode_as_latin1():
    ops = [ContentOperation("Tj", (b"caf\xe9",))]
    assert extract_text(FakeDocument([FakePage(operations=ops)])) == "café"


def test_page_without_text_contributes_empty_segment():
    doc = FakeDocument([FakePage(operations=tj("one")), FakePage(number=1)])
    assert extract_text(doc) == "one"
