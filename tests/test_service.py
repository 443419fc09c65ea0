from pathlib import Path

import pytest
from PIL import Image

from docsift.config.settings import ExtractionSettings
from docsift.extractor import (
    ContentClassifier,
    ContentKind,
    DocumentParseFailure,
    ExtractionResult,
    InvalidPageGeometry,
    OCREngineUnavailable,
    OnImageOnly,
    ResourceLimitExceeded,
    UnsupportedFormat,
)
from docsift.extractor.encoding import encode_image
from docsift.extractor.ocr import TesseractEngine
from docsift.extractor.probe import operator_probe
from docsift.extractor.pymupdf_backend import PyMuPDFParser
from docsift.extractor.service import normalise_extension
from fakes import (
    JPEG_IMAGE,
    TEXT_RUN,
    FakeDocument,
    FakeOCREngine,
    FakePage,
    FakeParser,
    scanned_document,
    text_document,
    tj,
)


@pytest.fixture
def scratch_root(tmp_path):
    return tmp_path / "scratch"


def _classifier(parser, scratch_root, **kwargs):
    return ContentClassifier(parser, scratch_root=scratch_root, **kwargs)


@pytest.mark.parametrize("extension", [".png", ".PNG", "png", ".jpg", ".JPEG", ".gif"])
def test_images_are_encoded_without_parsing(extension, scratch_root):
    parser = FakeParser()
    result = _classifier(parser, scratch_root).classify(b"\x89PNG fake", extension)

    assert result.kind is ContentKind.IMAGE_BASE64
    assert result.value == encode_image(b"\x89PNG fake")
    assert parser.opened == 0


@pytest.mark.parametrize("extension", [".xyz", ".docx", "", ".pdf.zip"])
def test_unsupported_format_has_no_side_effects(extension, scratch_root):
    parser = FakeParser()
    with pytest.raises(UnsupportedFormat):
        _classifier(parser, scratch_root).classify(b"data", extension)

    assert parser.opened == 0
    assert not scratch_root.exists()


def test_text_pdf_returns_structured_text(scratch_root):
    doc = text_document(["A", "B"], ["C"])
    result = _classifier(FakeParser(doc), scratch_root).classify(b"%PDF", ".pdf")

    assert result == ExtractionResult.text("ABC")
    assert doc.closed
    assert not scratch_root.exists()


def test_text_page_then_blank_page(scratch_root):
    doc = FakeDocument(
        [
            FakePage(elements=[TEXT_RUN], operations=tj("Page one text")),
            FakePage(number=1),
        ]
    )
    result = _classifier(FakeParser(doc), scratch_root).classify(b"%PDF", ".PDF")

    assert result.kind is ContentKind.TEXT
    assert result.value == "Page one text"


def test_image_only_pdf_writes_numbered_pages(scratch_root):
    doc = scanned_document(2, width=120, height=90)
    result = _classifier(FakeParser(doc), scratch_root).classify(b"%PDF", ".pdf")

    assert result.kind is ContentKind.IMAGE_PATHS
    paths = [Path(p) for p in result.value]
    assert [p.name for p in paths] == ["page_1.png", "page_2.png"]
    assert paths[0].parent == paths[1].parent
    assert paths[0].parent.parent == scratch_root
    for path in paths:
        with Image.open(path) as img:
            assert img.format == "PNG"
            assert img.size == (120, 90)
    assert doc.closed


def test_each_call_gets_a_fresh_scratch_directory(scratch_root):
    classifier = _classifier(FakeParser(scanned_document(1)), scratch_root)
    first = classifier.classify(b"%PDF", ".pdf")
    classifier.parser.document = scanned_document(1)
    second = classifier.classify(b"%PDF", ".pdf")

    assert Path(first.value[0]).parent != Path(second.value[0]).parent
    assert len(list(scratch_root.iterdir())) == 2


def test_render_failure_removes_partial_scratch_directory(scratch_root):
    doc = FakeDocument(
        [
            FakePage(elements=[JPEG_IMAGE]),
            FakePage(number=1, width=0, height=300, elements=[JPEG_IMAGE]),
        ]
    )
    with pytest.raises(InvalidPageGeometry):
        _classifier(FakeParser(doc), scratch_root).classify(b"%PDF", ".pdf")

    assert list(scratch_root.iterdir()) == []
    assert doc.closed


def test_run_ocr_variant_returns_text(scratch_root):
    engine = FakeOCREngine(["scan one ", "scan two"])
    classifier = _classifier(
        FakeParser(scanned_document(2)),
        scratch_root,
        ocr_engine=engine,
        on_image_only=OnImageOnly.RUN_OCR,
    )
    result = classifier.classify(b"%PDF", ".pdf")

    assert result == ExtractionResult.text("scan one scan two")
    assert not scratch_root.exists()


def test_run_ocr_without_engine_is_a_configuration_error(scratch_root):
    classifier = _classifier(
        FakeParser(scanned_document(1)),
        scratch_root,
        on_image_only=OnImageOnly.RUN_OCR,
    )
    with pytest.raises(OCREngineUnavailable):
        classifier.classify(b"%PDF", ".pdf")


def test_page_limit_is_enforced(scratch_root):
    doc = text_document(["a"], ["b"], ["c"])
    with pytest.raises(ResourceLimitExceeded):
        _classifier(FakeParser(doc), scratch_root, max_pages=2).classify(b"%PDF", ".pdf")
    assert doc.closed


def test_parse_failure_propagates(scratch_root):
    parser = FakeParser(error=DocumentParseFailure("broken"))
    with pytest.raises(DocumentParseFailure):
        _classifier(parser, scratch_root).classify(b"garbage", ".pdf")
    assert not scratch_root.exists()


def test_probe_is_pluggable(scratch_root):
    doc = text_document(["has text"])
    classifier = _classifier(FakeParser(doc), scratch_root, text_probe=lambda d: False)

    result = classifier.classify(b"%PDF", ".pdf")
    assert result.kind is ContentKind.IMAGE_PATHS


def test_classify_file_uses_filename_suffix(scratch_root):
    parser = FakeParser(text_document(["x"]))
    classifier = _classifier(parser, scratch_root)

    assert classifier.classify_file(b"%PDF", "Report.Final.PDF").value == "x"
    assert classifier.classify_file(b"gif", "anim.gif").kind is ContentKind.IMAGE_BASE64
    with pytest.raises(UnsupportedFormat):
        classifier.classify_file(b"?", "README")


def test_normalise_extension():
    assert normalise_extension("PDF") == ".pdf"
    assert normalise_extension(" .Pdf ") == ".pdf"
    assert normalise_extension("") == "."


def test_from_settings_wires_components(tmp_path):
    settings = ExtractionSettings(
        scratch_dir=str(tmp_path),
        on_image_only="run_ocr",
        text_probe="operators",
        max_pages=7,
        max_pixel_dimension=1234,
        image_extensions=["PNG", ".tiff"],
    )
    classifier = ContentClassifier.from_settings(settings)

    assert isinstance(classifier.parser, PyMuPDFParser)
    assert isinstance(classifier.ocr_engine, TesseractEngine)
    assert classifier.text_probe is operator_probe
    assert classifier.on_image_only is OnImageOnly.RUN_OCR
    assert classifier.scratch_root == tmp_path
    assert classifier.image_extensions == {".png", ".tiff"}
    assert classifier.max_pages == 7
    assert classifier.rasterizer.max_pixel_dimension == 1234


def test_result_rejects_mismatched_value():
    with pytest.raises(TypeError):
        ExtractionResult(ContentKind.TEXT, ("a",))
    with pytest.raises(TypeError):
        ExtractionResult(ContentKind.IMAGE_PATHS, "a.png")


def test_result_to_dict():
    assert ExtractionResult.image_paths(["/tmp/x/page_1.png"]).to_dict() == {
        "kind": "image_paths",
        "value": ["/tmp/x/page_1.png"],
    }
    assert ExtractionResult.text("hi").to_dict() == {"kind": "text", "value": "hi"}
