import json
import logging

import pytest

from docsift.cli import main
from docsift.extractor.encoding import encode_image


@pytest.fixture(autouse=True)
def isolated_logging(tmp_path, monkeypatch):
    """Send logs to tmp_path and restore the root logger afterwards."""
    monkeypatch.setenv("PIPELINE_LOG_DIR", str(tmp_path / "logs"))
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    for handler in root.handlers:
        handler.close()
    root.handlers[:] = handlers
    root.setLevel(level)


def test_image_source_prints_base64_result(tmp_path, capsys):
    path = tmp_path / "photo.JPG"
    path.write_bytes(b"\xff\xd8\xff fake jpeg")

    assert main([str(path), "--scratch-dir", str(tmp_path / "scratch")]) == 0

    out = json.loads(capsys.readouterr().out)
    assert out == {"kind": "image_base64", "value": encode_image(b"\xff\xd8\xff fake jpeg")}
    assert (tmp_path / "logs" / "docsift.log").exists()


def test_filename_override_selects_path(tmp_path, capsys):
    path = tmp_path / "upload.bin"
    path.write_bytes(b"GIF89a")

    assert main([str(path), "--filename", "anim.gif"]) == 0
    assert json.loads(capsys.readouterr().out)["kind"] == "image_base64"


def test_unsupported_source_exits_non_zero(tmp_path, capsys):
    path = tmp_path / "notes.xyz"
    path.write_bytes(b"hello")

    assert main([str(path), "--scratch-dir", str(tmp_path / "scratch")]) == 1
    assert capsys.readouterr().out == ""
    assert not (tmp_path / "scratch").exists()


def test_missing_source_exits_non_zero(tmp_path):
    assert main([str(tmp_path / "missing.pdf")]) == 1
