"""docsift command-line interface.

Startup sequence:
    1. Load pipeline configuration (needed for log_dir and download limits)
    2. Setup logging (must happen before any code that logs)
    3. Load extraction configuration, apply command-line overrides
    4. Load the source document (local path or URL)
    5. Classify it and print the ExtractionResult as JSON on stdout

Examples:
    docsift report.pdf
    docsift https://example.com/scan.pdf --on-image-only run_ocr
    docsift photo.PNG --filename upload.png
"""

from __future__ import annotations

import argparse
import json
import logging
import sys

from docsift.config import ExtractionSettings, PipelineSettings
from docsift.extractor import ContentClassifier, ExtractionError
from docsift.logging import setup_logging
from docsift.sources import SourceLoadError, load_source

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="docsift",
        description="Classify a PDF or image and extract its content.",
    )
    parser.add_argument("source", help="Local file path or http(s) URL")
    parser.add_argument(
        "--filename",
        help="Override the filename used to pick the extraction path",
    )
    parser.add_argument(
        "--on-image-only",
        choices=["return_paths", "run_ocr"],
        help="What to do with PDFs that have no text layer",
    )
    parser.add_argument(
        "--text-probe",
        choices=["filter", "operators"],
        help="Heuristic used to detect a text layer",
    )
    parser.add_argument("--scratch-dir", help="Parent directory for page images")
    return parser


def main(argv: list[str] | None = None) -> int:
    """Run one classification and return the process exit code."""
    args = build_parser().parse_args(argv)

    pipeline = PipelineSettings()
    setup_logging(
        log_dir=pipeline.log_dir,
        max_bytes=pipeline.log_max_bytes,
        backup_count=pipeline.log_backup_count,
        log_level_file=pipeline.log_level_file,
        log_level_console=pipeline.log_level_console,
    )

    overrides = {
        key: value
        for key, value in (
            ("on_image_only", args.on_image_only),
            ("text_probe", args.text_probe),
            ("scratch_dir", args.scratch_dir),
        )
        if value is not None
    }
    extraction = ExtractionSettings(**overrides)
    logger.info(
        "Config loaded -- extraction: on_image_only=%s, text_probe=%s, "
        "max_pages=%s, ocr_language=%s",
        extraction.on_image_only,
        extraction.text_probe,
        extraction.max_pages,
        extraction.ocr_language,
    )

    try:
        source = load_source(args.source, pipeline)
        classifier = ContentClassifier.from_settings(extraction)
        result = classifier.classify_file(source.data, args.filename or source.filename)
    except (SourceLoadError, ExtractionError) as e:
        logger.error("Classification of %s failed: %s", args.source, e)
        return 1

    json.dump(result.to_dict(), sys.stdout, ensure_ascii=False)
    sys.stdout.write("\n")
    return 0
