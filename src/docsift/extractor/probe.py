"""Text-layer probes: decide whether a PDF carries extractable text.

A probe is any callable ``Document -> bool``. The classifier takes one as a
constructor argument, so the heuristic can be swapped without touching the
orchestration code.

``filter_probe`` is the default. It walks the objects each page's content
stream draws: any text-show run is text, and any drawn object whose
``/Filter`` chain is not purely JPEG counts as evidence of text. This is a
proxy: Flate-compressed, JBIG2 or CCITT scans are all reported as
"has text". ``operator_probe`` compares the number of text-show and
image-draw operators instead.
"""

from __future__ import annotations

import logging
from collections.abc import Callable

from docsift.extractor.backends import Document
from docsift.extractor.types import TEXT_ELEMENT

logger = logging.getLogger(__name__)

TextProbe = Callable[[Document], bool]

IMAGE_ONLY_FILTER = "DCTDecode"

TEXT_SHOW_OPERATORS = frozenset({"Tj", "TJ", "'", '"'})
IMAGE_DRAW_OPERATORS = frozenset({"Do", "BI", "INLINE IMAGE"})


def filter_probe(document: Document) -> bool:
    """Return True at the first text run or non-JPEG filtered element.

    Elements without a filter are ignored; a page with no elements counts
    toward "no text". Never raises for classification reasons; a malformed
    content stream surfaces as DocumentParseFailure from the backend.
    """
    for page in document.pages:
        for element in page.content_elements():
            if element.kind == TEXT_ELEMENT:
                logger.debug("Text layer found on page %d (text run)", page.number + 1)
                return True
            if not element.filters:
                continue
            if any(name != IMAGE_ONLY_FILTER for name in element.filters):
                logger.debug(
                    "Text layer found on page %d (%s filtered %s)",
                    page.number + 1,
                    element.kind,
                    "/".join(element.filters),
                )
                return True
    logger.debug("No text layer found in %d page(s)", len(document.pages))
    return False


def operator_probe(document: Document) -> bool:
    """Return True when text-show operators exist and are not outnumbered.

    Counts ``Tj``/``TJ``/``'``/``"`` against ``Do`` and inline images across
    the whole document.
    """
    text_ops = 0
    image_ops = 0
    for page in document.pages:
        for op in page.operations():
            if op.operator in TEXT_SHOW_OPERATORS:
                text_ops += 1
            elif op.operator in IMAGE_DRAW_OPERATORS:
                image_ops += 1
    logger.debug(
        "Operator probe: %d text-show vs %d image-draw operators",
        text_ops,
        image_ops,
    )
    return text_ops > 0 and text_ops >= image_ops


_PROBES: dict[str, TextProbe] = {
    "filter": filter_probe,
    "operators": operator_probe,
}


def get_probe(name: str) -> TextProbe:
    """Look up a probe by its settings name."""
    try:
        return _PROBES[name]
    except KeyError:
        raise ValueError(
            f"Unknown text probe {name!r}; expected one of {sorted(_PROBES)}"
        ) from None
