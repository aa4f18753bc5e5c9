from __future__ import annotations

from .descriptors import ArtifactSpec


def built_in_sources() -> dict[str, ArtifactSpec]:
    """
    Upstream projects the toolchain is built from.

    Notes:
    - leptonica publishes release tarballs named after the version.
    - tesseract only has GitHub tag archives; the server names the file
      through Content-Disposition, which is why filename inference exists.
    """
    return {
        "leptonica": ArtifactSpec(
            name="leptonica",
            url_template=(
                "https://github.com/DanBloomberg/leptonica/releases/download/"
                "{version}/leptonica-{version}.tar.gz"
            ),
            tags_url="https://api.github.com/repos/DanBloomberg/leptonica/git/refs/tags",
            description="Leptonica image processing library (Tesseract dependency).",
            homepage="http://www.leptonica.org/",
        ),
        "tesseract": ArtifactSpec(
            name="tesseract",
            url_template="https://github.com/tesseract-ocr/tesseract/archive/refs/tags/{version}.tar.gz",
            tags_url="https://api.github.com/repos/tesseract-ocr/tesseract/git/refs/tags",
            description="Tesseract OCR engine.",
            homepage="https://github.com/tesseract-ocr/tesseract",
        ),
    }
