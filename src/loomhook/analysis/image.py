"""Image preparation for the analysis request."""

from __future__ import annotations
import base64
from io import BytesIO
from pathlib import Path

from PIL import Image

from loomhook.errors import AnalysisFailed

MAX_IMAGE_SIDE = 800
JPEG_QUALITY = 80


def fit_within(width: int, height: int, max_side: int = MAX_IMAGE_SIDE) -> tuple[int, int]:
    """
    Scale (width, height) so the longer side is at most max_side.

    Aspect ratio is kept; images already small enough are left alone.
    """
    longest = max(width, height)
    if longest <= max_side:
        return width, height
    scale = max_side / longest
    return max(1, round(width * scale)), max(1, round(height * scale))


def prepare_image(
    image: "Image.Image | bytes | str | Path",
    max_side: int = MAX_IMAGE_SIDE,
    quality: int = JPEG_QUALITY,
) -> str:
    """
    Resize and re-encode an image for the vision service.

    Args:
        image: PIL image, raw file bytes, or a path to an image file
        max_side: Longest side after resizing, in pixels
        quality: JPEG quality (0-95)

    Returns:
        Base64-encoded JPEG data (no data-URL prefix)

    Raises:
        AnalysisFailed: if the input cannot be decoded as an image
    """
    try:
        if isinstance(image, Image.Image):
            img = image
        elif isinstance(image, (bytes, bytearray)):
            img = Image.open(BytesIO(image))
        else:
            img = Image.open(Path(image))
        img.load()
    except OSError as exc:
        raise AnalysisFailed(f"Cannot read image: {exc}") from exc

    size = fit_within(img.width, img.height, max_side)
    if size != (img.width, img.height):
        img = img.resize(size, Image.Resampling.LANCZOS)

    # JPEG has no alpha or palette
    if img.mode != "RGB":
        img = img.convert("RGB")

    buffer = BytesIO()
    img.save(buffer, format="JPEG", quality=quality)
    return base64.b64encode(buffer.getvalue()).decode("ascii")
