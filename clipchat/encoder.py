# =============================================================================
# Clipboard VLM Chat - Image Encoder
# =============================================================================
# Serializes a raw RGBA pixel buffer into a lossless PNG container and encodes
# the PNG bytes as base64 text for JSON-safe transmission to the server.
# =============================================================================

import base64
import io
import logging

import numpy as np
from PIL import Image

from clipchat.clipboard import ClipboardImage
from clipchat.errors import EncodingError

logger = logging.getLogger(__name__)

_CHANNELS = 4  # RGBA8


def encode_png(width: int, height: int, rgba: bytes) -> bytes:
    """
    Encode an RGBA8 pixel buffer as PNG.

    Args:
        width:  Image width in pixels.
        height: Image height in pixels.
        rgba:   Row-major RGBA bytes, ``width * height * 4`` long.

    Returns:
        The PNG file bytes.

    Raises:
        EncodingError: If the dimensions do not match the buffer length or
                       Pillow fails to write the image.
    """
    if width <= 0 or height <= 0 or len(rgba) != width * height * _CHANNELS:
        raise EncodingError(width=width, height=height, buffer_length=len(rgba))

    pixels = np.frombuffer(rgba, dtype=np.uint8).reshape(height, width, _CHANNELS)
    buf = io.BytesIO()
    try:
        Image.fromarray(pixels).save(buf, format="PNG")
    except (OSError, ValueError) as exc:
        raise EncodingError(f"PNG encoding failed: {exc}") from exc

    png = buf.getvalue()
    logger.debug("Encoded %dx%d image → %d KB PNG", width, height, len(png) // 1024)
    return png


def encode_base64(data: bytes) -> str:
    """Standard (padded) base64 of data as ASCII text."""
    return base64.b64encode(data).decode("ascii")


def encode_image(image: ClipboardImage) -> str:
    """PNG-encode a clipboard image and return it as base64 text."""
    return encode_base64(encode_png(image.width, image.height, image.rgba))
