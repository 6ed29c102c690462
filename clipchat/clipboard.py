# =============================================================================
# Clipboard VLM Chat - Clipboard Access Module
# =============================================================================
# Reads the current clipboard image as a raw RGBA pixel buffer using Pillow's
# ImageGrab, and writes response text back to the clipboard using pyperclip.
# Both operations touch global OS clipboard state and are never retried.
# =============================================================================

import logging
from typing import NamedTuple

import pyperclip
from PIL import Image, ImageGrab

from clipchat.errors import ClipboardError

logger = logging.getLogger(__name__)


class ClipboardImage(NamedTuple):
    """Raw clipboard image: dimensions plus RGBA8 bytes in row-major order."""

    width: int
    height: int
    rgba: bytes


def read_image() -> ClipboardImage:
    """
    Read the current clipboard content as an RGBA pixel buffer.

    Returns:
        ClipboardImage with the image dimensions and its RGBA bytes.

    Raises:
        ClipboardError: If the clipboard is inaccessible, empty, or does not
                        hold image data.
    """
    try:
        content = ImageGrab.grabclipboard()
    except (OSError, NotImplementedError) as exc:
        raise ClipboardError(f"Clipboard is not accessible: {exc}") from exc

    if content is None:
        raise ClipboardError("Clipboard is empty or does not contain an image")
    # Windows and macOS report copied files as a list of paths
    if not isinstance(content, Image.Image):
        raise ClipboardError(
            f"Clipboard holds {type(content).__name__} content, not an image"
        )

    image = content.convert("RGBA")
    logger.debug("Read clipboard image: %dx%d (mode=%s)", image.width, image.height, content.mode)
    return ClipboardImage(image.width, image.height, image.tobytes())


def write_text(text: str) -> None:
    """
    Replace the clipboard content with text.

    Raises:
        ClipboardError: If no clipboard mechanism is available.
    """
    try:
        pyperclip.copy(text)
    except pyperclip.PyperclipException as exc:
        raise ClipboardError(f"Could not copy to clipboard: {exc}") from exc
    logger.info("Copied %d characters to the clipboard", len(text))
