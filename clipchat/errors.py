# =============================================================================
# Clipboard VLM Chat - Error Taxonomy
# =============================================================================
# Exception classes for the clipboard chat client.  Every error is fatal: it
# is raised at the failing stage and handled only by the CLI entry point,
# which prints it and exits non-zero.
# =============================================================================

from typing import Optional


class ClipchatError(RuntimeError):
    """Base class for all errors raised by the client."""

    default_message = "Clipboard chat error."

    def __init__(self, message=None, **kwargs):
        if message is None:
            # Compose a default message from kwargs if available
            details = ", ".join(f"{k}={v}" for k, v in kwargs.items())
            message = f"{self.default_message} {details}" if details else self.default_message
        super().__init__(message)
        self.details = kwargs


class ClipboardError(ClipchatError):
    """Raised when the clipboard is empty, inaccessible or holds no image."""

    default_message = "Clipboard error."


class EncodingError(ClipchatError):
    """Raised when a pixel buffer cannot be encoded as PNG."""

    default_message = "Image encoding error."


class FileReadError(ClipchatError):
    """Raised when the prompt file cannot be read."""

    default_message = "Could not read prompt file."


class NetworkError(ClipchatError):
    """Raised when the inference server cannot be reached."""

    default_message = "Could not reach the inference server."


class ServerError(ClipchatError):
    """Raised when the inference server answers with a non-2xx status."""

    def __init__(self, status_code: int, body: Optional[str] = None):
        message = f"Server responded with HTTP {status_code}"
        if body:
            message = f"{message}: {body[:200]}"
        super().__init__(message, status_code=status_code)
        self.status_code = status_code
        self.body = body


class ParseError(ClipchatError):
    """Raised when the completion response is not the expected JSON."""

    default_message = "Malformed completion response."


class IoError(ClipchatError):
    """Raised when reading from or writing to the console fails."""

    default_message = "Console I/O error."
