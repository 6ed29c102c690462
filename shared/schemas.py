# =============================================================================
# Clipboard VLM Chat - Shared API Schemas
# =============================================================================
# Pydantic models defining the data contract between the chat client and the
# llama.cpp server's /completion endpoint.  These schemas are used for request
# serialization and response validation across the HTTP API boundary.
#
# The server is stateless with respect to image data: the single clipboard
# image travels with every request, always under id 1 so that the prompt's
# "[img-1]" tag refers to it.
# =============================================================================

from pydantic import BaseModel, Field
from typing import List

IMAGE_ID = 1
USER_STOP = "USER:"


class EmbeddedImage(BaseModel):
    """
    A base64-encoded PNG attached to a completion request.

    Attributes:
        data: Base64 text of the PNG bytes.
        id:   Image identifier referenced from the prompt as ``[img-<id>]``.
    """

    data: str = Field(..., description="Base64-encoded PNG bytes")
    id: int = Field(default=IMAGE_ID, description="Image id referenced by the prompt")


class CompletionRequest(BaseModel):
    """
    Request body for ``POST /completion``.

    Built fresh for every call from the current transcript.  Exactly one image
    is attached and generation stops at the start of the next user turn.

    Attributes:
        prompt:       Full transcript sent as context.
        temperature:  Sampling temperature.
        n_predict:    Maximum number of tokens to generate.
        cache_prompt: Let the server reuse its KV cache for the common prefix.
        image_data:   The single embedded image.
        stop:         Stop sequences.
    """

    prompt: str
    temperature: float
    n_predict: int = Field(..., ge=0)
    cache_prompt: bool = True
    image_data: List[EmbeddedImage] = Field(..., min_length=1, max_length=1)
    stop: List[str] = Field(default_factory=lambda: [USER_STOP])


class CompletionResponse(BaseModel):
    """
    Response from ``POST /completion``.

    Only the generated continuation is consumed; the server's timing and
    token statistics are ignored.
    """

    content: str
