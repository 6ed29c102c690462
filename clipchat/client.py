# =============================================================================
# Clipboard VLM Chat - Completion HTTP Client
# =============================================================================
# Provides the CompletionClient class responsible for sending the transcript
# and the base64 clipboard image to the llama.cpp server's /completion
# endpoint and returning the generated continuation.
# =============================================================================

import logging
import time
from typing import Optional

import requests
from pydantic import ValidationError

from clipchat.errors import NetworkError, ParseError, ServerError
from shared.schemas import CompletionRequest, CompletionResponse, EmbeddedImage

logger = logging.getLogger(__name__)


class CompletionClient:
    """
    HTTP client for the llama.cpp server's completion API.

    Each call is a single blocking POST; generation may take many seconds and
    is waited for without a timeout unless one is configured.

    Args:
        server_url: Base URL of the server (e.g., "http://127.0.0.1:7001").
        timeout:    Seconds to wait for a response, None to wait indefinitely.
    """

    def __init__(self, server_url: str, timeout: Optional[float] = None):
        self._server_url = server_url.rstrip("/")
        self._timeout = timeout
        self._session = requests.Session()
        self._session.headers.update({"Content-Type": "application/json"})

    @property
    def endpoint(self) -> str:
        return f"{self._server_url}/completion"

    def complete(
        self,
        transcript: str,
        image_b64: str,
        temperature: float,
        n_predict: int,
    ) -> str:
        """
        Request a completion of the transcript with the image attached.

        Args:
            transcript:  Full conversation text sent as the prompt.
            image_b64:   Base64 PNG attached as image id 1.
            temperature: Sampling temperature.
            n_predict:   Maximum number of tokens to generate.

        Returns:
            str: The generated continuation text.

        Raises:
            NetworkError: If the server cannot be reached.
            ServerError:  If the server responds with a non-2xx status.
            ParseError:   If the body is not JSON with a string ``content``.
        """
        request = CompletionRequest(
            prompt=transcript,
            temperature=temperature,
            n_predict=n_predict,
            image_data=[EmbeddedImage(data=image_b64)],
        )
        payload = request.model_dump()
        payload_kb = len(image_b64) // 1024

        start = time.perf_counter()
        try:
            response = self._session.post(self.endpoint, json=payload, timeout=self._timeout)
        except requests.exceptions.RequestException as exc:
            raise NetworkError(f"Request to {self.endpoint} failed: {exc}") from exc

        if not 200 <= response.status_code < 300:
            raise ServerError(response.status_code, response.text)

        try:
            result = CompletionResponse.model_validate(response.json())
        except ValueError as exc:
            # requests' JSONDecodeError and pydantic's ValidationError both land here
            kind = "invalid fields" if isinstance(exc, ValidationError) else "not JSON"
            raise ParseError(f"Completion response is {kind}: {exc}") from exc

        elapsed_ms = (time.perf_counter() - start) * 1000
        logger.info(
            "Completion → %d chars (%.1fms, prompt=%d chars, %d KB image)",
            len(result.content), elapsed_ms, len(transcript), payload_kb,
        )
        return result.content

    def wait_for_server(self, timeout: float = 300, poll_interval: float = 2.0) -> bool:
        """
        Block until the server's /health endpoint reports the model loaded.

        Args:
            timeout:       Maximum seconds to wait for the server.
            poll_interval: Seconds between health check polls.

        Returns:
            True if the server is ready, False if timeout expired.
        """
        url = f"{self._server_url}/health"
        start = time.time()

        logger.info("Waiting for server at %s (timeout=%ds)...", url, timeout)

        while (time.time() - start) < timeout:
            try:
                response = self._session.get(url, timeout=5)
                if response.status_code == 200:
                    if response.json().get("status") == "ok":
                        logger.info("Server is ready (model loaded).")
                        return True
                else:
                    logger.info("Server responded %d, model not yet loaded...", response.status_code)
            except requests.exceptions.ConnectionError:
                logger.debug("Server not reachable yet...")
            except (requests.exceptions.RequestException, ValueError):
                logger.debug("Health check error", exc_info=True)

            time.sleep(poll_interval)

        logger.error("Timed out waiting for server after %ds.", timeout)
        return False
