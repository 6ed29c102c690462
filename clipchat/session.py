# =============================================================================
# Clipboard VLM Chat - Session Driver
# =============================================================================
# Orchestrates one initial exchange with the server and then either stops,
# copies the response to the clipboard, or enters the interactive chat loop.
#
# State flow:
#   INIT         → one completion of the initial prompt, printed in full
#   INTERACTIVE  → read a line, append "USER: <line>\nASSISTANT:", complete,
#                  print "ASSISTANT: <response>", repeat until end-of-input
#   DONE         → return to the caller
#
# The transcript is owned here and only ever grows.  The same base64 image
# is attached to every request.
# =============================================================================

import enum
import logging
import sys
from typing import Callable, Optional, TextIO

from clipchat import clipboard
from clipchat.client import CompletionClient
from clipchat.errors import IoError
from clipchat.prompt import Transcript, format_user_turn

logger = logging.getLogger(__name__)


class SessionState(enum.Enum):
    INIT = "init"
    INTERACTIVE = "interactive"
    DONE = "done"


class ChatSession:
    """
    Drives the exchanges between the console and the completion client.

    Args:
        client:           CompletionClient bound to the server.
        image_b64:        Base64 PNG of the clipboard image, sent every turn.
        transcript:       Transcript seeded with the initial prompt.
        temperature:      Sampling temperature for every request.
        n_predict:        Token limit for every request.
        interactive:      Enter the chat loop after the first response.
        copy_back:        Copy the first response to the clipboard
                          (ignored in interactive mode).
        clipboard_writer: Callable used for copy-back
                          (default: clipboard.write_text).
        stdin, stdout:    Console streams (default: sys.stdin / sys.stdout).
    """

    def __init__(
        self,
        client: CompletionClient,
        image_b64: str,
        transcript: Transcript,
        temperature: float,
        n_predict: int,
        interactive: bool = False,
        copy_back: bool = False,
        clipboard_writer: Optional[Callable[[str], None]] = None,
        stdin: Optional[TextIO] = None,
        stdout: Optional[TextIO] = None,
    ):
        self._client = client
        self._image_b64 = image_b64
        self._transcript = transcript
        self._temperature = temperature
        self._n_predict = n_predict
        self._interactive = interactive
        self._copy_back = copy_back
        self._clipboard_writer = clipboard_writer or clipboard.write_text
        self._stdin = stdin if stdin is not None else sys.stdin
        self._stdout = stdout if stdout is not None else sys.stdout
        self.state = SessionState.INIT
        self.turns = 0

    @property
    def transcript(self) -> Transcript:
        return self._transcript

    def _complete(self) -> str:
        return self._client.complete(
            self._transcript.text,
            self._image_b64,
            temperature=self._temperature,
            n_predict=self._n_predict,
        )

    def _write(self, text: str) -> None:
        try:
            self._stdout.write(text)
            self._stdout.flush()
        except (OSError, UnicodeEncodeError) as exc:
            raise IoError(f"Could not write to stdout: {exc}") from exc

    def _read_line(self) -> str:
        try:
            return self._stdin.readline()
        except (OSError, UnicodeDecodeError) as exc:
            raise IoError(f"Could not read from stdin: {exc}") from exc

    # -----------------------------------------------------------------
    # States
    # -----------------------------------------------------------------

    def _run_init(self) -> SessionState:
        response = self._complete()
        self._write(f"{self._transcript.text}{response}\n")
        self._transcript.append(response)

        if self._interactive:
            return SessionState.INTERACTIVE
        if self._copy_back:
            self._clipboard_writer(response)
        return SessionState.DONE

    def _run_turn(self) -> SessionState:
        self._write("USER: ")
        line = self._read_line()
        if not line:
            logger.info("End of input after %d turns.", self.turns)
            self._write("\n")
            return SessionState.DONE

        self._transcript.append(format_user_turn(line))
        response = self._complete()
        self._write(f"ASSISTANT: {response}\n")
        self._transcript.append(response)
        self.turns += 1
        return SessionState.INTERACTIVE

    def run(self) -> None:
        """Run the session until it reaches DONE.  Errors propagate unchanged."""
        while self.state is not SessionState.DONE:
            if self.state is SessionState.INIT:
                self.state = self._run_init()
            else:
                self.state = self._run_turn()
            logger.debug("Session state → %s", self.state.value)
