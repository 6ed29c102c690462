# =============================================================================
# Clipboard VLM Chat - Prompt Builder
# =============================================================================
# Resolves the initial prompt (prompt file, inline text, or the built-in
# template) and holds the growing conversation transcript.
# =============================================================================

import logging
from pathlib import Path
from typing import Optional, Union

from clipchat.errors import FileReadError

logger = logging.getLogger(__name__)

# Format: `<system> USER: <user> ASSISTANT: <empty or handwritten assistant response>`
DEFAULT_PROMPT = (
    "Assistant is skillful in writing long and detailed description to images.\n"
    "USER: [img-1] Describe the image.\n"
    "ASSISTANT:"
)


def resolve_prompt(
    prompt: Optional[str] = None,
    prompt_file: Optional[Union[str, Path]] = None,
) -> str:
    """
    Pick the initial prompt text.

    A prompt file, when given, wins over the inline prompt, which in turn
    falls back to DEFAULT_PROMPT.

    Raises:
        FileReadError: If the prompt file cannot be read.
    """
    if prompt_file is not None:
        path = Path(prompt_file)
        try:
            text = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            raise FileReadError(f"Could not read prompt file {path}: {exc}") from exc
        logger.debug("Loaded prompt from %s (%d chars)", path, len(text))
        return text
    if prompt is None:
        return DEFAULT_PROMPT
    return prompt


def format_user_turn(line: str) -> str:
    """Format one line of user input as a turn awaiting the assistant's reply."""
    line = line.rstrip("\r\n")
    return f"USER: {line}\nASSISTANT:"


class Transcript:
    """
    The whole conversation so far, sent as context on every request.

    Starts from the initial prompt and only ever grows: user turns and model
    responses are appended verbatim.
    """

    def __init__(self, seed: str):
        self._parts = [seed]

    def append(self, text: str) -> None:
        self._parts.append(text)

    @property
    def text(self) -> str:
        return "".join(self._parts)

    def __str__(self) -> str:
        return self.text

    def __len__(self) -> int:
        return sum(len(part) for part in self._parts)
