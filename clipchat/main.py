# =============================================================================
# Clipboard VLM Chat - Command Line Entry Point
# =============================================================================
# Reads the clipboard image, encodes it, resolves the initial prompt and runs
# a ChatSession against the llama.cpp server's /completion endpoint.
#
# Flow:
#   1. Read the clipboard image as RGBA
#   2. Encode it as PNG → base64
#   3. Resolve the prompt (--prompt-file wins over --prompt)
#   4. Complete once, then copy back, stop, or chat interactively
#
# Every failure is fatal: the error is printed to stderr and the process
# exits with status 1 (2 for invalid arguments or CLIPCHAT_* values).
# =============================================================================

import argparse
import ipaddress
import logging
import math
import sys
from typing import List, Optional

from clipchat import clipboard
from clipchat.client import CompletionClient
from clipchat.encoder import encode_image
from clipchat.errors import ClipchatError, NetworkError
from clipchat.prompt import DEFAULT_PROMPT, Transcript, resolve_prompt
from clipchat.session import ChatSession
from config import get_config

logger = logging.getLogger(__name__)


def _port(value: str) -> int:
    port = int(value)
    if not 0 <= port <= 65535:
        raise argparse.ArgumentTypeError(f"port out of range: {port}")
    return port


def _finite_float(value: str) -> float:
    number = float(value)
    if not math.isfinite(number):
        raise argparse.ArgumentTypeError(f"must be a finite number: {value}")
    return number


def _non_negative_int(value: str) -> int:
    number = int(value)
    if number < 0:
        raise argparse.ArgumentTypeError(f"must be >= 0: {number}")
    return number


def build_parser() -> argparse.ArgumentParser:
    """Build the CLI parser; defaults come from the environment-aware Config."""
    config = get_config()
    parser = argparse.ArgumentParser(
        prog="clipchat",
        description="Describe or chat about the clipboard image with a local llama.cpp LLaVA server",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )
    parser.add_argument(
        "--host", type=ipaddress.IPv4Address, default=config.server_host,
        help="llama.cpp server host",
    )
    parser.add_argument(
        "--port", type=_port, default=config.server_port,
        help="llama.cpp server port",
    )
    parser.add_argument(
        "-p", "--prompt", type=str, default=DEFAULT_PROMPT,
        help="Initial prompt in format "
             "`<system> USER: <user> ASSISTANT: <empty or handwritten assistant response>`",
    )
    parser.add_argument(
        "--prompt-file", type=str, default=None,
        help="Read initial prompt from file (has priority over --prompt)",
    )
    parser.add_argument(
        "-i", "--interactive", action="store_true",
        help="Start in interactive chat mode",
    )
    parser.add_argument(
        "-c", "--copy-back", action="store_true",
        help="Copy response to clipboard (not in interactive mode)",
    )
    parser.add_argument(
        "-t", "--temperature", type=_finite_float, default=config.temperature,
        help="Sampling temperature",
    )
    parser.add_argument(
        "-n", "--n-predict", type=_non_negative_int, default=config.n_predict,
        help="Token predict limit",
    )
    parser.add_argument(
        "--wait", type=float, default=None, metavar="SECONDS",
        help="Wait up to SECONDS for the server's /health check before the first request",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true",
        help="Enable debug logging on stderr",
    )
    return parser


def run(args: argparse.Namespace) -> None:
    """Execute one clipboard chat session.  Raises ClipchatError on failure."""
    config = get_config()

    image = clipboard.read_image()
    image_b64 = encode_image(image)
    prompt = resolve_prompt(args.prompt, args.prompt_file)

    server_url = f"http://{args.host}:{args.port}"
    timeout = config.request_timeout or None
    logger.info("Using completion endpoint %s/completion", server_url)
    client = CompletionClient(server_url=server_url, timeout=timeout)

    if args.wait is not None and not client.wait_for_server(timeout=args.wait):
        raise NetworkError(f"Server at {server_url} not ready after {args.wait}s")

    session = ChatSession(
        client=client,
        image_b64=image_b64,
        transcript=Transcript(prompt),
        temperature=args.temperature,
        n_predict=args.n_predict,
        interactive=args.interactive,
        copy_back=args.copy_back,
        clipboard_writer=clipboard.write_text,
    )
    session.run()


def main(argv: Optional[List[str]] = None) -> int:
    """CLI entry point.  Returns the process exit status."""
    try:
        parser = build_parser()
    except ValueError as exc:
        # Malformed CLIPCHAT_* environment variable
        print(f"error: {exc}", file=sys.stderr)
        return 2
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s [%(name)s] %(levelname)s: %(message)s",
        datefmt="%H:%M:%S",
        stream=sys.stderr,
    )

    try:
        run(args)
    except ClipchatError as exc:
        logger.debug("Fatal error", exc_info=True)
        print(f"error: {exc}", file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        logger.info("Keyboard interrupt received. Exiting...")
        return 130
    return 0


if __name__ == "__main__":
    sys.exit(main())
