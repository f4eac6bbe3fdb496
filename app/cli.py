"""
Command-line front end.

Sends a prompt (and optionally an image) to a local chat-completion server,
optionally asks the model to review its own answer, and prints the result.
Only model output goes to stdout; logs and errors go to stderr.
"""

from __future__ import annotations

import argparse
import logging
import sys
from typing import TextIO

from app.bootstrap.bootstrapper import bootstrap_review
from app.components.logger.logger import Logger
from app.entities.review import Phase, ReviewOutcome, ReviewRequest


EXIT_OK = 0
EXIT_FAILED = 1


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="llm-review",
        description="Ask a locally hosted LLM a question, optionally with an "
        "image, and optionally have it review its own answer.",
    )
    parser.add_argument(
        "-p", "--prompt", required=True, help="The prompt to send to the LLM"
    )
    parser.add_argument(
        "-i", "--image", default=None, help="Optional path to an image file"
    )
    parser.add_argument(
        "--review",
        action="store_true",
        help="Ask the model to review and revise its first response",
    )
    parser.add_argument(
        "--endpoint",
        default=None,
        help="Inference server base URL (default: $LLM_BASE_URL or "
        "http://localhost:8080)",
    )
    parser.add_argument(
        "-m", "--model", default=None, help="Model name sent with each request"
    )
    parser.add_argument(
        "--show-initial",
        action="store_true",
        help="With --review, also print the first response before the review",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Enable debug logging"
    )
    parser.add_argument(
        "--env",
        default="development",
        choices=["development", "staging", "production"],
        help=argparse.SUPPRESS,
    )
    return parser


def render_outcome(
    outcome: ReviewOutcome,
    request: ReviewRequest,
    show_initial: bool = False,
    stdout: TextIO | None = None,
    stderr: TextIO | None = None,
) -> int:
    """Print an outcome and return the process exit status."""
    stdout = stdout or sys.stdout
    stderr = stderr or sys.stderr

    if outcome.succeeded:
        if request.review and show_initial:
            print("--- Initial Response ---", file=stdout)
            print(outcome.initial_answer, file=stdout)
            print("\n--- Review Response ---", file=stdout)
        print(outcome.output, file=stdout)
        return EXIT_OK

    if outcome.phase is Phase.REVIEW:
        print(f"Error during review request: {outcome.error}", file=stderr)
        fallback = outcome.fallback
        if fallback is not None:
            print("Warning: showing the initial response instead.", file=stderr)
            print(fallback, file=stdout)
        return EXIT_FAILED

    print(f"Error: {outcome.error}", file=stderr)
    return EXIT_FAILED


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    try:
        components, review_service = bootstrap_review(
            env=args.env, base_url=args.endpoint, model_name=args.model
        )
    except (KeyError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_FAILED

    if args.verbose:
        components.get_component(Logger).set_level(logging.DEBUG)

    try:
        request = ReviewRequest(
            prompt=args.prompt, image_path=args.image, review=args.review
        )
        outcome = review_service.run(request)
        return render_outcome(outcome, request, show_initial=args.show_initial)
    finally:
        components.close()
