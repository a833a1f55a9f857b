"""deepcli command line.

Usage examples:
- One-shot query:
  deepcli "explain python generators"

- Reasoning model, JSON output:
  deepcli -m r1 --json "list three primes as {\"primes\": [...]}"

- Attach a file:
  deepcli --file notes.md "summarize this"

- Interactive chat (history kept in memory until exit):
  deepcli -i

Requires DEEPSEEK_API_KEY in the environment.
"""
import argparse
import sys
from typing import List, Optional

from rich.markup import escape

from .config import load_settings
from .dispatcher import Dispatcher, build_request, validate_max_tokens, validate_temperature
from .errors import ConfigError, DeepCliError, ValidationError
from .interactive import InteractiveSession
from .logging_util import get_logger, log_step, set_verbosity
from .registry import MODEL_ALIASES
from .render import err_console, render

logger = get_logger(__name__)

EXIT_INTERRUPTED = 130

def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(prog="deepcli", description="DeepSeek command-line interface")
    ap.add_argument("prompt", nargs="?", help="Query to send to the model (optional with --interactive)")
    ap.add_argument("-m", "--model", default="chat", choices=MODEL_ALIASES,
                    help="Model to use: r1 (reasoning) or chat (default: chat)")
    ap.add_argument("-t", "--temperature", type=float, help="Sampling temperature (0.0-2.0)")
    ap.add_argument("-l", "--max-tokens", "--max_tokens", dest="max_tokens", type=int,
                    help="Maximum number of tokens to generate")
    ap.add_argument("-i", "--interactive", action="store_true", help="Start an interactive chat session")
    ap.add_argument("--json", action="store_true", help="Output response as formatted JSON")
    ap.add_argument("--file", metavar="PATH", help="Attach a text or image file to the query")
    ap.add_argument("-v", "--verbose", action="count", default=0, help="Log dispatch steps to stderr (-vv for debug)")
    return ap

def _report(e: DeepCliError) -> int:
    err_console.print(f"[red]error:[/red] {escape(str(e))}", highlight=False)
    return e.exit_code

def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    set_verbosity(args.verbose)

    try:
        settings = load_settings()
    except ConfigError as e:
        return _report(e)

    dispatcher = Dispatcher(settings)

    if args.interactive:
        try:
            validate_temperature(args.temperature)
            validate_max_tokens(args.max_tokens)
        except ValidationError as e:
            return _report(e)

        session = InteractiveSession(
            dispatcher,
            model=args.model,
            temperature=args.temperature,
            max_tokens=args.max_tokens,
            json_mode=args.json,
        )
        try:
            return session.run(initial_prompt=args.prompt, initial_file=args.file)
        except KeyboardInterrupt:
            err_console.print()
            return EXIT_INTERRUPTED

    try:
        if not args.prompt:
            raise ValidationError("a prompt is required unless --interactive is given")

        log_step(logger, "1", "build request")
        request = build_request(
            args.prompt,
            model=args.model,
            temperature=args.temperature,
            max_tokens=args.max_tokens,
            file_path=args.file,
            json_mode=args.json,
        )

        log_step(logger, "2", "send")
        response = dispatcher.send(request)

        log_step(logger, "3", "render")
        render(response, args.json)
    except DeepCliError as e:
        return _report(e)
    except KeyboardInterrupt:
        return EXIT_INTERRUPTED

    return 0

if __name__ == "__main__":
    sys.exit(main())
