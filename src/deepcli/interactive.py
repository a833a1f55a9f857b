"""Interactive chat loop.

Directives (handled locally, never sent):
  \\file <path>   attach a file to the next message
  \\clear         drop the pending input buffer and attachment
  \\help          list directives
  \\exit, \\quit   leave the loop

A line ending in a backslash continues onto the next line.
The transcript lives in memory only and is gone when the process exits.
"""
from __future__ import annotations

from typing import Callable, Iterator, List, Optional

from rich.console import Console
from rich.markup import escape

from .attachments import read_attachment
from .dispatcher import Dispatcher, build_request
from .errors import DeepCliError
from .logging_util import get_logger
from .render import console as default_console
from .render import err_console as default_err_console
from .render import render
from .types import Attachment, Exchange, Response

logger = get_logger(__name__)

PROMPT = "> "
CONTINUATION_PROMPT = ". "

HELP_TEXT = """\
Directives:
  \\file <path>   attach a text or image file to the next message
  \\clear         discard the pending input and attachment
  \\help          show this help
  \\exit          leave (Ctrl-D works too)
End a line with \\ to continue typing on the next line."""

class Transcript:
    """Ordered (request, response) pairs of one interactive session."""

    def __init__(self):
        self._exchanges: List[Exchange] = []

    def append(self, exchange: Exchange) -> None:
        self._exchanges.append(exchange)

    def __iter__(self) -> Iterator[Exchange]:
        return iter(list(self._exchanges))

    def __len__(self) -> int:
        return len(self._exchanges)

class InteractiveSession:
    def __init__(
        self,
        dispatcher: Dispatcher,
        model: str = "chat",
        temperature: Optional[float] = None,
        max_tokens: Optional[int] = None,
        json_mode: bool = False,
        read_line: Optional[Callable[[str], str]] = None,
        out: Optional[Console] = None,
        err: Optional[Console] = None,
    ):
        self.dispatcher = dispatcher
        self.model = model
        self.temperature = temperature
        self.max_tokens = max_tokens
        self.json_mode = json_mode

        self.out = out or default_console
        self.err = err or default_err_console
        self.read_line = read_line or self.out.input

        self.transcript = Transcript()
        self.pending: List[str] = []
        self.attachment: Optional[Attachment] = None
        self.finished = False

    def attach(self, path: str) -> None:
        self.attachment = read_attachment(path)
        self.out.print(
            f"[dim]attached {escape(self.attachment.name)} ({self.attachment.kind}, {len(self.attachment.content)} bytes)[/dim]",
            highlight=False,
        )

    def clear(self) -> None:
        self.pending.clear()
        self.attachment = None
        self.out.print("[dim]input cleared[/dim]")

    def _directive(self, line: str) -> bool:
        """Handle a backslash directive. Returns False if the line is not one."""
        cmd, _, arg = line.partition(" ")
        arg = arg.strip()

        if cmd == "\\file":
            if not arg:
                self.err.print("[red]usage:[/red] \\file <path>", highlight=False)
            else:
                self.attach(arg)
            return True
        if cmd == "\\clear":
            self.clear()
            return True
        if cmd == "\\help":
            self.out.print(HELP_TEXT, markup=False, highlight=False)
            return True
        if cmd in ("\\exit", "\\quit"):
            self.finished = True
            return True
        return False

    def submit(self, text: str) -> Response:
        request = build_request(
            text,
            model=self.model,
            temperature=self.temperature,
            max_tokens=self.max_tokens,
            json_mode=self.json_mode,
            attachment=self.attachment,
        )
        response = self.dispatcher.send(request, history=self.transcript)
        render(response, self.json_mode, out=self.out, err=self.err)

        self.transcript.append(Exchange(request=request, response=response))
        self.attachment = None
        return response

    def handle_line(self, line: str) -> Optional[Response]:
        stripped = line.strip()

        if stripped.startswith("\\") and self._directive(stripped):
            return None

        if line.rstrip().endswith("\\"):
            self.pending.append(line.rstrip()[:-1])
            return None

        text = "\n".join(self.pending + [line]).strip()
        self.pending.clear()
        if not text:
            return None
        return self.submit(text)

    def _safe(self, fn: Callable[[], object]) -> None:
        try:
            fn()
        except DeepCliError as e:
            logger.info("interactive turn failed: %s", e)
            self.err.print(f"[red]error:[/red] {escape(str(e))}", highlight=False)

    def run(self, initial_prompt: Optional[str] = None, initial_file: Optional[str] = None) -> int:
        self.out.print("[bold]deepcli interactive mode[/bold] [dim](\\help for directives, Ctrl-C to quit)[/dim]")

        if initial_file:
            self._safe(lambda: self.attach(initial_file))
        if initial_prompt:
            self._safe(lambda: self.handle_line(initial_prompt))

        while not self.finished:
            try:
                line = self.read_line(CONTINUATION_PROMPT if self.pending else PROMPT)
            except EOFError:
                break
            self._safe(lambda: self.handle_line(line))

        return 0
