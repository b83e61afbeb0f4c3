"""
cli.py - command line front end for the next-word predictor
Features:
- Interactive loop: type text, pick one of the top 5 next words by number, repeat
- Color-coded prediction table (Rich) rendered from the session state
- Slash commands for reset, config and help
- One-shot `predict` command that prints the predictions as JSON
- `tui` command launching the Textual app
"""

import argparse
import asyncio
import json
import sys
from typing import Callable, List, Optional

from dotenv import load_dotenv
from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.prompt import Prompt
from rich.table import Table
from rich.text import Text

from nextword_predictor import __version__
from nextword_predictor.core.controller import SelectionController
from nextword_predictor.core.errors import InputError
from nextword_predictor.core.protocols import PredictionSet
from nextword_predictor.core.service import PredictionService, build_service
from nextword_predictor.utils.config_manager import Config
from nextword_predictor.utils.logger_utils import Log
from nextword_predictor.view import prediction_rows, status_line

HELP_TEXT = (
    "Type text to predict from it, a number to pick a prediction, "
    "+word to append your own word.\n"
    "Commands: /reset /text /config [key value] /help /quit"
)


class CLI:
    """Interactive loop around one SelectionController session."""

    def __init__(self,
                 controller: SelectionController,
                 cfg: Config,
                 console: Optional[Console] = None,
                 ask: Optional[Callable[..., str]] = None):
        self.controller = controller
        self.cfg = cfg
        self.console = console or Console()
        self.ask = ask or Prompt.ask
        self.running = True

    def run(self):
        """
        Main interactive loop:
        - Loads predictions for the initial text
        - Prompts the user for input until /quit or EOF
        """
        self.console.rule("[bold magenta]Next-Word Predictor[/bold magenta]")
        self.console.print(f"[cyan]{HELP_TEXT}[/cyan]\n")
        self._run(self.controller.reset())
        self._render()

        while self.running:
            try:
                line = self.ask("[green]You[/green]", default="")
            except (EOFError, KeyboardInterrupt):
                self._exit()
                break
            if not line or not line.strip():
                continue
            self.handle_line(line.strip())

    def handle_line(self, line: str):
        if line.startswith("/"):
            self._handle_command(line)
            return

        if line.isdigit():
            idx = int(line) - 1
            preds = self.controller.state.predictions
            if 0 <= idx < len(preds):
                self._run(self.controller.select_word(preds[idx].word))
                self._render()
            else:
                self.console.print(f"[red]No prediction #{line}[/red]")
            return

        if line.startswith("+"):
            self._run(self.controller.select_word(line[1:]))
        else:
            self._run(self.controller.request_predictions(line))
        self._render()

    @staticmethod
    def _run(coro):
        return asyncio.run(coro)

    # COMMAND HANDLING -----------------------------------------------------------
    def _handle_command(self, cmd: str):
        parts = cmd.split()
        name = parts[0].lower()

        if name in ("/q", "/quit", "/exit"):
            self._exit()
            return

        if name == "/help":
            self.console.print(HELP_TEXT)
            return

        if name == "/reset":
            self._run(self.controller.reset())
            self._render()
            return

        if name == "/text":
            self.console.print(Panel(self.controller.state.text or "(empty)", title="Text", border_style="cyan"))
            return

        if name == "/config":
            self._config_command(parts[1:])
            return

        self.console.print(f"[red]Unknown command:[/red] {cmd}")

    def _config_command(self, args: List[str]):
        if not args:
            table = Table(title="Config", box=box.MINIMAL)
            table.add_column("Key", style="cyan")
            table.add_column("Value")
            for k, v in self.cfg.show():
                table.add_row(k, v)
            self.console.print(table)
            return
        if len(args) != 2:
            self.console.print("usage: /config [key value]")
            return
        try:
            self.cfg.set(args[0], args[1])
        except (KeyError, ValueError) as e:
            self.console.print(f"[red]{e}[/red]")
            return
        self.console.print(f"[green]{args[0]} = {self.cfg[args[0]]}[/green] [dim](applies on next start)[/dim]")

    # DISPLAY -------------------------------------------------------------------------------
    def _render(self):
        state = self.controller.state
        self.console.print(Panel(state.text or "(empty)", title="Text", border_style="cyan"))
        rows = prediction_rows(state)
        if rows:
            table = Table(title="Predictions", box=box.SIMPLE, show_edge=False)
            table.add_column("#", justify="right", style="cyan")
            table.add_column("Word", style="bold")
            table.add_column("Probability", justify="right", style="magenta")
            for row in rows:
                table.add_row(str(row.index), Text(row.word, style=row.color), row.percent)
            self.console.print(table)
        self.console.print(status_line(state))

    def _exit(self):
        self.console.rule("[red]Exiting[/red]")
        self.running = False


# ONE-SHOT ------------------------------------------------------------------------
async def predict_once(service: PredictionService, text: str) -> PredictionSet:
    if not text or not text.strip():
        raise InputError("Text is required")
    return await service.predict(text)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="nextword", description="Next-word prediction assistant")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("--config", type=str, default=None, help="path to a JSON config file")
    parser.add_argument("--verbose", action="store_true", help="echo log lines to the console")
    parser.add_argument("--seed", type=int, default=None, help="seed the local fallback generator")
    parser.add_argument("--offline", action="store_true", help="ignore any endpoint, use local predictions")

    sub = parser.add_subparsers(dest="command")
    sub.add_parser("tui", help="full-screen terminal UI (default)")
    sub.add_parser("cli", help="line-based interactive loop")
    p = sub.add_parser("predict", help="print the predictions for TEXT as JSON")
    p.add_argument("text", nargs="?", default="")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    load_dotenv()
    Log.configure(echo=args.verbose)

    try:
        cfg = Config(path=args.config)
    except ValueError as e:  # bad setting or malformed JSON file
        Log.error(f"[CLI] invalid configuration: {e}")
        print(f"nextword: invalid configuration: {e}", file=sys.stderr)
        return 2
    if args.seed is not None:
        cfg.data["seed"] = args.seed
    command = args.command or "tui"
    if command == "predict":
        # artificial latency only matters to interactive front ends
        cfg.data["fallback_delay"] = 0.0

    service = build_service(cfg, offline=args.offline)

    if command == "predict":
        try:
            preds = asyncio.run(predict_once(service, args.text))
        except InputError as e:
            print(json.dumps({"error": str(e)}))
            return 2
        print(json.dumps(preds.to_dict()))
        return 0

    controller = SelectionController(service, initial_text=cfg["initial_text"])
    if command == "cli":
        CLI(controller, cfg).run()
        return 0

    from nextword_predictor.tui_app import NextWordApp
    NextWordApp(controller).run()
    return 0


if __name__ == "__main__":
    sys.exit(main())
