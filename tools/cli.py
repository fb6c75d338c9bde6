#!/usr/bin/env python3
"""
askbase CLI - Command Line Interface
====================================
Ask questions, teach answers and inspect the resolver without the server.

Usage:
    askbase ask "What is a goroutine?"
    askbase ask "What is a goroutine?" --detail
    askbase chat
    askbase stats
    askbase serve --port 8080
"""

import argparse
import sys
from pathlib import Path
from typing import Callable, List, Optional

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from config import ConfigurationError, Settings, setup_logging
from reasoning import ResponseResolver, Tagger, create_resolver


CHAT_HELP = "Commands: /learn <question> => <answer>, /stats, /quit"


class CLIController:
    """Controls the askbase resolver from the CLI"""

    def __init__(
        self,
        settings: Settings,
        console: Optional[Console] = None,
        tagger: Optional[Tagger] = None
    ):
        self.settings = settings
        self.console = console or Console()
        self._tagger = tagger
        self._resolver: Optional[ResponseResolver] = None

    @property
    def resolver(self) -> ResponseResolver:
        """Resolver, built on first use. Raises ConfigurationError."""
        if self._resolver is None:
            self._resolver = create_resolver(self.settings, tagger=self._tagger)
        return self._resolver

    def cmd_ask(self, question: str, detail: bool = False) -> None:
        if not detail:
            self.console.print(self.resolver.resolve(question), markup=False)
            return

        resolution = self.resolver.resolve_detailed(question)
        self.console.print(resolution.answer, markup=False)
        self.console.print(
            f"[dim]tier={resolution.tier.value} score={resolution.score:.3f} "
            f"keywords={escape(', '.join(resolution.keywords)) or '-'}[/dim]"
        )

    def cmd_chat(self, input_fn: Optional[Callable[[str], str]] = None) -> None:
        """Interactive loop. Learned answers live until the process exits."""
        input_fn = input_fn or self.console.input
        self.console.print(f"[bold cyan]askbase chat[/bold cyan]  {CHAT_HELP}")

        while True:
            try:
                line = input_fn("[bold]> [/bold]").strip()
            except (EOFError, KeyboardInterrupt):
                self.console.print()
                break

            if not line:
                continue
            if line in ("/quit", "/exit"):
                break
            if line == "/stats":
                self.cmd_stats()
                continue
            if line.startswith("/learn"):
                self._learn_from_line(line[len("/learn"):])
                continue

            self.console.print(self.resolver.resolve(line), style="green", markup=False)

    def _learn_from_line(self, text: str) -> None:
        question, sep, answer = text.partition("=>")
        question, answer = question.strip(), answer.strip()
        if not sep or not question or not answer:
            self.console.print("Usage: /learn <question> => <answer>", style="yellow")
            return

        self.resolver.learn(question, answer)
        self.console.print(f"Learned answer for: {question}", style="cyan", markup=False)

    def cmd_stats(self) -> None:
        stats = self.resolver.get_stats()

        table = Table(title="askbase statistics", show_header=True)
        table.add_column("Metric", style="cyan")
        table.add_column("Value", style="green")

        kb_stats = stats['knowledge_base']
        memory_stats = stats['memory']
        table.add_row("Knowledge entries", str(kb_stats['total_entries']))
        table.add_row("Learned entries", str(kb_stats['learned_entries']))
        table.add_row("Vocabulary", str(stats['embeddings']['words']))
        table.add_row("Dimension", str(stats['embeddings']['dimension']))
        table.add_row("Greetings", str(stats['greetings']))
        table.add_row("Common questions", str(stats['common_questions']))
        table.add_row("Interactions", f"{memory_stats['interactions']}/{memory_stats['capacity']}")
        table.add_row("Patterns", str(memory_stats['patterns']))

        self.console.print(table)

    def cmd_serve(self, host: Optional[str] = None, port: Optional[int] = None) -> None:
        from api.server import run_server

        if host:
            self.settings.HOST = host
        if port:
            self.settings.PORT = port
        run_server(self.settings)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='askbase',
        description='Question answering over a curated knowledge base'
    )
    parser.add_argument('--data-dir', default=None, help='Directory holding prompt.json and embeddings.json')
    parser.add_argument('--log-level', default=None, help='Logging level (default WARNING for CLI commands)')

    subparsers = parser.add_subparsers(dest='command', help='Commands')

    ask_parser = subparsers.add_parser('ask', help='Answer a single question')
    ask_parser.add_argument('question', help='Your question')
    ask_parser.add_argument('--detail', '-d', action='store_true',
                            help='Show which tier answered and its score')

    subparsers.add_parser('chat', help='Interactive session')
    subparsers.add_parser('stats', help='Show statistics')

    serve_parser = subparsers.add_parser('serve', help='Run the HTTP server')
    serve_parser.add_argument('--host', default=None, help='Host to bind to')
    serve_parser.add_argument('--port', '-p', type=int, default=None, help='Port to bind to')

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 0

    settings = Settings.from_env()
    if args.data_dir:
        settings.DATA_DIR = Path(args.data_dir)
    if args.log_level:
        settings.logging.level = args.log_level

    controller = CLIController(settings)

    try:
        if args.command == 'serve':
            controller.cmd_serve(host=args.host, port=args.port)
            return 0

        setup_logging(args.log_level or "WARNING", settings.logging.format)

        if args.command == 'ask':
            controller.cmd_ask(args.question, detail=args.detail)
        elif args.command == 'chat':
            controller.cmd_chat()
        elif args.command == 'stats':
            controller.cmd_stats()
    except ConfigurationError as e:
        controller.console.print(f"Configuration error: {e}", style="bold red", markup=False)
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
