#!/usr/bin/env python3
"""
Natural-Language Fact Parser - statements in, facts stored, questions answered
"""

import logging
import sys
from pathlib import Path
from typing import Iterable, List, Optional

import click
import yaml
from rich.console import Console
from rich.table import Table
from rich.panel import Panel
from rich.markup import escape

from factparse.kb.fact_store import FactStore
from factparse.kb.models import WILDCARD
from factparse.parser.statement_interpreter import StatementInterpreter, StatementOutcome
from factparse.query.question_interpreter import QuestionInterpreter, Answer

# Setup logger
logger = logging.getLogger(__name__)


def load_config(config_path: str = "config/config.yaml") -> dict:
    """Load configuration from YAML file."""
    try:
        with open(config_path, 'r') as f:
            config = yaml.safe_load(f)
        return config or {}
    except FileNotFoundError:
        print(f"❌ Configuration file not found: {config_path}")
        sys.exit(1)
    except yaml.YAMLError as e:
        print(f"❌ Error parsing configuration file: {e}")
        sys.exit(1)


def setup_logging(config: dict):
    """Setup logging configuration."""
    log_config = config.get("logging", {})
    log_level = getattr(logging, log_config.get("level", "WARNING"))
    log_format = log_config.get("format", "%(asctime)s - %(name)s - %(levelname)s - %(message)s")

    # Create logs directory if it doesn't exist
    log_file = log_config.get("file", "logs/fact_parser.log")
    Path(log_file).parent.mkdir(parents=True, exist_ok=True)

    logging.basicConfig(
        level=log_level,
        format=log_format,
        handlers=[
            logging.FileHandler(log_file),
            logging.StreamHandler()
        ]
    )


class FactQuerySystem:
    """Main system: one fact store shared by the statement and question interpreters."""

    def __init__(self, config: dict, console: Optional[Console] = None):
        self.config = config
        self.console = console or Console()

        store_config = config.get("store", {})
        self.store = FactStore(wildcard=store_config.get("wildcard", WILDCARD))
        self.parser = StatementInterpreter(self.store, config.get("parser", {}))
        self.interpreter = QuestionInterpreter(self.store, config.get("query", {}))

        self.demo = config.get("demo", {})
        self.debug_mode = config.get("debug", {}).get("enabled", False)

    def ingest_statements(self, sentences: Iterable[str]) -> List[StatementOutcome]:
        """Interpret each sentence and show what was added."""
        outcomes = self.parser.interpret_all(sentences)
        for outcome in outcomes:
            self.display_outcome(outcome)
        return outcomes

    def display_outcome(self, outcome: StatementOutcome):
        if outcome.parsed:
            line = f"[green]✅[/green] \"{escape(outcome.sentence)}\" -> [bold]{escape(str(outcome.fact))}[/bold]"
        else:
            line = f"[red]❌[/red] \"{escape(outcome.sentence)}\" -> [yellow]{outcome.reasoning}[/yellow]"
        if self.debug_mode:
            line += f" [dim]({outcome.rule or 'no rule'})[/dim]"
        self.console.print(line, highlight=False)

    def display_database(self):
        """Show the whole fact store."""
        self.console.print(Panel(
            escape(self.store.dump()),
            title="[bold blue]Fact Database[/bold blue]",
            border_style="blue"
        ))

    def answer_questions(self, questions: Iterable[str]) -> List[Answer]:
        answers = self.interpreter.ask_all(questions)
        for answer in answers:
            self.display_answer(answer)
        return answers

    def display_answer(self, answer: Answer):
        """Display an answer in a panel titled with the question."""
        body = escape(answer.render())
        if self.debug_mode:
            body += f"\n\n[dim]{answer.rule or 'no rule'}: {answer.reasoning}[/dim]"

        style = "green" if answer.recognized else "red"
        self.console.print(Panel(
            body,
            title=f"[bold]{escape(answer.question)}[/bold]",
            border_style=style
        ), highlight=False)

    def run_direct_queries(self, queries: Iterable[dict]) -> List[Answer]:
        """Run raw pattern lookups from configuration."""
        answers = []
        for query in queries:
            answer = self.interpreter.direct_query(query["predicate"], query.get("pattern", []))
            description = query.get("description")
            if description:
                self.console.print(f"[cyan]{description}[/cyan]")
            self.display_answer(answer)
            answers.append(answer)
        return answers

    def show_stats(self):
        """Display fact store statistics."""
        stats = self.store.get_stats()

        table = Table(title="Fact Store Statistics")
        table.add_column("Predicate", style="cyan")
        table.add_column("Facts", style="white")
        table.add_column("Arities", style="magenta")

        for pred in stats["predicates"]:
            table.add_row(
                pred,
                str(stats["facts_per_predicate"][pred]),
                ", ".join(str(arity) for arity in stats["arities"][pred])
            )

        self.console.print(table)
        self.console.print(f"[blue]Total facts:[/blue] {stats['total_facts']}")

    def run_demo(self):
        """Ingest statements, dump the store, then answer questions."""
        self.console.print(Panel(
            "[bold blue]Natural-Language Fact Parser[/bold blue]",
            border_style="blue"
        ))

        self.console.print("\n[bold]STEP 1: Parsing natural language statements[/bold]")
        self.ingest_statements(self.demo.get("statements", []))

        self.console.print("\n[bold]STEP 2: Fact database[/bold]")
        self.display_database()

        self.console.print("\n[bold]STEP 3: Processing questions[/bold]")
        self.answer_questions(self.demo.get("questions", []))

        direct_queries = self.demo.get("direct_queries", [])
        if direct_queries:
            self.console.print("\n[bold]STEP 4: Direct pattern queries[/bold]")
            self.run_direct_queries(direct_queries)

    def interactive_mode(self):
        """Run the system in interactive mode."""
        self.console.print(Panel(
            "[bold blue]Natural-Language Fact Parser[/bold blue]\n"
            "Type a statement to teach a fact, or end with '?' to ask a question.\n"
            "Type 'quit' to exit, 'dump' to list facts, 'stats' for statistics, 'help' for commands.",
            border_style="blue"
        ))

        while True:
            try:
                line = click.prompt("\nInput", default="", show_default=False)

                if line.lower() in ['quit', 'exit', 'q']:
                    break
                elif line.lower() == 'dump':
                    self.display_database()
                    continue
                elif line.lower() == 'stats':
                    self.show_stats()
                    continue
                elif line.lower() == 'help':
                    self.console.print("""
                    [bold]Available Commands:[/bold]
                    • A statement, e.g. 'John lives in Paris'
                    • A question ending in '?', e.g. 'Where does John live?'
                    • 'dump' - Show all facts
                    • 'stats' - Show fact store statistics
                    • 'quit' - Exit
                    """)
                    continue
                elif not line.strip():
                    continue

                if line.strip().endswith("?"):
                    self.display_answer(self.interpreter.ask(line))
                else:
                    self.display_outcome(self.parser.interpret(line))

            except (KeyboardInterrupt, EOFError, click.exceptions.Abort):
                self.console.print("\n[yellow]Exiting...[/yellow]")
                break


@click.group()
@click.option('--config', '-c', default='config/config.yaml', help='Configuration file path')
@click.option('--debug', '-d', is_flag=True, help='Show matched rules and lookups')
@click.pass_context
def cli(ctx, config, debug):
    """Natural-Language Fact Parser CLI."""
    ctx.ensure_object(dict)
    ctx.obj['config'] = load_config(config)
    ctx.obj['debug'] = debug

    # Setup logging
    setup_logging(ctx.obj['config'])

    if debug:
        ctx.obj['config'].setdefault('debug', {})['enabled'] = True


@cli.command()
@click.pass_context
def demo(ctx):
    """Run the statement, database and question phases on the configured data."""
    system = FactQuerySystem(ctx.obj['config'])
    system.run_demo()


@cli.command()
@click.argument('questions', nargs=-1, required=True)
@click.option('--statement', '-s', 'statements', multiple=True,
              help='Statement to learn first (repeatable); defaults to the configured statements')
@click.pass_context
def ask(ctx, questions, statements):
    """Answer QUESTIONS after learning statements."""
    system = FactQuerySystem(ctx.obj['config'])
    system.ingest_statements(statements or system.demo.get("statements", []))
    system.answer_questions(questions)


@cli.command()
@click.argument('predicate')
@click.argument('pattern', nargs=-1)
@click.pass_context
def query(ctx, predicate, pattern):
    """Look up PREDICATE facts matching PATTERN ('?' matches anything)."""
    system = FactQuerySystem(ctx.obj['config'])
    system.parser.interpret_all(system.demo.get("statements", []))
    system.run_direct_queries([{"predicate": predicate, "pattern": list(pattern)}])


@cli.command()
@click.pass_context
def stats(ctx):
    """Show fact store statistics for the configured statements."""
    system = FactQuerySystem(ctx.obj['config'])
    system.parser.interpret_all(system.demo.get("statements", []))
    system.show_stats()


@cli.command()
@click.pass_context
def interactive(ctx):
    """Start interactive mode."""
    system = FactQuerySystem(ctx.obj['config'])
    system.interactive_mode()


if __name__ == "__main__":
    cli()
