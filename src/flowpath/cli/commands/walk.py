"""Walk command: take a flow in the terminal, one page at a time."""

import asyncio
from pathlib import Path
from typing import Any

import typer
from rich.console import Console
from rich.panel import Panel
from rich.prompt import Prompt

from flowpath.config.loader import ConfigLoader
from flowpath.config.models import FlowGraph, Node
from flowpath.core.constants import ComponentType
from flowpath.core.errors import ConfigError, FlowpathError
from flowpath.engine.topology import question_component_of
from flowpath.persistence.flows import InMemoryFlowStore
from flowpath.persistence.memory import InMemorySessionStore
from flowpath.runtime.router import SessionRouter, StepResult

BACK_COMMAND = ":back"
QUIT_COMMAND = ":quit"

TEXT_KEYS = ("text", "title", "question", "label", "content", "url")


def _component_text(config: dict[str, Any]) -> str | None:
    for key in TEXT_KEYS:
        value = config.get(key)
        if isinstance(value, str) and value.strip():
            return value
    return None


def parse_terminal_answer(raw: str, question_type: str | None, options: list[str]) -> Any:
    """Turn typed input into the answer shape the question expects.

    Option questions accept option numbers or text, comma separated when
    several are picked. Checkbox answers are always lists. Slider answers
    are numbers when they parse as one.
    """
    text = raw.strip()

    if question_type in (ComponentType.MULTIPLE_CHOICE.value, ComponentType.CHECKBOX_MULTI.value):
        picks = [p.strip() for p in text.split(",") if p.strip()]
        values = []
        for pick in picks:
            if pick.isdigit() and 1 <= int(pick) <= len(options):
                values.append(options[int(pick) - 1])
            else:
                values.append(pick)
        if question_type == ComponentType.CHECKBOX_MULTI.value or len(values) > 1:
            return values
        return values[0] if values else text

    if question_type == ComponentType.SCALE_SLIDER.value:
        try:
            number = float(text)
        except ValueError:
            return text
        return int(number) if number.is_integer() else number

    return text


class WalkRunner:
    """Drives a SessionRouter from terminal input with in-memory stores."""

    def __init__(self, graph: FlowGraph, user_id: str, console: Console | None = None):
        self.graph = graph
        self.user_id = user_id
        self.console = console or Console()
        self.router = SessionRouter(InMemoryFlowStore({graph.id: graph}), InMemorySessionStore())

    def show(self, step: StepResult) -> None:
        node = step.node
        if node is None:
            return
        lines = []
        for component in node.components:
            text = _component_text(component.config)
            label = f"[dim]{component.type}[/]"
            lines.append(f"{label} {text}" if text else label)
            for i, option in enumerate(component.options, start=1):
                lines.append(f"   [cyan]{i}.[/] {option}")
        self.console.print(
            Panel(
                "\n".join(lines) or "[dim](empty page)[/]",
                title=f"[bold]{node.title or node.id}[/]",
                subtitle=f"step {step.step_index}",
            )
        )

    def ask(self, node: Node) -> str:
        question = question_component_of(node)
        if question is None:
            return Prompt.ask("[bold green]Enter to continue[/]", default="", show_default=False)
        return Prompt.ask(f"[bold green]Your answer[/] [dim]({question.type})[/]")

    async def run(self) -> StepResult:
        step = await self.router.start(self.user_id, self.graph.id)
        self.console.print(
            f"Walking '{self.graph.title or self.graph.id}'. "
            f"Type {BACK_COMMAND} to go back, {QUIT_COMMAND} to stop.\n"
        )

        while not step.is_completed and step.node is not None:
            self.show(step)
            raw = self.ask(step.node)

            if raw.strip() == QUIT_COMMAND:
                break
            if raw.strip() == BACK_COMMAND:
                step = await self.router.back(step.session.id)
                continue

            question = question_component_of(step.node)
            answer = None
            if question is not None:
                answer = parse_terminal_answer(raw, question.type, question.options)
            try:
                step = await self.router.advance(step.session.id, answer)
            except FlowpathError as e:
                self.console.print(f"[bold red]{e}[/]")

        if step.is_completed:
            path = await self.router.path(step.session.id)
            self.console.print("[bold green]Flow completed.[/]")
            self.console.print("Path: " + " -> ".join(entry.node_id for entry in path))
        return step


def walk(
    path: Path = typer.Argument(
        ..., help="Config file, config directory or flow file", exists=True
    ),
    flow: str | None = typer.Option(None, "--flow", "-f", help="Flow id (needed when several)"),
    user_id: str = typer.Option("cli-user", "--user", "-u", help="User id for the session"),
) -> None:
    """Walk a flow interactively."""
    console = Console()

    try:
        flows = ConfigLoader.load_flows(path)
    except (ConfigError, OSError) as e:
        console.print(f"[bold red]Cannot load {path}:[/] {e}")
        raise typer.Exit(2) from e

    if flow is None:
        if len(flows) != 1:
            console.print(
                f"[bold red]Choose a flow with --flow:[/] {', '.join(sorted(flows)) or '(none)'}"
            )
            raise typer.Exit(2)
        flow = next(iter(flows))
    elif flow not in flows:
        console.print(f"[bold red]Flow '{flow}' not found in {path}[/]")
        raise typer.Exit(2)

    runner = WalkRunner(flows[flow], user_id, console)
    try:
        asyncio.run(runner.run())
    except KeyboardInterrupt:
        pass
    except FlowpathError as e:
        console.print(f"[bold red]Error:[/] {e}")
        raise typer.Exit(1) from e
