"""Componentes de UI para CLI (Rich).

Por qué separar componentes:
- Mantiene la lógica de comandos separada de los detalles visuales.
- Permite reutilizar las mismas tablas/paneles en varios comandos.
"""

from __future__ import annotations

from typing import Iterable

from rich.align import Align
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from core.domain.models import Level, SolverBoard, SolverHintStep, Technique

GRID_SIZE = 9


def print_banner(console: Console) -> None:
    """Imprime el banner de bienvenida.

    Por qué aquí:
    - Evita imports circulares (main <-> doctor).
    - Permite que modos no interactivos (JSON/pipelines) lo omitan.
    """

    title = Text("SUDOJO", style="bold cyan")
    subtitle = Text("Levels • Techniques • Solver hints", style="dim")
    body = Align.center(Text.assemble(title, "\n", subtitle), vertical="middle")
    console.print(Panel(body, border_style="cyan", padding=(1, 4)))


def build_levels_table(levels: Iterable[Level]) -> Table:
    table = Table(title="Levels")
    table.add_column("Level", style="cyan", no_wrap=True)
    table.add_column("Title", style="white")
    table.add_column("Subscription", style="magenta")
    for item in levels:
        table.add_row(
            str(item.level),
            item.title or "",
            "yes" if item.requires_subscription else "",
        )
    return table


def build_techniques_table(techniques: Iterable[Technique]) -> Table:
    table = Table(title="Techniques")
    table.add_column("#", style="cyan", no_wrap=True)
    table.add_column("Level", style="green")
    table.add_column("Title", style="white")
    for item in techniques:
        table.add_row(
            str(item.technique),
            "" if item.level is None else str(item.level),
            item.title or "",
        )
    return table


def render_grid(puzzle: str) -> Text:
    """Tablero de 81 caracteres como rejilla 9x9; `0` y `.` se pintan en blanco."""

    text = Text()
    for row in range(GRID_SIZE):
        if row and row % 3 == 0:
            text.append("------+-------+------\n", style="dim")
        cells = puzzle[row * GRID_SIZE : (row + 1) * GRID_SIZE]
        for col, ch in enumerate(cells):
            if col and col % 3 == 0:
                text.append("| ", style="dim")
            text.append(ch if ch not in "0." else "·", style="bold" if ch not in "0." else "dim")
            text.append(" ")
        text.append("\n")
    return text


def build_board_panel(board: SolverBoard, *, title: str = "Board", solved: bool = False) -> Panel:
    puzzle = (board.solution if solved else None) or board.user or board.original
    body = render_grid(puzzle) if len(puzzle) == GRID_SIZE * GRID_SIZE else Text(puzzle)
    return Panel(body, title=Text(title, style="bold cyan"), border_style="cyan", expand=False)


def build_hints_table(hints: Iterable[SolverHintStep]) -> Table:
    table = Table(title="Hints")
    table.add_column("Step", style="cyan", no_wrap=True)
    table.add_column("Title", style="white")
    table.add_column("Cells", style="magenta")
    for index, hint in enumerate(hints, start=1):
        cells = ", ".join(f"r{c.row + 1}c{c.column + 1}" for c in hint.cells)
        table.add_row(
            str(index),
            hint.title or "",
            cells,
        )
    return table
