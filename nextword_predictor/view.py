# view.py - pure projection of SessionState for the CLI and TUI
#
# Nothing here mutates state or reorders the canonical PredictionSet; both front
# ends render from these rows so they stay in step.

from __future__ import annotations

from typing import List, NamedTuple

from nextword_predictor.core.protocols import SessionState, Status


class PredictionRow(NamedTuple):
    index: int  # 1-based shortcut key
    word: str
    percent: str
    color: str


def confidence_color(probability: float) -> str:
    # > 0.7: High confidence = Green
    # > 0.4: Medium confidence = Cyan
    # Else: Low confidence = Yellow
    if probability > 0.7:
        return "green"
    if probability > 0.4:
        return "cyan"
    return "yellow"


def format_percent(probability: float) -> str:
    return f"{probability * 100:.1f}%"


def prediction_rows(state: SessionState) -> List[PredictionRow]:
    return [
        PredictionRow(i, p.word, format_percent(p.probability), confidence_color(p.probability))
        for i, p in enumerate(state.predictions, 1)
    ]


def status_line(state: SessionState) -> str:
    """One-line rich-markup summary of the session status."""
    if state.status is Status.LOADING:
        return "[cyan]Predicting...[/cyan]"
    if state.status is Status.ERROR:
        return f"[red]{state.error_message or 'error'}[/red]"
    if state.status is Status.READY:
        n = len(state.predictions)
        if state.predictions.exhausted:
            return f"[yellow]Only {n} predictions available[/yellow]"
        return f"[green]Top {n} predictions[/green]"
    return "[dim]Idle[/dim]"
