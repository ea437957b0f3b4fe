"""
Rich rendering of pipeline state.

A thin presentation adapter: subscribe a ConsoleRenderer to a
VerdictCoordinator to print each state change.

Copyright (c) 2025 DNS Science.io, an After Dark Systems, LLC company.
All rights reserved.
"""

from rich.console import Console, Group
from rich.panel import Panel
from rich.text import Text

from breachaware.models import BreachStatus, BreachVerdict, Phase, PipelineState, RiskLevel


def strength_color(score: int | None) -> str:
    """Get color for a strength score."""
    colors = {
        0: "red",
        1: "orange3",
        2: "yellow",
        3: "green",
        4: "bright_green",
    }
    return colors.get(score, "grey50")


def risk_color(risk: RiskLevel | None) -> str:
    """Get color for risk level."""
    colors = {
        RiskLevel.SAFE: "green",
        RiskLevel.LOW: "yellow",
        RiskLevel.MEDIUM: "orange3",
        RiskLevel.HIGH: "red",
        RiskLevel.CRITICAL: "bold red",
    }
    return colors.get(risk, "grey50")


def breach_message(verdict: BreachVerdict) -> Text:
    """One-line breach status. Unknown and failed never look like clean."""
    if verdict.status == BreachStatus.BREACHED:
        return Text(
            f"Your password has been breached {verdict.occurrences:,} times.",
            style=risk_color(verdict.risk_level),
        )
    if verdict.status == BreachStatus.CLEAN:
        return Text("Your password was not found in any breaches.", style="green")
    if verdict.status == BreachStatus.LOOKUP_FAILED:
        return Text("Breach status unknown: the breach check failed.", style="bold magenta")
    return Text("Checking known breaches...", style="dim")


def render_state(state: PipelineState) -> Panel:
    """Build a panel for one state snapshot."""
    if state.phase == Phase.IDLE:
        return Panel(Text("Enter a password to check it.", style="dim"), title="Password Check")

    parts = [breach_message(state.breach)]

    if state.strength is not None:
        strength = state.strength
        score = Text("Strength: ")
        score.append(f"{strength.score} / 4 ({strength.label})", style=f"bold {strength_color(strength.score)}")
        parts.append(score)
        if strength.warning:
            parts.append(Text(f"Warning: {strength.warning}", style="yellow"))
        for suggestion in strength.suggestions:
            parts.append(Text(f"  - {suggestion}", style="cyan"))
    elif state.strength_error:
        parts.append(Text("Strength unavailable.", style="dim"))
    else:
        parts.append(Text("Scoring strength...", style="dim"))

    return Panel(Group(*parts), title="Password Check")


class ConsoleRenderer:
    """State listener that prints each snapshot to a rich console."""

    def __init__(self, console: Console | None = None):
        self.console = console or Console()

    def __call__(self, state: PipelineState) -> None:
        self.console.print(render_state(state))
