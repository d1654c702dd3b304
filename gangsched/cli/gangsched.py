"""
gangsched CLI: inspect gang admission and node scoring from the command line.

Usage:
    gangsched config      Show the effective configuration
    gangsched validate    Validate configuration from the environment
    gangsched admit       Check whether a job would pass gang admission
    gangsched score       Score and rank nodes by allocatable memory
"""

import re
from typing import List, Optional, Tuple

import typer
from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from ..config import GangSchedConfig, get_config
from ..errors import ConfigurationError, ResourceOverflowError
from ..scheduler.admission import AdmissionChecker, StaticMembershipSource
from ..scheduler.normalize import Normalizer
from ..scheduler.scoring import ResourceScorer
from ..types import Candidate, Job, NodeScore

console = Console()
cli = typer.Typer(
    name="gangsched",
    help="Gang admission and memory-based node scoring for workload schedulers.",
    no_args_is_help=True,
)

_QUANTITY_PATTERN = re.compile(r"^([0-9]+)(Ki|Mi|Gi|Ti)?$")
_QUANTITY_UNITS = {None: 1, "Ki": 2**10, "Mi": 2**20, "Gi": 2**30, "Ti": 2**40}


@cli.command()
def config():
    """Show the effective scoring and logging configuration."""
    cfg = get_config()

    table = Table(show_header=False, box=box.SIMPLE)
    table.add_column("Setting", style="bold")
    table.add_column("Value")

    table.add_row("Scoring mode", f"{cfg.scoring.mode.value} ({cfg.scoring.mode.long_name})")
    table.add_row("Score range", f"[{cfg.scoring.min_score}, {cfg.scoring.max_score}]")
    table.add_row("Log level", cfg.logging.log_level)
    table.add_row("Log format", cfg.logging.log_format)

    console.print(Panel(table, title="gangsched Configuration", border_style="blue"))


@cli.command()
def validate(
    env_file: Optional[str] = typer.Option(None, "--env-file", help="Load variables from a file"),
):
    """Validate configuration read from the environment."""
    try:
        cfg = GangSchedConfig.from_env(env_file)
    except ConfigurationError as e:
        console.print(f"[red]Invalid configuration:[/red] {e}")
        raise typer.Exit(code=1)

    errors = cfg.validate()
    if errors:
        for error in errors:
            console.print(f"[red]✗[/red] {error}")
        raise typer.Exit(code=1)

    console.print(f"[green]✓[/green] Configuration is valid: {cfg}")


@cli.command()
def admit(
    members: int = typer.Option(0, "--members", "-m", help="Known members of the group"),
    group: Optional[str] = typer.Option(None, "--group", "-g", help="Group identity"),
    quorum: Optional[str] = typer.Option(None, "--quorum", "-q", help="Required quorum"),
    job_id: str = typer.Option("cli-job", "--job-id", help="Job identity"),
):
    """Check whether a job would pass gang admission."""
    if members < 0:
        console.print("[red]Error:[/red] --members cannot be negative.")
        raise typer.Exit(code=2)

    job = Job(job_id=job_id, group=group, min_available=quorum)
    snapshot = StaticMembershipSource({group: members} if group else {})
    decision = AdmissionChecker(snapshot).check(job)

    table = Table(show_header=False, box=box.SIMPLE)
    table.add_column("Field", style="bold")
    table.add_column("Value")
    table.add_row("Job ID", decision.job_id)
    table.add_row("Group", decision.group or "-")
    table.add_row("Members", "-" if decision.member_count is None else str(decision.member_count))
    table.add_row("Required", "-" if decision.required is None else str(decision.required))

    if decision.admitted:
        console.print(Panel(table, title="Admitted", border_style="green"))
        return

    table.add_row("Reason", decision.reason)
    console.print(Panel(table, title="Rejected", border_style="red"))
    raise typer.Exit(code=1)


@cli.command()
def score(
    nodes: List[str] = typer.Argument(..., help="Nodes as NAME=MEMORY, e.g. node-a=8Gi"),
    mode: Optional[str] = typer.Option(None, "--mode", help="Least or Most"),
):
    """Score nodes by allocatable memory and rank them."""
    cfg = get_config()

    try:
        scorer = ResourceScorer(mode if mode is not None else cfg.scoring.mode)
        candidates = [_parse_node(spec) for spec in nodes]
    except (ConfigurationError, ValueError) as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(code=2)

    names = [c.name for c in candidates]
    duplicates = sorted({name for name in names if names.count(name) > 1})
    if duplicates:
        console.print(f"[red]Error:[/red] duplicate node names: {', '.join(duplicates)}")
        raise typer.Exit(code=2)

    batch = []
    raw_scores = {}
    excluded: List[Tuple[Candidate, str]] = []
    for candidate in candidates:
        try:
            raw = scorer.score(candidate)
        except ResourceOverflowError as e:
            excluded.append((candidate, str(e)))
            continue
        raw_scores[candidate.name] = raw
        batch.append(NodeScore(name=candidate.name, score=raw))

    if batch:
        Normalizer(cfg.scoring.min_score, cfg.scoring.max_score).normalize(batch)
    ranked = sorted(batch, key=lambda s: s.score, reverse=True)
    memory = {c.name: c.allocatable_memory for c in candidates}

    table = Table(title=f"Node Ranking ({scorer.mode.long_name})", box=box.ROUNDED)
    table.add_column("Rank", justify="right")
    table.add_column("Node", style="bold")
    table.add_column("Allocatable", justify="right")
    table.add_column("Raw score", justify="right")
    table.add_column("Score", justify="right", style="green")

    for rank, entry in enumerate(ranked, start=1):
        table.add_row(
            str(rank),
            entry.name,
            str(memory[entry.name]),
            str(raw_scores[entry.name]),
            str(entry.score),
        )
    for candidate, _ in excluded:
        table.add_row("-", candidate.name, str(candidate.allocatable_memory), "-", "excluded")

    console.print(table)
    for candidate, reason in excluded:
        console.print(f"[yellow]Excluded {candidate.name}:[/yellow] {reason}")


def _parse_node(spec: str) -> Candidate:
    """Parse a NAME=MEMORY node spec."""
    name, sep, quantity = spec.partition("=")
    if not sep or not name:
        raise ValueError(f"Invalid node spec {spec!r}, expected NAME=MEMORY")

    match = _QUANTITY_PATTERN.match(quantity.strip())
    if not match:
        raise ValueError(f"Invalid memory quantity {quantity!r} for node {name}")

    value, unit = match.groups()
    return Candidate(name=name, allocatable_memory=int(value) * _QUANTITY_UNITS[unit])


if __name__ == "__main__":
    cli()
