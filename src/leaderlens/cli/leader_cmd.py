"""leaderlens leader — register and inspect interviews."""

from __future__ import annotations

import math

import click
from rich.console import Console
from rich.table import Table

from leaderlens.catalog.chapters import chapter_ranges, group_qa_by_chapter
from leaderlens.catalog.store import DuplicateLeaderError, LeaderNotFoundError
from leaderlens.cli.common import open_catalog
from leaderlens.models.leader import Leader
from leaderlens.utils.progress import log_error, log_success
from leaderlens.utils.timestamps import format_qa_timestamp, format_timestamp, seconds_to_timestamp

console = Console()


@click.group()
def leader_cmd() -> None:
    """Manage cataloged leaders."""


@leader_cmd.command("add")
@click.argument("name")
@click.option("--video", "video_url", required=True, help="Video URL")
@click.option("--transcript", "transcript_url", required=True, help="Transcript URL or file path")
@click.option("--thumbnail", "thumbnail_url", default=None, help="Thumbnail URL")
@click.option("--title", default=None, help="Display title")
@click.pass_context
def add(
    ctx: click.Context,
    name: str,
    video_url: str,
    transcript_url: str,
    thumbnail_url: str | None,
    title: str | None,
) -> None:
    """Register a new leader interview."""
    _, store = open_catalog(ctx)
    try:
        leader = store.create_leader(
            name,
            video_url,
            transcript_url,
            thumbnail_url=thumbnail_url,
            title=title,
        )
    except (DuplicateLeaderError, ValueError) as e:
        log_error(str(e))
        raise SystemExit(1)
    log_success(f"Added {leader.display_title}")


def matches_search(leader: Leader, search: str) -> bool:
    """Case-insensitive substring match on name or title."""
    needle = search.lower()
    return needle in leader.name.lower() or needle in (leader.title or "").lower()


@leader_cmd.command("list")
@click.option("--search", "-s", default=None, help="Filter by name or title")
@click.pass_context
def list_leaders(ctx: click.Context, search: str | None) -> None:
    """List leaders with their analysis state."""
    _, store = open_catalog(ctx)
    leaders = store.read_all()
    if not leaders:
        console.print("[dim]No leaders cataloged yet.[/dim]")
        return
    if search:
        leaders = [leader for leader in leaders if matches_search(leader, search)]
        if not leaders:
            console.print(f"[dim]No leaders match '{search}'.[/dim]")
            return

    table = Table(title="Leaders")
    table.add_column("Name", style="bold")
    table.add_column("Title")
    table.add_column("Versions", justify="right")
    table.add_column("Default")
    for leader in leaders:
        table.add_row(
            leader.name,
            leader.title or "—",
            str(len(leader.analysis_versions)),
            leader.latest_analysis_version or "[dim]—[/dim]",
        )
    console.print(table)


def chapter_span(start: str, end: float) -> str:
    """``03:07 - 05:10`` for a bounded chapter, the start alone for the last one."""
    if math.isinf(end):
        return format_timestamp(start)
    return f"{format_timestamp(start)} - {format_timestamp(seconds_to_timestamp(end))}"


@leader_cmd.command("show")
@click.argument("name")
@click.option("--qa/--no-qa", default=True, help="Show Q&A segments under each chapter")
@click.pass_context
def show(ctx: click.Context, name: str, qa: bool) -> None:
    """Show the default analysis version of a leader."""
    _, store = open_catalog(ctx)
    try:
        leader = store.get(name)
    except LeaderNotFoundError as e:
        log_error(str(e))
        raise SystemExit(1)

    console.print(f"\n[bold]{leader.display_title}[/bold]")
    console.print(f"[dim]{leader.video_url}[/dim]")

    version = leader.default_version()
    if version is None:
        console.print("No analysis yet. Run `leaderlens annotate` to create one.\n")
        return

    created = version.timestamp.strftime("%Y-%m-%d %H:%M") if version.timestamp else "—"
    console.print(f"Version {version.version_id} ({created})\n")

    ranges = chapter_ranges(version.chapter_markers)
    grouped = group_qa_by_chapter(version.chapter_markers, version.qa_segments)
    for span, (marker, segments) in zip(ranges, grouped):
        noise = " [magenta]\\[Noise][/magenta]" if marker.is_noise_segment else ""
        console.print(f"[cyan]{chapter_span(marker.timestamp, span.end)}[/cyan] [bold]{marker.title}[/bold]{noise}")
        if marker.description:
            console.print(f"  {marker.description}")
        tags = marker.themes + [f"[italic]{t}[/italic]" for t in marker.custom_themes]
        if tags:
            console.print(f"  [dim]Themes:[/dim] {', '.join(tags)}")
        if marker.context_card:
            console.print(f"  [dim]Context:[/dim] {marker.context_card}")
        if marker.matched_topics:
            console.print(f"  [dim]Topics:[/dim] {', '.join(marker.matched_topics)}")
        if qa:
            for segment in segments:
                start = format_qa_timestamp(segment.question_start or segment.answer_start)
                marker_q = "[yellow]Q*[/yellow]" if segment.is_jeopardy_style else "Q"
                console.print(f"    {marker_q} [{start}] {segment.question}")
        console.print()
