"""leaderlens topics — corpus topic distribution and chapter categorization."""

from __future__ import annotations

from datetime import timedelta

import click
from rich.console import Console
from rich.table import Table

from leaderlens.cli.common import open_catalog, write_output
from leaderlens.utils.progress import log_error, log_success, show_summary

console = Console()


@click.group()
def topics_cmd() -> None:
    """Analyze topics across all interviews."""


@topics_cmd.command("analyze")
@click.option("--force-refresh", is_flag=True, help="Ignore the cached analysis")
@click.option("--max-age-hours", type=float, default=None, help="Regenerate when older than this")
@click.pass_context
def analyze(ctx: click.Context, force_refresh: bool, max_age_hours: float | None) -> None:
    """Generate (or load the cached) topic distribution."""
    config, store = open_catalog(ctx)

    from leaderlens.annotation.gateway import AnnotationGateway
    from leaderlens.topics.analysis import generate_topic_analysis_report

    hours = max_age_hours if max_age_hours is not None else config.topics.cache_max_age_hours
    try:
        analysis = generate_topic_analysis_report(
            store,
            AnnotationGateway(config.gateway),
            force_refresh=force_refresh,
            max_age=timedelta(hours=hours) if hours is not None else None,
            summary_chars=config.topics.summary_chars,
            excerpt_chars=config.topics.excerpt_chars,
        )
    except Exception as e:
        log_error(f"Topic analysis failed: {e}")
        raise SystemExit(1)

    table = Table(title="Topic distribution")
    table.add_column("Topic", style="bold")
    table.add_column("%", justify="right")
    table.add_column("Description")
    for share in analysis.topic_distribution:
        table.add_row(share.topic, f"{share.percentage:g}", share.description)
    console.print(table)

    for topic in analysis.key_topics:
        console.print(f"[bold cyan]{topic.topic}[/bold cyan] [dim]({', '.join(topic.related_interviews)})[/dim]")
        console.print(f"  {topic.description}")
        for quote in topic.key_quotes[:2]:
            console.print(f"  [italic]“{quote.quote}”[/italic] — {quote.interview_id}")
    if analysis.topic_insights:
        console.print(f"\n{analysis.topic_insights}")


@topics_cmd.command("categorize")
@click.option("--ai/--no-ai", "use_ai", default=True, help="Use the LLM or keyword matching")
@click.pass_context
def categorize(ctx: click.Context, use_ai: bool) -> None:
    """Assign key topics to the chapters of every default version."""
    config, store = open_catalog(ctx)

    from leaderlens.topics.categorize import categorize_chapters_by_topic

    gateway = None
    if use_ai:
        from leaderlens.annotation.gateway import AnnotationGateway
        gateway = AnnotationGateway(config.gateway)

    try:
        result = categorize_chapters_by_topic(
            store,
            gateway,
            use_ai=use_ai,
            threshold=config.topics.match_threshold,
            max_topics=config.topics.max_topics_per_chapter,
        )
    except Exception as e:
        log_error(f"Categorization failed: {e}")
        raise SystemExit(1)

    show_summary("Categorization", {
        "Leaders": result.total_leaders,
        "Chapters": result.total_chapters,
        "Method": "AI" if use_ai else "keyword matching",
    })


@topics_cmd.command("chapters")
@click.argument("topic", required=False)
@click.pass_context
def chapters(ctx: click.Context, topic: str | None) -> None:
    """List categorized chapters, grouped by topic."""
    _, store = open_catalog(ctx)

    from leaderlens.topics.analysis import chapters_by_topic
    from leaderlens.utils.timestamps import format_timestamp

    grouped = chapters_by_topic(store.read_all())
    if topic:
        grouped = {topic: grouped.get(topic, [])}
    if not any(grouped.values()):
        console.print("[dim]No categorized chapters. Run `leaderlens topics categorize`.[/dim]")
        return

    for name, refs in grouped.items():
        console.print(f"[bold cyan]{name}[/bold cyan] ({len(refs)})")
        for ref in refs:
            console.print(f"  {ref.leader_title} [dim]{format_timestamp(ref.timestamp)}[/dim] {ref.chapter_title}")


@topics_cmd.command("chart")
@click.option("--out", "-o", type=click.Path(), required=True, help="Write the pie layout JSON here")
@click.pass_context
def chart(ctx: click.Context, out: str) -> None:
    """Lay out the topic distribution pie chart and its labels."""
    config, store = open_catalog(ctx)

    from leaderlens.layout.pie import layout_pie_labels

    analysis = store.load_topic_analysis()
    if analysis is None or not analysis.topic_distribution:
        log_error("No topic analysis found. Run `leaderlens topics analyze` first.")
        raise SystemExit(1)

    layout = layout_pie_labels(
        [(share.topic, share.percentage) for share in analysis.topic_distribution],
        width=config.layout.pie_width,
        height=config.layout.pie_height,
        margin=config.layout.pie_margin,
        padding=config.layout.label_padding,
        font_size=config.layout.font_size,
    )
    write_output(out, layout.to_dict())
    log_success(f"Pie layout written to {out}")
