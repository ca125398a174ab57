# ABOUTME: Rich tables for presenting report manifests and logging status in the terminal
# ABOUTME: One styled table factory shared by the report, catalog and logging views

from typing import Any

from rich.box import ROUNDED
from rich.console import Console
from rich.table import Table

from poudre_flies.core.models import FlyMention, ManifestFly, ReportManifest, ReportSnapshot

REPORT_PREVIEW_CHARS = 500


def styled_table(title: str, *columns: tuple[str, str], title_style: str = "bold cyan") -> Table:
    """Create a rounded, left-titled table.

    Args:
        title: Table title (may include emoji)
        *columns: ``(header, style)`` pairs in display order
        title_style: Rich style applied to the title

    Returns:
        Empty table ready for ``add_row``
    """
    table = Table(
        title=f"[{title_style}]{title}[/{title_style}]",
        title_justify="left",
        box=ROUNDED,
        header_style="bold magenta",
        border_style="cyan",
    )
    for header, style in columns:
        table.add_column(header, style=style, no_wrap=header in ("Field", "Category"))
    return table


def create_key_value_table(title: str, rows: dict[str, str], title_style: str = "bold cyan") -> Table:
    """Two-column field/value table."""
    table = styled_table(title, ("Field", "bold blue"), ("Value", "green"), title_style=title_style)
    for field, value in rows.items():
        table.add_row(field, str(value))
    return table


def create_report_table(snapshot: ReportSnapshot, mentions: list[FlyMention]) -> Table:
    """Summarize an extracted report: flow line, report preview and matched flies."""
    report = snapshot.report_text
    if len(report) > REPORT_PREVIEW_CHARS:
        report = report[:REPORT_PREVIEW_CHARS] + "..."

    return create_key_value_table(
        "🏞️ Fishing Report",
        {
            "🌊 Flow": snapshot.flow_info or "N/A",
            "📜 Report": report or "N/A (section not found)",
            "🎣 Mentioned Flies": ", ".join(mention.name for mention in mentions) or "None",
            "🔗 Source": snapshot.source_url,
        },
    )


def _fly_names(flies: list[ManifestFly]) -> str:
    return ", ".join(fly.name for fly in flies) or "None"


def create_catalog_table(manifest: ReportManifest) -> Table:
    """One row per catalog bucket with its count and fly names."""
    table = styled_table("🪰 Recommended Flies", ("Category", "bold blue"), ("Count", "yellow"), ("Flies", "green"))
    table.columns[1].justify = "right"

    table.add_row("Dry Flies", str(len(manifest.dry_flies)), _fly_names(manifest.dry_flies))
    table.add_row("Nymphs", str(len(manifest.nymphs)), _fly_names(manifest.nymphs))
    table.add_row("Streamers", str(len(manifest.streamers)), _fly_names(manifest.streamers))
    return table


def create_logging_status_table(status: dict[str, Any]) -> Table:
    """Table for ``get_logging_status()`` output; log file rows appear only when active."""
    rows = {
        "🔧 Mode": status["mode"].title(),
        "📁 Log Directory": status["log_directory"] or "N/A (production mode)",
    }
    labels = {"main": "📝 Main Log", "json": "📊 JSON Log", "errors": "🚨 Error Log"}
    for key, label in labels.items():
        if status["log_files"][key]:
            rows[label] = status["log_files"][key]
    rows["🔇 Quieted Loggers"] = ", ".join(status["third_party_suppressed"])

    return create_key_value_table("🔍 Logging Configuration", rows, title_style="bold green")


def print_rich_table(console: Console, table: Table) -> None:
    """Print a table surrounded by blank lines."""
    console.print()
    console.print(table)
    console.print()
