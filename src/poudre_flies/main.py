# ABOUTME: Main CLI application entry point using asyncclick for native async support
# ABOUTME: Provides commands for running the report pipeline, previewing extraction, and logging status

import os
import tempfile
from pathlib import Path

import asyncclick as click
from rich.console import Console
from rich.panel import Panel

from poudre_flies.config import get_config
from poudre_flies.core.dictionary import FlyDictionary
from poudre_flies.core.models import ReportManifest
from poudre_flies.core.pipeline import FlyReportPipeline
from poudre_flies.extraction.base import ReportUnavailableError
from poudre_flies.utils.logging import (
    LoggingMode,
    ProgressReporter,
    configure_logging,
    get_logging_status,
    with_pipeline_context,
)
from poudre_flies.utils.rich_tables import (
    create_catalog_table,
    create_logging_status_table,
    create_report_table,
    print_rich_table,
)

console = Console()


async def _run_with_progress(coro, message: str, json_output: bool):
    """Run async operation with a spinner unless JSON output was requested."""
    if json_output:
        return await coro

    reporter = ProgressReporter(console=console)
    return await reporter.run_with_status(
        operation=lambda: coro, message=message, success_message="✅ Operation completed"
    )


def write_manifest(manifest: ReportManifest, output: Path) -> None:
    """Write the manifest to ``output`` via a temp file and rename.

    Readers never observe a partially written artifact.
    """
    output.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_name = tempfile.mkstemp(dir=output.parent, prefix=f".{output.name}.", suffix=".tmp")
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as handle:
            handle.write(manifest.to_json())
            handle.write("\n")
        os.replace(tmp_name, output)
    except BaseException:
        Path(tmp_name).unlink(missing_ok=True)
        raise


def _load_dictionary(dictionary_file: Path | None) -> FlyDictionary | None:
    if dictionary_file is None:
        return None
    return FlyDictionary.from_file(dictionary_file)


@click.command()
@click.option("--output", "-o", type=click.Path(dir_okay=False, path_type=Path), help="Write manifest to this file")
@click.option(
    "--dictionary",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="JSON fly dictionary replacing the built-in one",
)
@click.option("--report-url", help="Override the report page URL")
@click.pass_context
async def run(ctx, output: Path | None, dictionary: Path | None, report_url: str | None):
    """
    🎣 Run the full report pipeline and emit the manifest.

    Fetches the fishing report, matches fly mentions, resolves their images
    and prints the manifest JSON (or writes it to --output). Nothing is
    written when the report page cannot be fetched.
    """
    json_output = ctx.obj["json_output"]

    with with_pipeline_context("fly_report") as logger:
        pipeline = FlyReportPipeline(dictionary=_load_dictionary(dictionary))
        try:
            manifest = await _run_with_progress(
                pipeline.run(report_url), "🏞️ Building fly report", json_output
            )
        except ReportUnavailableError as e:
            logger.error("Report unavailable, no manifest written", url=e.url, error=str(e))
            if not json_output:
                console.print(f"[red]❌ {e}[/red]")
            ctx.exit(1)
        finally:
            await pipeline.close()

        if not json_output:
            print_rich_table(console, create_catalog_table(manifest))

        if output is not None:
            write_manifest(manifest, output)
            logger.info("Manifest written", path=str(output))
            if not json_output:
                console.print(f"[green]💾 Manifest saved to {output}[/green]")
        else:
            click.echo(manifest.to_json())


@click.command()
@click.option("--report-url", help="Override the report page URL")
@click.pass_context
async def extract(ctx, report_url: str | None):
    """
    🕷️ Extract the report section and fly mentions without resolving images.
    """
    json_output = ctx.obj["json_output"]

    with with_pipeline_context("report_extraction") as logger:
        pipeline = FlyReportPipeline()
        try:
            snapshot, mentions = await _run_with_progress(
                pipeline.extract_report(report_url), "🕷️ Extracting report", json_output
            )
        except ReportUnavailableError as e:
            logger.error("Report unavailable", url=e.url, error=str(e))
            if not json_output:
                console.print(f"[red]❌ {e}[/red]")
            ctx.exit(1)
        finally:
            await pipeline.close()

        if json_output:
            click.echo(
                ReportManifest.assemble(snapshot, mentions).model_dump_json(
                    by_alias=True, include={"flow_info", "report_text", "mentioned_flies", "source_url"}, indent=2
                )
            )
            return

        print_rich_table(console, create_report_table(snapshot, mentions))
        if snapshot.is_empty:
            console.print(Panel("Report section not found on the page", border_style="yellow"))


def _initialize_logging(json_output: bool, log_level: str | None = None, log_file: str | None = None) -> None:
    """Configure sinks for this invocation; command-line options win over settings.

    ``--json`` forces production logging, otherwise ``log_mode`` decides.
    """
    config = get_config()
    configure_logging(
        mode=LoggingMode.PRODUCTION if json_output else config.log_mode,
        log_level=log_level or config.log_level,
        log_file=log_file or (str(config.log_file) if config.log_file else None),
    )


@click.command(name="logging-status")
def logging_status():
    """
    📊 Show where logs are going and which libraries are quieted.
    """
    print_rich_table(console, create_logging_status_table(get_logging_status()))


@click.group(invoke_without_command=True)
@click.option("--json", is_flag=True, help="Output machine-readable JSON instead of rich interface")
@click.option("--log-level", default=None, help="Logging level (DEBUG, INFO, WARNING, ERROR)")
@click.option("--log-file", help="Custom log file path")
@click.pass_context
def app(ctx, json: bool, log_level: str | None, log_file: str | None):
    """
    🎣 Poudre Flies - Fishing Report Fly Extractor

    Turn the Poudre River fishing report into a manifest of current
    conditions and recommended flies, each with a product image.
    """
    ctx.ensure_object(dict)
    ctx.obj["json_output"] = json

    _initialize_logging(json, log_level, log_file)

    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


app.add_command(run)
app.add_command(extract)
app.add_command(logging_status)


if __name__ == "__main__":
    app()
