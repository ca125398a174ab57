# ABOUTME: Tests for the poudre-flies CLI
# ABOUTME: Runs commands through the asyncclick test runner with the pipeline replaced by a stub

import json
from datetime import UTC, datetime

import pytest
from asyncclick.testing import CliRunner
from loguru import logger as loguru_logger

from poudre_flies.config import Config
from poudre_flies.core.models import (
    FlyCatalog,
    FlyCategory,
    FlyMention,
    ReportManifest,
    ReportSnapshot,
    ResolvedFly,
)
from poudre_flies.extraction.base import ReportUnavailableError
from poudre_flies.main import app, write_manifest
from poudre_flies.utils.logging import LoggingMode, get_logging_status

SNAPSHOT = ReportSnapshot(
    flow_info="Current Streamflow: 150 cfs",
    report_text="Zebra Midge have been producing.",
    source_url="https://example.com/report",
    captured_at=datetime(2024, 1, 1, tzinfo=UTC),
)
MENTIONS = [FlyMention(name="Zebra Midge", is_dictionary_match=True)]
MANIFEST = ReportManifest.assemble(
    SNAPSHOT,
    MENTIONS,
    FlyCatalog.from_resolved(
        [ResolvedFly(name="Zebra Midge", image_url="https://cdn.example.com/zm.jpg?width=400", category=FlyCategory.NYMPH)]
    ),
)


class StubPipeline:
    """Stands in for FlyReportPipeline; records how it was built."""

    fail = False
    instances: list["StubPipeline"] = []

    def __init__(self, config=None, dictionary=None, client=None, pacer=None):
        self.dictionary = dictionary
        self.closed = False
        StubPipeline.instances.append(self)

    async def run(self, report_url=None):
        if StubPipeline.fail:
            raise ReportUnavailableError("Failed to fetch report: connection refused", url="https://example.com/report")
        return MANIFEST

    async def extract_report(self, report_url=None):
        if StubPipeline.fail:
            raise ReportUnavailableError("Failed to fetch report: connection refused", url="https://example.com/report")
        return SNAPSHOT, MENTIONS

    async def close(self):
        self.closed = True


@pytest.fixture(autouse=True)
def isolated_cli(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    monkeypatch.setattr("poudre_flies.main.FlyReportPipeline", StubPipeline)
    StubPipeline.fail = False
    StubPipeline.instances = []
    yield
    loguru_logger.remove()


def test_main_function_exists():
    """Test that the CLI group exists and is callable."""
    assert callable(app)


@pytest.mark.asyncio
async def test_main_command_help():
    runner = CliRunner()
    result = await runner.invoke(app, ["--help"])

    assert result.exit_code == 0
    assert "Poudre Flies" in result.output


@pytest.mark.asyncio
async def test_main_with_logging_status():
    runner = CliRunner()
    result = await runner.invoke(app, ["logging-status"])

    assert result.exit_code == 0
    assert "Logging Configuration" in result.output


@pytest.mark.asyncio
async def test_log_mode_setting_selects_production_sinks(tmp_path, monkeypatch):
    monkeypatch.setenv("POUDRE_FLIES_LOG_MODE", "production")
    monkeypatch.setattr("poudre_flies.main.get_config", Config)

    runner = CliRunner()
    result = await runner.invoke(app, ["logging-status"])

    assert result.exit_code == 0
    assert get_logging_status()["mode"] == LoggingMode.PRODUCTION
    assert "Production" in result.output
    assert not (tmp_path / "logs").exists()


class TestRunCommand:
    """Test the run command."""

    @pytest.mark.asyncio
    async def test_writes_manifest_to_output(self, tmp_path):
        output = tmp_path / "site" / "data.json"
        runner = CliRunner()

        result = await runner.invoke(app, ["--json", "run", "--output", str(output)])

        assert result.exit_code == 0
        artifact = json.loads(output.read_text())
        assert artifact["flowInfo"] == "Current Streamflow: 150 cfs"
        assert artifact["mentionedFlies"] == ["Zebra Midge"]
        assert artifact["nymphs"] == [{"name": "Zebra Midge", "image": "https://cdn.example.com/zm.jpg?width=400"}]
        assert list(output.parent.glob("*.tmp")) == []
        assert StubPipeline.instances[0].closed

    @pytest.mark.asyncio
    async def test_prints_manifest_without_output(self):
        runner = CliRunner()
        result = await runner.invoke(app, ["--json", "run"])

        assert result.exit_code == 0
        assert '"mentionedFlies"' in result.output
        assert '"lastUpdated"' in result.output

    @pytest.mark.asyncio
    async def test_interactive_run_shows_catalog(self):
        runner = CliRunner()
        result = await runner.invoke(app, ["run"])

        assert result.exit_code == 0
        assert "Recommended Flies" in result.output

    @pytest.mark.asyncio
    async def test_report_failure_writes_nothing(self, tmp_path):
        StubPipeline.fail = True
        output = tmp_path / "data.json"
        runner = CliRunner()

        result = await runner.invoke(app, ["--json", "run", "--output", str(output)])

        assert result.exit_code == 1
        assert not output.exists()
        assert StubPipeline.instances[0].closed

    @pytest.mark.asyncio
    async def test_report_failure_keeps_previous_manifest(self, tmp_path):
        output = tmp_path / "data.json"
        output.write_text('{"previous": true}')
        StubPipeline.fail = True
        runner = CliRunner()

        result = await runner.invoke(app, ["run", "--output", str(output)])

        assert result.exit_code == 1
        assert json.loads(output.read_text()) == {"previous": True}

    @pytest.mark.asyncio
    async def test_dictionary_file_is_injected(self, tmp_path):
        dictionary_file = tmp_path / "flies.json"
        dictionary_file.write_text(json.dumps({"known_patterns": ["Chubby Chernobyl"]}))
        runner = CliRunner()

        result = await runner.invoke(app, ["--json", "run", "--dictionary", str(dictionary_file)])

        assert result.exit_code == 0
        assert StubPipeline.instances[0].dictionary.known_patterns == ("Chubby Chernobyl",)


class TestExtractCommand:
    """Test the extract command."""

    @pytest.mark.asyncio
    async def test_extract_json(self):
        runner = CliRunner()
        result = await runner.invoke(app, ["--json", "extract"])

        assert result.exit_code == 0
        assert '"flowInfo": "Current Streamflow: 150 cfs"' in result.output
        assert '"dryFlies"' not in result.output

    @pytest.mark.asyncio
    async def test_extract_interactive(self):
        runner = CliRunner()
        result = await runner.invoke(app, ["extract"])

        assert result.exit_code == 0
        assert "Fishing Report" in result.output

    @pytest.mark.asyncio
    async def test_extract_failure_exits_nonzero(self):
        StubPipeline.fail = True
        runner = CliRunner()
        result = await runner.invoke(app, ["--json", "extract"])

        assert result.exit_code == 1


def test_write_manifest_replaces_existing_file(tmp_path):
    output = tmp_path / "data.json"
    output.write_text("stale")

    write_manifest(MANIFEST, output)

    assert json.loads(output.read_text())["sourceUrl"] == "https://example.com/report"
    assert sorted(path.name for path in tmp_path.iterdir()) == ["data.json"]
