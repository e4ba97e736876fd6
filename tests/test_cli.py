"""Tests for the command-line interface"""

import json

import pytest
from click.testing import CliRunner

from autodoc.source.index_loader import load_index
from config import CONFIG_FILENAME
from main import cli


@pytest.fixture
def runner(tmp_path, monkeypatch):
    """Runs in an empty directory so no config file is picked up"""
    workdir = tmp_path / "work"
    workdir.mkdir()
    monkeypatch.chdir(workdir)
    for name in ("AUTODOC_OUTPUT_DIR", "AUTODOC_OUTPUT_FILE", "AUTODOC_VERBOSE",
                 "AUTODOC_INCLUDE_PRIVATE", "AUTODOC_NO_COLOR"):
        monkeypatch.delenv(name, raising=False)
    return CliRunner()


class TestAnalyzeCommand:
    """Tests for `autodoc analyze`"""

    def test_analyze(self, runner, sample_project):
        result = runner.invoke(cli, ["analyze", str(sample_project), "--no-color"])

        assert result.exit_code == 0, result.output
        assert "UsersController" in result.output
        assert "/users/:id" in result.output
        assert "Controllers: 1" in result.output
        assert "Endpoints:   4" in result.output
        assert "\x1b[" not in result.output

    def test_verbose_lists_types(self, runner, sample_project):
        result = runner.invoke(cli, ["analyze", str(sample_project), "-v"])

        assert result.exit_code == 0, result.output
        assert "CreateUserDto [class]" in result.output
        assert "query: page (number)" in result.output

    def test_unsupported_file(self, runner, tmp_path):
        path = tmp_path / "notes.txt"
        path.write_text("hello")

        result = runner.invoke(cli, ["analyze", str(path)])

        assert result.exit_code == 1
        assert "Could not read source index" in result.output

    def test_invalid_index(self, runner, tmp_path):
        path = tmp_path / "index.json"
        path.write_text("{broken")

        result = runner.invoke(cli, ["analyze", str(path)])

        assert result.exit_code == 1

    def test_missing_path(self, runner, tmp_path):
        result = runner.invoke(cli, ["analyze", str(tmp_path / "missing")])
        assert result.exit_code == 2


class TestExportCommand:
    """Tests for `autodoc export`"""

    def test_export_with_openapi(self, runner, sample_project, tmp_path):
        output = tmp_path / "out" / "analysis.json"

        result = runner.invoke(cli, ["export", str(sample_project), "-o", str(output), "--openapi"])

        assert result.exit_code == 0, result.output
        assert json.loads(output.read_text())["summary"]["endpoints"] == 4
        openapi = json.loads((tmp_path / "out" / "analysis-openapi.json").read_text())
        assert "/users/{id}" in openapi["paths"]
        assert "Written to" in result.output

    def test_export_default_location(self, runner, sample_project, tmp_path):
        result = runner.invoke(cli, ["export", str(sample_project), "--compact"])

        assert result.exit_code == 0, result.output
        text = (tmp_path / "work" / "docs" / "analysis.json").read_text()
        assert "\n" not in text

    def test_export_verbose_enables_debug_logging(self, runner, sample_project, monkeypatch):
        calls = []
        monkeypatch.setattr("main.setup_logging", calls.append)

        result = runner.invoke(cli, ["export", str(sample_project), "-v"])

        assert result.exit_code == 0, result.output
        assert calls == [True]

    def test_export_quiet_by_default(self, runner, sample_project, monkeypatch):
        calls = []
        monkeypatch.setattr("main.setup_logging", calls.append)

        result = runner.invoke(cli, ["export", str(sample_project)])

        assert result.exit_code == 0, result.output
        assert calls == [False]


class TestScanCommand:
    """Tests for `autodoc scan`"""

    def test_scan_then_analyze_index(self, runner, sample_project, tmp_path):
        index_file = tmp_path / "index.json"

        result = runner.invoke(cli, ["scan", str(sample_project), "-o", str(index_file)])

        assert result.exit_code == 0, result.output
        assert "3 files" in result.output
        assert len(load_index(str(index_file))) == 3

        result = runner.invoke(cli, ["analyze", str(index_file)])
        assert result.exit_code == 0, result.output
        assert "Endpoints:   4" in result.output

    def test_output_required(self, runner, sample_project):
        result = runner.invoke(cli, ["scan", str(sample_project)])
        assert result.exit_code == 2


class TestInitConfigCommand:
    """Tests for `autodoc init-config`"""

    def test_init_config(self, runner, tmp_path):
        result = runner.invoke(cli, ["init-config"])

        assert result.exit_code == 0, result.output
        data = json.loads((tmp_path / "work" / CONFIG_FILENAME).read_text())
        assert data["json"]["output_dir"] == "./docs"

    def test_existing_file_needs_force(self, runner):
        assert runner.invoke(cli, ["init-config"]).exit_code == 0

        second = runner.invoke(cli, ["init-config"])
        assert second.exit_code == 1
        assert "already exists" in second.output

        assert runner.invoke(cli, ["init-config", "--force"]).exit_code == 0

    def test_version(self, runner):
        result = runner.invoke(cli, ["--version"])

        assert result.exit_code == 0
        assert "0.1.0" in result.output
