"""Tests for the command-line interface."""

import json
import pytest
from pathlib import Path
import tempfile

from cli import main, parse_args
from helpers import make_package, make_project, write_text


def _project(root: Path) -> None:
    make_project(root, {"paper-button": "^1.0.0"})
    make_package(root, "paper-button", "1.0.5", {"polymer": "^1.0.0"})
    make_package(root, "polymer", "1.9.3")


class TestParseArgs:
    """Tests for argument parsing."""

    def test_graph_defaults(self):
        """Test defaults of the graph command."""
        parsed = parse_args(["graph"])

        assert parsed.command == "graph"
        assert parsed.project == "."
        assert parsed.format == "ascii"
        assert parsed.log_level is None

    def test_log_level_is_case_insensitive(self):
        """Test that --log-level accepts lower case."""
        assert parse_args(["--log-level", "debug", "graph"]).log_level == "DEBUG"

    def test_command_required(self):
        """Test that a subcommand must be given."""
        with pytest.raises(SystemExit):
            parse_args([])


class TestMain:
    """Tests for main()."""

    def test_graph_json(self, capsys):
        """Test printing the readable graph as JSON."""
        with tempfile.TemporaryDirectory() as tmpdir:
            root = Path(tmpdir)
            _project(root)

            assert main(["graph", str(root), "-f", "json"]) == 0

            data = json.loads(capsys.readouterr().out)
            assert data["graph"] == {"paper-button": ["polymer"], "polymer": []}
            assert data["shrinkwrap"] == {"paper-button": "1.0.5", "polymer": "1.9.3"}

    def test_graph_to_file(self):
        """Test writing the graph to an output file."""
        with tempfile.TemporaryDirectory() as tmpdir:
            root = Path(tmpdir)
            _project(root)
            output = root / "graph.mmd"

            assert main(["graph", str(root), "-f", "mermaid", "-o", str(output)]) == 0

            assert output.read_text(encoding="utf-8").startswith("flowchart LR")

    def test_missing_manifest_exits_non_zero(self, capsys):
        """Test that fatal errors are reported with status 1."""
        with tempfile.TemporaryDirectory() as tmpdir:
            assert main(["graph", tmpdir]) == 1

            assert "bower.json" in capsys.readouterr().err

    def test_missing_package_exits_non_zero(self, capsys):
        """Test that a missing dependency aborts with the offending path."""
        with tempfile.TemporaryDirectory() as tmpdir:
            root = Path(tmpdir)
            make_project(root, {"ghost": "1"})

            assert main(["graph", str(root)]) == 1

            assert "ghost" in capsys.readouterr().err

    def test_install(self):
        """Test materializing packages into the modules directory."""
        with tempfile.TemporaryDirectory() as tmpdir:
            root = Path(tmpdir)
            _project(root)

            assert main(["install", str(root)]) == 0

            assert (root / "web_components" / "polymer" / "1.9.3" / ".bower.json").is_file()

    def test_install_custom_dest(self):
        """Test --dest."""
        with tempfile.TemporaryDirectory() as tmpdir:
            root = Path(tmpdir)
            _project(root)
            dest = root / "out"

            assert main(["install", str(root), "--dest", str(dest)]) == 0

            assert (dest / "paper-button" / "1.0.5").is_dir()

    def test_prepare(self, capsys):
        """Test rewriting the project's entry points."""
        with tempfile.TemporaryDirectory() as tmpdir:
            root = Path(tmpdir)
            write_text(root / "src" / "index.html", (
                '<link rel="import" href="../../paper-button/paper-button.html">'
                '<link rel="import" href="missing.html">'
            ))

            code = main([
                "prepare", str(root),
                "--main", "src/*.html",
                "--out-dir", "build",
            ])

            assert code == 0
            assert (root / "build" / "src" / "index.html").is_file()
            assert "1 reference(s) could not be resolved" in capsys.readouterr().err

    def test_invalid_config(self, capsys):
        """Test that configuration errors exit with status 1."""
        with tempfile.TemporaryDirectory() as tmpdir:
            write_text(Path(tmpdir) / "wcm.yml", "log_level: LOUD\n")

            assert main(["graph", tmpdir]) == 1

            assert "log_level" in capsys.readouterr().err
