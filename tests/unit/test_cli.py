"""
Unit tests for the command line interface
"""

import json
from pathlib import Path

import pytest
import yaml
from click.testing import CliRunner
from member_order import __version__
from member_order.cli import cli, main

ENV_VARS = ["MEMBER_ORDER_DRY_RUN", "MEMBER_ORDER_VERBOSE", "MEMBER_ORDER_NO_BACKUP"]


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture(autouse=True)
def isolated_home(tmp_path, monkeypatch):
    """Keep user level configuration out of the tests"""
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setattr(Path, "home", lambda: home)
    for key in ENV_VARS:
        monkeypatch.delenv(key, raising=False)


@pytest.fixture
def config_file(temp_dir):
    """Config file keeping backups inside the temporary directory"""
    path = temp_dir / "member-order.yaml"
    backup = {"directory": str(temp_dir / ".backups")}
    path.write_text(yaml.safe_dump({"backup": backup}))
    return path


def invoke(runner, config_file, *args, **kwargs):
    return runner.invoke(cli, ["--config", str(config_file), *args], obj={}, **kwargs)


def member_names(path):
    tree = json.loads(path.read_text())
    return [m["key"]["name"] for m in tree["body"][0]["body"]["body"]]


class TestReorderCli:
    """Test the reorder command"""

    def test_reorder_file(self, runner, config_file, sample_ast_file):
        """Test reordering a single file"""
        result = invoke(runner, config_file, "reorder", str(sample_ast_file))

        assert result.exit_code == 0
        assert "✓ component.json: 1 declarations reordered" in result.output
        assert "Reordering completed successfully" in result.output
        assert member_names(sample_ast_file) == ["a", "c", "b"]

    def test_reorder_directory(
        self, runner, config_file, temp_dir, sample_ast_file, ordered_ast_file
    ):
        """Test unchanged files are only listed in verbose mode"""
        result = invoke(runner, config_file, "reorder", str(temp_dir), "--no-backup")

        assert result.exit_code == 0
        assert "component.json" in result.output
        assert "ordered.json" not in result.output
        assert not (temp_dir / ".backups").exists()

    def test_check_fails_on_unordered_file(self, runner, config_file, sample_ast_file):
        """Test --check exits 1 and leaves the file alone"""
        before = sample_ast_file.read_text()

        result = invoke(runner, config_file, "reorder", "--check", str(sample_ast_file))

        assert result.exit_code == 1
        assert "not in dependency order" in result.output
        assert sample_ast_file.read_text() == before

    def test_check_passes_on_ordered_file(self, runner, config_file, ordered_ast_file):
        """Test --check succeeds when nothing would move"""
        result = invoke(
            runner, config_file, "reorder", "--check", str(ordered_ast_file)
        )

        assert result.exit_code == 0

    def test_check_with_output_passes_on_ordered_file(
        self, runner, config_file, ordered_ast_file, temp_dir
    ):
        """Test --check -o succeeds and writes nothing when nothing would move"""
        output = temp_dir / "out.json"

        result = invoke(
            runner,
            config_file,
            "reorder",
            "--check",
            str(ordered_ast_file),
            "-o",
            str(output),
        )

        assert result.exit_code == 0
        assert "not in dependency order" not in result.output
        assert not output.exists()

    def test_dry_run(self, runner, config_file, sample_ast_file):
        """Test --dry-run reports without writing"""
        before = sample_ast_file.read_text()

        result = invoke(
            runner, config_file, "reorder", "--dry-run", str(sample_ast_file)
        )

        assert result.exit_code == 0
        assert "1 declarations reordered" in result.output
        assert sample_ast_file.read_text() == before

    def test_output_option(self, runner, config_file, sample_ast_file, temp_dir):
        """Test -o writes the result elsewhere"""
        output = temp_dir / "sorted.json"

        result = invoke(
            runner, config_file, "reorder", str(sample_ast_file), "-o", str(output)
        )

        assert result.exit_code == 0
        assert member_names(output) == ["a", "c", "b"]

    def test_output_with_directory_is_a_usage_error(
        self, runner, config_file, temp_dir
    ):
        """Test -o together with a directory"""
        output = temp_dir / "x.json"

        result = invoke(
            runner, config_file, "reorder", str(temp_dir), "-o", str(output)
        )

        assert result.exit_code == 2
        assert "single input file" in result.output

    def test_invalid_file_fails(self, runner, config_file, temp_dir):
        """Test a broken file makes the run fail"""
        broken = temp_dir / "broken.json"
        broken.write_text("{ not json")

        result = invoke(runner, config_file, "reorder", str(broken))

        assert result.exit_code == 1
        assert "✗ broken.json" in result.output
        assert "Reordering failed" in result.output

    def test_invalid_configuration(self, runner, temp_dir, sample_ast_file):
        """Test configuration errors exit 2 before touching files"""
        bad_config = temp_dir / "bad.yaml"
        bad_config.write_text(yaml.safe_dump({"ordering": {"indent": -1}}))
        before = sample_ast_file.read_text()

        result = invoke(runner, bad_config, "reorder", str(sample_ast_file))

        assert result.exit_code == 2
        assert "Invalid indent" in result.output
        assert sample_ast_file.read_text() == before

    def test_quiet(self, runner, config_file, sample_ast_file):
        """Test -q suppresses the report"""
        result = runner.invoke(
            cli,
            ["--config", str(config_file), "-q", "reorder", str(sample_ast_file)],
            obj={},
        )

        assert result.exit_code == 0
        assert result.output == ""

    def test_project_config_is_picked_up(self, runner, temp_dir, sample_ast_file):
        """Test .member-order.yaml in the working directory"""
        with runner.isolated_filesystem(temp_dir=temp_dir):
            Path(".member-order.yaml").write_text(
                yaml.safe_dump(
                    {"backup": {"enabled": False}, "ordering": {"indent": 4}}
                )
            )

            result = runner.invoke(cli, ["reorder", str(sample_ast_file)], obj={})

        assert result.exit_code == 0
        assert '\n    "type"' in sample_ast_file.read_text()


class TestDepsCli:
    """Test the deps command"""

    def test_deps(self, runner, config_file, sample_ast_file):
        """Test the text report"""
        result = invoke(runner, config_file, "deps", str(sample_ast_file))

        assert result.exit_code == 0
        assert "1. ClassBody\n   b -> a, c\n   c -> a\n" in result.output

    def test_deps_without_references(self, runner, config_file, temp_dir, b):
        """Test a declaration without self references"""
        ast_file = temp_dir / "plain.json"
        ast_file.write_text(json.dumps(b.program(b.class_body(b.field("a")))))

        result = invoke(runner, config_file, "deps", str(ast_file))

        assert result.exit_code == 0
        assert "(no self references)" in result.output

    def test_deps_json(self, runner, config_file, sample_ast_file):
        """Test the JSON report"""
        result = invoke(runner, config_file, "deps", "--json", str(sample_ast_file))

        assert result.exit_code == 0
        assert json.loads(result.output) == [
            {"declaration": "ClassBody", "dependencies": {"b": ["a", "c"], "c": ["a"]}}
        ]

    def test_deps_invalid_file(self, runner, config_file, temp_dir):
        """Test a file without a syntax tree"""
        data = temp_dir / "data.json"
        data.write_text("[]")

        result = invoke(runner, config_file, "deps", str(data))

        assert result.exit_code == 1
        assert "Cannot analyze" in result.output


class TestInitCli:
    """Test the init command"""

    def test_init_creates_config(self, runner, temp_dir):
        """Test a default configuration file is written"""
        with runner.isolated_filesystem(temp_dir=temp_dir):
            result = runner.invoke(cli, ["init"], obj={})

            assert result.exit_code == 0
            data = yaml.safe_load(Path(".member-order.yaml").read_text())

        assert data["ordering"]["dependency_order"] is True
        assert data["backup"]["keep_sessions"] == 10

    def test_init_asks_before_overwriting(self, runner, temp_dir):
        """Test an existing file is kept unless confirmed"""
        with runner.isolated_filesystem(temp_dir=temp_dir):
            Path(".member-order.yaml").write_text("verbose: true\n")

            result = runner.invoke(cli, ["init"], obj={}, input="n\n")

            assert result.exit_code == 1
            assert Path(".member-order.yaml").read_text() == "verbose: true\n"


class TestBackupCli:
    """Test the backup command"""

    def test_no_sessions(self, runner, config_file):
        """Test listing an empty backup directory"""
        result = invoke(runner, config_file, "backup", "--sessions")

        assert result.exit_code == 0
        assert "No backup sessions found." in result.output

    def test_sessions_after_reorder(self, runner, config_file, sample_ast_file):
        """Test a reorder run leaves one session behind"""
        invoke(runner, config_file, "reorder", str(sample_ast_file))

        result = invoke(runner, config_file, "backup", "--sessions")

        assert result.exit_code == 0
        assert "Found 1 backup sessions:" in result.output
        assert "_reorder" in result.output
        assert "archive" in result.output

    def test_ordered_run_leaves_no_session(self, runner, config_file, ordered_ast_file):
        """Test a run that writes nothing does not add a session"""
        invoke(runner, config_file, "reorder", str(ordered_ast_file))

        result = invoke(runner, config_file, "backup", "--sessions")

        assert "No backup sessions found." in result.output

    def test_clean(self, runner, config_file, temp_dir, sample_ast_file):
        """Test --clean reports how many sessions were removed"""
        invoke(runner, config_file, "reorder", str(sample_ast_file))

        result = invoke(runner, config_file, "backup", "--clean")

        assert result.exit_code == 0
        assert "Removed 0 sessions, kept the 10 most recent." in result.output

    def test_restore(self, runner, config_file, sample_ast_file, temp_dir):
        """Test restoring the session of a reorder run"""
        before = sample_ast_file.read_text()
        invoke(runner, config_file, "reorder", str(sample_ast_file))
        archive = next((temp_dir / ".backups").glob("session_*.tar.gz"))
        session_id = archive.name.removesuffix(".tar.gz")

        result = invoke(
            runner, config_file, "backup", "--restore", session_id, input="y\n"
        )

        assert result.exit_code == 0
        assert f"Successfully restored session: {session_id}" in result.output
        assert sample_ast_file.read_text() == before

    def test_restore_unknown_session(self, runner, config_file):
        """Test restoring a session that does not exist"""
        result = invoke(
            runner, config_file, "backup", "--restore", "session_missing", input="y\n"
        )

        assert result.exit_code == 1
        assert "Failed to restore session" in result.output

    def test_without_option(self, runner, config_file):
        """Test the usage hint"""
        result = invoke(runner, config_file, "backup")

        assert "Use --sessions, --restore, or --clean" in result.output


def test_version(runner):
    """Test --version"""
    result = runner.invoke(cli, ["--version"], obj={})

    assert result.exit_code == 0
    assert __version__ in result.output


class TestMain:
    """Test the console script entry point"""

    def test_keyboard_interrupt(self, mocker):
        """Test Ctrl-C exits 130"""
        mocker.patch("member_order.cli.cli", side_effect=KeyboardInterrupt)

        with pytest.raises(SystemExit) as exc_info:
            main()

        assert exc_info.value.code == 130

    def test_unexpected_error(self, mocker):
        """Test unexpected exceptions are logged and exit 1"""
        mocker.patch("member_order.cli.cli", side_effect=RuntimeError("boom"))
        error = mocker.patch("member_order.cli.logger.error")

        with pytest.raises(SystemExit) as exc_info:
            main()

        assert exc_info.value.code == 1
        error.assert_called_once_with("Unexpected error: boom")
