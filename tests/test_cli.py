"""
CLI tests: argument handling, early validation, and report output.
The CLI is read-only, so every test inspects only what gets printed and the exit code.
"""
from unittest import mock
import pytest
from deduper.cli import CLIApplication, main
from deduper.commands import DetectionCommand
from deduper.core.models import AccessFailure, ScanError, DetectionConfig


class TestArgumentParsing:
    """Test argument defaults and conversion into DetectionParams."""

    def test_defaults(self, temp_dir):
        app = CLIApplication()
        args = app.parse_args([str(temp_dir)])
        params = app.create_params(args, root_dirs=[str(temp_dir)])

        assert params.config == DetectionConfig()
        assert params.min_size_bytes is None
        assert params.extensions == []

    def test_tunables_and_filters(self, temp_dir):
        app = CLIApplication()
        args = app.parse_args([
            str(temp_dir), "--window", "64KB", "--header-ratio", "20%", "--size-ratio", "0.95",
            "-m", "1KB", "-M", "1MB", "-x", "JPG", ".png",
        ])
        params = app.create_params(args, root_dirs=[str(temp_dir)])

        assert params.config.base_window == 64 * 1024
        assert params.config.header_ratio == pytest.approx(0.2)
        assert params.config.size_ratio_threshold == pytest.approx(0.95)
        assert params.min_size_bytes == 1024
        assert params.max_size_bytes == 1024 * 1024
        assert params.extensions == [".jpg", ".png"]

    def test_directory_is_required(self):
        with pytest.raises(SystemExit) as exc_info:
            CLIApplication.parse_args([])
        assert exc_info.value.code == 2


class TestEarlyValidation:
    """Invalid tunables must stop the program before any directory is scanned."""

    @pytest.mark.parametrize("extra", [
        ["--header-ratio", "1.5"],
        ["--header-ratio", "abc"],
        ["--size-ratio", "120%"],
        ["--window", "0"],
        ["--window=-5KB"],
        ["-m", "10MB", "-M", "1MB"],
    ])
    def test_invalid_parameters_exit_before_scanning(self, temp_dir, capsys, extra):
        with mock.patch.object(DetectionCommand, "execute") as mock_execute:
            with pytest.raises(SystemExit) as exc_info:
                CLIApplication().run([str(temp_dir)] + extra)

        assert exc_info.value.code == 1
        mock_execute.assert_not_called()
        assert "Parameter error" in capsys.readouterr().err

    def test_no_valid_directories(self, temp_dir, capsys):
        with pytest.raises(SystemExit) as exc_info:
            CLIApplication().run([str(temp_dir / "missing")])

        assert exc_info.value.code == 1
        err = capsys.readouterr().err
        assert "doesn't exist" in err
        assert "No valid directories to scan" in err


class TestOutput:
    """Test the printed report."""

    def test_groups_printed_with_canonical_first(self, test_files, temp_dir, capsys):
        CLIApplication().run([str(temp_dir)])
        out = capsys.readouterr().out

        assert f"Scanning directory: {temp_dir}" in out
        assert "Found 2 probable duplicate groups (5 files)" in out
        assert "Group 1 | Files: 3" in out
        assert "Group 2 | Files: 2" in out
        assert f"{test_files['dup1_a']} [1.00KB] (canonical)" in out
        assert f"{test_files['dup1_b']} [1.00KB]\n" in out
        assert out.index(str(test_files["dup1_a"])) < out.index(str(test_files["sub_dup"]))

    def test_no_groups(self, temp_dir, capsys):
        (temp_dir / "only.txt").write_bytes(b"x" * 10)
        CLIApplication().run([str(temp_dir)])
        assert "No probable duplicate groups found." in capsys.readouterr().out

    def test_quiet_prints_nothing(self, test_files, temp_dir, capsys):
        CLIApplication().run([str(temp_dir), "--quiet"])
        captured = capsys.readouterr()
        assert captured.out == ""
        assert captured.err == ""

    def test_verbose_prints_statistics(self, test_files, temp_dir, capsys):
        CLIApplication().run([str(temp_dir), "-v"])
        out = capsys.readouterr().out
        assert "Detection Statistics" in out
        assert "Files scanned: 9" in out

    def test_nested_root_warned_and_scanned_once(self, test_files, temp_dir, capsys):
        CLIApplication().run([str(temp_dir), str(temp_dir / "subdir")])
        captured = capsys.readouterr()
        assert "is a descendant of" in captured.err
        assert captured.out.count(str(test_files["sub_dup"])) == 1

    def test_excluded_dir_option(self, test_files, temp_dir, capsys):
        CLIApplication().run([str(temp_dir), "-e", str(temp_dir / "subdir")])
        out = capsys.readouterr().out
        assert str(test_files["sub_dup"]) not in out
        assert "Group 1 | Files: 2" in out

    def test_failures_summarized(self, test_files, temp_dir, capsys):
        failures = [AccessFailure(path="/x/a.bin", reason="Permission denied")]
        scan_errors = [ScanError(path="/x/locked", reason="Permission denied")]
        with mock.patch.object(DetectionCommand, "get_failures", return_value=failures), \
                mock.patch.object(DetectionCommand, "get_scan_errors", return_value=scan_errors):
            CLIApplication().run([str(temp_dir)])

        err = capsys.readouterr().err
        assert "1 file(s) and 1 director(ies) or entr(ies) could not be read" in err
        assert "/x/a.bin" not in err  # details only in verbose mode

    def test_candidate_failures_summarized_separately(self, test_files, temp_dir, capsys):
        candidates = [AccessFailure(path="/x/gone.bin", reason="No such file or directory")]
        with mock.patch.object(DetectionCommand, "get_candidate_failures", return_value=candidates):
            CLIApplication().run([str(temp_dir), "-v"])

        err = capsys.readouterr().err
        assert "could not be read" not in err
        assert "1 already ingested file(s) became unreadable" in err
        assert "/x/gone.bin: No such file or directory" in err

    def test_empty_files_grouped(self, temp_dir, capsys):
        (temp_dir / "a.txt").write_bytes(b"")
        (temp_dir / "b.txt").write_bytes(b"")
        CLIApplication().run([str(temp_dir)])
        out = capsys.readouterr().out
        assert "Group 1 | Files: 2" in out
        assert f"{temp_dir / 'a.txt'} [0.00B] (canonical)" in out

    def test_skip_empty_option(self, temp_dir, capsys):
        (temp_dir / "a.txt").write_bytes(b"")
        (temp_dir / "b.txt").write_bytes(b"")
        CLIApplication().run([str(temp_dir), "--skip-empty"])
        assert "No probable duplicate groups found." in capsys.readouterr().out


class TestMain:
    """Test process-level exit codes."""

    def test_keyboard_interrupt_exits_130(self):
        with mock.patch.object(CLIApplication, "run", side_effect=KeyboardInterrupt):
            with pytest.raises(SystemExit) as exc_info:
                main()
        assert exc_info.value.code == 130

    def test_unexpected_error_exits_1(self, monkeypatch, capsys):
        monkeypatch.delenv("DEBUG", raising=False)
        with mock.patch.object(CLIApplication, "run", side_effect=OSError("boom")):
            with pytest.raises(SystemExit) as exc_info:
                main()
        assert exc_info.value.code == 1
        assert "boom" in capsys.readouterr().err

    def test_debug_reraises(self, monkeypatch):
        monkeypatch.setenv("DEBUG", "1")
        with mock.patch.object(CLIApplication, "run", side_effect=OSError("boom")):
            with pytest.raises(OSError):
                main()
