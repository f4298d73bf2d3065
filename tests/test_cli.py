"""
Tests for the mojostyle command line.
"""

import sys

import pytest
from mojostyle.cli import main
from mojostyle.fixer import backup_path_for


GOOD = 'fn main():\n    """Print a greeting to stdout."""\n    print("hi")\n'
BAD = 'fn main():\n    """Print a greeting to stdout."""\n    let x = 1\n'


@pytest.fixture(autouse=True)
def isolated(tmp_path, monkeypatch):
    """Run from an empty directory with no config in the environment."""
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("MOJOSTYLE_RETENTION_DAYS", raising=False)
    monkeypatch.delenv("MOJOSTYLE_VALIDATE_COMMAND", raising=False)


@pytest.fixture
def project(tmp_path):
    src = tmp_path / "src"
    src.mkdir()
    (src / "good.mojo").write_text(GOOD, encoding="utf-8")
    (src / "bad.mojo").write_text(BAD, encoding="utf-8")
    return src


def validator_config(tmp_path, script):
    """A config file whose build check runs a Python one-liner."""
    path = tmp_path / "mojostyle.yaml"
    path.write_text(f"validate_command: ['{sys.executable}', '-c', '{script}']\n", encoding="utf-8")
    return str(path)


class TestScan:
    """Test scan, validate and report."""

    def test_scan_with_errors(self, project, capsys):
        assert main(["scan", str(project)]) == 1
        out = capsys.readouterr().out
        assert "Files scanned:  2" in out
        assert "bad.mojo" in out
        assert "good.mojo" not in out

    def test_scan_clean(self, project, capsys):
        (project / "bad.mojo").unlink()
        assert main(["scan", str(project)]) == 0

    def test_scan_missing_directory(self, tmp_path, capsys):
        assert main(["scan", str(tmp_path / "nope")]) == 2
        assert "not found" in capsys.readouterr().err

    def test_validate_file(self, project, capsys):
        assert main(["validate", str(project / "bad.mojo")]) == 1
        out = capsys.readouterr().out
        assert "Score: 90.0/100" in out
        assert "[ERROR] line 3" in out

    def test_report_to_file(self, project, tmp_path):
        output = tmp_path / "report.txt"
        main(["report", str(project), "--output", str(output)])
        text = output.read_text(encoding="utf-8")
        assert "good.mojo" in text and "bad.mojo" in text

    def test_show_observations_flag(self, tmp_path, capsys):
        path = tmp_path / "loops.mojo"
        path.write_text(
            'fn f():\n    """Print every coordinate triple."""\n'
            "    for i in range(2):\n"
            "        for j in range(2):\n"
            "            for k in range(2):\n"
            "                print(i, j, k)\n",
            encoding="utf-8",
        )
        main(["validate", str(path)])
        assert "OBSERVATION" not in capsys.readouterr().out
        main(["validate", str(path), "--show-observations"])
        assert "OBSERVATION" in capsys.readouterr().out


class TestFix:
    """Test the fix command."""

    def test_dry_run_by_default(self, project, capsys):
        path = project / "bad.mojo"
        assert main(["fix", str(path)]) == 0
        out = capsys.readouterr().out
        assert "--enable-auto-fix" in out
        assert path.read_text(encoding="utf-8") == BAD

    def test_apply(self, project, tmp_path, capsys):
        path = project / "bad.mojo"
        config = validator_config(tmp_path, "pass")
        assert main(["fix", str(path), "--enable-auto-fix", "--config", config]) == 0
        assert "var x = 1" in path.read_text(encoding="utf-8")
        assert backup_path_for(path).exists()

    def test_apply_with_auto_cleanup(self, project, tmp_path):
        path = project / "bad.mojo"
        config = validator_config(tmp_path, "pass")
        main(["fix", str(path), "--enable-auto-fix", "--auto-cleanup", "--config", config])
        assert not backup_path_for(path).exists()

    def test_failed_build_rolls_back(self, project, tmp_path, capsys):
        path = project / "bad.mojo"
        config = validator_config(tmp_path, "import sys; sys.exit(1)")
        assert main(["fix", str(path), "--enable-auto-fix", "--config", config]) == 1
        assert path.read_text(encoding="utf-8") == BAD
        assert "restored" in capsys.readouterr().out


class TestCleanup:
    """Test backup cleanup."""

    def test_cleanup_all(self, project, capsys):
        backup = project / "bad.mojo.backup"
        backup.write_text(BAD, encoding="utf-8")
        assert main(["cleanup", str(project), "--retention-days", "0"]) == 0
        assert not backup.exists()
        assert "1 backups removed" in capsys.readouterr().out

    def test_cleanup_keeps_recent(self, project):
        backup = project / "bad.mojo.backup"
        backup.write_text(BAD, encoding="utf-8")
        main(["cleanup", str(project)])
        assert backup.exists()


class TestErrors:
    """Test argument and configuration errors."""

    def test_no_command_prints_help(self, capsys):
        assert main([]) == 0
        assert "usage" in capsys.readouterr().out.lower()

    def test_bad_config(self, project, tmp_path, capsys):
        config = tmp_path / "bad.yaml"
        config.write_text("retention_days: soon\n", encoding="utf-8")
        assert main(["scan", str(project), "--config", str(config)]) == 2
        assert "retention_days" in capsys.readouterr().err

    def test_missing_config(self, project, tmp_path):
        assert main(["scan", str(project), "--config", str(tmp_path / "nope.yaml")]) == 2
