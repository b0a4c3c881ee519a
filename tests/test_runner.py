from pathlib import Path

import pytest

from bracketsmith.core.normalizer import BracketNormalizer, NormalizationConfig
from bracketsmith.engine.runner import BracketSmith
from bracketsmith.files.walker import WalkConfig


def _write(path: Path, text: str) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")
    return path


def test_run_rewrites_changed_files(tmp_path: Path, capsys: pytest.CaptureFixture) -> None:
    a = _write(tmp_path / "app" / "a.php", "<?php\n$a = [1,2];\n")
    b = _write(tmp_path / "app" / "b.php", "<?php\n$b = [ 1 ];\n")

    runner = BracketSmith(walk_cfg=WalkConfig(directories=(str(tmp_path / "app"),)), verbose=True)
    assert runner.run() is True

    assert a.read_text(encoding="utf-8") == "<?php\n$a = [ 1,2 ];\n"
    assert b.read_text(encoding="utf-8") == "<?php\n$b = [ 1 ];\n"
    assert runner.stats() == {"processed": 2, "changed": 1}
    assert runner.changed_files == [str(a)]

    out = capsys.readouterr().out
    assert out.splitlines()[0] == "🔧 Processing array spacing..."
    assert f"✅ Processed: {a}" in out
    assert f"⏭️ No changes needed: {b}" in out
    assert out.rstrip().endswith("✅ Processing completed: 1 of 2 files were changed.")


def test_dry_run_leaves_files_untouched(tmp_path: Path, capsys: pytest.CaptureFixture) -> None:
    a = _write(tmp_path / "a.php", "<?php $a = [1,2];")
    runner = BracketSmith(dry_run=True, verbose=True)
    assert runner.run([a]) is True

    assert a.read_text(encoding="utf-8") == "<?php $a = [1,2];"
    out = capsys.readouterr().out
    assert f"🔍 Would be processed: {a}" in out
    assert "🔍 Verification completed: 1 of 1 files would require changes." in out


def test_quiet_mode_prints_only_header_and_summary(tmp_path: Path, capsys: pytest.CaptureFixture) -> None:
    a = _write(tmp_path / "a.php", "<?php $a = [1,2];")
    BracketSmith().run([a])
    lines = capsys.readouterr().out.splitlines()
    assert len(lines) == 2


def test_missing_directory_is_not_fatal(tmp_path: Path, capsys: pytest.CaptureFixture) -> None:
    runner = BracketSmith(walk_cfg=WalkConfig(directories=(str(tmp_path / "nope"),)))
    assert runner.run() is True
    assert "⚠️ Directory not found:" in capsys.readouterr().out


def test_missing_path_fails(tmp_path: Path, capsys: pytest.CaptureFixture) -> None:
    runner = BracketSmith()
    assert runner.run([tmp_path / "missing.php"]) is False
    assert "❌ Path not found:" in capsys.readouterr().err
    assert runner.failed_files == [str(tmp_path / "missing.php")]


def test_directory_argument_is_walked(tmp_path: Path) -> None:
    _write(tmp_path / "src" / "x.php", "<?php $x = [1,2];")
    _write(tmp_path / "src" / "vendor" / "y.php", "<?php $y = [1,2];")
    runner = BracketSmith()
    assert runner.run([tmp_path / "src"]) is True
    assert runner.stats() == {"processed": 1, "changed": 1}


def test_undecodable_file_is_reported_and_run_continues(tmp_path: Path, capsys: pytest.CaptureFixture) -> None:
    bad = tmp_path / "bad.php"
    bad.write_bytes(b"<?php $a = [1,2]; \xff\xfe")
    good = _write(tmp_path / "good.php", "<?php $a = [1,2];")

    runner = BracketSmith()
    assert runner.run([bad, good]) is False
    assert good.read_text(encoding="utf-8") == "<?php $a = [ 1,2 ];"
    assert f"❌ Error processing file {bad}" in capsys.readouterr().err
    assert runner.stats() == {"processed": 2, "changed": 1}


def test_crlf_line_endings_preserved(tmp_path: Path) -> None:
    p = tmp_path / "crlf.php"
    p.write_bytes(b"<?php\r\n$a = [1,2];\r\n")
    BracketSmith().run([p])
    assert p.read_bytes() == b"<?php\r\n$a = [ 1,2 ];\r\n"


def test_non_converged_file_is_flagged(tmp_path: Path, capsys: pytest.CaptureFixture) -> None:
    p = _write(tmp_path / "a.php", "<?php $a = [1,2];")
    runner = BracketSmith(normalizer=BracketNormalizer(NormalizationConfig(max_passes=1)))
    assert runner.run([p]) is True
    assert runner.non_converged_files == [str(p)]
    assert "⚠️ No fixed point after 1 passes" in capsys.readouterr().out


def test_report_contents(tmp_path: Path) -> None:
    p = _write(tmp_path / "a.php", "<?php $a = [1,2];")
    runner = BracketSmith(dry_run=True)
    runner.run([p])
    report = runner.report()
    assert report["dry_run"] is True
    assert report["stats"] == {"processed": 1, "changed": 1}
    assert report["changed_files"] == [str(p)]
    assert report["failed_files"] == []
    assert "created_at" in report
