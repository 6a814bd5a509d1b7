import json
from pathlib import Path

from typer.testing import CliRunner

from cli import cvmcount
from cvm_core import __version__

runner = CliRunner()


def _json_payload(output: str) -> dict:
    return json.loads(output[output.index("{") :])


def test_version_flag() -> None:
    result = runner.invoke(cvmcount.app, ["--version"])
    assert result.exit_code == 0
    assert __version__ in result.stdout


def test_count_words_with_exact(tmp_path: Path) -> None:
    text = tmp_path / "play.txt"
    text.write_text("the cat and the dog\nthe end\n", encoding="utf-8")
    result = runner.invoke(cvmcount.app, ["count", str(text), "--capacity", "100", "--exact"])
    assert result.exit_code == 0, result.output
    payload = _json_payload(result.stdout)
    assert payload["estimate"] == 5.0
    assert payload["exact"] == 5
    assert payload["relative_error"] == 0.0
    assert payload["round"] == 0
    assert payload["probability"] == 1.0


def test_count_lines_mode(tmp_path: Path) -> None:
    text = tmp_path / "lines.txt"
    text.write_text("a b\na b\nc\n", encoding="utf-8")
    result = runner.invoke(
        cvmcount.app, ["count", str(text), "--mode", "lines", "--key-strategy", "xxhash"]
    )
    assert result.exit_code == 0, result.output
    assert _json_payload(result.stdout)["estimate"] == 2.0


def test_count_uses_env_capacity(tmp_path: Path, monkeypatch) -> None:
    monkeypatch.setenv("CVM_CAPACITY", "4")
    text = tmp_path / "many.txt"
    text.write_text(" ".join(f"w{i}" for i in range(200)), encoding="utf-8")
    result = runner.invoke(cvmcount.app, ["count", str(text)])
    assert result.exit_code == 0, result.output
    payload = _json_payload(result.stdout)
    assert payload["capacity"] == 4
    assert payload["round"] > 0
    assert payload["sample_size"] < 4


def test_count_missing_file(tmp_path: Path) -> None:
    result = runner.invoke(cvmcount.app, ["count", str(tmp_path / "absent.txt")])
    assert result.exit_code == 1


def test_count_rejects_zero_capacity(tmp_path: Path) -> None:
    text = tmp_path / "play.txt"
    text.write_text("a b c", encoding="utf-8")
    result = runner.invoke(cvmcount.app, ["count", str(text), "--capacity", "0"])
    assert result.exit_code == 2


def test_count_rejects_unknown_mode(tmp_path: Path) -> None:
    text = tmp_path / "play.txt"
    text.write_text("a b c", encoding="utf-8")
    result = runner.invoke(cvmcount.app, ["count", str(text), "--mode", "chars"])
    assert result.exit_code == 2


def test_generate_then_count(tmp_path: Path) -> None:
    out = tmp_path / "ints.txt"
    result = runner.invoke(
        cvmcount.app, ["generate", "--count", "2000", "--seed", "5", "--out", str(out)]
    )
    assert result.exit_code == 0, result.output
    lines = out.read_text(encoding="utf-8").splitlines()
    assert len(lines) == 2000
    assert all(0 <= int(line) < 1000 for line in lines)

    result = runner.invoke(cvmcount.app, ["count", str(out), "--capacity", "1500", "--exact"])
    assert result.exit_code == 0, result.output
    payload = _json_payload(result.stdout)
    assert payload["estimate"] == float(payload["exact"])


def test_generate_defaults_to_data_dir(tmp_path: Path) -> None:
    result = runner.invoke(cvmcount.app, ["generate", "--count", "10"])
    assert result.exit_code == 0, result.output
    assert (tmp_path / "data" / "streams" / "ints_10.txt").exists()


def test_invalid_log_level_is_usage_error() -> None:
    result = runner.invoke(cvmcount.app, ["--log-level", "chatty", "generate", "--count", "10"])
    assert result.exit_code == 2


def test_count_rejects_directory(tmp_path: Path) -> None:
    result = runner.invoke(cvmcount.app, ["count", str(tmp_path)])
    assert result.exit_code == 1
    assert not isinstance(result.exception, IsADirectoryError)
    assert "not a regular file" in result.output


def test_count_reports_undecodable_input(tmp_path: Path) -> None:
    binary = tmp_path / "bin.txt"
    binary.write_bytes(b"\xff\xfe\x00garbage")
    result = runner.invoke(cvmcount.app, ["count", str(binary), "--exact"])
    assert result.exit_code == 1
    assert not isinstance(result.exception, UnicodeDecodeError)
    assert "Could not read" in result.output
