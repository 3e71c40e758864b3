#!/usr/bin/env python3
"""
CLI Tests
CLIテスト

Runs the twinrotor commands in-process through main(argv).
"""

import json

import matplotlib
matplotlib.use("Agg")

import pytest

from twinrotor import __version__
from twinrotor.cli import main
from twinrotor.core import SimConfig
from twinrotor.interfaces import load_output_csv


SHORT_ARGS = ["--dt", "0.0001", "--end-time", "0.001"]
SHORT_STEPS = SimConfig(step_size=0.0001, end_time=0.001).num_steps


def test_no_command_prints_help(capsys):
    """Test 1: bare invocation shows help and succeeds"""
    assert main([]) == 0
    assert "usage: twinrotor" in capsys.readouterr().out


def test_version(capsys):
    """Test 2: version command"""
    assert main(["version"]) == 0
    assert capsys.readouterr().out.strip() == f"twinrotor {__version__}"


def test_run_text_to_stdout(capsys):
    """Test 3: text trajectory on stdout, status on stderr"""
    assert main(["--no-color", "run"] + SHORT_ARGS) == 0
    captured = capsys.readouterr()

    lines = captured.out.splitlines()
    assert len(lines) == SHORT_STEPS + 1
    assert all(len(line.split()) == 7 for line in lines)
    assert "[OK]" in captured.err


def test_run_csv_file(tmp_path, capsys):
    """Test 4: CSV file with run metadata"""
    path = tmp_path / "traj.csv"
    assert main(["run", "--format", "csv", "-o", str(path), "--voltage-left", "7.5"] + SHORT_ARGS) == 0

    records, metadata = load_output_csv(path)
    assert len(records) == SHORT_STEPS + 1
    assert float(metadata["voltage_left"]) == 7.5
    assert all(r.rate == 0.0 for r in records)


def test_run_queued_csv_stdout(capsys):
    """Test 5: queued output produces the same rows"""
    assert main(["run", "--format", "csv", "--queued"] + SHORT_ARGS) == 0
    out = capsys.readouterr().out.splitlines()
    rows = [line for line in out if not line.startswith("#")]
    assert rows[0].startswith("time,")
    assert len(rows) == SHORT_STEPS + 2


def test_run_with_config_file(tmp_path, capsys):
    """Test 6: --config file, CLI flags override it"""
    cfg = tmp_path / "cfg.json"
    cfg.write_text(json.dumps({"end_time": 0.002, "step_size": 0.0005, "voltage_right": 6.0}))

    assert main(["run", "--config", str(cfg), "--end-time", "0.001"]) == 0
    lines = capsys.readouterr().out.splitlines()
    assert len(lines) == SimConfig(step_size=0.0005, end_time=0.001).num_steps + 1


@pytest.mark.parametrize("args", [
    ["run", "--dt", "0"],
    ["run", "--end-time", "-1"],
    ["run", "--config", "does-not-exist.json"],
    ["run", "--plot", "x.png"],
    ["params", "--dt", "-1"],
])
def test_invalid_arguments_return_error(args, capsys):
    """Test 7: invalid configuration exits with 1"""
    assert main(["--no-color"] + args) == 1
    assert "[ERROR]" in capsys.readouterr().err


def test_divergence_warning(capsys):
    """Test 8: an unstable step size is reported, not raised"""
    assert main(["--no-color", "run", "--dt", "0.05", "--end-time", "20",
                 "--stop-on-divergence", "-o", "/dev/null"]) == 0
    assert "[WARN]" in capsys.readouterr().err


def test_params(capsys):
    """Test 9: params prints constants and steady state on stdout"""
    assert main(["--no-color", "params"]) == 0
    captured = capsys.readouterr()
    assert "Steady state" in captured.out
    assert "mass (unused)" in captured.out
    assert captured.err == ""


def test_run_plot_and_plot_command(tmp_path, capsys):
    """Test 10: run --plot and the plot command write PNG files"""
    csv_path = tmp_path / "traj.csv"
    png_run = tmp_path / "run.png"
    png_cmd = tmp_path / "cmd.png"

    assert main(["run", "--format", "csv", "-o", str(csv_path), "--plot", str(png_run)] + SHORT_ARGS) == 0
    assert png_run.exists()

    assert main(["plot", str(csv_path), "--save", str(png_cmd), "--no-show"]) == 0
    assert png_cmd.exists()


def test_plot_missing_file(tmp_path, capsys):
    """Test 11: plot of a missing file exits with 1"""
    assert main(["plot", str(tmp_path / "missing.csv"), "--no-show"]) == 1


@pytest.mark.parametrize("args", [
    ["run", "--end-time", "inf"],
    ["run", "--dt", "inf"],
    ["run", "--voltage-right", "nan"],
    ["params", "--end-time", "inf"],
])
def test_non_finite_arguments_return_error(args, capsys):
    """Test 12: inf/nan on the command line is a configuration error"""
    assert main(["--no-color"] + args) == 1
    assert "Invalid configuration" in capsys.readouterr().err


@pytest.mark.parametrize("text", [
    '{"motor": null}',
    '{"airframe": [1, 2]}',
    '{"end_time": "abc"}',
    '[0.5]',
])
def test_malformed_config_file_returns_error(tmp_path, capsys, text):
    """Test 13: malformed JSON sections exit with 1, no traceback"""
    cfg = tmp_path / "cfg.json"
    cfg.write_text(text)
    assert main(["--no-color", "run", "--config", str(cfg)]) == 1
    err = capsys.readouterr().err
    assert "[ERROR]" in err
    assert "Traceback" not in err


def test_unexpected_error_returns_1(monkeypatch, capsys):
    """Test 14: an exception escaping a command is reported, exit code 1"""
    from twinrotor.cli.commands import version

    def broken(args):
        raise ZeroDivisionError("boom")

    monkeypatch.setattr(version, "run", broken)
    assert main(["--no-color", "version"]) == 1
    assert "Unexpected error: boom" in capsys.readouterr().err


def test_run_to_file_keeps_stderr_for_problems(tmp_path, capsys):
    """Test 15: with -o, status lines go to stdout and stderr stays empty"""
    path = tmp_path / "traj.txt"
    assert main(["--no-color", "run", "-o", str(path)] + SHORT_ARGS) == 0
    captured = capsys.readouterr()
    assert "[OK]" in captured.out
    assert captured.err == ""
    assert len(path.read_text().splitlines()) == SHORT_STEPS + 1
