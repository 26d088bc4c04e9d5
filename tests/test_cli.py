import json
from pathlib import Path

import pytest
from click.testing import CliRunner

from nmmprofile import writer
from nmmprofile.cli import cli
from nmmprofile.formats import FileFormat
from nmmprofile.funct import rcs

from helper_functions import make_profile

GRID_SDF = "aISO-1.0\nNumPoints = 2\nNumProfiles = 2\nXscale = 1e-6\nZscale = 1e-6\n*\n1 2\n3 4\n*\n"


@pytest.fixture
def runner() -> CliRunner:
    return CliRunner()


@pytest.fixture
def sdf_file(tmp_path: Path, ctx) -> Path:
    return writer.writeToFile(make_profile([0.0, 1.0, 0.5, 2.0], delta_x=0.5), tmp_path / "step", FileFormat.Bcr, ctx)


def test_converts_to_requested_formats(runner: CliRunner, sdf_file: Path) -> None:
    result = runner.invoke(cli, [str(sdf_file), "--csv", "--prDE", "-q"])
    assert result.exit_code == 0, result.output
    assert (sdf_file.parent / "step_p1.csv").is_file()
    assert (sdf_file.parent / "step_p1.pr").read_text(encoding="utf-8").startswith("Profil step_p1.pr\r\n")


def test_default_format(runner: CliRunner, sdf_file: Path) -> None:
    result = runner.invoke(cli, [str(sdf_file), "-q"])
    assert result.exit_code == 0, result.output
    assert (sdf_file.parent / "step_p1.sig").is_file()


def test_output_name(runner: CliRunner, sdf_file: Path, tmp_path: Path) -> None:
    result = runner.invoke(cli, [str(sdf_file), str(tmp_path / "converted.dat"), "--txt", "-r", "0", "-q"])
    assert result.exit_code == 0, result.output
    lines = (tmp_path / "converted.txt").read_text(encoding="utf-8").split("\r\n")
    assert lines[:5] == ["0.500", "0.000000", "1.000000", "0.500000", "2.000000"]


def test_processing_options(runner: CliRunner, sdf_file: Path, tmp_path: Path) -> None:
    result = runner.invoke(cli, [str(sdf_file), str(tmp_path / "out"), "--sdf", "-r", "2",
                                 "--xstart", "0.4", "--xlength", "1.2", "--comment", "cli run", "-q"])
    assert result.exit_code == 0, result.output
    text = (tmp_path / "out.sdf").read_text(encoding="utf-8")
    assert "NumPoints   = 3\r\n" in text
    assert "UserComment          = cli run\r\n" in text
    assert "TrimmedStart         = 0.4 µm\r\n" in text


def test_parameter_file(runner: CliRunner, sdf_file: Path, tmp_path: Path) -> None:
    rc_file = tmp_path / "params.json"
    rc_file.write_text(json.dumps({"defaultFormat": "csv"}))
    result = runner.invoke(cli, [str(sdf_file), "--rc", str(rc_file), "-q"])
    assert result.exit_code == 0, result.output
    assert (sdf_file.parent / "step_p1.csv").is_file()


def test_missing_input(runner: CliRunner) -> None:
    result = runner.invoke(cli, ["-q"])
    assert result.exit_code == 1
    assert "Missing input file" in result.output


def test_input_not_found(runner: CliRunner, tmp_path: Path) -> None:
    result = runner.invoke(cli, [str(tmp_path / "absent.sdf")])
    assert result.exit_code == 1


def test_too_many_names(runner: CliRunner, sdf_file: Path) -> None:
    result = runner.invoke(cli, [str(sdf_file), "a", "b"])
    assert result.exit_code == 1


def test_unknown_channel(runner: CliRunner, sdf_file: Path) -> None:
    result = runner.invoke(cli, [str(sdf_file), "-c", "XY", "-q"])
    assert result.exit_code == 5


def test_unimplemented_format(runner: CliRunner, sdf_file: Path) -> None:
    result = runner.invoke(cli, [str(sdf_file), "--x3p", "--csv", "-q"])
    assert result.exit_code == 6
    assert (sdf_file.parent / "step_p1.csv").is_file()


def test_fail_fast(runner: CliRunner, tmp_path: Path) -> None:
    grid = tmp_path / "grid.sdf"
    grid.write_text(GRID_SDF)
    result = runner.invoke(cli, [str(grid), "--x3p", "--csv", "-q"])
    assert result.exit_code == 6
    assert sorted(p.name for p in tmp_path.glob("*.csv")) == ["grid_p1.csv", "grid_p2.csv"]

    for csv in tmp_path.glob("*.csv"):
        csv.unlink()
    result = runner.invoke(cli, [str(grid), "--x3p", "--csv", "--fail-fast", "-q"])
    assert result.exit_code == 6
    assert sorted(p.name for p in tmp_path.glob("*.csv")) == ["grid_p1.csv"]


def test_plot_dir(runner: CliRunner, sdf_file: Path, tmp_path: Path) -> None:
    plots = tmp_path / "plots"
    result = runner.invoke(cli, [str(sdf_file), "--csv", "--plot-dir", str(plots), "-q"])
    assert result.exit_code == 0, result.output
    assert (plots / "pltCompare_p1_0.png").is_file()


def test_progress_messages(runner: CliRunner, sdf_file: Path) -> None:
    rcs.params["verbose"] = True
    result = runner.invoke(cli, [str(sdf_file), "--csv"])
    assert result.exit_code == 0, result.output
    assert "nmm2profile version 1.0.0" in result.output
    assert "[*.csv]" in result.output


def test_help_lists_references(runner: CliRunner) -> None:
    result = runner.invoke(cli, ["--help"])
    assert result.exit_code == 0
    assert "10: LSQ" in result.output
    assert "12: LSQ(positive)" in result.output
    assert "--prEN" in result.output


def test_version(runner: CliRunner) -> None:
    result = runner.invoke(cli, ["--version"])
    assert result.exit_code == 0
    assert "1.0.0" in result.output
