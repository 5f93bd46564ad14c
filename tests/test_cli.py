import pytest

import numpy as np
import toml
from click.testing import CliRunner
from pathlib import Path

from fbt._cli import main


@pytest.fixture(scope="function")
def tmpdir(tmp_path_factory) -> Path:
    return tmp_path_factory.mktemp("cli-tests")


def test_no_config_or_args(tmpdir: Path):
    runner = CliRunner()
    result = runner.invoke(main, ["run", "--outdir", str(tmpdir)])
    assert result.exit_code == 0

    assert (tmpdir / "fbt_transform.txt").exists()
    assert (tmpdir / "fbt_cfg.toml").exists()


def test_with_config(tmpdir: Path):
    runner = CliRunner()

    cfg = """
    function = "x * exp(-x**2 / 2)"
    method = "de"
    q = [0.5, 1.0, 2.0]
    [params]
    nu = 0
    N = 200
    """

    with open(tmpdir / "cfg.toml", "w") as fl:
        fl.write(cfg)

    result = runner.invoke(
        main, ["run", "-i", str(tmpdir / "cfg.toml"), "-o", str(tmpdir)]
    )
    print(result.stdout)
    assert result.exit_code == 0

    q, F = np.genfromtxt(tmpdir / "fbt_transform.txt").T
    assert np.allclose(q, [0.5, 1.0, 2.0])
    assert np.allclose(F, np.exp(-(q ** 2) / 2), rtol=1e-6)


def test_config_vs_cli(tmpdir: Path):
    cfgdir = tmpdir / "cfg"
    cfgdir.mkdir()

    clidir = tmpdir / "cli"
    clidir.mkdir()

    runner = CliRunner()

    cfg = """
    function = "x**2 * exp(-x**2 / 2)"
    q = [0.5, 1.5]

    [params]
    nu = 1
    N = 100
    """

    with open(tmpdir / "cfg.toml", "w") as fl:
        fl.write(cfg)

    result_cfg = runner.invoke(
        main, ["run", "-i", str(tmpdir / "cfg.toml"), "-o", str(cfgdir)]
    )
    result_cli = runner.invoke(
        main,
        [
            "run",
            "-o",
            str(clidir),
            "--",
            "--nu=1",
            "--N=100",
            "--q=[0.5,1.5]",
            "--function=x**2 * exp(-x**2 / 2)",
        ],
    )

    assert result_cfg.exit_code == 0
    assert result_cli.exit_code == 0

    cfg_out = np.genfromtxt(cfgdir / "fbt_transform.txt")
    cli_out = np.genfromtxt(clidir / "fbt_transform.txt")

    assert np.allclose(cfg_out, cli_out)


def test_label_and_plain_method(tmpdir: Path):
    runner = CliRunner()
    result = runner.invoke(
        main,
        ["run", "-o", str(tmpdir), "-l", "plain", "--", "--method=plain", "--N=200"],
    )
    assert result.exit_code == 0

    q, F = np.genfromtxt(tmpdir / "plain_transform.txt")
    assert np.isclose(F, np.exp(-0.5), rtol=1e-6)

    cfg = toml.load(tmpdir / "plain_cfg.toml")
    assert cfg["method"] == "plain"
    assert cfg["params"]["N"] == 200


def test_bad_method(tmpdir: Path):
    runner = CliRunner()
    result = runner.invoke(main, ["run", "-o", str(tmpdir), "--", "--method=simpson"])
    assert result.exit_code != 0


def test_roundtrip_cfg(tmpdir):
    runner = CliRunner()

    cfg = """
        function = "x * exp(-x**2 / 2)"
        q = [0.3, 3.0]
        [params]
        N = 150
        Q = 2.0
        """

    with open(tmpdir / "cfg.toml", "w") as fl:
        fl.write(cfg)

    result = runner.invoke(
        main, ["run", "-i", str(tmpdir / "cfg.toml"), "-o", str(tmpdir)]
    )

    assert result.exit_code == 0

    clidir = tmpdir / "cli"
    clidir.mkdir()

    result2 = runner.invoke(
        main, ["run", "-i", str(tmpdir / "fbt_cfg.toml"), "-o", str(clidir)]
    )

    assert result2.exit_code == 0

    first = np.genfromtxt(tmpdir / "fbt_transform.txt")
    second = np.genfromtxt(clidir / "fbt_transform.txt")

    assert np.allclose(first, second)
