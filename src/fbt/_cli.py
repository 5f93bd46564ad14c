"""Module that contains the command line app."""
import click
import numpy as np
import toml
from pathlib import Path
from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.rule import Rule
from rich.table import Table
from time import time

import fbt
from fbt.transform import FBT

from .helpers.cfg_utils import engine_to_dict, make_function

console = Console(width=100)

#: Top-level config entries. Everything else given on the command line is a param.
_RUN_KEYS = ("function", "method", "q")

DEFAULT_FUNCTION = "x * exp(-x**2 / 2)"


def _get_config(config=None):
    if config is None:
        return {}

    with open(config, "r") as fl:
        return toml.load(fl)


def _ctx_to_dct(args):
    dct = {}
    j = 0
    while j < len(args):
        arg = args[j]
        if "=" in arg:
            k, v = arg.split("=", maxsplit=1)
            k = k.replace("--", "")
            j += 1
        else:
            k = arg.replace("--", "")
            v = args[j + 1]
            j += 2

        try:
            # For most arguments, this will convert it to the right type.
            v = eval(v, {"__builtins__": {}})
        except (NameError, SyntaxError, TypeError):
            # Strings given without quotes, including function expressions.
            v = str(v)

        dct[k] = v

    return dct


def _get_transform(engine, method):
    methods = {"de": engine.transform_de, "plain": engine.transform_plain}
    try:
        return methods[method]
    except KeyError:
        raise click.BadParameter(
            f"method must be one of {tuple(methods)}, got '{method}'",
            param_hint="method",
        )


main = click.Group()


@main.command(
    context_settings={  # Doing this allows arbitrary options to override config
        "ignore_unknown_options": True,
        "allow_extra_args": True,
    }
)
@click.option(
    "-i",
    "--config",
    type=click.Path(exists=True, dir_okay=False),
    default=None,
)
@click.option(
    "-o",
    "--outdir",
    type=click.Path(exists=True, dir_okay=True, file_okay=True),
    default=".",
)
@click.option(
    "-l",
    "--label",
    type=str,
    default="fbt",
)
@click.pass_context
def run(ctx, config, outdir, label):
    """Calculate the transform of a function and output to a file.

    Parameters
    ----------
    ctx :
        A parameter from the parent CLI function to be able to override config.
    config : str
        Path to the configuration file.
    """
    run_cli(config, ctx.args, outdir, label)


def run_cli(config, args, outdir, label):
    """Run the CLI command."""
    console.print(
        Panel(FBT.acknowledgement(), box=box.DOUBLE_EDGE),
        style="bold",
        justify="center",
    )
    console.print()
    console.print(
        f"Using fbt version [blue]{fbt.__version__}[/blue]",
        style="bold",
    )

    cfg = _get_config(config)

    # Update the file-based config with options given on the CLI.
    if "params" not in cfg:
        cfg["params"] = {}

    if args:
        for k, v in _ctx_to_dct(args).items():
            if k in _RUN_KEYS:
                cfg[k] = v
            else:
                cfg["params"][k] = v

    function = cfg.get("function", DEFAULT_FUNCTION)
    method = cfg.get("method", "de")
    qs = np.atleast_1d(np.asarray(cfg.get("q", 1.0), dtype=float))

    console.print()
    console.print("You set the following parameters explicitly:", style="bold")
    for k, v in cfg["params"].items():
        console.print(f"   {k}: {v}")

    console.print()
    console.print(f"Transforming g(x) = [cyan]{function}[/cyan] ({method})", style="bold")

    engine = FBT(**cfg["params"])
    transform = _get_transform(engine, method)
    g = make_function(function)

    outdir = Path(outdir)

    console.print()
    console.print(Rule("Starting Calculations", style="grey53"))
    t = time()

    out = np.zeros_like(qs)
    for i, q in enumerate(qs):
        out[i] = transform(g, q)

        table = Table.grid()
        table.expand = True
        table.add_column(style="bold", justify="left")
        table.add_column(style="blue", justify="right")
        table.add_row(f"Calculated F(q={q:g}) = {out[i]:.8e}", f"[[{time() - t:.2f} sec]]")
        console.print(table)

        t = time()

    np.savetxt(outdir / f"{label}_transform.txt", np.column_stack((qs, out)), header="q F")
    console.print(
        f"   Writing transform to [cyan]{outdir}/{label}_transform.txt[/cyan]."
    )

    # Write out parameters
    dct = engine_to_dict(engine)
    dct["function"] = function
    dct["method"] = method
    dct["q"] = qs.tolist()
    with open(outdir / f"{label}_cfg.toml", "w") as fl:
        toml.dump(dct, fl, encoder=toml.TomlNumpyEncoder())

    console.print(f"   Writing full config to [cyan]{outdir}/{label}_cfg.toml[/cyan].")
    console.print()

    console.print(Rule("Finished!", style="grey53"), style="bold green")
