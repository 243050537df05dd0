# cli.py
from __future__ import annotations

import sys

import click

from denox import __version__
from denox.launcher import DEFAULT_RUNTIME
from denox.runner import run as run_workspace_script
from denox.ui.console import Console, set_console


@click.group()
@click.option(
    "--debug",
    is_flag=True,
    default=False,
    help="Enable debug mode (show stack traces and detailed output)",
)
@click.option(
    "--workspace",
    default=None,
    envvar="DENOX_WORKSPACE",
    help="Workspace file path (defaults to deno-workspace.yml/.yaml/.json in the current directory)",
)
@click.option(
    "--runtime",
    default=DEFAULT_RUNTIME,
    envvar="DENOX_RUNTIME",
    show_default=True,
    help="Runtime executable used for 'file' scripts",
)
@click.option(
    "--update-check/--no-update-check",
    default=True,
    envvar="DENOX_UPDATE_CHECK",
    help="Check GitHub for a newer denox release after the script finishes",
)
@click.version_option(__version__, prog_name="denox")
@click.pass_context
def cli(ctx, debug, workspace, runtime, update_check):
    """denox: run scripts declared in a deno workspace file."""
    console = Console(debug=debug)
    set_console(console)
    ctx.ensure_object(dict)
    ctx.obj["debug"] = debug
    ctx.obj["workspace"] = workspace
    ctx.obj["runtime"] = runtime
    ctx.obj["update_check"] = update_check


@cli.command(
    context_settings={"ignore_unknown_options": True, "allow_interspersed_args": False},
)
@click.argument("script")
@click.argument("args", nargs=-1, type=click.UNPROCESSED)
@click.pass_context
def run(ctx, script, args):
    """Run SCRIPT from the workspace; ARGS are passed to it unchanged."""
    code = run_workspace_script(
        script,
        list(args),
        workspace_path=ctx.obj["workspace"],
        runtime=ctx.obj["runtime"],
        check_updates=ctx.obj["update_check"],
    )
    sys.exit(code)


if __name__ == "__main__":
    cli()
