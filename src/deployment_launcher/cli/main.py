"""Main CLI entry point for the deployment launcher."""

import sys
from importlib import metadata
from typing import List, Optional, Sequence

import typer
from typer.core import TyperGroup

from .utils.output import console, print_usage


def get_version() -> str:
    """Get the package version from metadata."""
    try:
        return metadata.version("deployment-launcher")
    except metadata.PackageNotFoundError:
        return "unknown"


class LauncherGroup(TyperGroup):
    """Prints the launcher usage and exits with 1 on an unknown command.

    The command word is checked before click parses anything, so typer's own
    "No such command" error (exit code 2) is never reached.
    """

    def main(self, args: Optional[Sequence[str]] = None, *main_args, **kwargs):
        argv = list(sys.argv[1:] if args is None else args)
        command_name = next((arg for arg in argv if not arg.startswith("-")), None)

        if command_name is not None and command_name not in self.commands:
            print_usage()
            if kwargs.get("standalone_mode", True):
                sys.exit(1)
            return 1

        return super().main(argv, *main_args, **kwargs)


# command: deployment-launcher
app = typer.Typer(
    name="deployment-launcher",
    help="Launch, stop and list cloud deployments and their simulated player deployments.",
    cls=LauncherGroup,
    add_completion=False,
    rich_markup_mode="rich",
)

ARGS_HELP = "Positional arguments, see usage"
TAG_HELP = "Extra deployment tag (repeatable)"

# command: deployment-launcher <command>


@app.command("create", context_settings={"ignore_unknown_options": True})
def create_cmd(
    args: Optional[List[str]] = typer.Argument(None, help=ARGS_HELP),
    tags: Optional[List[str]] = typer.Option(None, "--tag", "-t", help=TAG_HELP),
):
    """Start a deployment, optionally with a simulated player deployment."""
    from .commands.create import create_command

    return create_command(args, tags)


@app.command("createsim", context_settings={"ignore_unknown_options": True})
def createsim_cmd(
    args: Optional[List[str]] = typer.Argument(None, help=ARGS_HELP),
    tags: Optional[List[str]] = typer.Option(None, "--tag", "-t", help=TAG_HELP),
):
    """Start a simulated player deployment against an existing deployment."""
    from .commands.create import createsim_command

    return createsim_command(args, tags)


@app.command("stop", context_settings={"ignore_unknown_options": True})
def stop_cmd(args: Optional[List[str]] = typer.Argument(None, help=ARGS_HELP)):
    """Stop a deployment, or all active deployments started by the launcher."""
    from .commands.stop import stop_command

    return stop_command(args)


@app.command("list", context_settings={"ignore_unknown_options": True})
def list_cmd(args: Optional[List[str]] = typer.Argument(None, help=ARGS_HELP)):
    """List active deployments started by the launcher."""
    from .commands.listing import list_command

    return list_command(args)


@app.callback(invoke_without_command=True)
def main(
    ctx: typer.Context,
    version: bool = typer.Option(False, "--version", "-v", help="Show version"),
):
    """Deployment launcher for cloud and simulated player deployments."""
    if version:
        console.print(f"deployment-launcher v{get_version()}")
        raise typer.Exit()

    if ctx.invoked_subcommand is None:
        print_usage()
        raise typer.Exit(1)


if __name__ == "__main__":
    app()
