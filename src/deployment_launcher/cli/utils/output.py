"""Console output shared by the launcher commands.

Status lines are read by other tools, so they are printed without Rich
markup, highlighting or wrapping.
"""

from rich.console import Console

console = Console()
err_console = Console(stderr=True)

UNKNOWN_DEPLOYMENT_TOKEN = "<error:unknown-deployment>"

USAGE = """Usage:
deployment-launcher create <project-name> <assembly-name> <runtime-version> <main-deployment-name> <main-deployment-json> <main-deployment-snapshot> <main-deployment-region> [<sim-deployment-name> <sim-deployment-json> <sim-deployment-region> <num-sim-players>]
  Starts a cloud deployment, with optionally a simulated player deployment. The deployments can be started in different regions ('EU', 'US', 'AP' and 'CN').
deployment-launcher createsim <project-name> <assembly-name> <runtime-version> <target-deployment-name> <sim-deployment-name> <sim-deployment-json> <sim-deployment-region> <num-sim-players> <auto-connect>
  Starts a simulated player deployment. Can be started in a different region from the target deployment ('EU', 'US', 'AP' and 'CN').
deployment-launcher stop <project-name> <main-deployment-region> [deployment-id]
  Stops the specified deployment within the project.
  If no deployment id argument is specified, all active deployments started by the deployment launcher in the project will be stopped.
deployment-launcher list <project-name> <main-deployment-region>
  Lists all active deployments within the specified project that are started by the deployment launcher."""


def emit(message: str, err: bool = False) -> None:
    target = err_console if err else console
    target.print(message, markup=False, highlight=False, soft_wrap=True)


def print_usage() -> None:
    emit(USAGE)
