# Load .env vars from file before everything else
from dotenv import load_dotenv

load_dotenv()

from .logger import setup_logging  # noqa: E402

setup_logging()

# TYPE_CHECKING imports provide full IDE support (autocomplete, type hints)
# while __getattr__ enables lazy loading at runtime for fast CLI startup
from typing import TYPE_CHECKING  # noqa: E402

if TYPE_CHECKING:
    from .config import LauncherSettings
    from .core.deployments import DeploymentManager
    from .core.launch_config import patch_launch_config
    from .core.regions import RegionResolver


def __getattr__(name):
    """Lazily import core modules only when accessed."""
    if name == "LauncherSettings":
        from .config import LauncherSettings

        return LauncherSettings
    elif name == "DeploymentManager":
        from .core.deployments import DeploymentManager

        return DeploymentManager
    elif name == "patch_launch_config":
        from .core.launch_config import patch_launch_config

        return patch_launch_config
    elif name == "RegionResolver":
        from .core.regions import RegionResolver

        return RegionResolver
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


__all__ = [
    "DeploymentManager",
    "LauncherSettings",
    "RegionResolver",
    "patch_launch_config",
]
