"""CLI commands.

- get: list runs or print one in full
- delete: cascade-delete runs
- logs: print a run's stored log
- config: manage the client configuration
- version: print version information
"""

from .config import config_app
from .delete import delete
from .get import get
from .logs import logs
from .version import version

__all__ = [
    "config_app",
    "delete",
    "get",
    "logs",
    "version",
]
