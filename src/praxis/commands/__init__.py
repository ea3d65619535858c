"""Praxis CLI commands."""

from praxis.commands.components import components
from praxis.commands.init_cmd import init
from praxis.commands.status import status
from praxis.commands.update import update

__all__ = ["init", "update", "components", "status"]
