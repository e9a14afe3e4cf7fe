from __future__ import annotations

from discord.app_commands import AppCommandError
from discord.ext.commands import CommandError


class CadenceException(CommandError, AppCommandError):
    """Base exception for errors in the library"""


class InvalidStateException(CadenceException):
    """Raised when an operation is attempted on an object in the wrong state"""


class InvalidArgumentException(CadenceException):
    """Raised when invalid arguments are passed to a method"""


class NotFoundException(CadenceException):
    """Raised when a lookup produced nothing"""


class RemoteOperationFailedException(CadenceException):
    """Raised when a call to the node or the voice gateway fails"""
