# pyright: reportUnusedCallResult=false, reportUnusedFunction=false
"""Config command app for managing netsup configuration."""

# Import command modules to register commands with the app
from . import _read as _read, _validate as _validate, _write as _write
from ._app import app

__all__ = ["app"]
