"""
Rudimentary type [re-]definitions for cross-versioned Python & mypy.

Some StdLib types are generics in the type-sheds, but not at runtime
on the older Pythons (e.g. ``logging.LoggerAdapter``). This module defines
them in a reusable way, plus some plain definitions used across the codebase.
"""
import logging
from typing import TYPE_CHECKING, Any, Dict, Union

if TYPE_CHECKING:
    LoggerAdapter = logging.LoggerAdapter[Any]
else:
    LoggerAdapter = logging.LoggerAdapter

# As publicly exposed: we only promise that it is based on one of the built-in loggable classes.
Logger = Union[logging.Logger, LoggerAdapter]

# Raw JSON-compatible bodies as sent to or received from the APIs.
RawBody = Dict[str, Any]
