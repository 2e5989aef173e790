"""
Detecting the package's own version.

The version is not kept in the codebase, it comes from the tags
at packaging time (via ``setuptools_scm``), and is read here once at startup.
"""
import importlib.metadata
from typing import Optional

version: Optional[str] = None

try:
    name, *_ = __name__.split('.')  # usually "tunnelkeeper", unless renamed/forked.
    version = importlib.metadata.version(name)
except importlib.metadata.PackageNotFoundError:
    pass  # running from a source tree without installation.
