"""
scatterspace
============
Data and selection core of an interactive 3D scatter plotting service.

The library logs under the 'scatterspace' logger and stays silent until the
host application configures logging (see scatterspace.logging_config).
"""
import logging
from importlib.metadata import version, PackageNotFoundError

try:
    __version__ = version("scatterspace")
except PackageNotFoundError:
    __version__ = "0.0.0-dev"

logging.getLogger(__name__).addHandler(logging.NullHandler())
