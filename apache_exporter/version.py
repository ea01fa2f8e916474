"""Build metadata."""

import platform

__version__ = "0.7.0"
PROGRAM = "apache_exporter"


def version_string() -> str:
    return f"{PROGRAM}, version {__version__} (python {platform.python_version()})"
