"""leakprobe - published file detector

Checks whether local files are served by a web server, by fetching
base URL + relative path and looking for the file's first lines in the
response. Designed to be used as both a script and a library.
"""

from ._version import NAME, __version__, default_user_agent
from .scanner import check_async, run_check

__all__ = ["check_async", "run_check", "default_user_agent", "NAME", "__version__"]
