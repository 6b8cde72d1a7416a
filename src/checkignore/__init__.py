"""Report which ignore rule, if any, excludes each given path.

This package answers the question "why is this file ignored?" for a Git working tree:
for every path it finds the highest-priority .gitignore-style rule that matches, while
never reporting tracked paths as ignored.
"""

from importlib.metadata import PackageNotFoundError, version

# Expose the version for both programmatic use and CLI
try:
    __version__ = version("checkignore")
except PackageNotFoundError:
    __version__ = "unknown"
