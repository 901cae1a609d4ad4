"""treescan: Scan a folder tree, process every match in parallel, report."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("treescan")
except PackageNotFoundError:
    __version__ = "0.0.0.dev0"
