"""Built-in processors."""

from .base import Processor
from .git_pull import git_processor
from .zip_check import zip_processor

__all__ = ["Processor", "git_processor", "zip_processor"]
