"""Error taxonomy for the scan-and-process engine."""


class TreescanError(Exception):
    """Base class for every error raised by treescan."""


class SetupError(TreescanError):
    """Run cannot start: unusable root, no workers."""


class ConfigError(TreescanError):
    """Settings file unreadable or malformed."""


class CollectionError(TreescanError):
    """Directory unreadable or entry vanished during the scan. Never escapes collect()."""


class ItemProcessingError(TreescanError):
    """A classifier blew up on one item. Converted to a Failed outcome by the pool."""


class PersistenceError(TreescanError):
    """Log file could not be written."""


class PostActionError(TreescanError):
    """Follow-up action failed for a single flagged item."""


class QueueClosed(TreescanError):
    """put() on a queue that was already closed."""
