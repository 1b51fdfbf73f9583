"""Database layer exceptions."""


class PersistenceError(Exception):
    """Raised when staging, flushing, pruning or reordering commits fails.

    Wraps the underlying SQLAlchemy error (available as ``__cause__``).
    Anything staged but not yet flushed when this is raised has been
    rolled back and will be re-mirrored on the next run.
    """

    pass
