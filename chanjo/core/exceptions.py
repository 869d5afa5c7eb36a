class ChanjoError(Exception):
    """Base class for errors raised by the reminder core."""


class NotFoundError(ChanjoError):
    """Referenced mother or baby does not exist, or the baby belongs to someone else."""


class ConflictError(ChanjoError):
    """The write would violate a uniqueness rule (duplicate baby name, phone, email)."""
