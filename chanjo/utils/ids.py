import uuid


def new_id() -> str:
    """Opaque identifier for mothers, babies and reminders."""
    return uuid.uuid4().hex
