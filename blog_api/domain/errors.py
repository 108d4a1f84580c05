"""Domain exceptions raised by the store and its persistence adapter."""


class StoreError(Exception):
    """Base exception for store operations."""


class RecordNotFoundError(StoreError):
    """Raised when no record of a kind carries the requested id."""

    def __init__(self, kind: str, record_id: int) -> None:
        super().__init__(f"{kind} {record_id} not found")
        self.kind = kind
        self.record_id = record_id


class PersistenceError(StoreError):
    """Raised when the snapshot file can not be written or read."""
