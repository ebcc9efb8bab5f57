"""Exception types raised by fittrack."""


class FitTrackError(Exception):
    """Base class for fittrack errors."""


class StoreError(FitTrackError):
    """The document store failed (connectivity, permission, quota, I/O)."""


class BatchLimitExceededError(StoreError):
    """A write batch was given more operations than the store accepts."""

    def __init__(self, limit: int):
        super().__init__(f"Write batch exceeds the limit of {limit} operations")
        self.limit = limit


class NotFoundError(FitTrackError):
    """A referenced document does not exist."""


class OwnershipError(FitTrackError):
    """An entity does not belong to the requesting user."""


class ValidationError(FitTrackError):
    """An entity failed validation before being written."""


class PartialCascadeDeleteError(FitTrackError):
    """A cascade delete failed after some of its batches were committed.

    Batches are atomic individually but the cascade as a whole is not: the
    documents in ``committed_batches`` are gone and the rest still exist.
    No rollback is attempted.
    """

    def __init__(
        self,
        target: str,
        committed_batches: int,
        total_batches: int,
        deleted_documents: int,
    ):
        super().__init__(
            f"Cascade delete of {target} is incomplete: "
            f"{committed_batches} of {total_batches} batches committed "
            f"({deleted_documents} documents deleted). "
            "The delete is not atomic across batches; remaining descendants still exist."
        )
        self.target = target
        self.committed_batches = committed_batches
        self.total_batches = total_batches
        self.deleted_documents = deleted_documents
