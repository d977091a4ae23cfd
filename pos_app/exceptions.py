class PosError(Exception):
    """Base class for errors raised by the POS core."""


class NotFoundError(PosError, LookupError):
    """A fetch-then-act helper was given an id that does not exist.

    Plain lookups (``Store.get``, ``Store.get_by_index``) return ``None``
    instead of raising this.
    """

    def __init__(self, kind: str, key: str):
        super().__init__(f"{kind} {key} not found")
        self.kind = kind
        self.key = key


class DuplicateKeyError(PosError):
    """A primary key or unique index value is already taken."""


class StoreUnavailableError(PosError):
    """The database could not be opened or a write could not be committed."""


class WorkflowRejected(PosError, ValueError):
    """Input failed validation; nothing was written."""


class CommitFailed(PosError):
    """The first commit step of a workflow failed; nothing was written."""


class PartialCommitError(CommitFailed):
    """The workflow's record was written but not every stock adjustment was.

    The record is not rolled back. ``adjusted`` lists the product ids whose
    quantity was updated, ``pending`` the ones that were not.
    """

    def __init__(self, message: str, record_id: str, adjusted: list[str], pending: list[str]):
        super().__init__(message)
        self.record_id = record_id
        self.adjusted = adjusted
        self.pending = pending


class PartialImportError(CommitFailed):
    """A backup import cleared the old data but could not re-add every record.

    ``restored`` counts the records of each kind that were written before
    the failure.
    """

    def __init__(self, message: str, restored: dict[str, int]):
        super().__init__(message)
        self.restored = restored
