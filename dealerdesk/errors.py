from enum import Enum


class DealerDeskError(Exception):
    pass


class StoreUnavailable(DealerDeskError):
    """The record store could not be queried."""


class RemoteUnavailable(DealerDeskError):
    """The remote model call failed, timed out or returned nothing usable."""


class Outcome(str, Enum):
    FOUND = "found"
    NOT_FOUND = "not_found"
    # rendered exactly like NOT_FOUND, kept apart for callers and logs
    STORE_UNAVAILABLE = "store_unavailable"
    OVERVIEW = "overview"
    FAILED = "failed"
