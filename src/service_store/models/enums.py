"""String enums for environment and build lifecycle states."""

from enum import StrEnum


class EnvironmentStatus(StrEnum):
    INITIALIZING = "initializing"
    IN_PROGRESS = "in_progress"
    DONE = "done"
    ERRORED = "errored"


class BuildStatus(StrEnum):
    IN_PROGRESS = "in_progress"
    DONE = "done"
    ERRORED = "errored"


# Environment states from which a new build may start (plain values, as stored)
BUILDABLE_STATUSES = frozenset(
    status.value
    for status in (EnvironmentStatus.INITIALIZING, EnvironmentStatus.DONE, EnvironmentStatus.ERRORED)
)
