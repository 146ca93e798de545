"""Exceptions raised while building and rendering reports."""


class ReportError(Exception):
    """Base class for all stackreport errors."""


class MalformedSnapshot(ReportError):
    """The raw snapshot is missing a required field."""


class EmptySnapshot(ReportError):
    """The snapshot has no frames where at least one is required."""


class UnknownFrame(ReportError, KeyError):
    """A frame id does not resolve to a frame in the snapshot."""

    def __init__(self, frame_id: str) -> None:
        super().__init__(frame_id)
        self.frame_id = frame_id

    def __str__(self) -> str:
        return f"unknown frame {self.frame_id!r}"


class UnknownEdgeTarget(UnknownFrame):
    """A call edge points at a frame that is not in the snapshot."""

    def __init__(self, caller_id: str, frame_id: str) -> None:
        super().__init__(frame_id)
        self.caller_id = caller_id

    def __str__(self) -> str:
        return f"frame {self.caller_id!r} calls unknown frame {self.frame_id!r}"


class SourceUnavailable(ReportError):
    """The source file of a frame could not be read for annotation."""

    def __init__(self, frame_name: str, path: str | None, reason: str) -> None:
        super().__init__(frame_name, path, reason)
        self.frame_name = frame_name
        self.path = path
        self.reason = reason

    def __str__(self) -> str:
        return f"source of {self.frame_name} unavailable ({self.path}): {self.reason}"


class InvalidPattern(ReportError):
    """A name filter is not a valid regular expression."""
