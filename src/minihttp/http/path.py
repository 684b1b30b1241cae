"""
Request target decomposition.

The server routes on the first path segment only and hands the rest of
the path to the handler as its argument:

    "/echo/hello/world"  →  primary="echo",  secondary="hello/world"
    "/files/report.txt"  →  primary="files", secondary="report.txt"
    "/user-agent"        →  primary="user-agent", secondary=""
    "/"                  →  primary="",      secondary=""
    ""                   →  primary="",      secondary=""

The text before the first "/" (empty for any well-formed target) is
discarded.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class RequestPath:
    """A request target split into its route key and its argument."""

    target: str
    segments: tuple[str, ...] = ()

    @classmethod
    def parse(cls, target: str) -> "RequestPath":
        if not target:
            return cls(target=target)
        return cls(target=target, segments=tuple(target.split("/")[1:]))

    @property
    def primary(self) -> str:
        """Route selector: first segment after the leading "/"."""
        return self.segments[0] if self.segments else ""

    @property
    def secondary(self) -> str:
        """Everything after the primary segment, re-joined with "/"."""
        return "/".join(self.segments[1:])
