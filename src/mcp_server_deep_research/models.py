"""Data models for research interactions and grounded answers."""

from dataclasses import dataclass, field


@dataclass
class ResearchSource:
    """A web citation attached to a grounded answer."""

    title: str
    uri: str

    def to_dict(self) -> dict[str, str]:
        return {"title": self.title, "uri": self.uri}


@dataclass
class InteractionSnapshot:
    """State of a deep research interaction at the time it was fetched."""

    id: str
    status: str | None
    outputs: list[str | None] = field(default_factory=list)
    error: object | None = None


@dataclass
class GroundedAnswer:
    """Result of a single search-grounded generation call."""

    text: str | None
    sources: list[ResearchSource] = field(default_factory=list)
