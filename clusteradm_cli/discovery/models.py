"""Value types for discovered component resources."""

from __future__ import annotations

from dataclasses import dataclass
from dataclasses import field


@dataclass(frozen=True)
class Resource:
    """A single manifest file used for deploying cluster API or one of its providers.

    The content is kept as raw bytes and never parsed here.
    """

    path: str
    content: bytes

    def __repr__(self) -> str:
        return f"Resource({self.path!r}, {len(self.content)} bytes)"


@dataclass(frozen=True)
class ComponentResources:
    """The group of resources for one component.

    When a component ships multiple resources, ``apply`` names the one that
    should be used as entry point when applying them. An empty string means
    no hint was given.
    """

    resources: tuple[Resource, ...] = field(default_factory=tuple)
    apply: str = ""

    def __post_init__(self) -> None:
        # Accept any iterable but store a tuple so the bundle stays immutable
        object.__setattr__(self, "resources", tuple(self.resources))

    @property
    def paths(self) -> list[str]:
        return [r.path for r in self.resources]

    def entry_point(self) -> Resource | None:
        """Return the resource named by the apply hint, if any."""
        if not self.apply:
            return None
        for resource in self.resources:
            if resource.path == self.apply:
                return resource
        return None
