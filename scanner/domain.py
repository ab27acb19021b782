# scanner/domain.py

from dataclasses import dataclass, field


@dataclass(frozen=True)
class DomainContext:
    """The target domain and its dot-separated labels, left to right."""

    domain: str
    labels: tuple = field(init=False)

    def __post_init__(self):
        object.__setattr__(self, "labels", tuple(self.domain.split(".")))
