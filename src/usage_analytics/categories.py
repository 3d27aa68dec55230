"""Endpoint identifier to category key normalization."""

from collections.abc import Mapping
from enum import StrEnum
from types import MappingProxyType


class EndpointCategory(StrEnum):
    SCORE = "score"
    IMPROVE = "improve"


DEFAULT_ENDPOINT_ALIASES: Mapping[str, str] = MappingProxyType(
    {
        "/score-prompt": EndpointCategory.SCORE.value,
        "/score": EndpointCategory.SCORE.value,
        "/improve": EndpointCategory.IMPROVE.value,
    }
)


class CategoryMap:
    """
    Fixed mapping from raw endpoint identifiers to category keys.

    Lookups are exact. Identifiers with no alias map to themselves, so
    `normalize` is total. Only the categories the aliases point at are
    "tracked" and get a dedicated slot on every daily point.
    """

    def __init__(
        self,
        aliases: Mapping[str, str] | None = None,
        *,
        tracked: tuple[str, ...] | None = None,
    ) -> None:
        source = DEFAULT_ENDPOINT_ALIASES if aliases is None else aliases
        self._aliases: Mapping[str, str] = MappingProxyType(
            {str(raw): str(category) for raw, category in source.items()}
        )
        if tracked is None:
            tracked = tuple(dict.fromkeys(self._aliases.values()))
        self._tracked = tracked

    @property
    def aliases(self) -> Mapping[str, str]:
        return self._aliases

    @property
    def tracked(self) -> tuple[str, ...]:
        """Category keys with a dedicated per-point slot, in alias order."""
        return self._tracked

    def normalize(self, endpoint: str) -> str:
        return self._aliases.get(endpoint, endpoint)

    def is_tracked(self, category: str) -> bool:
        return category in self._tracked

    def with_aliases(self, aliases: Mapping[str, str]) -> "CategoryMap":
        """Return a new map with `aliases` layered over the current entries."""
        merged = dict(self._aliases)
        merged.update(aliases)
        tracked = tuple(dict.fromkeys((*self._tracked, *aliases.values())))
        return CategoryMap(merged, tracked=tracked)

    def __repr__(self) -> str:
        return f"CategoryMap(tracked={self._tracked!r})"


DEFAULT_CATEGORY_MAP = CategoryMap()


def normalize_endpoint(endpoint: str) -> str:
    """Normalize `endpoint` with the default alias table."""
    return DEFAULT_CATEGORY_MAP.normalize(endpoint)


__all__ = [
    "CategoryMap",
    "DEFAULT_CATEGORY_MAP",
    "DEFAULT_ENDPOINT_ALIASES",
    "EndpointCategory",
    "normalize_endpoint",
]
