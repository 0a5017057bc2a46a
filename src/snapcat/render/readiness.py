"""Readiness predicates — when is a client-rendered page done?

Each route kind has exactly one predicate: a CSS selector that must be
present in the document and, optionally, must contain non-blank text.
The predicate is evaluated inside the page by a polled JS function, so
the same check runs uniformly for every route.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from types import MappingProxyType

from snapcat._errors import ConfigError
from snapcat.routes.registry import RouteKind

# Evaluated in the page with a single ``{selector, nonEmpty}`` argument.
READY_FUNCTION = """(predicate) => {
  const el = document.querySelector(predicate.selector);
  if (!el) return false;
  if (!predicate.nonEmpty) return true;
  return (el.textContent || "").trim().length > 0;
}"""


@dataclass(frozen=True, slots=True)
class ReadinessPredicate:
    """Selector presence + optional non-empty text content.

    Attributes:
        selector: CSS selector of the marker element.
        non_empty: Also require the marker's trimmed text to be non-empty.

    """

    selector: str
    non_empty: bool = True

    def as_arg(self) -> dict[str, object]:
        """The argument passed to :data:`READY_FUNCTION`."""
        return {"selector": self.selector, "nonEmpty": self.non_empty}


DEFAULT_PREDICATES: Mapping[RouteKind, ReadinessPredicate] = MappingProxyType({
    RouteKind.LISTING: ReadinessPredicate("app-home"),
    RouteKind.DETAIL: ReadinessPredicate("#rendered-markdown"),
    RouteKind.STATIC: ReadinessPredicate("app-root"),
})


class ReadinessRegistry:
    """Maps every :class:`RouteKind` to exactly one predicate.

    Args:
        predicates: One entry per route kind.

    Raises:
        ConfigError: If any route kind has no predicate.

    """

    __slots__ = ("_predicates",)

    def __init__(self, predicates: Mapping[RouteKind, ReadinessPredicate]) -> None:
        missing = [kind.value for kind in RouteKind if kind not in predicates]
        if missing:
            msg = f"No readiness predicate for route kind(s): {', '.join(missing)}"
            raise ConfigError(msg)
        self._predicates = dict(predicates)

    @classmethod
    def from_overrides(
        cls, overrides: Mapping[str, Mapping[str, object]] | None = None,
    ) -> ReadinessRegistry:
        """Build from the defaults, replacing kinds named in *overrides*.

        *overrides* maps a kind name (``"listing"``, ``"detail"``,
        ``"static"``) to ``{"selector": ..., "non_empty": ...}``.
        """
        predicates = dict(DEFAULT_PREDICATES)
        for name, spec in (overrides or {}).items():
            try:
                kind = RouteKind(name.lower())
            except ValueError as exc:
                msg = f"Unknown route kind in readiness config: {name!r}"
                raise ConfigError(msg) from exc
            predicates[kind] = ReadinessPredicate(
                selector=str(spec["selector"]),
                non_empty=bool(spec.get("non_empty", True)),
            )
        return cls(predicates)

    def predicate_for(self, kind: RouteKind) -> ReadinessPredicate:
        return self._predicates[kind]

    def items(self) -> list[tuple[RouteKind, ReadinessPredicate]]:
        return [(kind, self._predicates[kind]) for kind in RouteKind]
