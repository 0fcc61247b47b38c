"""Entity resolution strategies: which existing record does a name refer to?"""

from __future__ import annotations

from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Sequence

    from nexus.domain.model import ProjectRecord

log = getLogger(__name__)


@runtime_checkable
class NameResolver(Protocol):
    """Resolve a candidate name against the existing records."""

    def resolve(self, name: str, projects: Sequence[ProjectRecord]) -> ProjectRecord | None: ...


@dataclass(frozen=True, slots=True)
class SubstringNameResolver:
    """Case-insensitive containment of the candidate name in a record name.

    The first match in store order wins; multiple matches are not disambiguated.
    """

    def resolve(self, name: str, projects: Sequence[ProjectRecord]) -> ProjectRecord | None:
        needle = name.strip().casefold()
        if not needle:
            return None
        matches = [project for project in projects if needle in project.name.casefold()]
        if not matches:
            return None
        if len(matches) > 1:
            log.debug(
                "Name %r matches %d projects; using %r",
                name,
                len(matches),
                matches[0].name,
            )
        return matches[0]


@dataclass(frozen=True, slots=True)
class ExactNameResolver:
    """Case-insensitive equality of names."""

    def resolve(self, name: str, projects: Sequence[ProjectRecord]) -> ProjectRecord | None:
        needle = name.strip().casefold()
        for project in projects:
            if project.name.strip().casefold() == needle:
                return project
        return None


__all__ = ["ExactNameResolver", "NameResolver", "SubstringNameResolver"]
