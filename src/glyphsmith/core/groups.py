"""Group reference expansion.

Rule tables and attachment classes may list ``$name`` or ``@name`` group
references next to plain character names. Groups can contain other groups;
a reference that is already being expanded is ignored, so cycles terminate.
"""

from collections.abc import Iterable

from glyphsmith.domain import CharacterSet

GROUP_PREFIXES = ("$", "@")


def is_group_ref(item: str) -> bool:
    return item.startswith(GROUP_PREFIXES)


class GroupResolver:
    """Expands names and group references into character names.

    One resolver is built per engine call and memoizes each group's
    expansion for the lifetime of that call.

    Args:
        groups: Named groups of names or further group references
        character_sets: Character sets; a set's name_key acts as a group
            when no explicit group of that name exists
    """

    def __init__(
        self,
        groups: dict[str, list[str]] | None = None,
        character_sets: Iterable[CharacterSet] | None = None,
    ) -> None:
        self.groups = groups or {}
        self.set_members = {
            cs.name_key: [c.name for c in cs.characters] for cs in character_sets or []
        }
        self._cache: dict[str, tuple[str, ...]] = {}

    def group_members(self, group_name: str) -> list[str] | None:
        if group_name in self.groups:
            return self.groups[group_name]
        return self.set_members.get(group_name)

    def expand_group(self, group_name: str) -> tuple[str, ...]:
        """Flat, ordered, de-duplicated names of one group."""
        cached = self._cache.get(group_name)
        if cached is not None:
            return cached
        result: dict[str, None] = {}
        self._walk(group_name, result, set())
        names = tuple(result)
        self._cache[group_name] = names
        return names

    def _walk(self, group_name: str, result: dict[str, None], visiting: set[str]) -> None:
        if group_name in visiting:
            return
        visiting.add(group_name)
        for member in self.group_members(group_name) or []:
            member = member.strip()
            if not member:
                continue
            if is_group_ref(member):
                self._walk(member[1:], result, visiting)
            else:
                result[member] = None

    def expand(self, items: Iterable[str] | None) -> list[str]:
        """Expand a list of names and group references.

        Args:
            items: Names and ``$group`` / ``@group`` references

        Returns:
            Unique character names in first-seen order
        """
        result: dict[str, None] = {}
        for item in items or []:
            item = item.strip()
            if not item:
                continue
            if is_group_ref(item):
                for name in self.expand_group(item[1:]):
                    result[name] = None
            else:
                result[item] = None
        return list(result)

    def contains(self, items: Iterable[str] | None, name: str) -> bool:
        """Check whether name is listed directly or through any group."""
        for item in items or []:
            item = item.strip()
            if item == name:
                return True
            if is_group_ref(item) and name in self.expand_group(item[1:]):
                return True
        return False
