from __future__ import annotations

from wiregen.symbols import RoundEnvironment


class TargetCollector:
    """Discover injection target names among the root types of a round.

    Discovery only: members are neither classified nor validated here. Hosts
    list nested types as root types of their own, so no recursion is needed.
    """

    def collect(self, environment: RoundEnvironment) -> tuple[str, ...]:
        """Return the names of types declaring a marked member, in discovery order.

        Args:
            environment: Round whose root types are scanned.

        """
        discovered: dict[str, None] = {}
        for type_symbol in environment.root_types:
            if any(member.marked for member in type_symbol.members):
                discovered.setdefault(type_symbol.qualified_name, None)
        return tuple(discovered)
