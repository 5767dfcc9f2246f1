from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass

from equiring.core.models.errors import InvariantError, PreconditionError

MAX_OFFSETS = 10


@dataclass(frozen=True, slots=True)
class OffsetAssignment:
    """
    The outcome of an offset search: which shift each datacenter adds to
    the base tokens, and how many nodes would have to move to reach it.
    """
    offsets: dict[str, int]
    moves: int


class OffsetAssigner:
    """
    Chooses a distinct ring offset for every datacenter.

    Each datacenter owns one token per base slot, shifted by a small offset
    in [0, max_offsets). Offsets must be pairwise distinct so that tokens of
    different datacenters never collide, which holds as long as the spacing
    between base slots exceeds max_offsets.

    The search is exhaustive over injective datacenter -> offset maps, but
    restricted to "active" offsets: those at which some node already sits.
    If there are fewer active offsets than datacenters, the lowest unused
    offsets are activated until every datacenter can get one. Datacenter
    counts are tiny in practice, so the falling factorial stays small.

    The assigner holds no per-run state: every call to
    `find_best_assignment` builds its own search, so one instance may be
    shared by concurrent callers.
    """
    def __init__(self, max_offsets: int = MAX_OFFSETS) -> None:
        self._max_offsets = max_offsets

    @property
    def max_offsets(self) -> int:
        return self._max_offsets

    def find_best_assignment(
        self,
        current: Mapping[str, int],
        host_dc: Mapping[str, str],
        base_tokens: Sequence[int],
    ) -> OffsetAssignment:
        """
        Return the datacenter -> offset map needing the fewest moves.

        Datacenters are visited in order of first appearance in `current`
        and offsets are tried in ascending order. Among assignments with the
        same number of moves, the first one enumerated wins.
        """
        if not current:
            raise PreconditionError("No hosts to balance")

        datacenters = list(dict.fromkeys(self._datacenter_of(host, host_dc) for host in current))
        if len(datacenters) > self._max_offsets:
            raise PreconditionError(
                "Too many datacenters",
                datacenters=len(datacenters),
                max_offsets=self._max_offsets,
            )

        placements = self.placements(current, base_tokens)
        active = self.active_offsets(placements, len(datacenters))

        def count_moves(offsets: Mapping[str, int]) -> int:
            return sum(
                1 for host in current
                if offsets[host_dc[host]] not in placements[host]
            )

        best = self._search(datacenters, active, count_moves, {}, frozenset())
        if best is None:
            raise InvariantError(
                "No offset assignment found",
                datacenters=len(datacenters),
                active_offsets=len(active),
            )
        return best

    def placements(
        self,
        current: Mapping[str, int],
        base_tokens: Sequence[int],
    ) -> dict[str, set[int]]:
        """
        Map every host to the offsets under which it is already on a slot.

        A host sits at offset `d` when `token - base[j] == d` for some slot j
        and 0 <= d < max_offsets. The comparison stays in the integer domain
        so it remains exact for 127-bit tokens.
        """
        placements: dict[str, set[int]] = {}
        for host, token in current.items():
            placements[host] = {
                token - base
                for base in base_tokens
                if 0 <= token - base < self._max_offsets
            }
        return placements

    def active_offsets(self, placements: Mapping[str, set[int]], needed: int) -> list[int]:
        """
        Return the ascending list of offsets worth trying.

        Offsets already used by some host are always included; if they
        are not enough to give every datacenter its own offset, the lowest
        inactive ones are added.
        """
        active = set().union(*placements.values()) if placements else set()
        candidate = 0
        while len(active) < needed and candidate < self._max_offsets:
            active.add(candidate)
            candidate += 1
        return sorted(active)

    def _search(
        self,
        datacenters: Sequence[str],
        active: Sequence[int],
        count_moves: Callable[[Mapping[str, int]], int],
        assignment: dict[str, int],
        taken: frozenset[int],
    ) -> OffsetAssignment | None:
        depth = len(assignment)
        if depth == len(datacenters):
            return OffsetAssignment(assignment, count_moves(assignment))

        best: OffsetAssignment | None = None
        dc = datacenters[depth]
        for offset in active:
            if offset in taken:
                continue
            candidate = self._search(
                datacenters,
                active,
                count_moves,
                {**assignment, dc: offset},
                taken | {offset},
            )
            # Strict comparison: the first assignment found wins ties
            if candidate is not None and (best is None or candidate.moves < best.moves):
                best = candidate

        return best

    @staticmethod
    def _datacenter_of(host: str, host_dc: Mapping[str, str]) -> str:
        try:
            return host_dc[host]
        except KeyError:
            raise PreconditionError("Host has no datacenter", host=host) from None
