from collections import Counter
from collections.abc import Mapping

from equiring.core.models.errors import InvariantError, PreconditionError
from equiring.core.space.layout import RingRange, base_tokens
from equiring.core.space.offset import OffsetAssigner, OffsetAssignment


class RingBalancer:
    """
    Computes the target token of every node in a one-token-per-node ring.

    Every datacenter receives the same evenly spaced base tokens, shifted by
    an offset chosen by the OffsetAssigner so that as few nodes as possible
    have to move. Nodes already sitting on one of their datacenter's targets
    keep it; the remaining targets are handed out in ascending order to the
    remaining hosts sorted by name, which keeps the output reproducible for
    identical input.

    Example: with a [0, 3000) ring and two datacenters of three nodes each,
    the targets are 0, 1000, 2000 for one datacenter and 1, 1001, 2001 for
    the other.
    """
    def __init__(self, assigner: OffsetAssigner | None = None) -> None:
        self._assigner = assigner or OffsetAssigner()

    def balance(
        self,
        current: Mapping[str, int],
        host_dc: Mapping[str, str],
        min_token: int,
        max_token: int,
    ) -> dict[str, int]:
        """
        Return the host -> target token mapping for the whole cluster.
        """
        result, _ = self.plan(current, host_dc, RingRange(min_token, max_token))
        return result

    def plan(
        self,
        current: Mapping[str, int],
        host_dc: Mapping[str, str],
        ring: RingRange,
    ) -> tuple[dict[str, int], OffsetAssignment]:
        """
        Same as `balance`, but also return the offset assignment the layout
        was derived from.
        """
        dc_size = self.datacenter_size(current, host_dc)

        # Distinct offsets only keep datacenters apart while slots are wider
        # than the offset range
        datacenters = len(set(host_dc[host] for host in current))
        spacing = ring.size // dc_size
        if datacenters > 1 and spacing <= self._assigner.max_offsets:
            raise PreconditionError(
                "Ring too small for distinct datacenter offsets",
                spacing=spacing,
                max_offsets=self._assigner.max_offsets,
                datacenters=datacenters,
            )

        tokens = base_tokens(ring, dc_size)
        assignment = self._assigner.find_best_assignment(current, host_dc, tokens)

        new_map: dict[str, int] = {}
        for dc, offset in assignment.offsets.items():
            hosts = [host for host in current if host_dc[host] == dc]
            targets = {token + offset for token in tokens}
            new_map.update(self._assign(dc, hosts, current, targets))

        return new_map, assignment

    @staticmethod
    def datacenter_size(current: Mapping[str, int], host_dc: Mapping[str, str]) -> int:
        """
        Return the number of live hosts per datacenter.

        All datacenters must hold the same number of hosts; the balancer
        cannot compensate for an asymmetric cluster.
        """
        if not current:
            raise PreconditionError("No hosts to balance")

        missing = [host for host in current if host not in host_dc]
        if missing:
            raise PreconditionError("Host has no datacenter", host=sorted(missing)[0])

        counts = Counter(host_dc[host] for host in current)
        if len(set(counts.values())) != 1:
            raise PreconditionError(
                "Datacenters have unequal live-node counts",
                counts=dict(sorted(counts.items())),
            )
        return next(iter(counts.values()))

    @staticmethod
    def _assign(
        dc: str,
        hosts: list[str],
        current: Mapping[str, int],
        targets: set[int],
    ) -> dict[str, int]:
        assigned: dict[str, int] = {}
        needs_token: list[str] = []

        for host in hosts:
            token = current[host]
            if token in targets:
                targets.discard(token)
                assigned[host] = token
            else:
                needs_token.append(host)

        if len(needs_token) != len(targets):
            raise InvariantError(
                "Unassigned hosts do not match free target tokens",
                datacenter=dc,
                hosts=len(needs_token),
                tokens=len(targets),
            )

        # Sorted hosts take sorted tokens, so the layout is reproducible
        for host, token in zip(sorted(needs_token), sorted(targets)):
            assigned[host] = token

        return assigned
