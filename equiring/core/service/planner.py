import logging

from equiring.core.models.cluster import ClusterSnapshot
from equiring.core.models.errors import InvariantError
from equiring.core.models.plan import BalancePlan, MoveOperation, MoveResult
from equiring.core.ports.executor import MoveExecutor
from equiring.core.ports.inventory import Inventory
from equiring.core.space.balancer import RingBalancer


class BalancePlanner:
    """
    Turns a live cluster snapshot into an executable balancing plan.

    The planner is the bridge between the pure RingBalancer and the outside
    world. It rejects clusters the balancer cannot handle (vnodes, hosts
    without a token), derives the target layout, and decides whether the
    plan may actually be carried out:

    - a dry run never moves anything;
    - a cluster holding data is only moved when `force` is set, because
      moving a token streams the data it owns to another node.

    Applying a plan asks each host to move exactly once, in report order.
    Failures are recorded per host and never retried.
    """
    def __init__(self, inventory: Inventory, balancer: RingBalancer | None = None) -> None:
        self._inventory = inventory
        self._balancer = balancer or RingBalancer()
        self._logger = logging.getLogger("core.service.planner")

    def plan(self, *, dry_run: bool = False, force: bool = False) -> BalancePlan:
        """
        Collect the cluster layout from the inventory and plan it.
        """
        self._logger.info("Collecting information about the cluster...")
        snapshot = self._inventory.snapshot()
        return self.plan_for(snapshot, dry_run=dry_run, force=force)

    def plan_for(
        self,
        snapshot: ClusterSnapshot,
        *,
        dry_run: bool = False,
        force: bool = False,
    ) -> BalancePlan:
        snapshot.validate()

        # Load reports are only needed to guard real moves
        has_data = False if dry_run else snapshot.has_data()

        current = snapshot.current_tokens()
        new_map, assignment = self._balancer.plan(
            current,
            snapshot.host_datacenters(),
            snapshot.ring,
        )

        operations = sorted(
            MoveOperation(
                datacenter=node.datacenter,
                new_token=new_map[node.host],
                host=node.host,
                old_token=current[node.host],
            )
            for node in snapshot.nodes
        )

        moves_needed = sum(1 for op in operations if op.moves)
        if moves_needed != assignment.moves:
            raise InvariantError(
                "Planned moves differ from the offset search result",
                planned=moves_needed,
                searched=assignment.moves,
            )

        for dc, offset in sorted(assignment.offsets.items()):
            self._logger.info(f"Datacenter {dc} uses offset {offset}")

        if moves_needed and has_data and not dry_run and not force:
            self._logger.warning(
                "The cluster is unbalanced but has data, so no operations will "
                "actually be carried out. Use --force if you want the cluster "
                "to balance anyway."
            )
            dry_run = True

        return BalancePlan(
            operations=operations,
            offsets=assignment.offsets,
            moves_needed=moves_needed,
            dry_run=dry_run,
            has_data=has_data,
        )

    def apply(self, plan: BalancePlan, executor: MoveExecutor) -> list[MoveResult]:
        """
        Ask every host whose token changes to move to its target.

        Returns one MoveResult per attempted move, in plan order. Nothing is
        attempted for a dry-run plan.
        """
        if plan.dry_run:
            self._logger.info(f"Dry run: {plan.moves_needed} move(s) not carried out")
            return []

        results: list[MoveResult] = []
        for op in plan.moving:
            self._logger.debug(f"Moving {op.host} from {op.old_token} to {op.new_token}")
            try:
                executor.move(op.address, op.new_token)
            except Exception as ex:
                self._logger.error(f"Failed to move {op.host} to {op.new_token}: {ex}")
                results.append(MoveResult(op.host, op.new_token, ok=False, error=str(ex)))
            else:
                results.append(MoveResult(op.host, op.new_token, ok=True))

        return results
