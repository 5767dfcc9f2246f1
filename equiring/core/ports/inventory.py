from typing import Protocol

from equiring.core.models.cluster import ClusterSnapshot


class Inventory(Protocol):
    """
    Source of truth for the live cluster layout.

    Implementations gather, for every live host, its datacenter, its
    current tokens and its reported load, together with the ring bounds of
    the partitioning scheme in use. They may return hosts with several
    tokens: rejecting vnode clusters is the planner's job.
    """

    def snapshot(self) -> ClusterSnapshot:
        """Return the current cluster layout."""
