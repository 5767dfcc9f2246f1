from dataclasses import dataclass, field
from enum import StrEnum
from typing import Self

from equiring.core.models.errors import PreconditionError
from equiring.core.space.layout import RingRange


class LoadUnit(StrEnum):
    """
    Units a node reports its on-disk load in. Anything at or above a
    megabyte means the node holds real data.
    """
    KB = "KB"
    MB = "MB"
    GB = "GB"
    TB = "TB"

    @property
    def has_data(self) -> bool:
        return self is not LoadUnit.KB

    @classmethod
    def parse(cls, load: str) -> Self:
        for unit in cls:
            if unit.value in load:
                return unit
        raise PreconditionError("Unknown suffix in load report", load=load)


@dataclass
class NodeInfo:
    """
    What the inventory knows about a single live host.
    """
    host: str
    """
    Host identifier, as displayed to the operator and sorted by the
    balancer. Typically `<canonical-name>/<address>`.
    """

    datacenter: str
    """
    Datacenter label of the host.
    """

    tokens: list[int]
    """
    Ring positions currently owned by the host. Only single-token hosts
    can be balanced; the list form lets the snapshot detect vnode clusters.
    """

    load: str = "0 KB"
    """
    Human readable on-disk load, e.g. "12.5 KB" or "3.1 GB".
    """

    @property
    def address(self) -> str:
        """The part of the host identifier after the last '/'."""
        return self.host.rsplit("/", 1)[-1]

    @property
    def token(self) -> int:
        if len(self.tokens) > 1:
            raise PreconditionError(
                "vnodes not supported",
                host=self.host,
                tokens=len(self.tokens),
            )
        if not self.tokens:
            raise PreconditionError("No token for host; aborting", host=self.host)
        return self.tokens[0]


@dataclass
class ClusterSnapshot:
    """
    A point-in-time view of the live cluster, the sole input of a
    balancing run.
    """
    ring: RingRange
    nodes: list[NodeInfo] = field(default_factory=list)

    def validate(self) -> None:
        """
        Reject clusters the balancer cannot handle: no live hosts,
        duplicate host identifiers, hosts with zero or several tokens, or
        two hosts claiming the same token.
        """
        if not self.nodes:
            raise PreconditionError("No live hosts in cluster")

        owners: dict[int, str] = {}
        hosts: set[str] = set()
        for node in self.nodes:
            if node.host in hosts:
                raise PreconditionError("Duplicate host in cluster", host=node.host)
            hosts.add(node.host)

            token = node.token
            if token in owners:
                raise PreconditionError(
                    "Token owned by several hosts",
                    token=token,
                    host=node.host,
                    owner=owners[token],
                )
            owners[token] = node.host

    def current_tokens(self) -> dict[str, int]:
        return {node.host: node.token for node in self.nodes}

    def host_datacenters(self) -> dict[str, str]:
        return {node.host: node.datacenter for node in self.nodes}

    def has_data(self) -> bool:
        """
        Reports whether any host holds at least a megabyte of data.
        """
        return any(LoadUnit.parse(node.load).has_data for node in self.nodes)
