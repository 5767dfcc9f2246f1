from dataclasses import dataclass
from enum import StrEnum
from typing import Self

from equiring.core.models.errors import PreconditionError


@dataclass(frozen=True, slots=True)
class RingRange:
    """
    The half-open token interval [min_token, max_token) shared by the
    whole ring, regardless of datacenter.

    Bounds are plain Python integers: the random partitioner spans 2^127
    positions, so fixed-width arithmetic is never assumed.
    """
    min_token: int
    max_token: int

    def __post_init__(self) -> None:
        if self.max_token <= self.min_token:
            raise PreconditionError(
                "Ring range is empty",
                min_token=self.min_token,
                max_token=self.max_token,
            )

    @property
    def size(self) -> int:
        return self.max_token - self.min_token


class Partitioner(StrEnum):
    """
    Partitioning schemes whose token space is known in advance.
    """
    random = "random"
    murmur3 = "murmur3"

    @property
    def ring_range(self) -> RingRange:
        if self is Partitioner.random:
            return RingRange(0, 1 << 127)
        return RingRange(-(1 << 63), (1 << 63) - 1)

    @classmethod
    def parse(cls, name: str) -> Self:
        """
        Resolve a partitioner from its short name or from a fully
        qualified class name such as `org.apache.cassandra.dht.Murmur3Partitioner`.
        """
        short = name.rsplit(".", 1)[-1].lower().removesuffix("partitioner")
        try:
            return cls(short)
        except ValueError:
            raise PreconditionError(f"Unsupported partitioner: {name}") from None


def base_tokens(ring: RingRange, dc_size: int) -> list[int]:
    """
    Return `dc_size` positions evenly spaced across the ring.

    The i-th position is min_token + floor(size * i / dc_size). These slots
    are datacenter-agnostic: every datacenter owns one token per slot,
    shifted by its own offset.
    """
    if dc_size <= 0:
        raise PreconditionError("Datacenter size must be positive", dc_size=dc_size)

    return [ring.min_token + (ring.size * i) // dc_size for i in range(dc_size)]
