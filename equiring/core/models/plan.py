from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True, slots=True, order=True)
class MoveOperation:
    """
    The planned position of one host. Operations order by datacenter, then
    by target token, which is the order the report lists them in.
    """
    datacenter: str
    new_token: int
    host: str = field(compare=False)
    old_token: int = field(compare=False)

    @property
    def moves(self) -> bool:
        return self.old_token != self.new_token

    @property
    def address(self) -> str:
        return self.host.rsplit("/", 1)[-1]

    def to_dict(self) -> dict[str, Any]:
        # 127-bit tokens exceed double precision, keep them as strings
        return {
            "host": self.host,
            "datacenter": self.datacenter,
            "old_token": str(self.old_token),
            "new_token": str(self.new_token),
            "action": "move" if self.moves else "stay",
        }


@dataclass
class BalancePlan:
    """
    The full outcome of a planning run, before anything is executed.
    """
    operations: list[MoveOperation]
    """
    One operation per live host, sorted by datacenter then target token.
    """

    offsets: dict[str, int]
    """
    The offset chosen for each datacenter.
    """

    moves_needed: int
    """
    Number of hosts whose token must change. Always equal to the move
    count of the winning offset assignment.
    """

    dry_run: bool = False
    """
    When set, the plan is reported but no host is moved.
    """

    has_data: bool = False
    """
    Whether any host reported at least a megabyte of data.
    """

    @property
    def balanced(self) -> bool:
        return self.moves_needed == 0

    @property
    def moving(self) -> list[MoveOperation]:
        return [op for op in self.operations if op.moves]

    def to_dict(self) -> dict[str, Any]:
        return {
            "operations": [op.to_dict() for op in self.operations],
            "offsets": dict(sorted(self.offsets.items())),
            "moves_needed": self.moves_needed,
            "balanced": self.balanced,
            "dry_run": self.dry_run,
            "has_data": self.has_data,
        }


@dataclass(frozen=True, slots=True)
class MoveResult:
    """
    Outcome of asking one host to change its token.
    """
    host: str
    token: int
    ok: bool
    error: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "host": self.host,
            "token": str(self.token),
            "ok": self.ok,
            "error": self.error,
        }
