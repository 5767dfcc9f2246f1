from typing import Protocol


class MoveExecutor(Protocol):
    """
    Asks a single host to change its ring position.

    The planner calls `move` once per host whose token differs from its
    target and never retries. A failure must be reported by raising; the
    planner records it and carries on with the remaining hosts.
    """

    def move(self, address: str, token: int) -> None:
        """Move the host reachable at `address` to `token`."""
