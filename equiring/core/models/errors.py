from typing import Any


class BalanceError(RuntimeError):
    """
    Root of every failure raised while planning a ring layout.

    A balancing run never repairs its own input: any error aborts the run
    and is propagated to the caller. The keyword arguments passed at
    construction (datacenter, host, counts...) are kept in `context` so
    the operator can diagnose the failure without re-running.
    """
    def __init__(self, message: str, **context: Any) -> None:
        super().__init__(message)
        self.message = message
        self.context = context

    def __str__(self) -> str:
        if not self.context:
            return self.message
        details = ", ".join(f"{k}={v}" for k, v in self.context.items())
        return f"{self.message} ({details})"


class PreconditionError(BalanceError):
    """The input cluster cannot be balanced as supplied."""


class InvariantError(BalanceError):
    """The computation reached a state that valid input can never produce."""
