import logging
import socket


def setup_logging(level: str = "INFO") -> None:
    logging.basicConfig(
        level=level,
        format='%(asctime)s %(levelname)-8s [%(name)s:%(funcName)s] : %(message)s',
    )


def decorate_host(address: str, resolve: bool = True) -> str:
    """
    Build the host identifier shown to the operator and sorted by the
    balancer.

    With name resolution the identifier is `<canonical-name>/<address>`, so
    tokens end up assigned in the logical order of host names. Without it,
    the identifier is `/<address>`. Either way the address stays after the
    last '/'.
    """
    if not resolve:
        return f"/{address}"

    # getfqdn falls back to the address itself when nothing resolves
    return f"{socket.getfqdn(address)}/{address}"
