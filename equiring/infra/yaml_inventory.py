from pathlib import Path
from typing import Any

import yaml

from equiring.core.helpers.utils import decorate_host
from equiring.core.models.cluster import ClusterSnapshot, NodeInfo
from equiring.core.space.layout import Partitioner, RingRange


class YamlInventory:
    """
    Reads the live cluster layout from a YAML document.

    The document names either a partitioner or explicit ring bounds, and
    lists every live node:

        partitioner: murmur3          # or: ring: {min_token: 0, max_token: 3000}
        nodes:
          - address: 10.0.0.1
            datacenter: dc1
            tokens: ["-9223372036854775808"]
            load: 1.2 GB

    Tokens may be written as integers or decimal strings; strings are
    preferred since 127-bit values are mangled by YAML tools that go through
    floating point. When both `partitioner` and `ring` are present, the
    explicit ring bounds win.
    """
    def __init__(self, path: str | Path, resolve: bool = True) -> None:
        self.path = Path(path).expanduser()
        self._resolve = resolve

    def snapshot(self) -> ClusterSnapshot:
        if not self.path.is_file():
            raise FileNotFoundError(f"inventory not found: {self.path}")

        data = yaml.safe_load(self.path.read_text())
        if not isinstance(data, dict):
            raise ValueError(f"inventory format is invalid: {self.path.absolute()}")

        return self.from_dict(data)

    def from_dict(self, data: dict[str, Any]) -> ClusterSnapshot:
        ring = self._parse_ring(data)

        raw_nodes = data.get("nodes") or []
        if not isinstance(raw_nodes, list):
            raise ValueError("'nodes' must be a list")

        nodes = [self._parse_node(i, raw) for i, raw in enumerate(raw_nodes)]
        return ClusterSnapshot(ring=ring, nodes=nodes)

    def _parse_ring(self, data: dict[str, Any]) -> RingRange:
        ring = data.get("ring")
        if ring is not None:
            try:
                return RingRange(
                    min_token=self._parse_token(ring["min_token"]),
                    max_token=self._parse_token(ring["max_token"]),
                )
            except (KeyError, TypeError) as ex:
                raise ValueError(f"'ring' requires min_token and max_token: {ex}") from ex

        partitioner = data.get("partitioner")
        if partitioner is None:
            raise ValueError("inventory must define either 'partitioner' or 'ring'")

        return Partitioner.parse(str(partitioner)).ring_range

    def _parse_node(self, index: int, raw: Any) -> NodeInfo:
        if not isinstance(raw, dict):
            raise ValueError(f"node #{index} must be a mapping")

        try:
            address = str(raw["address"])
            datacenter = str(raw["datacenter"])
        except KeyError as ex:
            raise ValueError(f"node #{index} is missing {ex}") from ex

        tokens = raw.get("tokens")
        if tokens is None:
            tokens = [raw["token"]] if "token" in raw else []
        if not isinstance(tokens, list):
            tokens = [tokens]

        return NodeInfo(
            host=decorate_host(address, self._resolve),
            datacenter=datacenter,
            tokens=[self._parse_token(t) for t in tokens],
            load=str(raw.get("load", "0 KB")),
        )

    @staticmethod
    def _parse_token(value: Any) -> int:
        if isinstance(value, bool) or not isinstance(value, (int, str)):
            raise ValueError(f"Invalid token: {value!r}")
        try:
            return int(value)
        except ValueError:
            raise ValueError(f"Invalid token: {value!r}") from None
