import os
from typing import Generator

import pytest
import yaml

from equiring.bootstrap.config.settings import EquiringConfig
from equiring.core.models.cluster import ClusterSnapshot, NodeInfo
from equiring.core.space.layout import RingRange
from tests.fake.fake_executor import FakeExecutor
from tests.fake.fake_inventory import FakeInventory
from tests.helpers import FakeEquiringConfig


@pytest.fixture
def multi_dc_tokens() -> dict[str, int]:
    # Three datacenters of two nodes, some of them accidentally on an offset
    return {
        "dc1-a": 735,
        "dc1-b": 7,      # offset 7
        "dc2-c": 1001,   # offset 1
        "dc2-d": 1008,   # offset 8
        "dc3-e": 100,
        "dc3-f": 1,      # offset 1
    }


@pytest.fixture
def multi_dc_hosts() -> dict[str, str]:
    return {
        "dc1-a": "dc1",
        "dc1-b": "dc1",
        "dc2-c": "dc2",
        "dc2-d": "dc2",
        "dc3-e": "dc3",
        "dc3-f": "dc3",
    }


@pytest.fixture
def multi_dc_snapshot(multi_dc_tokens, multi_dc_hosts) -> ClusterSnapshot:
    return ClusterSnapshot(
        ring=RingRange(0, 2000),
        nodes=[
            NodeInfo(host=f"{host}/10.0.0.{i}", datacenter=multi_dc_hosts[host], tokens=[token])
            for i, (host, token) in enumerate(multi_dc_tokens.items(), start=1)
        ],
    )


@pytest.fixture
def inventory(multi_dc_snapshot) -> FakeInventory:
    return FakeInventory(multi_dc_snapshot)


@pytest.fixture
def executor() -> FakeExecutor:
    return FakeExecutor()


@pytest.fixture
def inventory_file(tmp_path):
    file = tmp_path / "cluster.yaml"
    data = {
        "partitioner": "org.apache.cassandra.dht.RandomPartitioner",
        "nodes": [
            {"address": "10.0.0.1", "datacenter": "cloud", "tokens": ["120"], "load": "10.5 KB"},
            {"address": "10.0.0.2", "datacenter": "cloud", "tokens": ["430"], "load": "11 KB"},
            {"address": "10.0.0.3", "datacenter": "cloud", "token": 1020, "load": "9 KB"},
        ],
    }
    file.write_text(yaml.dump(data))
    return file


@pytest.fixture
def config_file(tmp_path, inventory_file):
    file = tmp_path / "equiring.yaml"
    data = {
        "inventory": {
            "file": str(inventory_file),
            "resolve": False,
        },
        "balance": {
            "dry_run": True,
        },
        "executor": {
            "command": "echo {address} {token}",
            "port": 7199,
            "timeout": 5,
        },
        "output": {
            "format": "yaml",
        },
    }
    file.write_text(yaml.dump(data))
    return file


@pytest.fixture
def equiring_config(config_file) -> Generator[type[EquiringConfig], None, None]:
    backup = os.environ.copy()

    try:
        os.environ["TEST_EQUIRINGCONFIG"] = str(config_file)
        yield FakeEquiringConfig
    finally:
        os.environ.clear()
        os.environ.update(backup)
