import pytest
import yaml

from equiring.core.models.errors import PreconditionError
from equiring.core.space.layout import RingRange
from equiring.infra.yaml_inventory import YamlInventory


def write(tmp_path, data) -> str:
    file = tmp_path / "inventory.yaml"
    file.write_text(yaml.dump(data))
    return str(file)


@pytest.mark.ut
def test_snapshot_from_file(inventory_file):
    snapshot = YamlInventory(inventory_file, resolve=False).snapshot()

    assert snapshot.ring == RingRange(0, 1 << 127)
    assert [n.host for n in snapshot.nodes] == ["/10.0.0.1", "/10.0.0.2", "/10.0.0.3"]
    assert snapshot.current_tokens() == {"/10.0.0.1": 120, "/10.0.0.2": 430, "/10.0.0.3": 1020}
    assert snapshot.nodes[0].load == "10.5 KB"
    assert not snapshot.has_data()


@pytest.mark.ut
def test_explicit_ring_overrides_partitioner(tmp_path):
    path = write(tmp_path, {
        "partitioner": "murmur3",
        "ring": {"min_token": "-100", "max_token": 200},
        "nodes": [{"address": "10.0.0.1", "datacenter": "dc", "token": "5"}],
    })

    snapshot = YamlInventory(path, resolve=False).snapshot()

    assert snapshot.ring == RingRange(-100, 200)
    assert snapshot.nodes[0].tokens == [5]
    assert snapshot.nodes[0].load == "0 KB"


@pytest.mark.ut
def test_huge_tokens_survive_as_strings(tmp_path):
    token = str((1 << 127) - 1)
    path = write(tmp_path, {
        "partitioner": "random",
        "nodes": [{"address": "10.0.0.1", "datacenter": "dc", "tokens": [token]}],
    })

    snapshot = YamlInventory(path, resolve=False).snapshot()

    assert snapshot.nodes[0].tokens == [(1 << 127) - 1]


@pytest.mark.ut
def test_vnode_tokens_are_kept_for_validation(tmp_path):
    path = write(tmp_path, {
        "partitioner": "murmur3",
        "nodes": [{"address": "10.0.0.1", "datacenter": "dc", "tokens": ["1", "2"]}],
    })

    snapshot = YamlInventory(path, resolve=False).snapshot()

    assert snapshot.nodes[0].tokens == [1, 2]
    with pytest.raises(PreconditionError, match="vnodes"):
        snapshot.validate()


@pytest.mark.ut
def test_resolved_host_keeps_address_suffix(tmp_path):
    path = write(tmp_path, {
        "partitioner": "murmur3",
        "nodes": [{"address": "127.0.0.1", "datacenter": "dc", "token": 0}],
    })

    node = YamlInventory(path).snapshot().nodes[0]

    assert node.host.endswith("/127.0.0.1")
    assert not node.host.startswith("/")
    assert node.address == "127.0.0.1"


@pytest.mark.ut
def test_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        YamlInventory(tmp_path / "nope.yaml").snapshot()


@pytest.mark.ut
@pytest.mark.parametrize("data,match", [
    ({"nodes": []}, "partitioner"),
    ({"partitioner": "random", "nodes": {"a": 1}}, "must be a list"),
    ({"partitioner": "random", "nodes": ["10.0.0.1"]}, "must be a mapping"),
    ({"partitioner": "random", "nodes": [{"address": "10.0.0.1"}]}, "missing"),
    ({"partitioner": "random", "nodes": [{"address": "a", "datacenter": "d", "token": "x1"}]}, "Invalid token"),
    ({"partitioner": "random", "nodes": [{"address": "a", "datacenter": "d", "token": 1.5}]}, "Invalid token"),
    ({"ring": {"min_token": 0}, "nodes": []}, "min_token and max_token"),
])
def test_malformed_inventory(tmp_path, data, match):
    path = write(tmp_path, data)

    with pytest.raises(ValueError, match=match):
        YamlInventory(path, resolve=False).snapshot()


@pytest.mark.ut
def test_non_mapping_document(tmp_path):
    file = tmp_path / "inventory.yaml"
    file.write_text("- just\n- a list\n")

    with pytest.raises(ValueError, match="invalid"):
        YamlInventory(file).snapshot()


@pytest.mark.ut
def test_unsupported_partitioner(tmp_path):
    path = write(tmp_path, {"partitioner": "ByteOrderedPartitioner", "nodes": []})

    with pytest.raises(PreconditionError, match="Unsupported partitioner"):
        YamlInventory(path).snapshot()
