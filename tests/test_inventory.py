from __future__ import annotations

from core.inventory import DeviceInventory


class BatchSource:
    """Returns every known device whatever was asked for."""

    def __init__(self, sizes) -> None:
        self.sizes = sizes
        self.calls = 0

    def read(self, *devices: str):
        self.calls += 1
        return dict(self.sizes)


def test_resolve_caches_every_returned_device() -> None:
    source = BatchSource({"sda": 512, "nvme0n1": 4096})
    inventory = DeviceInventory(source)

    assert inventory.resolve("sda") == 512
    assert inventory.resolve("nvme0n1") == 4096
    assert source.calls == 1


def test_unresolved_device_is_queried_again() -> None:
    source = BatchSource({"sda": 512})
    inventory = DeviceInventory(source)

    assert inventory.resolve("sdb") is None
    assert inventory.resolve("sdb") is None
    assert source.calls == 2


def test_resolve_all_tolerates_missing_utility() -> None:
    source = BatchSource({})
    inventory = DeviceInventory(source)

    assert inventory.resolve_all() == {}
    assert inventory.resolve("sda") is None
    assert source.calls == 2


def test_known_sizes_are_never_requeried() -> None:
    source = BatchSource({"sda": 512})
    inventory = DeviceInventory(source)
    inventory.resolve_all()

    source.sizes = {"sda": 4096, "sdb": 512}
    found = inventory.resolve_all()

    assert found == {"sda": 512, "sdb": 512}
    assert inventory.resolve("sda") == 512
