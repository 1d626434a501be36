import threading

import pytest

from ndr.engine import ResourcePool
from ndr.errors import InvalidResourceRequest
from ndr.randomness import SimulationRandom


def _build_pool(**capacities):
    return ResourcePool(capacities or {"ndrf": 10, "boats": 4, "helicopters": 2})


def test_allocate_decrements_every_kind():
    pool = _build_pool()

    assert pool.allocate({"ndrf": 3, "boats": 2}) is True
    assert pool.snapshot() == {"ndrf": 7, "boats": 2, "helicopters": 2}
    assert pool.in_use() == {"ndrf": 3, "boats": 2, "helicopters": 0}
    assert pool.stats["allocations"] == 1


def test_insufficient_kind_leaves_pool_untouched():
    pool = _build_pool()

    # ndrf alone would fit; helicopters do not
    assert pool.allocate({"ndrf": 5, "helicopters": 3}) is False
    assert pool.snapshot() == pool.capacity()
    assert pool.stats["allocation_failures"] == 1


def test_request_for_exact_remaining_amount_succeeds():
    pool = _build_pool()
    assert pool.allocate({"boats": 4}) is True
    assert pool.snapshot()["boats"] == 0
    assert pool.allocate({"boats": 1}) is False


def test_empty_request_is_a_successful_noop():
    pool = _build_pool()
    assert pool.allocate({}) is True
    assert pool.snapshot() == pool.capacity()


@pytest.mark.parametrize(
    "request_",
    [
        {"ndrf": 1, "submarines": 1},
        {"ndrf": 1, "boats": -1},
        {"boats": 1.5},
        {"boats": True},
        {"boats": "2"},
    ],
)
def test_invalid_request_raises_without_mutation(request_):
    pool = _build_pool()

    with pytest.raises(InvalidResourceRequest):
        pool.allocate(request_)

    assert pool.snapshot() == pool.capacity()
    assert pool.stats["allocations"] == 0


def test_invalid_request_is_a_value_error():
    with pytest.raises(ValueError):
        _build_pool().allocate({"submarines": 1})


def test_negative_capacity_is_rejected():
    with pytest.raises(InvalidResourceRequest):
        ResourcePool({"boats": -1})


def test_release_restores_counts():
    pool = _build_pool()
    pool.allocate({"ndrf": 4, "boats": 4})
    pool.release({"ndrf": 4, "boats": 4})

    assert pool.snapshot() == pool.capacity()
    assert pool.in_use() == {"ndrf": 0, "boats": 0, "helicopters": 0}


def test_over_release_is_clamped_at_capacity():
    pool = _build_pool()
    pool.allocate({"boats": 1})

    pool.release({"boats": 3})

    assert pool.snapshot()["boats"] == 4
    assert pool.stats["over_release_clamped"] == 1


def test_release_skips_unknown_kinds_and_negative_amounts():
    pool = _build_pool()
    pool.allocate({"ndrf": 2})

    pool.release({"submarines": 5, "ndrf": -1})
    assert pool.snapshot()["ndrf"] == 8

    pool.release({"submarines": 5, "ndrf": 2})
    assert pool.snapshot()["ndrf"] == 10


def test_release_skips_bool_amounts_like_allocate_does():
    pool = _build_pool()
    pool.allocate({"boats": 2})

    pool.release({"boats": True})

    assert pool.snapshot()["boats"] == 2
    assert pool.in_use()["boats"] == 2


def test_snapshot_is_a_copy():
    pool = _build_pool()
    snapshot = pool.snapshot()
    snapshot["boats"] = 0
    assert pool.snapshot()["boats"] == 4


def test_summary_lists_available_over_capacity():
    pool = _build_pool()
    pool.allocate({"boats": 1})
    assert pool.summary() == "Resources -> ndrf=10/10, boats=3/4, helicopters=2/2"


def test_counts_stay_in_bounds_over_random_sequence():
    pool = _build_pool()
    rng = SimulationRandom(7)
    held = []

    for _ in range(500):
        if held and rng.chance(0.4):
            pool.release(held.pop(rng.int_range(0, len(held) - 1)))
        else:
            request = {kind: rng.int_range(0, 3) for kind in pool.kinds}
            if pool.allocate(request):
                held.append(request)

        available = pool.snapshot()
        capacity = pool.capacity()
        in_use = pool.in_use()
        for kind in pool.kinds:
            assert 0 <= available[kind] <= capacity[kind]
            assert available[kind] + in_use[kind] == capacity[kind]

    for request in held:
        pool.release(request)
    assert pool.snapshot() == pool.capacity()


def test_concurrent_allocate_and_release_never_oversubscribe():
    pool = ResourcePool({"ndrf": 5, "boats": 3})
    violations = []

    def worker():
        for _ in range(500):
            request = {"ndrf": 2, "boats": 1}
            if pool.allocate(request):
                available = pool.snapshot()
                if available["ndrf"] < 0 or available["boats"] < 0:
                    violations.append(available)
                pool.release(request)

    threads = [threading.Thread(target=worker) for _ in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert violations == []
    assert pool.snapshot() == {"ndrf": 5, "boats": 3}
    assert pool.stats["over_release_clamped"] == 0
