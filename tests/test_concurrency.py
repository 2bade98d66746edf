import threading

import pytest

from qtsheet.concurrency import (
    Controller,
    Counter,
    Worker,
    filter_in_place,
    filtered,
    map_in_place,
    mapped,
    mapped_reduced,
    run_counters,
)


def times_ten(num):
    return num * 10


def above_three(num):
    return num > 3


def test_map_in_place_changes_the_list():
    items = [1, 2, 3, 4, 5]
    map_in_place(items, times_ten)
    assert items == [10, 20, 30, 40, 50]


def test_mapped_returns_copy_and_keeps_original():
    items = [1, 2, 3, 4, 5]
    result = mapped(items, times_ten)
    assert items == [1, 2, 3, 4, 5]
    assert result == [10, 20, 30, 40, 50]


def test_mapped_reduced_sums_mapped_values():
    def add(result, intermediate):
        return result + intermediate

    assert mapped_reduced([1, 2, 3, 4, 5], times_ten, add) == 150


def test_mapped_reduced_of_nothing_is_initial():
    assert mapped_reduced([], times_ten, lambda a, b: a + b, 7) == 7


def test_filter_in_place_keeps_matching():
    items = [1, 2, 3, 4, 5]
    filter_in_place(items, above_three)
    assert items == [4, 5]


def test_filtered_returns_copy_and_keeps_original():
    items = [1, 2, 3, 4, 5]
    result = filtered(items, above_three)
    assert items == [1, 2, 3, 4, 5]
    assert result == [4, 5]


def test_mapped_preserves_order_for_large_input():
    items = list(range(200))
    assert mapped(items, str) == [str(i) for i in items]


def test_counter_run_counts_iterations():
    counter = Counter()
    assert counter.run(5, 0) == 5
    assert counter.n == 5


def test_counter_callable_continues_from_current_value():
    counter = Counter(3)
    assert counter() == 8


def test_run_counters_only_shared_state_changes():
    report = run_counters(5, 0)
    assert report == {"value": 5, "method": 5, "callable": 0}


def test_worker_reports_hello():
    received = []
    worker = Worker(received.append)
    assert worker.do_something() == "Hello"
    assert received == ["Hello"]
    assert worker.thread_id == threading.get_ident()


def test_controller_runs_worker_on_another_thread():
    received = []
    with Controller(received.append) as controller:
        future = controller.start()
        assert future.result(timeout=5) == "Hello"
    assert received == ["Hello"]
    assert controller.results == ["Hello"]
    assert controller.worker.thread_id != threading.get_ident()


def test_controller_delivers_every_request():
    controller = Controller()
    futures = [controller.start() for _ in range(3)]
    controller.close()
    assert [f.result() for f in futures] == ["Hello"] * 3
    assert controller.results == ["Hello"] * 3


def test_controller_start_after_close_fails():
    controller = Controller()
    controller.close()
    with pytest.raises(RuntimeError):
        controller.start()