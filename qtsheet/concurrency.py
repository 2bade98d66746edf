"""Parallel map, filter and reduce, counting threads, and a worker thread."""

from __future__ import annotations

import copy
import threading
import time
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Callable, Dict, Iterable, List, MutableSequence, Optional, TypeVar

T = TypeVar("T")
R = TypeVar("R")
A = TypeVar("A")


def map_in_place(items: MutableSequence[T], function: Callable[[T], T]) -> None:
    """Replace every element of *items* with ``function(element)``, in parallel."""
    with ThreadPoolExecutor() as pool:
        items[:] = list(pool.map(function, items))


def mapped(items: Iterable[T], function: Callable[[T], R]) -> List[R]:
    """Return ``function`` applied to every element, in order, leaving *items* alone."""
    with ThreadPoolExecutor() as pool:
        return list(pool.map(function, items))


def mapped_reduced(
    items: Iterable[T],
    function: Callable[[T], R],
    reducer: Callable[[A, R], A],
    initial: A = 0,
) -> A:
    """Map *items* in parallel, then fold the results into *initial* with *reducer*."""
    result = initial
    for intermediate in mapped(items, function):
        result = reducer(result, intermediate)
    return result


def filter_in_place(items: MutableSequence[T], predicate: Callable[[T], bool]) -> None:
    """Keep only the elements of *items* for which *predicate* is true."""
    items[:] = filtered(items, predicate)


def filtered(items: Iterable[T], predicate: Callable[[T], bool]) -> List[T]:
    """Return the elements for which *predicate* is true, in order."""
    values = list(items)
    with ThreadPoolExecutor() as pool:
        keep = list(pool.map(predicate, values))
    return [value for value, wanted in zip(values, keep) if wanted]


class Counter:
    """A value that a thread increments step by step."""

    def __init__(self, n: int = 0) -> None:
        self.n = n

    def run(self, iterations: int = 5, delay: float = 0.01) -> int:
        """Increment the value *iterations* times, pausing *delay* seconds each time."""
        for _ in range(iterations):
            self.n += 1
            time.sleep(delay)
        return self.n

    def __call__(self) -> int:
        return self.run()


def run_counters(iterations: int = 5, delay: float = 0.01) -> Dict[str, int]:
    """Run four counting threads and report which values they changed.

    One thread works on a copy of the caller's value, one on the shared value
    itself, one on a method of an object, and one on a copy of a callable
    object. Only the shared value and the object whose method ran change.
    """
    value = Counter()
    by_value = Counter(value.n + 1)
    method_owner = Counter()
    callable_counter = Counter()
    callable_copy = copy.copy(callable_counter)

    threads = [
        threading.Thread(target=by_value.run, args=(iterations, delay)),
        threading.Thread(target=value.run, args=(iterations, delay)),
        threading.Thread(target=method_owner.run, args=(iterations, delay)),
        threading.Thread(target=callable_copy.run, args=(iterations, delay)),
    ]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    return {
        "value": value.n,
        "method": method_owner.n,
        "callable": callable_counter.n,
    }


class Worker:
    """Does a piece of work and reports its result through *on_result*."""

    RESULT = "Hello"

    def __init__(self, on_result: Optional[Callable[[str], object]] = None) -> None:
        self._on_result = on_result
        self.thread_id: Optional[int] = None

    def do_something(self) -> str:
        """Do the work, record the thread it ran on and report the result."""
        self.thread_id = threading.get_ident()
        if self._on_result is not None:
            self._on_result(self.RESULT)
        return self.RESULT


class Controller:
    """Owns a worker and a dedicated thread on which the worker runs.

    Results reach *on_result* from the worker thread. The controller is a
    context manager that stops and joins its thread on exit.
    """

    def __init__(self, on_result: Optional[Callable[[str], object]] = None) -> None:
        self._on_result = on_result
        self.results: List[str] = []
        self._lock = threading.Lock()
        self.worker = Worker(self._receive_result)
        self._thread = ThreadPoolExecutor(max_workers=1, thread_name_prefix="worker")

    def _receive_result(self, text: str) -> None:
        with self._lock:
            self.results.append(text)
        if self._on_result is not None:
            self._on_result(text)

    def start(self) -> "Future[str]":
        """Ask the worker to do its work on the worker thread."""
        return self._thread.submit(self.worker.do_something)

    def close(self) -> None:
        """Stop the worker thread after pending work and wait for it."""
        self._thread.shutdown(wait=True)

    def __enter__(self) -> "Controller":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()