"""Fan-out/fan-in helper shared by hashing and comparison."""

from concurrent.futures import FIRST_EXCEPTION, ThreadPoolExecutor, wait
from typing import Callable, Iterable, List, Optional, TypeVar

T = TypeVar("T")
R = TypeVar("R")


def run_all(
    fn: Callable[[T], R],
    items: Iterable[T],
    max_workers: Optional[int] = None,
) -> List[R]:
    """Run fn over every item concurrently and join all of them.

    Results come back in item order. If any unit raises, units that have
    not started yet are cancelled and running ones are allowed to finish.
    Of the units finished by then, the earliest failing one in item order
    has its exception re-raised.

    Args:
        fn: Work unit
        items: Inputs, one unit each
        max_workers: Thread cap; None uses the executor's default

    Returns:
        List of results aligned with items
    """
    items = list(items)
    if not items:
        return []

    with ThreadPoolExecutor(max_workers=max_workers) as executor:
        futures = [executor.submit(fn, item) for item in items]
        done, pending = wait(futures, return_when=FIRST_EXCEPTION)

        for future in pending:
            future.cancel()

        for future in futures:
            if future in done and future.exception() is not None:
                raise future.exception()

        return [future.result() for future in futures]
