"""Parallel map + associative fold.

fold_parallel() is the one concurrency primitive of the pipeline. It is used
twice: over the lines of a file (inner pool) and over the files of the corpus
(outer pool). Each worker pulls work from a shared lazy iterator and folds its
results into a private partial. Once every worker has finished, the calling
thread merges the partials. No partial is ever touched by two threads.

The two phases are also available separately (map_partials() and
merge_partials()) for callers that need to observe the boundary.
"""

import logging
import threading
from collections.abc import Callable, Iterable
from concurrent.futures import ThreadPoolExecutor, wait
from itertools import islice
from typing import Any, TypeVar

from chatty.aggregate import ResultAggregate


logger = logging.getLogger(__name__)

T = TypeVar('T')


class SharedIterator:
    """Hands out batches of a lazily consumed iterable to concurrent workers.

    Each item is returned by exactly one next_batch() call. Exceptions raised
    while advancing the underlying iterator (e.g. a read error in a file
    object) propagate to the worker that asked for the batch.
    """

    def __init__(self, items: Iterable[T]):
        self._it = iter(items)
        self._lock = threading.Lock()
        self._exhausted = False

    def next_batch(self, size: int) -> list[T]:
        """Return up to size items; an empty list means the source is drained."""
        with self._lock:
            if self._exhausted:
                return []
            batch = list(islice(self._it, size))
            if len(batch) < size:
                self._exhausted = True
            return batch


def map_partials(
    items: Iterable[T],
    func: Callable[[T], Any],
    workers: int,
    *,
    batch_size: int = 1,
    identity: Callable[[], Any] = ResultAggregate,
    thread_name_prefix: str = 'chatty',
) -> list[Any]:
    """Run func over items on a pool of workers, one private partial per worker.

    On the first exception every worker stops pulling new work, the pool is
    joined and the exception is re-raised; no partials are returned.

    Args:
        items: Work items, consumed lazily
        func: Maps one item to a mergeable result
        workers: Pool size (1 runs inline in the calling thread)
        batch_size: Items taken from the shared iterator per pull
        identity: Factory for the empty result
        thread_name_prefix: Name prefix for pool threads

    Returns:
        One partial per worker

    Raises:
        ValueError: If workers or batch_size is below 1
    """
    if workers < 1:
        raise ValueError(f'workers must be >= 1, got {workers}')
    if batch_size < 1:
        raise ValueError(f'batch_size must be >= 1, got {batch_size}')

    source = SharedIterator(items)
    abort = threading.Event()

    def worker() -> Any:
        local = identity()
        try:
            while not abort.is_set():
                batch = source.next_batch(batch_size)
                if not batch:
                    break
                for item in batch:
                    local.update(func(item))
        except Exception:
            abort.set()
            raise
        return local

    if workers == 1:
        return [worker()]

    with ThreadPoolExecutor(max_workers=workers, thread_name_prefix=thread_name_prefix) as executor:
        futures = [executor.submit(worker) for _ in range(workers)]
        wait(futures)

    partials = []
    errors: list[BaseException] = []
    for future in futures:
        error = future.exception()
        if error is not None:
            logger.debug(f'[{thread_name_prefix}] Worker failed: {error}')
            errors.append(error)
        else:
            partials.append(future.result())

    if errors:
        raise errors[0]
    return partials


def merge_partials(partials: Iterable[Any], identity: Callable[[], Any] = ResultAggregate) -> Any:
    """Fold partials into a fresh result with their in-place update()."""
    result = identity()
    for partial in partials:
        result.update(partial)
    return result


def fold_parallel(
    items: Iterable[T],
    func: Callable[[T], Any],
    workers: int,
    *,
    batch_size: int = 1,
    identity: Callable[[], Any] = ResultAggregate,
    thread_name_prefix: str = 'chatty',
) -> Any:
    """Apply func to every item on a pool of workers and fold the results.

    Results are combined with their update() method, which must be an
    associative and commutative in-place merge; identity() must build its
    neutral element. ResultAggregate satisfies both. See map_partials() for
    the arguments and the error behavior.

    Returns:
        The merged result of func over all items
    """
    partials = map_partials(
        items,
        func,
        workers,
        batch_size=batch_size,
        identity=identity,
        thread_name_prefix=thread_name_prefix,
    )
    return merge_partials(partials, identity)
