"""Corpus scheduler: reduces many site files in parallel into one aggregate"""

import logging
from collections.abc import Iterable
from enum import Enum
from time import time

from chatty import prometheus as prom
from chatty.aggregate import ResultAggregate
from chatty.parallel import map_partials, merge_partials
from chatty.reducer import FileReadError, reduce_file
from chatty.utils import get_inner_workers, get_line_batch_size, get_outer_workers


logger = logging.getLogger(__name__)


class FailurePolicy(Enum):
    """What a run does when a file cannot be read."""

    FAIL_FAST = 'fail_fast'  # First failure aborts the run, no aggregate
    BEST_EFFORT = 'best_effort'  # Failing files are skipped and recorded in ResultAggregate.failures


class RunState(Enum):
    """Lifecycle of a single CorpusScheduler run."""

    IDLE = 'idle'
    DISPATCHING = 'dispatching'
    PROCESSING = 'processing'
    REDUCING = 'reducing'
    DONE = 'done'
    FAILED = 'failed'


class CorpusScheduler:
    """Runs FileReducer over a set of files with an outer pool of workers.

    Outer workers pull files one at a time, so a large site does not hold up
    a statically assigned chunk of small ones. Each outer worker keeps its own
    running aggregate; those are merged once all files are done.

    A scheduler is single-shot: run() may be called once.
    """

    def __init__(
        self,
        outer_workers: int | None = None,
        inner_workers: int | None = None,
        policy: FailurePolicy = FailurePolicy.FAIL_FAST,
        batch_size: int | None = None,
    ):
        """Initialize the scheduler.

        Args:
            outer_workers: Files processed concurrently (default: CHATTY_WORKERS or CPU count)
            inner_workers: Threads per file (default: CHATTY_INNER_WORKERS or CPU count)
            policy: I/O failure policy. Default: FAIL_FAST
            batch_size: Lines per inner pull (default: CHATTY_LINE_BATCH_SIZE)

        Raises:
            ValueError: If a worker count or the batch size is below 1
        """
        self.outer_workers = outer_workers if outer_workers is not None else get_outer_workers()
        self.inner_workers = inner_workers if inner_workers is not None else get_inner_workers()
        self.batch_size = batch_size if batch_size is not None else get_line_batch_size()
        self.policy = policy

        if self.outer_workers < 1:
            raise ValueError(f'outer_workers must be >= 1, got {self.outer_workers}')
        if self.inner_workers < 1:
            raise ValueError(f'inner_workers must be >= 1, got {self.inner_workers}')
        if self.batch_size < 1:
            raise ValueError(f'batch_size must be >= 1, got {self.batch_size}')

        self.state = RunState.IDLE

    def _set_state(self, state: RunState) -> None:
        logger.debug(f'[SCHEDULER] {self.state.value} -> {state.value}')
        self.state = state

    def _reduce_one(self, path: str) -> ResultAggregate:
        try:
            partial = reduce_file(path, self.inner_workers, self.batch_size)
        except FileReadError as e:
            prom.files_failed_total.labels(policy=self.policy.value).inc()
            if self.policy is FailurePolicy.FAIL_FAST:
                logger.error(f'[SCHEDULER] Aborting run, failed to read {e.path}: {e.cause}')
                raise
            logger.warning(f'[SCHEDULER] Skipping {e.path}: {e.cause}')
            return ResultAggregate(failures={e.path: str(e.cause)})

        prom.files_processed_total.inc()
        return partial

    def run(self, paths: Iterable[str]) -> ResultAggregate:
        """Reduce all files into a single aggregate.

        Args:
            paths: Files to process; each is processed exactly once

        Returns:
            The final aggregate

        Raises:
            FileReadError: Under FAIL_FAST, for the first file that could not be read
            RuntimeError: If this scheduler has already been run
        """
        if self.state is not RunState.IDLE:
            raise RuntimeError(f'Scheduler already used (state: {self.state.value})')

        start_time = time()
        self._set_state(RunState.DISPATCHING)
        files = list(paths)
        # No point in more outer threads than files
        workers = max(1, min(self.outer_workers, len(files)))
        logger.info(
            f'[SCHEDULER] Processing {len(files)} files with {workers} outer x {self.inner_workers} inner workers '
            f'(policy={self.policy.value})'
        )

        self._set_state(RunState.PROCESSING)
        try:
            partials = map_partials(files, self._reduce_one, workers, thread_name_prefix='chatty-files')
        except Exception:
            self._set_state(RunState.FAILED)
            raise

        self._set_state(RunState.REDUCING)
        result = merge_partials(partials)

        self._set_state(RunState.DONE)
        elapsed = time() - start_time
        prom.run_duration_seconds.observe(elapsed)
        logger.info(
            f'[SCHEDULER] Completed: {result.files} files, {result.questions:,} questions, '
            f'{len(result.failures)} failures in {elapsed:.2f}s'
        )
        return result


def run(
    paths: Iterable[str],
    outer_workers: int | None = None,
    inner_workers: int | None = None,
    policy: FailurePolicy = FailurePolicy.FAIL_FAST,
    batch_size: int | None = None,
) -> ResultAggregate:
    """Reduce a list of files into one aggregate with a fresh CorpusScheduler."""
    scheduler = CorpusScheduler(outer_workers, inner_workers, policy, batch_size)
    return scheduler.run(paths)
