"""Reduction of a single site file into one partial aggregate."""

import logging
import os
from time import time

from chatty import prometheus as prom
from chatty.aggregate import ResultAggregate
from chatty.extractor import LineExtractor
from chatty.parallel import fold_parallel
from chatty.utils import get_line_batch_size


logger = logging.getLogger(__name__)

SITE_FILE_SUFFIX = '.jsonl'


class FileReadError(OSError):
    """A file could not be opened or fully read.

    Attributes:
        path: The file that failed
        cause: The underlying OSError
    """

    def __init__(self, path: str, cause: OSError):
        super().__init__(f'{path}: {cause}')
        self.path = path
        self.cause = cause


def get_site_name(path: str) -> str:
    """Site name for a dump file: its file name without the .jsonl suffix.

    Undecodable bytes in the file name become U+FFFD.
    """
    name = os.path.basename(path).removesuffix(SITE_FILE_SUFFIX)
    return name.encode('utf-8', errors='surrogateescape').decode('utf-8', errors='replace')


def reduce_file(path: str, inner_workers: int, batch_size: int | None = None) -> ResultAggregate:
    """Reduce every line of a file into a single partial aggregate.

    Lines are read lazily and handed out in batches to inner_workers threads,
    each folding its own lines. The returned partial counts the file once in
    its files total.

    Args:
        path: Path to a site dump file
        inner_workers: Number of threads extracting lines of this file
        batch_size: Lines per pull from the shared reader (default: CHATTY_LINE_BATCH_SIZE)

    Returns:
        The file's partial aggregate

    Raises:
        FileReadError: If the file cannot be opened or read
    """
    if batch_size is None:
        batch_size = get_line_batch_size()

    extractor = LineExtractor(get_site_name(path))

    def extract(line: str) -> ResultAggregate:
        contribution = extractor.extract(line)
        prom.lines_read_total.inc()
        if contribution.is_empty():
            prom.lines_skipped_total.inc()
        return contribution

    start_time = time()
    try:
        # Lines end at \n only; a bare \r is JSON whitespace inside a line
        with open(path, encoding='utf-8', errors='replace', newline='\n') as f:
            partial = fold_parallel(
                f,
                extract,
                inner_workers,
                batch_size=batch_size,
                thread_name_prefix='chatty-lines',
            )
    except OSError as e:
        raise FileReadError(path, e) from e

    partial.files = 1
    elapsed = time() - start_time
    prom.file_duration_seconds.observe(elapsed)
    logger.debug(
        f'[REDUCE] {path}: {partial.questions:,} questions in {elapsed:.3f}s with {inner_workers} workers'
    )
    return partial
