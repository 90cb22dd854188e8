"""Chatty - parallel Stack Exchange dump summarizer.

Reads one JSON Lines file per site and reduces every question into a single
aggregate of per-site and per-tag counters.
"""

from .__version__ import __version__
from .aggregate import ResultAggregate, SiteStats, TagStats, merge
from .extractor import LineExtractor, extract_line
from .reducer import FileReadError, reduce_file
from .scheduler import CorpusScheduler, FailurePolicy, RunState, run


__all__ = [
    '__version__',
    # Data model
    'ResultAggregate',
    'SiteStats',
    'TagStats',
    'merge',
    # Pipeline
    'LineExtractor',
    'extract_line',
    'FileReadError',
    'reduce_file',
    'CorpusScheduler',
    'FailurePolicy',
    'RunState',
    'run',
]
