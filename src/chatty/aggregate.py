"""Mergeable counters accumulated by the extraction pipeline.

Every value produced by the pipeline (a single line, one worker's share of a
file, a whole file, the whole corpus) is a ResultAggregate. Aggregates are
combined with an associative, commutative merge whose identity element is an
empty ResultAggregate(), so partial results can be folded in any order.
"""

from dataclasses import dataclass, field


@dataclass
class TagStats:
    """Question and word counters for a single tag."""

    questions: int = 0
    words: int = 0

    def update(self, other: 'TagStats') -> None:
        self.questions += other.questions
        self.words += other.words

    def copy(self) -> 'TagStats':
        return TagStats(self.questions, self.words)

    @property
    def coef(self) -> int:
        """Chattiness coefficient: average words per question (integer division)."""
        return self.words // self.questions if self.questions else 0


@dataclass
class SiteStats:
    """Counters for a single site, including its own per-tag breakdown."""

    questions: int = 0
    words: int = 0
    tags: dict[str, TagStats] = field(default_factory=dict)

    def update(self, other: 'SiteStats') -> None:
        self.questions += other.questions
        self.words += other.words
        _merge_mapping(self.tags, other.tags)

    def copy(self) -> 'SiteStats':
        return SiteStats(self.questions, self.words, {name: tag.copy() for name, tag in self.tags.items()})

    @property
    def coef(self) -> int:
        """Chattiness coefficient: average words per question (integer division)."""
        return self.words // self.questions if self.questions else 0


def _merge_mapping(target: dict, source: dict) -> None:
    """Merge stats from source into target, copying entries target does not have yet."""
    for key, value in source.items():
        existing = target.get(key)
        if existing is None:
            # Never alias the other side's objects; it may be merged elsewhere too
            target[key] = value.copy()
        else:
            existing.update(value)


@dataclass
class ResultAggregate:
    """Aggregate summary of some subset of the corpus.

    Attributes:
        sites: Site name -> SiteStats
        tags: Tag name -> TagStats across all sites
        questions: Number of lines that produced a contribution
        words: Number of words across all contributing lines
        files: Number of files fully processed
        failures: Path -> error message for files skipped under the best-effort policy
    """

    sites: dict[str, SiteStats] = field(default_factory=dict)
    tags: dict[str, TagStats] = field(default_factory=dict)
    questions: int = 0
    words: int = 0
    files: int = 0
    failures: dict[str, str] = field(default_factory=dict)

    def update(self, other: 'ResultAggregate') -> 'ResultAggregate':
        """Merge other into this aggregate in place.

        Only the thread that owns this aggregate may call this. Nothing from
        other is shared with self afterwards, so other stays safe to reuse.

        Args:
            other: Aggregate to fold in

        Returns:
            self, to allow chaining
        """
        _merge_mapping(self.sites, other.sites)
        _merge_mapping(self.tags, other.tags)
        self.questions += other.questions
        self.words += other.words
        self.files += other.files
        self.failures.update(other.failures)
        return self

    def copy(self) -> 'ResultAggregate':
        return ResultAggregate().update(self)

    def is_empty(self) -> bool:
        """True if this aggregate equals the merge identity."""
        return self == ResultAggregate()

    def __add__(self, other: 'ResultAggregate') -> 'ResultAggregate':
        if not isinstance(other, ResultAggregate):
            return NotImplemented
        return merge(self, other)


def merge(a: ResultAggregate, b: ResultAggregate) -> ResultAggregate:
    """Return a new aggregate combining a and b; neither input is modified."""
    return ResultAggregate().update(a).update(b)
