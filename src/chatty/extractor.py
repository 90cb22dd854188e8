"""Per-line extraction of question counters.

Each input line is a JSON object describing one question:

    {"texts": ["title", "body ..."], "tags": ["python", "threads"]}

The extractor turns it into a single-question ResultAggregate. Lines that are
empty, not JSON, or missing either field contribute nothing. So do lines whose
strings hold unpaired surrogate escapes, which are not valid Unicode text.
"""

import json

from chatty.aggregate import ResultAggregate, SiteStats, TagStats


# Every well-formed line is exactly one question
QUESTIONS_PER_LINE = 1

# str.split() treats the information separators U+001C..U+001F as whitespace,
# Unicode White_Space does not
_NOT_WHITESPACE = str.maketrans('\x1c\x1d\x1e\x1f', '____')


def count_words(texts: list[str]) -> int:
    """Count words separated by Unicode White_Space across all texts."""
    return sum(len(text.translate(_NOT_WHITESPACE).split()) for text in texts)


def _is_utf8(text: str) -> bool:
    # Lone surrogates from \ud800-style escapes cannot be encoded
    try:
        text.encode('utf-8')
    except UnicodeEncodeError:
        return False
    return True


def _string_list(value) -> list[str] | None:
    if not isinstance(value, list):
        return None
    if not all(isinstance(item, str) and _is_utf8(item) for item in value):
        return None
    return value


class LineExtractor:
    """Extracts contributions from the lines of one site's file.

    The site name is fixed at construction so that extract() depends only on
    the line itself.
    """

    def __init__(self, site: str):
        self.site = site

    def extract(self, line: str) -> ResultAggregate:
        """Build the contribution of a single line.

        Args:
            line: Raw line text (trailing newline allowed)

        Returns:
            A one-question ResultAggregate, or an empty one if the line
            carries no question.
        """
        line = line.strip()
        if not line:
            return ResultAggregate()

        try:
            data = json.loads(line)
        except (ValueError, RecursionError):
            return ResultAggregate()
        if not isinstance(data, dict):
            return ResultAggregate()

        texts = _string_list(data.get('texts'))
        tags = _string_list(data.get('tags'))
        if texts is None or tags is None:
            return ResultAggregate()

        words = count_words(texts)
        # A tag repeated on the same question still counts once
        line_tags = {tag: TagStats(QUESTIONS_PER_LINE, words) for tag in dict.fromkeys(tags)}
        site = SiteStats(
            questions=QUESTIONS_PER_LINE,
            words=words,
            tags={name: stats.copy() for name, stats in line_tags.items()},
        )
        return ResultAggregate(
            sites={self.site: site},
            tags=line_tags,
            questions=QUESTIONS_PER_LINE,
            words=words,
        )

    __call__ = extract


def extract_line(line: str, site: str) -> ResultAggregate:
    """Convenience wrapper around LineExtractor(site).extract(line)."""
    return LineExtractor(site).extract(line)
