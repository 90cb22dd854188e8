"""Unit tests for per-line extraction."""

import json

import pytest

from chatty.aggregate import ResultAggregate, SiteStats, TagStats
from chatty.extractor import LineExtractor, count_words, extract_line


class TestCountWords:
    def test_counts_across_texts(self):
        assert count_words(['1', '2']) == 2
        assert count_words(['3', '4 5 6 7']) == 5

    def test_any_whitespace_separates(self):
        assert count_words(['a\tb\nc   d ']) == 4

    def test_empty(self):
        assert count_words([]) == 0
        assert count_words(['', '   ']) == 0

    def test_unicode_whitespace_separates(self):
        assert count_words(['a\u3000b\xa0c d']) == 4

    def test_information_separators_join(self):
        assert count_words(['a\x1cb c\x1fd']) == 2


class TestLineExtractor:
    def setup_method(self):
        self.extractor = LineExtractor('site1')

    def test_valid_line(self):
        line = json.dumps({'texts': ['1', '2'], 'tags': ['1', 'tag repetido']})
        result = self.extractor.extract(line)

        assert result == ResultAggregate(
            sites={
                'site1': SiteStats(
                    questions=1,
                    words=2,
                    tags={'1': TagStats(1, 2), 'tag repetido': TagStats(1, 2)},
                )
            },
            tags={'1': TagStats(1, 2), 'tag repetido': TagStats(1, 2)},
            questions=1,
            words=2,
        )

    def test_trailing_newline_is_ignored(self):
        line = '{"texts": ["a b c"], "tags": ["x"]}\n'
        assert self.extractor.extract(line).words == 3

    def test_single_tag_counts_one_question(self):
        result = self.extractor.extract('{"texts": ["hello"], "tags": ["python"]}')
        assert result.tags == {'python': TagStats(1, 1)}
        assert result.sites['site1'].tags['python'].questions == 1

    def test_duplicate_tags_count_once(self):
        result = self.extractor.extract('{"texts": ["a b"], "tags": ["x", "x"]}')
        assert result.tags == {'x': TagStats(1, 2)}

    def test_no_tags_still_counts_question(self):
        result = self.extractor.extract('{"texts": ["a b"], "tags": []}')
        assert result.questions == 1
        assert result.sites['site1'] == SiteStats(1, 2, {})
        assert result.tags == {}

    def test_extra_fields_are_ignored(self):
        result = self.extractor.extract('{"texts": ["a"], "tags": ["t"], "score": 12}')
        assert result.questions == 1

    def test_site_and_tag_stats_are_distinct_objects(self):
        result = self.extractor.extract('{"texts": ["a"], "tags": ["t"]}')
        assert result.tags['t'] is not result.sites['site1'].tags['t']

    def test_callable(self):
        line = '{"texts": ["a"], "tags": ["t"]}'
        assert self.extractor(line) == self.extractor.extract(line)

    def test_deterministic(self):
        line = '{"texts": ["one two three"], "tags": ["a", "b"]}'
        assert self.extractor.extract(line) == self.extractor.extract(line)
        assert extract_line(line, 'site1') == self.extractor.extract(line)


class TestMalformedLines:
    """Malformed lines contribute nothing and never raise."""

    @pytest.mark.parametrize(
        'line',
        [
            '',
            '   ',
            '\n',
            'not json',
            '{"texts": ["a"], "tags": ["t"]',
            '[1, 2, 3]',
            '"just a string"',
            '42',
            'null',
            '{"texts": ["a"]}',
            '{"tags": ["t"]}',
            '{"texts": "a b", "tags": ["t"]}',
            '{"texts": ["a"], "tags": "t"}',
            '{"texts": ["a", 3], "tags": ["t"]}',
            '{"texts": ["a"], "tags": [null]}',
            '[' * 100000,
            r'{"texts": ["x"], "tags": ["\ud800"]}',
            r'{"texts": ["x"], "tags": ["ok", "bad \udfff"]}',
            r'{"texts": ["x \udc00"], "tags": ["t"]}',
        ],
    )
    def test_malformed_line_is_identity(self, line):
        assert extract_line(line, 'site1') == ResultAggregate()

    def test_surrogate_pair_is_valid(self):
        result = extract_line(r'{"texts": ["x"], "tags": ["\ud83d\ude00"]}', 'site1')
        assert result.tags == {'\U0001f600': TagStats(1, 1)}
