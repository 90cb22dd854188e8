"""Pytest configuration and shared fixtures for Chatty tests.

This module provides an auto-use fixture isolating the CHATTY_* environment
and fixtures that write small site dumps to a temporary directory.
"""

import json
import os
import shutil
import tempfile

import pytest


CHATTY_ENV_VARS = ['CHATTY_WORKERS', 'CHATTY_INNER_WORKERS', 'CHATTY_LINE_BATCH_SIZE', 'CHATTY_LOG_LEVEL']

# Two sites with two questions each; 'tag repetido' appears on every question
SITE1_LINES = [
    {'texts': ['1', '2'], 'tags': ['1', 'tag repetido']},
    {'texts': ['3', '4 5 6 7'], 'tags': ['2', 'tag repetido']},
]
SITE2_LINES = [
    {'texts': ['8', '9'], 'tags': ['3', 'tag repetido']},
    {'texts': ['10', '11 12 13 14'], 'tags': ['4', 'tag repetido']},
]


def write_site(directory: str, site: str, lines: list) -> str:
    """Write a site dump; dict entries are JSON-encoded, strings written raw."""
    path = os.path.join(directory, f'{site}.jsonl')
    with open(path, 'w', encoding='utf-8') as f:
        for line in lines:
            f.write(line if isinstance(line, str) else json.dumps(line))
            f.write('\n')
    return path


@pytest.fixture(autouse=True)
def isolate_environment(monkeypatch):
    """Auto-use fixture so a developer's CHATTY_* settings never leak into tests."""
    for name in CHATTY_ENV_VARS:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def temp_dir():
    """Temporary directory removed after the test."""
    path = tempfile.mkdtemp(prefix='chatty_test_')
    yield path
    shutil.rmtree(path, ignore_errors=True)


@pytest.fixture
def two_sites(temp_dir):
    """Directory holding site1.jsonl and site2.jsonl."""
    write_site(temp_dir, 'site1', SITE1_LINES)
    write_site(temp_dir, 'site2', SITE2_LINES)
    return temp_dir


@pytest.fixture
def large_corpus(temp_dir):
    """Directory with several sites of a few hundred generated questions each."""
    for s in range(6):
        lines = []
        for i in range(300 + s * 37):
            if i % 50 == 7:
                lines.append('not json at all')
                continue
            if i % 61 == 3:
                lines.append('')
                continue
            words = ' '.join(f'w{k}' for k in range((i * 7 + s) % 23))
            tags = [f'tag{(i + s) % 11}', f'tag{(i * 3) % 5}', 'common']
            lines.append({'texts': [f'title {i}', words], 'tags': tags})
        write_site(temp_dir, f'site{s}', lines)
    return temp_dir


@pytest.fixture
def make_site(temp_dir):
    """Factory writing a site dump into temp_dir: make_site(site, lines) -> path."""

    def _make(site: str, lines: list) -> str:
        return write_site(temp_dir, site, lines)

    return _make
