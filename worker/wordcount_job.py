"""
Built-in word count job.
Splits lines on non-alphabetic runs, lowercases tokens, and sums counts per word.
"""

import re

TOKEN_SEPARATOR = re.compile(r'[^a-zA-Z]+')


def tokenize(line):
    """Split a line into maximal runs of ASCII letters"""
    return [token for token in TOKEN_SEPARATOR.split(line) if token]


def normalize(token):
    return token.lower()


def map_function(key, value):
    """
    Map function: emit (word, 1) for each token in the line.

    Args:
        key: Line key (unused)
        value: Text line

    Yields:
        (word, 1) tuples
    """
    for token in tokenize(value):
        yield (normalize(token), 1)


def reduce_function(key, values):
    """
    Reduce function: sum all counts for a word.

    Args:
        key: Word
        values: Counts from map tasks (1s, or partial sums after the combiner)

    Yields:
        (word, total_count) tuple
    """
    yield (key, sum(values))


def combiner_function(key, values):
    """Pre-aggregate counts inside a map task"""
    yield (key, sum(values))
