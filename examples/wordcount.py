"""
Word count job file for --job-file.
Counts the frequency of each alphabetic word, ignoring case.
Same result as the built-in job; reduce returns a plain value instead of yielding pairs.
"""

import re

SEPARATOR = re.compile(r'[^a-zA-Z]+')


def map_function(key, value):
    """
    Map function: emit (word, 1) for each word in the line.

    Args:
        key: Line key (unused)
        value: Text line

    Yields:
        (word, 1) tuples
    """
    for word in SEPARATOR.split(value):
        if word:  # Skip empty strings
            yield (word.lower(), 1)


def reduce_function(key, values):
    """
    Reduce function: sum all counts for a word.

    Returns:
        Total count for this word
    """
    return sum(values)
