"""
Unit tests for the built-in word count job
"""

from worker.wordcount_job import tokenize, normalize, map_function, reduce_function, combiner_function


class TestTokenize:
    """Tests for splitting lines into tokens"""

    def test_splits_on_whitespace_and_punctuation(self):
        assert tokenize("Hello, world! How's it going?") == ['Hello', 'world', 'How', 's', 'it', 'going']

    def test_digits_are_separators(self):
        assert tokenize("abc123def 42") == ['abc', 'def']

    def test_leading_and_trailing_separators_produce_no_empty_tokens(self):
        """A line starting with a separator must not yield an empty token"""
        assert tokenize("  ...hello world!!!  ") == ['hello', 'world']

    def test_empty_line_has_no_tokens(self):
        assert tokenize("") == []
        assert tokenize("123 -- 456") == []

    def test_non_ascii_letters_are_separators(self):
        assert tokenize("café naïve") == ['caf', 'na', 've']

    def test_underscore_and_hyphen_split_words(self):
        assert tokenize("snake_case well-known") == ['snake', 'case', 'well', 'known']


class TestNormalize:
    """Tests for case normalization"""

    def test_lowercases(self):
        assert normalize("The") == "the"
        assert normalize("SHOUT") == "shout"
        assert normalize("already") == "already"


class TestJobFunctions:
    """Tests for map, reduce and combiner functions"""

    def test_map_emits_lowercase_word_one_pairs(self):
        results = list(map_function(0, "The the THE cat"))
        assert results == [('the', 1), ('the', 1), ('the', 1), ('cat', 1)]

    def test_map_on_line_without_letters_emits_nothing(self):
        assert list(map_function(0, "1234 !!!")) == []

    def test_reduce_sums_counts(self):
        assert list(reduce_function('word', [1, 1, 1])) == [('word', 3)]

    def test_reduce_accepts_partial_sums(self):
        assert list(reduce_function('word', [3, 4, 1])) == [('word', 8)]

    def test_combiner_matches_reduce(self):
        assert list(combiner_function('x', [2, 2])) == list(reduce_function('x', [2, 2]))
