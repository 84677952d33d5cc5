"""Tests for reply chunking."""

import pytest

from wagemini.communication.outbound import split_message, wrap_lines, LINE_BREAK_MARKER


def _lines_of(chunks):
    return [line for chunk in chunks for line in chunk.split("\n")]


LONG_PROSE = (
    "WhatsApp replies read better as a few short bursts than as one long wall of text, "
    "so the assistant breaks every answer into small messages that arrive one after "
    "another, each holding no more than a handful of short lines, which keeps the chat "
    "feeling natural even when the model has a lot to say about a topic."
)


class TestBasics:
    """Degenerate and trivial inputs."""

    def test_empty_string(self):
        assert split_message("") == []

    def test_whitespace_only(self):
        assert split_message("   \n  ") == []

    def test_short_text_single_chunk(self):
        assert split_message("short") == ["short"]

    def test_single_character(self):
        assert split_message("x") == ["x"]

    def test_deterministic(self):
        assert split_message(LONG_PROSE) == split_message(LONG_PROSE)


class TestParagraphs:
    """Literal \\n markers and real newlines both separate lines."""

    def test_literal_marker_splits(self):
        text = f"one{LINE_BREAK_MARKER}two{LINE_BREAK_MARKER}three"
        assert split_message(text) == ["one\ntwo\nthree"]

    def test_real_newlines_split(self):
        assert split_message("one\ntwo\nthree\nfour") == ["one\ntwo\nthree", "four"]

    def test_blank_paragraphs_dropped(self):
        assert split_message(f"a{LINE_BREAK_MARKER}{LINE_BREAK_MARKER}b\n\n\nc") == ["a\nb\nc"]

    def test_short_paragraph_kept_verbatim(self):
        text = "keep   the  spacing"
        assert split_message(text) == [text]

    def test_two_wrapped_paragraphs_make_two_chunks(self):
        """A and B each wrap to two lines → four lines → chunks of 3 and 1."""
        a = "alpha " * 20  # 120 chars
        b = "bravo " * 20
        lines_a = wrap_lines(a)
        lines_b = wrap_lines(b)
        assert len(lines_a) == 2 and len(lines_b) == 2

        chunks = split_message(a + LINE_BREAK_MARKER + b, max_lines=3)

        assert len(chunks) == 2
        assert chunks[0].split("\n") == lines_a + lines_b[:1]
        assert chunks[1].split("\n") == lines_b[1:]


class TestWrapping:
    """Greedy word repacking of long paragraphs."""

    def test_lines_respect_char_limit(self):
        for line in wrap_lines(LONG_PROSE, 40):
            assert len(line) <= 40

    def test_greedy_fill(self):
        assert wrap_lines("aaa bbb ccc ddd eee", 7) == ["aaa bbb", "ccc ddd", "eee"]

    def test_exact_fit(self):
        # 5 + 1 + 4 = 10 fits a 10-char line
        assert wrap_lines("abcde fghi jk", 10) == ["abcde fghi", "jk"]

    def test_oversized_word_kept_whole(self):
        word = "x" * 30
        lines = wrap_lines(f"tiny {word} end", 10)
        assert lines == ["tiny", word, "end"]
        assert "" not in lines

    def test_oversized_first_word_no_empty_line(self):
        word = "y" * 150
        assert split_message(word + " tail") == [f"{word}\ntail"]


class TestChunkInvariants:
    """Properties that hold for any input."""

    @pytest.mark.parametrize("text,max_lines,max_chars", [
        (LONG_PROSE, 3, 100),
        (LONG_PROSE, 2, 30),
        (LONG_PROSE + LINE_BREAK_MARKER + LONG_PROSE, 3, 50),
        ("a\nb\nc\nd\ne\nf\ng", 3, 100),
        ("a\nb\nc\nd\ne\nf", 3, 100),
        ("one line", 1, 5),
    ])
    def test_invariants(self, text, max_lines, max_chars):
        chunks = split_message(text, max_lines=max_lines, max_chars_per_line=max_chars)

        assert chunks, "non-empty input must yield chunks"
        for chunk in chunks:
            assert chunk
            assert len(chunk.split("\n")) <= max_lines
            for line in chunk.split("\n"):
                assert len(line) <= max_chars or " " not in line

        # No line lost, duplicated or reordered
        assert _lines_of(chunks) == wrap_lines(text, max_chars)

    def test_boundary_after_max_lines(self):
        chunks = split_message("1\n2\n3\n4\n5\n6\n7", max_lines=3)
        assert chunks == ["1\n2\n3", "4\n5\n6", "7"]

    def test_exactly_max_lines_is_one_chunk(self):
        assert split_message("1\n2\n3", max_lines=3) == ["1\n2\n3"]

    def test_zero_max_lines_treated_as_one(self):
        assert split_message("a\nb", max_lines=0) == ["a", "b"]
