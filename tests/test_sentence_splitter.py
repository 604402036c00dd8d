"""
Tests for the regex-based sentence splitter.
"""

from ingestion.sentence_splitter import sentence_spans, split_sentences


class TestBasicSplitting:
    def test_two_sentences(self):
        assert split_sentences("This is one. This is two.") == [
            "This is one.",
            "This is two.",
        ]

    def test_question_and_exclamation(self):
        assert split_sentences("Really? Yes! Done.") == ["Really?", "Yes!", "Done."]

    def test_single_sentence(self):
        assert split_sentences("Just one sentence here.") == ["Just one sentence here."]

    def test_no_punctuation(self):
        assert split_sentences("no boundary here") == ["no boundary here"]

    def test_newline_after_period(self):
        assert split_sentences("First line.\nSecond line.") == ["First line.", "Second line."]


class TestAbbreviations:
    def test_title(self):
        assert split_sentences("Dr. Smith arrived. He sat down.") == [
            "Dr. Smith arrived.",
            "He sat down.",
        ]

    def test_figure_reference(self):
        assert split_sentences("Fig. 3 shows the result. It is clear.") == [
            "Fig. 3 shows the result.",
            "It is clear.",
        ]

    def test_case_insensitive(self):
        assert split_sentences("See FIG. 2 for details. Then continue.") == [
            "See FIG. 2 for details.",
            "Then continue.",
        ]


class TestMultiPartAbbreviations:
    def test_eg(self):
        assert split_sentences("Use a tool, e.g. a hammer. Then stop.") == [
            "Use a tool, e.g. a hammer.",
            "Then stop.",
        ]

    def test_us(self):
        assert split_sentences("U.S. policy changed. Markets reacted.") == [
            "U.S. policy changed.",
            "Markets reacted.",
        ]


class TestOrdinals:
    def test_numbered_list(self):
        text = "Steps:\n1. Open the file.\n2. Save it."
        assert split_sentences(text) == ["Steps:\n1. Open the file.", "2. Save it."]

    def test_decimal_numbers(self):
        assert split_sentences("Pi is about 3.14 today. Next.") == [
            "Pi is about 3.14 today.",
            "Next.",
        ]


class TestEdgeCases:
    def test_empty(self):
        assert split_sentences("") == []

    def test_whitespace_only(self):
        assert split_sentences("   \n ") == []

    def test_keep_whitespace_is_lossless(self):
        text = "One.  Two.\nThree. "
        pieces = split_sentences(text, keep_whitespace=True)

        assert "".join(pieces) == text
        assert pieces == ["One.  ", "Two.\n", "Three. "]

    def test_spans_cover_input(self):
        text = "Alpha beta. Gamma delta! Epsilon?"
        spans = sentence_spans(text)

        assert spans[0][0] == 0
        assert spans[-1][1] == len(text)
        for (_, end), (start, _) in zip(spans, spans[1:]):
            assert end == start

    def test_spans_of_empty_text(self):
        assert sentence_spans("") == []
