# =============================================================================
# TESTS - Response Parser
# =============================================================================
# Pure functions over literal completion text
# =============================================================================

import pytest

from core.exceptions import InsufficientSuggestionsError, ParseYieldTooLowError
from quiz.engine.parser import parse_questions, parse_suggestions

FIVE_QUESTIONS = """Here are your questions:

Q1: What is 2 + 2?
A) 3
B) 4
C) 5
D) 6
Answer: B

Q2: What is the capital of France?
A) Berlin
B) Madrid
C) Paris
D) Rome
Answer: C

Q3: Which planet is known as the Red Planet?
A) Mars
B) Venus
C) Jupiter
D) Saturn
Answer: A

Q4: What is 10 / 2?
A) 2
B) 5
C) 10
D) 20
Answer: B

Q5: What gas do plants absorb?
A) Oxygen
B) Nitrogen
C) Carbon dioxide
D) Helium
Answer: C
"""


class TestParseQuestions:
    """Tests for question extraction."""

    def test_caps_at_expected_count(self):
        """Five well-formed blocks with expected_count=3 give exactly three."""
        parsed = parse_questions(FIVE_QUESTIONS, 3)

        assert len(parsed) == 3
        assert [q.text for q in parsed] == [
            "What is 2 + 2?",
            "What is the capital of France?",
            "Which planet is known as the Red Planet?",
        ]

    def test_answer_marker_selects_option(self):
        parsed = parse_questions(FIVE_QUESTIONS, 5)

        assert [q.correct_answer for q in parsed] == ["4", "Paris", "Mars", "5", "Carbon dioxide"]
        assert all(len(q.options) == 4 for q in parsed)

    def test_block_missing_fourth_option_is_dropped(self):
        """A three-option block does not count toward the requested total."""
        text = (
            "Q1: Broken question?\nA) one\nB) two\nC) three\nAnswer: A\n\n"
            + FIVE_QUESTIONS.split("\n\n", 1)[1]
        )

        parsed = parse_questions(text, 3)

        assert len(parsed) == 3
        assert parsed[0].text == "What is 2 + 2?"
        assert all(q.text != "Broken question?" for q in parsed)

    def test_missing_answer_defaults_to_option_a(self):
        text = "Q1: Which is a fruit?\nA) Apple\nB) Carrot\nC) Potato\nD) Onion\n"

        parsed = parse_questions(text, 1)

        assert parsed[0].answer_letter == "A"
        assert parsed[0].correct_answer == "Apple"

    def test_accepts_correct_marker_and_numbering_variants(self):
        text = (
            "1. Largest ocean?\n(A) Atlantic\n(B) Pacific\n(C) Indian\n(D) Arctic\nCorrect: B\n\n"
            "Question 2: Smallest prime?\na) 0\nb) 1\nc) 2\nd) 3\nCorrect answer: c\n"
        )

        parsed = parse_questions(text, 5)

        assert len(parsed) == 1
        assert parsed[0].correct_answer == "Pacific"

    @pytest.mark.parametrize(
        "marker,expected",
        [("**Answer:** B", "4"), ("**Correct answer: C**", "5"), ("Answer: **D**", "6")],
    )
    def test_bold_answer_marker(self, marker, expected):
        text = f"**Q1:** What is 2 + 2?\nA) 3\nB) 4\nC) 5\nD) 6\n{marker}\n"

        (parsed,) = parse_questions(text, 1)

        assert parsed.correct_answer == expected
        assert parsed.options == ["3", "4", "5", "6"]

    def test_block_without_question_text_is_dropped(self):
        text = "Q1:\nA) 1\nB) 2\nC) 3\nD) 4\nAnswer: A\n"

        assert parse_questions(text, 1) == []

    def test_partial_yield_is_not_an_error(self):
        parsed = parse_questions(FIVE_QUESTIONS, 10)

        assert len(parsed) == 5

    @pytest.mark.parametrize("text,count", [("", 3), ("no questions here", 3), (FIVE_QUESTIONS, 0)])
    def test_empty_results(self, text, count):
        assert parse_questions(text, count) == []

    def test_logs_dropped_blocks(self, capture_logs):
        text = "Q1: Bad?\nA) 1\nB) 2\n\n" + FIVE_QUESTIONS.split("\n\n", 1)[1]

        parse_questions(text, 5)

        assert "dropped 1 malformed block" in capture_logs.text


class TestParseSuggestions:
    """Tests for suggestion-list extraction."""

    def test_keeps_first_three_long_lines_in_order(self):
        """Five candidates, four long enough: the first three of those four."""
        text = (
            "1. Review fractions by working through the textbook examples again slowly.\n"
            "2. Too short to count.\n"
            "3. Practice multiplication tables daily for at least fifteen minutes each.\n"
            "4. Ask your teacher to explain long division with one more worked example.\n"
            "5. Use flash cards to memorise the key vocabulary from this unit of study.\n"
        )

        suggestions = parse_suggestions(text)

        assert suggestions == [
            "Review fractions by working through the textbook examples again slowly.",
            "Practice multiplication tables daily for at least fifteen minutes each.",
            "Ask your teacher to explain long division with one more worked example.",
        ]

    def test_strips_bullets(self):
        text = "\n".join(
            f"{marker} This suggestion line is definitely longer than fifty characters ({i})."
            for i, marker in enumerate(["-", "•", "*"])
        )

        suggestions = parse_suggestions(text)

        assert all(s.startswith("This suggestion") for s in suggestions)

    def test_too_few_lines_raise(self):
        text = (
            "1. Review fractions by working through the textbook examples again slowly.\n"
            "2. Short.\n"
        )

        with pytest.raises(InsufficientSuggestionsError) as exc_info:
            parse_suggestions(text)

        assert exc_info.value.found == 1
        assert exc_info.value.required == 3
        # The gateway treats it like any provider failure
        assert isinstance(exc_info.value, ParseYieldTooLowError)
