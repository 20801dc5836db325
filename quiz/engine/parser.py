"""Response Parser - Turns free-text completions into structured items.

Both parsers are pure functions over the completion text. They never pad
the result with invented content; deciding whether a yield is too low is
left to the gateway (see ``CompletionGateway.generate``).
"""

import logging
import re
from dataclasses import dataclass

from core.exceptions import InsufficientSuggestionsError

logger = logging.getLogger(__name__)

OPTION_LABELS = ("A", "B", "C", "D")

# "Q1:", "Q1.", "Question 1:", "1." or "1)" at the start of a line
QUESTION_MARKER = re.compile(
    r"^\s*(?:\*\*)?(?:Q(?:uestion)?\s*)?\d+\s*[:.)](?:\*\*)?\s*",
    re.IGNORECASE | re.MULTILINE,
)
OPTION_LINE = re.compile(r"^\s*\(?([A-D])\s*[).:]\s*(.+?)\s*$", re.MULTILINE)
ANSWER_MARKER = re.compile(
    r"(?:Answer|Correct(?:\s+answer)?)\s*\**\s*[:\-]\s*\**\s*\(?([A-D])\b", re.IGNORECASE
)

MIN_SUGGESTION_LENGTH = 50
REQUIRED_SUGGESTIONS = 3
SUGGESTION_PREFIX = re.compile(r"^\s*(?:\d+\s*[.)]\s*|[-•*]+\s*)")


@dataclass
class ParsedQuestion:
    """Question extracted from completion text."""

    text: str
    options: list[str]
    answer_letter: str

    @property
    def correct_answer(self) -> str:
        return self.options[OPTION_LABELS.index(self.answer_letter)]


# =============================================================================
# QUESTIONS
# =============================================================================


def _split_blocks(text: str) -> list[str]:
    """Split completion text into one chunk per numbered question."""
    starts = [m.start() for m in QUESTION_MARKER.finditer(text)]
    if not starts:
        return [text] if text.strip() else []
    starts.append(len(text))
    return [text[starts[i] : starts[i + 1]] for i in range(len(starts) - 1)]


def _parse_block(block: str) -> ParsedQuestion | None:
    body = QUESTION_MARKER.sub("", block, count=1)

    first_option = OPTION_LINE.search(body)
    if first_option is None:
        return None

    text = " ".join(body[: first_option.start()].split())
    if not text:
        return None

    options: dict[str, str] = {}
    for match in OPTION_LINE.finditer(body):
        label, option_text = match.group(1).upper(), match.group(2).strip()
        if label not in options and option_text:
            options[label] = option_text

    if set(options) != set(OPTION_LABELS):
        return None

    answer = ANSWER_MARKER.search(body)
    # Lenient policy: a block without an answer marker defaults to A
    letter = answer.group(1).upper() if answer else "A"

    return ParsedQuestion(
        text=text,
        options=[options[label] for label in OPTION_LABELS],
        answer_letter=letter,
    )


def parse_questions(text: str, expected_count: int) -> list[ParsedQuestion]:
    """Extract up to ``expected_count`` well-formed questions.

    A block is kept only when it has non-empty question text and all four
    options A-D. Malformed blocks are dropped and counted, never repaired.

    Args:
        text: Raw completion text
        expected_count: Maximum number of questions to return

    Returns:
        Parsed questions in the order they appear (possibly fewer than asked)

    Example:
        >>> parse_questions("Q1: 2+2?\\nA) 3\\nB) 4\\nC) 5\\nD) 6\\nAnswer: B", 1)[0].correct_answer
        '4'
    """
    if expected_count <= 0 or not text:
        return []

    parsed: list[ParsedQuestion] = []
    dropped = 0

    for block in _split_blocks(text):
        if len(parsed) >= expected_count:
            break
        question = _parse_block(block)
        if question is None:
            dropped += 1
            continue
        parsed.append(question)

    if dropped:
        logger.info(f"Parser dropped {dropped} malformed block(s), kept {len(parsed)}")
    return parsed


# =============================================================================
# SUGGESTIONS
# =============================================================================


def parse_suggestions(text: str, expected_count: int = REQUIRED_SUGGESTIONS) -> list[str]:
    """Extract exactly ``expected_count`` study suggestions.

    Leading enumeration ("1.", "2)") and bullet markers are stripped; only
    lines longer than ``MIN_SUGGESTION_LENGTH`` characters qualify.

    Raises:
        InsufficientSuggestionsError: Fewer lines qualified than required
    """
    suggestions: list[str] = []

    for line in text.splitlines():
        cleaned = SUGGESTION_PREFIX.sub("", line).strip()
        if len(cleaned) > MIN_SUGGESTION_LENGTH:
            suggestions.append(cleaned)
        if len(suggestions) == expected_count:
            return suggestions

    raise InsufficientSuggestionsError(found=len(suggestions), required=expected_count)
