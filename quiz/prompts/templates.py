"""Quiz Templates - Prompts sent to the completion providers."""

from ..models.enums import QuizDifficulty

# =============================================================================
# QUESTION GENERATION
# =============================================================================

DIFFICULTY_GUIDANCE = {
    QuizDifficulty.EASY: "basic recall and simple definitions",
    QuizDifficulty.MEDIUM: "applying concepts and short reasoning steps",
    QuizDifficulty.HARD: "multi-step reasoning, edge cases and analysis",
}

QUESTION_GENERATION_PROMPT = """Generate exactly {count} multiple-choice questions for grade {grade} students on the subject "{subject}".

Difficulty: {difficulty} ({guidance}).

Format EVERY question exactly like this:

Q1: What is the question text?
A) First option
B) Second option
C) Third option
D) Fourth option
Answer: B

Rules:
- Exactly four options per question, labelled A) to D)
- One correct option, named on the "Answer:" line with its letter only
- Questions must be appropriate for grade {grade}
- Do not add explanations or any other text

Generate the {count} questions now:"""


# =============================================================================
# STUDY SUGGESTIONS
# =============================================================================

PERFECT_SCORE_PROMPT = """A student scored perfectly {score}/{total} on a quiz! Generate exactly 3 encouraging suggestions to help them continue excelling:

1. [Suggestion for advanced learning]
2. [Suggestion for maintaining excellence]
3. [Suggestion for exploring related topics]

Each suggestion should be specific and actionable, at least one full sentence."""

IMPROVEMENT_PROMPT = """A student scored {score}/{total} on a quiz. They made these mistakes:

{mistakes}

Generate exactly 3 specific study suggestions to help them improve:

1. [Specific suggestion based on their mistakes]
2. [Study technique suggestion]
3. [Practice recommendation]

Each suggestion should be specific and actionable, at least one full sentence."""

MISTAKE_LINE = 'Question {question_id}: Student chose "{user_response}" but correct answer was "{correct_answer}"'


# =============================================================================
# HINTS
# =============================================================================

HINT_PROMPT = """Question: {question}

Options:
{options}

Provide a helpful hint that guides the student toward the correct answer without revealing it directly. Keep it to one or two sentences."""


# =============================================================================
# BUILDERS
# =============================================================================


def build_question_prompt(
    grade: int, subject: str, difficulty: QuizDifficulty, count: int
) -> str:
    """Render the question-generation prompt for one difficulty bucket."""
    return QUESTION_GENERATION_PROMPT.format(
        count=count,
        grade=grade,
        subject=subject,
        difficulty=difficulty.value.lower(),
        guidance=DIFFICULTY_GUIDANCE[difficulty],
    )


def build_suggestion_prompt(score: int, total: int, mistakes: list[dict]) -> str:
    """Render the study-suggestion prompt.

    Args:
        score: Correct answers
        total: Answered questions
        mistakes: Incorrect responses with ``question_id``, ``user_response``
            and ``correct_answer`` keys

    Returns:
        Encouragement prompt for a perfect score, improvement prompt otherwise
    """
    if not mistakes:
        return PERFECT_SCORE_PROMPT.format(score=score, total=total)

    lines = "\n".join(MISTAKE_LINE.format(**mistake) for mistake in mistakes)
    return IMPROVEMENT_PROMPT.format(score=score, total=total, mistakes=lines)


def build_hint_prompt(question: str, options: list[str]) -> str:
    labels = "ABCDEFGH"
    rendered = "\n".join(f"{labels[i]}) {text}" for i, text in enumerate(options))
    return HINT_PROMPT.format(question=question, options=rendered)
