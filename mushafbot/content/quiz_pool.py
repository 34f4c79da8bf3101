"""Quiz question loading."""

import json
from pathlib import Path
from typing import Any

from loguru import logger

from mushafbot.auto_reply.quiz import ANSWER_TOKENS, QuizAnswer, QuizQuestion


DEFAULT_QUESTIONS_PATH = Path(__file__).resolve().parent.parent / "data" / "quiz.json"


def extract_questions(node: Any) -> list[QuizQuestion]:
    """
    Collect every question in a nested JSON document.

    Any object with a string ``q`` and a list ``answers`` of
    ``{"answer": str, "t": 0|1}`` is a question; other containers are
    walked recursively. Questions with no correct answer, or with more
    options than there are answer tokens, are skipped.
    """
    questions: list[QuizQuestion] = []
    skipped = 0
    stack = [node]

    while stack:
        current = stack.pop()
        if isinstance(current, list):
            stack.extend(reversed(current))
        elif isinstance(current, dict):
            if isinstance(current.get("q"), str) and isinstance(current.get("answers"), list):
                question = _build_question(current)
                if question is None:
                    skipped += 1
                else:
                    questions.append(question)
            else:
                stack.extend(reversed(list(current.values())))

    if skipped:
        logger.warning(f"Skipped {skipped} unusable quiz questions")
    return questions


def _build_question(node: dict[str, Any]) -> QuizQuestion | None:
    answers = tuple(
        QuizAnswer(text=str(a.get("answer", "")), is_correct=a.get("t") == 1)
        for a in node["answers"]
        if isinstance(a, dict)
    )
    if not answers or len(answers) > len(ANSWER_TOKENS):
        return None
    if not any(a.is_correct for a in answers):
        return None
    return QuizQuestion(prompt=node["q"].strip(), answers=answers)


def load_question_pool(path: Path | None = None) -> list[QuizQuestion]:
    """
    Load the question pool from a JSON file.

    Returns an empty pool (and logs the error) if the file is missing or
    invalid.
    """
    path = path or DEFAULT_QUESTIONS_PATH
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, ValueError) as e:
        logger.error(f"Failed to load {path.name}: {e}")
        return []

    questions = extract_questions(data)
    logger.info(f"Quiz pool loaded: {len(questions)} questions")
    return questions
