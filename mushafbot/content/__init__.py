"""Content providers for mushafbot."""

from mushafbot.content.quiz_pool import extract_questions, load_question_pool
from mushafbot.content.quran import ContentError, QuranClient

__all__ = ["ContentError", "QuranClient", "extract_questions", "load_question_pool"]
