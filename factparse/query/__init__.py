"""
Question answering over the fact store.
"""

from .question_interpreter import QuestionInterpreter, QuestionType, Answer

__all__ = ["QuestionInterpreter", "QuestionType", "Answer"]
