"""
Statement parsing: English sentences to facts.
"""

from .statement_interpreter import StatementInterpreter, StatementOutcome, StatementRule

__all__ = ["StatementInterpreter", "StatementOutcome", "StatementRule"]
