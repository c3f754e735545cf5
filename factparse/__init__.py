"""
Natural-Language Fact Parser

Turns simple English sentences into ground facts, keeps them in an in-memory
fact store, and answers a small set of canned question patterns against it.
"""

__version__ = "1.0.0"
__author__ = "Fact Parser Team"
