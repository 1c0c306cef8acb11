"""
The clrparsing package implements the following exception classes:

  * AnyException
  * GrammarError
  * NonTerminatingGrammarError
  * ConflictError
  * ParsingError
  * UnexpectedToken
"""

from __future__ import annotations
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from clrparsing.automaton import Conflict


# ============================================================================
# Begin exceptions.
#
class AnyException(Exception):
    """
    Top-level class for all exceptions thrown within the clrparsing package.
    """


class GrammarError(AnyException):
    """
    Grammar specification error.  GrammarError arises when a grammar is
    malformed in a way that cannot be recovered from, for example when a
    symbol is neither a declared terminal nor a declared non-terminal.
    """


class NonTerminatingGrammarError(GrammarError):
    """
    FIRST set computation did not reach a fixpoint within the configured
    number of passes.
    """


class ConflictError(AnyException):
    """
    Unresolvable parsing table conflict.  Table construction reports
    conflicts in-band via BuildFailure; ConflictError is only raised when a
    failed build result is unwrapped.
    """

    def __init__(self, conflict: Conflict) -> None:
        super().__init__("%s" % conflict)
        self.conflict = conflict


class ParsingError(AnyException):
    """
    Top level parsing exception class, from which we derive all exceptions
    that occur during the parsing of an input string.
    """


class UnexpectedToken(ParsingError):
    """
    Parser syntax error.  UnexpectedToken arises when a parser instance
    detects that the ACTION table has no entry for the current state and
    input symbol.
    """


#
# End exceptions.
# ============================================================================
