# ============================================================================
# Copyright (c) 2007 Jason Evans <jasone@canonware.com>
#
# Permission is hereby granted, free of charge, to any person obtaining a copy
# of this software and associated documentation files (the "Software"), to deal
# in the Software without restriction, including without limitation the rights
# to use, copy, modify, merge, publish, distribute, sublicense, and/or sell
# copies of the Software, and to permit persons to whom the Software is
# furnished to do so, subject to the following conditions:
#
# The above copyright notice and this permission notice shall be included in
# all copies or substantial portions of the Software.
#
# THE SOFTWARE IS PROVIDED "AS IS", WITHOUT WARRANTY OF ANY KIND, EXPRESS OR
# IMPLIED, INCLUDING BUT NOT LIMITED TO THE WARRANTIES OF MERCHANTABILITY,
# FITNESS FOR A PARTICULAR PURPOSE AND NONINFRINGEMENT. IN NO EVENT SHALL THE
# AUTHORS OR COPYRIGHT HOLDERS BE LIABLE FOR ANY CLAIM, DAMAGES OR OTHER
# LIABILITY, WHETHER IN AN ACTION OF CONTRACT, TORT OR OTHERWISE, ARISING FROM,
# OUT OF OR IN CONNECTION WITH THE SOFTWARE OR THE USE OR OTHER DEALINGS IN THE
# SOFTWARE.
# ============================================================================
"""
The clrparsing package implements a canonical LR(1) (CLR(1)) parser
generator, as well as a shift-reduce parser driver that consumes the
generated tables.

A grammar is described by its four-tuple: terminals, non-terminals, a start
symbol and productions.  Symbols are plain strings.  Two symbols are
reserved: EPSILON, the body of an empty production, and END ('$'), the
end-of-input marker that is added when the grammar is augmented.

    grammar = clrparsing.Grammar(
        ["c", "d"],
        ["S", "C"],
        "S",
        [("S", ["C", "C"]), ("C", ["c", "C"]), ("C", ["d"])],
    )

Grammars can also be read from a definition mapping or JSON document
(DefinitionSource), or from text rules (RuleSource), via
Grammar.from_source().

Table construction augments the grammar with a fresh start symbol S' and
the production S' -> S, then explores the canonical LR(1) automaton.  Each
state is a kernel of LR(1) items plus its closure; items carry a whole
lookahead set, and that set is part of the item's identity.  States are
named I0, I1, ... in order of creation.

build_tables() returns a BuildResult rather than raising on conflicts:

    result = clrparsing.build_tables(grammar)
    if result.ok:
        table = result.table
    else:
        print(result.conflict)

Conflicts are handled as follows:

  reduce/reduce : Fatal.  Construction is aborted and a BuildFailure
                  carrying the conflict is returned; no partial table is
                  available.

   shift/reduce : Resolved by keeping the reduce action.  The conflict is
                  logged and recorded in ParsingTable.conflicts.

The Lr driver (or the parse() shortcut) accepts or rejects a sequence of
terminal symbols and returns the full trace of the parse, whatever the
outcome:

    accepted, trace = clrparsing.parse(table, ["c", "d", "d"])

Following are the main classes:

  * Grammar
  * TableBuilder
  * ParsingTable
  * Lr
"""

from __future__ import annotations


__all__ = (
    "END",
    "EPSILON",
    "AcceptAction",
    "BuildFailure",
    "BuildResult",
    "BuildSuccess",
    "Closure",
    "Conflict",
    "ConflictError",
    "ConflictKind",
    "DefinitionSource",
    "Grammar",
    "GrammarError",
    "GrammarSource",
    "Item",
    "Lr",
    "NonTerminatingGrammarError",
    "ParseResult",
    "ParseStep",
    "Parser",
    "ParsingTable",
    "Production",
    "ReduceAction",
    "RuleSource",
    "ShiftAction",
    "TableBuilder",
    "Tables",
    "UnexpectedToken",
    "build_tables",
    "parse",
    "__version__",
)

from clrparsing._version import __version__
from clrparsing.grammar import (
    END,
    EPSILON,
    AcceptAction,
    Grammar,
    Item,
    Production,
    ReduceAction,
    ShiftAction,
)
from clrparsing.automaton import (
    BuildFailure,
    BuildResult,
    BuildSuccess,
    Closure,
    Conflict,
    ConflictKind,
    ParsingTable,
    TableBuilder,
    build_tables,
)
from clrparsing.errors import (
    ConflictError,
    GrammarError,
    NonTerminatingGrammarError,
    UnexpectedToken,
)
from clrparsing.interfaces import GrammarSource, Parser, Tables
from clrparsing.definition import DefinitionSource, RuleSource
from clrparsing.lrparser import Lr, ParseResult, ParseStep, parse
