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
This module contains the classes that describe a context-free grammar:
symbols, productions, LR(1) items and the Grammar itself, along with the
parsing actions that the automaton assigns to grammar symbols.
"""

from __future__ import annotations
from typing import (
    TYPE_CHECKING,
    Any,
    Dict,
    FrozenSet,
    Iterable,
    List,
    Mapping,
    Optional,
    Sequence,
    Set,
    Tuple,
)

import logging

from clrparsing.errors import GrammarError, NonTerminatingGrammarError

if TYPE_CHECKING:
    from clrparsing.automaton import Closure
    from clrparsing.interfaces import GrammarSource


logger = logging.getLogger(__name__)

# <e>: body of an empty production.
EPSILON = "ε"

# <$>: end-of-input marker, only present in augmented grammars.
END = "$"


class Production:
    """
    A rewrite rule head -> body.  Productions are immutable and compare by
    value.  An empty body is stored as (EPSILON,)."""

    def __init__(self, head: str, body: Iterable[str]) -> None:
        body = tuple(body)
        if len(body) == 0:
            body = (EPSILON,)
        self._head = head
        self._body = body

    @property
    def head(self) -> str:
        return self._head

    @property
    def body(self) -> Tuple[str, ...]:
        return self._body

    @property
    def isEpsilon(self) -> bool:
        return self._body == (EPSILON,)

    @property
    def popCount(self) -> int:
        """Number of stack entries consumed when reducing."""
        if self.isEpsilon:
            return 0
        return len(self._body)

    def __hash__(self) -> int:
        return hash((self._head, self._body))

    def __eq__(self, other: Any) -> bool:
        if isinstance(other, Production):
            return self._head == other._head and self._body == other._body
        else:
            return NotImplemented

    def __repr__(self) -> str:
        return "%s -> %s" % (self._head, " ".join(self._body))

    def item(self, dotPos: int, lookahead: Iterable[str]) -> Item:
        return Item(self, dotPos, lookahead)


class Item:
    """
    LR(1) item: a production, the position of the dot within its body, and
    a set of lookahead symbols.  The lookahead set is part of the item's
    identity; items with the same core but different lookahead sets are
    distinct."""

    def __init__(
        self,
        production: Production,
        dotPos: int,
        lookahead: Iterable[str],
    ) -> None:
        if not 0 <= dotPos <= len(production.body):
            raise GrammarError(
                "Dot position %d is out of range for %r" % (dotPos, production)
            )
        self.production = production
        self.dotPos = dotPos
        self.lookahead: FrozenSet[str] = frozenset(lookahead)

    @property
    def isReducing(self) -> bool:
        # The dot never has to cross EPSILON.
        return (
            self.production.isEpsilon
            or self.dotPos == len(self.production.body)
        )

    @property
    def symbol(self) -> Optional[str]:
        """The symbol immediately after the dot, or None if reducing."""
        if self.isReducing:
            return None
        return self.production.body[self.dotPos]

    def advance(self) -> Item:
        return Item(self.production, self.dotPos + 1, self.lookahead)

    def __hash__(self) -> int:
        return hash((self.production, self.dotPos, self.lookahead))

    def __eq__(self, other: Any) -> bool:
        if isinstance(other, Item):
            return (
                self.dotPos == other.dotPos
                and self.production == other.production
                and self.lookahead == other.lookahead
            )
        else:
            return NotImplemented

    def __repr__(self) -> str:
        strs = ["[%s ->" % self.production.head]
        body = self.production.body
        if self.production.isEpsilon:
            body = ()
        i = 0
        while i < self.dotPos:
            strs.append(" %s" % body[i])
            i += 1
        strs.append(" .")
        while i < len(body):
            strs.append(" %s" % body[i])
            i += 1
        strs.append(", %s]" % "/".join(sorted(self.lookahead)))
        return "".join(strs)


def _ordered(symbols: Iterable[str]) -> Tuple[str, ...]:
    # Drop duplicates, keep declaration order.
    return tuple(dict.fromkeys(symbols))


class Grammar:
    """
    A context-free grammar (terminals, non-terminals, start, productions).

    terminals, non_terminals : Iterables of symbol names.  Declaration order
                               is preserved; it determines the order in
                               which the automaton is explored.

    start : The start symbol; must be one of non_terminals.

    productions : Production instances, or (head, body) pairs.  A production
                  whose head is not a declared non-terminal is dropped and
                  reported in the diagnostics list.

    max_first_passes : Upper bound on the number of fixpoint passes used to
                       compute FIRST sets.  Defaults to a bound that is
                       always sufficient for a well-formed grammar."""

    def __init__(
        self,
        terminals: Iterable[str],
        non_terminals: Iterable[str],
        start: str,
        productions: Iterable[Production | Tuple[str, Sequence[str]]],
        max_first_passes: Optional[int] = None,
    ) -> None:
        terms = _ordered(terminals)
        nonterms = _ordered(non_terminals)

        overlap = set(terms) & set(nonterms)
        if overlap:
            raise GrammarError(
                "Symbols declared as both terminal and non-terminal: %s"
                % ", ".join(sorted(overlap))
            )
        for reserved in (EPSILON,):
            if reserved in terms or reserved in nonterms:
                raise GrammarError(
                    "Reserved symbol '%s' cannot be declared" % reserved
                )
        if start not in nonterms:
            raise GrammarError(
                "Start symbol '%s' is not a non-terminal" % start
            )

        diagnostics: List[str] = []
        prods: List[Production] = []
        known = set(terms) | set(nonterms) | {EPSILON}
        for prod in productions:
            if not isinstance(prod, Production):
                head, body = prod
                prod = Production(head, body)
            if prod.head not in nonterms:
                msg = (
                    "%s is not in set of non terminals. "
                    "Discarding production %r" % (prod.head, prod)
                )
                logger.warning(msg)
                diagnostics.append(msg)
                continue
            for sym in prod.body:
                if sym not in known:
                    msg = (
                        "%s is neither a terminal nor a non terminal "
                        "found in %r" % (sym, prod)
                    )
                    logger.warning(msg)
                    diagnostics.append(msg)
            prods.append(prod)

        self._setup(terms, nonterms, start, prods, max_first_passes)
        self.diagnostics = diagnostics

    def _setup(
        self,
        terms: Tuple[str, ...],
        nonterms: Tuple[str, ...],
        start: str,
        productions: List[Production],
        max_first_passes: Optional[int],
    ) -> None:
        self._terminals = terms
        self._nonterms = nonterms
        self._terminalSet = frozenset(terms)
        self._nontermSet = frozenset(nonterms)
        self._start = start
        self._productions = tuple(productions)
        self._maxFirstPasses = max_first_passes
        self._userStart: Optional[str] = None

        self._prodMap: Dict[str, List[Production]] = {
            nonterm: [] for nonterm in nonterms
        }
        for prod in self._productions:
            self._prodMap[prod.head].append(prod)

        # Computed on demand.
        self._firstSets: Optional[Dict[str, FrozenSet[str]]] = None
        self._firstSetCache: Dict[Tuple[str, ...], FrozenSet[str]] = {}
        self._undeclaredFirst: Dict[str, str] = {}

    @classmethod
    def from_source(
        cls,
        source: GrammarSource,
        max_first_passes: Optional[int] = None,
    ) -> Grammar:
        return cls(
            source.get_terminals(),
            source.get_nonterminals(),
            source.get_start(),
            source.get_productions(),
            max_first_passes=max_first_passes,
        )

    @property
    def terminals(self) -> Tuple[str, ...]:
        return self._terminals

    @property
    def nonterminals(self) -> Tuple[str, ...]:
        return self._nonterms

    @property
    def start(self) -> str:
        return self._start

    @property
    def productions(self) -> Tuple[Production, ...]:
        return self._productions

    @property
    def isAugmented(self) -> bool:
        return self._userStart is not None

    @property
    def userStart(self) -> str:
        """The start symbol that the user declared, even when augmented."""
        if self._userStart is None:
            return self._start
        return self._userStart

    def is_terminal(self, sym: str) -> bool:
        return sym in self._terminalSet

    def is_nonterminal(self, sym: str) -> bool:
        return sym in self._nontermSet

    def productions_for(self, head: str) -> List[Production]:
        return list(self._prodMap.get(head, ()))

    def augmented(self) -> Grammar:
        """
        Return the augmented grammar: a fresh start symbol S' with the
        single production S' -> S, and END added to the terminals.  The
        receiver is left untouched."""
        startSym = self._start + "'"
        while startSym in self._terminalSet or startSym in self._nontermSet:
            startSym += "'"

        terms = self._terminals
        if END not in self._terminalSet:
            terms = terms + (END,)
        productions = list(self._productions)
        productions.append(Production(startSym, (self._start,)))

        ret = Grammar.__new__(Grammar)
        ret._setup(
            terms,
            self._nonterms + (startSym,),
            startSym,
            productions,
            self._maxFirstPasses,
        )
        ret.diagnostics = list(self.diagnostics)
        ret._userStart = self._start
        return ret

    def first_of(self, word: Iterable[str]) -> FrozenSet[str]:
        """
        Compute the FIRST set of a sequence of symbols.  EPSILON is a
        member of the result only if the whole sequence is nullable.

        GrammarError is raised if the walk reaches a symbol that does not
        belong to the grammar, or a non-terminal whose own FIRST set
        depends on one."""
        word = tuple(word)
        if len(word) == 0:
            return frozenset((EPSILON,))
        if word[0] in self._terminalSet:
            return frozenset(word[:1])

        firstSet = self._firstSetCache.get(word)
        if firstSet is None:
            firstSets = self._computeFirstSets()
            for sym in self._reached(word, firstSets):
                self._checkKnown(sym)
            firstSet = frozenset(self._sequenceFirst(word, firstSets))
            self._firstSetCache[word] = firstSet
        return firstSet

    def _checkKnown(self, sym: str) -> None:
        if sym in self._terminalSet or sym == EPSILON:
            return
        elif sym in self._nontermSet:
            unknown = self._undeclaredFirst.get(sym)
            if unknown is not None:
                raise GrammarError(
                    "'%s' doesn't belong to the grammar (reached from %s)"
                    % (unknown, sym)
                )
            return
        raise GrammarError("'%s' doesn't belong to the grammar" % sym)

    # Undeclared symbols have an empty FIRST set here; first_of() reports
    # them once a walk actually reaches them.
    def _symbolFirst(
        self, sym: str, firstSets: Mapping[str, FrozenSet[str] | Set[str]]
    ) -> FrozenSet[str] | Set[str]:
        if sym in self._terminalSet:
            return frozenset((sym,))
        elif sym in self._nontermSet:
            return firstSets[sym]
        elif sym == EPSILON:
            return frozenset((EPSILON,))
        return frozenset()

    # The prefix of word that a FIRST walk visits: every symbol up to and
    # including the first one that is not nullable.
    def _reached(
        self,
        word: Tuple[str, ...],
        firstSets: Mapping[str, FrozenSet[str] | Set[str]],
    ) -> List[str]:
        ret = []
        for sym in word:
            ret.append(sym)
            if EPSILON not in self._symbolFirst(sym, firstSets):
                break
        return ret

    def _sequenceFirst(
        self,
        word: Tuple[str, ...],
        firstSets: Mapping[str, FrozenSet[str] | Set[str]],
    ) -> Set[str]:
        result = set()
        for sym in word:
            symFirst = self._symbolFirst(sym, firstSets)
            hasEpsilon = False
            for elm in symFirst:
                if elm == EPSILON:
                    hasEpsilon = True
                else:
                    result.add(elm)
            if not hasEpsilon:
                return result
        # Merge epsilon if it was in the first set of every symbol.
        result.add(EPSILON)
        return result

    # Compute the first sets of all non-terminals.
    def _computeFirstSets(self) -> Dict[str, FrozenSet[str]]:
        if self._firstSets is not None:
            return self._firstSets

        limit = self._maxFirstPasses
        if limit is None:
            # Every pass but the last adds at least one symbol.
            limit = len(self._nonterms) * (len(self._terminals) + 1) + 1

        firstSets: Dict[str, Set[str]] = {
            nonterm: set() for nonterm in self._nonterms
        }

        # Repeat the following loop until no more symbols can be added to any
        # first set.
        nPasses = 0
        done = False
        while not done:
            nPasses += 1
            if nPasses > limit:
                raise NonTerminatingGrammarError(
                    "FIRST sets did not converge within %d pass%s"
                    % (limit, ("es", "")[limit == 1])
                )
            done = True
            for prod in self._productions:
                firstSet = firstSets[prod.head]
                oldLen = len(firstSet)
                firstSet.update(self._sequenceFirst(prod.body, firstSets))
                if len(firstSet) != oldLen:
                    done = False

        # Record, per non-terminal, an undeclared symbol that its FIRST walk
        # reaches, directly or through another non-terminal.
        undeclared: Dict[str, str] = {}
        deps: Dict[str, Set[str]] = {nonterm: set() for nonterm in firstSets}
        for prod in self._productions:
            for sym in self._reached(prod.body, firstSets):
                if sym in self._nontermSet:
                    deps[prod.head].add(sym)
                elif sym not in self._terminalSet and sym != EPSILON:
                    undeclared.setdefault(prod.head, sym)
        done = False
        while not done:
            done = True
            for nonterm, reached in deps.items():
                if nonterm in undeclared:
                    continue
                for sym in reached:
                    if sym in undeclared:
                        undeclared[nonterm] = undeclared[sym]
                        done = False
                        break
        self._undeclaredFirst = undeclared

        self._firstSets = {
            nonterm: frozenset(firstSet)
            for nonterm, firstSet in firstSets.items()
        }
        return self._firstSets

    def __repr__(self) -> str:
        lines = [
            "Grammar: %d terminal%s, %d non-terminal%s, %d production%s"
            % (
                len(self._terminals),
                ("s", "")[len(self._terminals) == 1],
                len(self._nonterms),
                ("s", "")[len(self._nonterms) == 1],
                len(self._productions),
                ("s", "")[len(self._productions) == 1],
            ),
            "  Start: %s" % self._start,
        ]
        for prod in self._productions:
            lines.append("  %r" % prod)
        return "\n".join(lines)


class Action:
    """
    Abstract base class, subclassed by {Shift,Reduce,Accept}Action."""

    def __init__(self) -> None:
        pass


class ShiftAction(Action):
    """
    Shift action, with associated nextState."""

    def __init__(self, nextState: Closure) -> None:
        super().__init__()
        self.nextState = nextState

    def __repr__(self) -> str:
        return "[shift %s]" % self.nextState.name

    def __hash__(self) -> int:
        return hash(("shift", self.nextState.name))

    def __eq__(self, other: Any) -> bool:
        if not isinstance(other, ShiftAction):
            return False
        if self.nextState.name != other.nextState.name:
            return False
        return True


class ReduceAction(Action):
    """
    Reduce action, with associated item."""

    def __init__(self, item: Item) -> None:
        super().__init__()
        self.item = item

    @property
    def production(self) -> Production:
        return self.item.production

    def __repr__(self) -> str:
        return "[reduce %r]" % self.item.production

    def __hash__(self) -> int:
        return hash(("reduce", self.item))

    def __eq__(self, other: Any) -> bool:
        if not isinstance(other, ReduceAction):
            return False
        if self.item != other.item:
            return False
        return True


class AcceptAction(Action):
    """
    Accept action: the augmented start production has been recognized with
    END as lookahead."""

    def __repr__(self) -> str:
        return "[accept]"

    def __hash__(self) -> int:
        return hash("accept")

    def __eq__(self, other: Any) -> bool:
        return isinstance(other, AcceptAction)
