"""
The classes in this module are used to compute the canonical LR(1)
automaton of an augmented grammar, and to derive the ACTION/GOTO tables
that the parser drivers consume.
"""
from __future__ import annotations
from typing import (
    TYPE_CHECKING,
    Dict,
    FrozenSet,
    Iterable,
    Iterator,
    List,
    Optional,
    Set,
    Tuple,
)

import enum
import logging
import sys
import time

from clrparsing.errors import ConflictError, GrammarError
from clrparsing import interfaces
from clrparsing.grammar import (
    END,
    EPSILON,
    Action,
    AcceptAction,
    Grammar,
    Item,
    ReduceAction,
    ShiftAction,
)

if TYPE_CHECKING:
    ActionState = Dict[str, Action]
    GotoState = Dict[str, Optional["Closure"]]


logger = logging.getLogger(__name__)


class Closure:
    """
    A state of the LR(1) automaton: a kernel of items together with its
    closure under the grammar's productions.  States are named when they
    are created; the name is unique within one table construction run.

    The processed flag is set by TableBuilder once all outgoing transitions
    of the state have been computed."""

    def __init__(
        self, name: str, kernel: Iterable[Item], grammar: Grammar
    ) -> None:
        self._name = name
        self._grammar = grammar
        self._kernel: Tuple[Item, ...] = tuple(dict.fromkeys(kernel))
        self._kernelSet: FrozenSet[Item] = frozenset(self._kernel)
        self._closure: List[Item] = []
        self._members: Set[Item] = set()
        self._symMap: Dict[str, List[Item]] = {}
        self.processed = False

        self._closeItems()

    @property
    def name(self) -> str:
        return self._name

    @property
    def kernel(self) -> Tuple[Item, ...]:
        return self._kernel

    @property
    def closure(self) -> Tuple[Item, ...]:
        return tuple(self._closure)

    def __iter__(self) -> Iterator[Item]:
        return iter(self._closure)

    def __len__(self) -> int:
        return len(self._closure)

    def __str__(self) -> str:
        return self._name

    def __repr__(self) -> str:
        kernel = ", ".join("%r" % item for item in self._kernel)
        added = ", ".join(
            "%r" % item
            for item in self._closure
            if item not in self._kernelSet
        )
        return "Closure(%s: kernel: %s, added: %s)" % (
            self._name,
            kernel,
            added,
        )

    # Add an item, unless an identical one (same production, dot position
    # and lookahead set) is already present.
    def _addItem(self, item: Item) -> bool:
        if item in self._members:
            return False
        self._members.add(item)
        self._closure.append(item)
        sym = item.symbol
        if sym is not None:
            if sym in self._symMap:
                self._symMap[sym].append(item)
            else:
                self._symMap[sym] = [item]
        return True

    # Iterate over the items until no more can be added to the closure.  The
    # worklist is the closure itself, which grows while it is walked.
    def _closeItems(self) -> None:
        grammar = self._grammar
        for item in self._kernel:
            self._addItem(item)

        i = 0
        while i < len(self._closure):
            item = self._closure[i]
            sym = item.symbol
            if sym is not None and grammar.is_nonterminal(sym):
                rest = item.production.body[item.dotPos + 1 :]
                lookahead = grammar.first_of(rest)
                if EPSILON in lookahead:
                    lookahead = (lookahead - {EPSILON}) | item.lookahead
                for prod in grammar.productions_for(sym):
                    self._addItem(prod.item(0, lookahead))
            i += 1

    def reducing_items(self) -> List[Item]:
        """All items with the dot at the end of the production."""
        return [item for item in self._closure if item.isReducing]

    def items_before(self, sym: str) -> List[Item]:
        """All items whose symbol after the dot is sym."""
        return list(self._symMap.get(sym, ()))

    def is_of_same_kernel(
        self, kernel: Iterable[Item], symmetric: bool = False
    ) -> bool:
        """
        True if every item of kernel is in this state's kernel.  Unless
        symmetric is set, the reverse inclusion is not checked, so a
        candidate kernel that is a strict subset of this state's kernel
        matches as well."""
        candidate = frozenset(kernel)
        if not candidate <= self._kernelSet:
            return False
        if symmetric and not self._kernelSet <= candidate:
            return False
        return True


class ConflictKind(enum.Enum):
    SHIFT_REDUCE = "SR CONFLICT"
    REDUCE_REDUCE = "RR CONFLICT"


class Conflict:
    """
    Two actions competing for the same ACTION table cell.  existing is the
    action that was in the cell first, rejected the one that lost out (for
    reduce-reduce conflicts, the one that aborted table construction)."""

    def __init__(
        self,
        kind: ConflictKind,
        state: str,
        symbol: str,
        existing: Action,
        rejected: Action,
    ) -> None:
        self.kind = kind
        self.state = state
        self.symbol = symbol
        self.existing = existing
        self.rejected = rejected

    def __repr__(self) -> str:
        return "%s in state %s on %r: %r vs. %r" % (
            self.kind.value,
            self.state,
            self.symbol,
            self.existing,
            self.rejected,
        )


class ParsingTable(interfaces.Tables):
    """
    The ParsingTable class contains the read-only data structures that
    parser instances need in order to parse input.  Table construction
    results in a ParsingTable instance, which can then be shared by
    multiple parser instances.

    The tables conceptually contain one state per row, where each row
    contains one element per symbol.  Each row is actually a dictionary
    keyed by symbol.  If no ACTION entry exists for a symbol in a
    particular state, then input of that symbol is an error for that
    state."""

    def __init__(
        self,
        grammar: Grammar,
        states: List[Closure],
        action: Dict[str, ActionState],
        goto: Dict[str, GotoState],
        startState: Closure,
        conflicts: List[Conflict],
    ) -> None:
        self._grammar = grammar
        self._states = tuple(states)
        self._action = action
        self._goto = goto
        self._startState = startState
        self._conflicts = tuple(conflicts)

    @property
    def grammar(self) -> Grammar:
        return self._grammar

    @property
    def states(self) -> Tuple[Closure, ...]:
        return self._states

    @property
    def startState(self) -> Closure:
        return self._startState

    @property
    def conflicts(self) -> Tuple[Conflict, ...]:
        """Shift-reduce conflicts that were resolved by reducing."""
        return self._conflicts

    def actions(self) -> Dict[str, ActionState]:
        return self._action

    def goto(self) -> Dict[str, GotoState]:
        return self._goto

    def __repr__(self) -> str:
        lines = [
            "ParsingTable: %d state%s, %d resolved conflict%s"
            % (
                len(self._states),
                ("s", "")[len(self._states) == 1],
                len(self._conflicts),
                ("s", "")[len(self._conflicts) == 1],
            )
        ]
        for state in self._states:
            lines.append("  %s" % ("=" * 70))
            lines.append(
                "  State %s:%s"
                % (
                    state.name,
                    ("", " (start state)")[state is self._startState],
                )
            )
            for item in state:
                lines.append("      %r" % item)
            lines.append("    Goto:")
            for sym, dest in self._goto[state.name].items():
                if dest is not None:
                    lines.append("    %15s : %s" % (sym, dest.name))
            lines.append("    Action:")
            for sym, action in self._action[state.name].items():
                lines.append("    %15s : %r" % (sym, action))
        return "\n".join(lines)


class BuildResult:
    """
    Outcome of table construction: either BuildSuccess or BuildFailure."""

    ok: bool

    def unwrap(self) -> ParsingTable:
        raise NotImplementedError


class BuildSuccess(BuildResult):
    ok = True

    def __init__(self, table: ParsingTable) -> None:
        self.table = table

    def unwrap(self) -> ParsingTable:
        return self.table

    def __repr__(self) -> str:
        return "BuildSuccess(%d states)" % len(self.table.states)


class BuildFailure(BuildResult):
    ok = False

    def __init__(self, conflict: Conflict) -> None:
        self.conflict = conflict

    def unwrap(self) -> ParsingTable:
        raise ConflictError(self.conflict)

    def __repr__(self) -> str:
        return "BuildFailure(%r)" % self.conflict


class TableBuilder:
    """
    Construct the canonical LR(1) automaton of a grammar and derive its
    ACTION/GOTO tables.

    grammar : The grammar to build tables for.  It is augmented first
              unless it already is.

    verbose : If true, print progress information while generating the
              parsing tables.

    symmetric_kernels : If true, a goto kernel only reuses an existing
                        state whose kernel is exactly the same item set.
                        By default any state whose kernel contains every
                        item of the goto kernel is reused.

    State names (I0, I1, ...) are drawn from a counter owned by the
    builder; reset() discards everything built so far and restarts the
    counter."""

    def __init__(
        self,
        grammar: Grammar,
        verbose: bool = False,
        symmetric_kernels: bool = False,
    ) -> None:
        if not grammar.isAugmented:
            grammar = grammar.augmented()
        self._grammar = grammar
        self._verbose = verbose
        self._symmetricKernels = symmetric_kernels
        self.reset()

    def reset(self) -> None:
        self._count = 0
        self._states: List[Closure] = []
        self._goto: Dict[str, GotoState] = {}
        self._action: Dict[str, ActionState] = {}
        self._startState: Optional[Closure] = None
        self._conflicts: List[Conflict] = []
        self._result: Optional[BuildResult] = None

    @property
    def grammar(self) -> Grammar:
        return self._grammar

    @property
    def states(self) -> List[Closure]:
        return list(self._states)

    @property
    def startState(self) -> Optional[Closure]:
        return self._startState

    def _newState(self, kernel: Iterable[Item]) -> Closure:
        state = Closure("I%d" % self._count, kernel, self._grammar)
        self._count += 1
        self._states.append(state)
        self._goto[state.name] = {}
        if self._verbose:
            sys.stdout.write("+")
            sys.stdout.flush()
        return state

    # Return the first registered state matching kernel, or register a new
    # one.
    def _stateFor(self, kernel: List[Item]) -> Closure:
        for state in self._states:
            if state.is_of_same_kernel(
                kernel, symmetric=self._symmetricKernels
            ):
                return state
        return self._newState(kernel)

    def goto(self, state: Closure, symbol: str) -> Optional[Closure]:
        """
        The goto function of the automaton, e.g. goto(I0, 'C') == I2.
        Returns None when state has no transition on symbol."""
        grammar = self._grammar
        if not (
            grammar.is_terminal(symbol)
            or grammar.is_nonterminal(symbol)
            or symbol == EPSILON
        ):
            raise GrammarError("'%s' doesn't belong to the grammar" % symbol)

        gstate = self._goto.setdefault(state.name, {})
        if symbol in gstate:
            return gstate[symbol]

        kernel = [item.advance() for item in state.items_before(symbol)]
        dest = self._stateFor(kernel) if kernel else None
        gstate[symbol] = dest
        return dest

    def build_automaton(self) -> List[Closure]:
        """
        Explore the automaton from the start state, computing every
        transition of every reachable state exactly once."""
        if self._startState is not None:
            return self.states

        grammar = self._grammar
        if self._verbose:
            print(
                "clrparsing: Generating LR(1) itemset collection... ",
                end=" ",
            )

        # Add {[S' -> * S, $]} to the collection.
        self._startState = self._newState(
            prod.item(0, (END,))
            for prod in grammar.productions_for(grammar.start)
        )

        syms = list(grammar.nonterminals) + list(grammar.terminals)
        worklist = [self._startState]
        while worklist:
            state = worklist.pop()
            if state.processed:
                continue
            for sym in syms:
                dest = self.goto(state, sym)
                if dest is not None and not dest.processed:
                    worklist.append(dest)
            state.processed = True

        if self._verbose:
            sys.stdout.write("\n")
            sys.stdout.flush()
        return self.states

    def build_tables(self) -> BuildResult:
        """
        Build the automaton if needed, then derive the ACTION table.  A
        reduce-reduce conflict aborts construction and yields a
        BuildFailure; shift-reduce conflicts are resolved in favour of the
        reduce and recorded in ParsingTable.conflicts."""
        if self._result is not None:
            return self._result

        if self._verbose:
            start = time.monotonic()
        self.build_automaton()
        assert self._startState is not None

        if self._verbose:
            print(
                "clrparsing: Generating LR(1) parsing tables "
                "(%d state%s)... "
                % (len(self._states), ("s", "")[len(self._states) == 1])
            )

        grammar = self._grammar
        for state in self._states:
            astate: ActionState = {}
            self._action[state.name] = astate

            # X ::= a*
            for item in state.reducing_items():
                prod = item.production
                for lookaheadSym in sorted(item.lookahead):
                    action: Action
                    if lookaheadSym == END and prod.head == grammar.start:
                        action = AcceptAction()
                    else:
                        action = ReduceAction(item)

                    existing = astate.get(lookaheadSym)
                    if existing is not None:
                        conflict = Conflict(
                            ConflictKind.REDUCE_REDUCE,
                            state.name,
                            lookaheadSym,
                            existing,
                            action,
                        )
                        logger.error("%r", conflict)
                        self._action = {}
                        self._result = BuildFailure(conflict)
                        return self._result
                    astate[lookaheadSym] = action

            # X ::= a*Ab
            for term in grammar.terminals:
                dest = self._goto[state.name].get(term)
                if dest is None:
                    continue
                shift = ShiftAction(dest)
                existing = astate.get(term)
                if existing is not None:
                    conflict = Conflict(
                        ConflictKind.SHIFT_REDUCE,
                        state.name,
                        term,
                        existing,
                        shift,
                    )
                    logger.info("%r, keeping %r", conflict, existing)
                    self._conflicts.append(conflict)
                    continue
                astate[term] = shift

        self._result = BuildSuccess(
            ParsingTable(
                grammar,
                self._states,
                self._action,
                self._goto,
                self._startState,
                self._conflicts,
            )
        )
        if self._verbose:
            print(
                "clrparsing: LR(1) parser generation took "
                f"{(time.monotonic() - start) * 1000:.1f} milliseconds"
            )
            sys.stdout.flush()
        return self._result


def build_tables(
    grammar: Grammar,
    verbose: bool = False,
    symmetric_kernels: bool = False,
) -> BuildResult:
    """
    Augment grammar and build its CLR(1) parsing tables with a fresh
    builder, so that state naming starts at I0."""
    builder = TableBuilder(
        grammar, verbose=verbose, symmetric_kernels=symmetric_kernels
    )
    return builder.build_tables()
