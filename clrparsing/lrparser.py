from __future__ import annotations
from typing import Iterable, List, NamedTuple, Optional, Tuple

from clrparsing.automaton import Closure
from clrparsing.errors import UnexpectedToken
from clrparsing.grammar import (
    END,
    AcceptAction,
    Action,
    Production,
    ReduceAction,
    ShiftAction,
)
from clrparsing.interfaces import Parser, Tables


class ParseStep(NamedTuple):
    """One pass of the parser, recorded before its action is taken."""

    top_of_stack: Optional[str]
    stack: Tuple[str, ...]
    action: Optional[Action]
    remaining_input: Tuple[str, ...]


class ParseResult(NamedTuple):
    accepted: bool
    trace: Tuple[ParseStep, ...]


class Lr(Parser):
    """
    LR(1) parser.  The Lr class uses a ParsingTable instance in order to
    accept or reject the input that is fed to it via the parse() method.
    Every pass of the parser is recorded in the trace, whether or not the
    input is accepted.
    """

    _tables: Tables
    _stack: List[Tuple[Optional[str], Closure]]
    _trace: List[ParseStep]

    def __init__(self, tables: Tables, verbose: bool = False) -> None:
        self._tables = tables
        self._action = tables.actions()
        self._goto = tables.goto()
        self.verbose = verbose
        self.reset()

    @property
    def tables(self) -> Tables:
        return self._tables

    @property
    def trace(self) -> Tuple[ParseStep, ...]:
        return tuple(self._trace)

    def reset(self) -> None:
        self._stack = [(None, self._tables.startState)]
        self._trace = []

    def parse(self, tokens: Iterable[str]) -> ParseResult:
        """
        Parse a sequence of terminal symbols.  A string is parsed as a
        sequence of one-character symbols."""
        self.reset()
        remaining = list(tokens)
        remaining.append(END)
        try:
            pos = 0
            while True:
                if self._act(remaining[pos], remaining[pos:]):
                    break
                pos += 1
        except UnexpectedToken:
            if self.verbose:
                print("   --> reject")
            return ParseResult(False, self.trace)

        if self.verbose:
            print("   --> accept")
        return ParseResult(True, self.trace)

    def _record(self, action: Optional[Action], remaining: List[str]) -> None:
        symbols = tuple(sym for sym, _ in self._stack if sym is not None)
        self._trace.append(
            ParseStep(
                self._stack[-1][0],
                symbols,
                action,
                tuple(remaining),
            )
        )

    # Process one input symbol.  Returns True if the input is accepted,
    # False once sym has been shifted.
    def _act(self, sym: str, remaining: List[str]) -> bool:
        if self.verbose:
            self._printStack()
            print("INPUT: %s" % sym)

        while True:
            top = self._stack[-1]
            action = self._action[top[1].name].get(sym)
            if type(action) is AcceptAction and len(remaining) > 1:
                # END in the middle of the input.
                action = None
            self._record(action, remaining)
            if action is None:
                raise UnexpectedToken("Unexpected token: %r" % sym)

            if self.verbose:
                print("   --> %r" % action)
            if type(action) is ShiftAction:
                self._stack.append((sym, action.nextState))
                return False
            elif type(action) is AcceptAction:
                return True
            else:
                assert type(action) is ReduceAction
                self._reduce(action.production, sym)

            if self.verbose:
                self._printStack()

    def _printStack(self) -> None:
        print("STACK:", end=" ")
        for node in self._stack:
            print("%s" % (node[0] or "-"), end=" ")
        print()
        print("      ", end=" ")
        for node in self._stack:
            name = node[1].name
            print(
                "%s%s" % (name, " " * (len(node[0] or "-") - len(name))),
                end=" ",
            )
        print()

    def _reduce(self, production: Production, sym: str) -> None:
        for i in range(production.popCount):
            self._stack.pop()

        top = self._stack[-1]
        dest = self._goto[top[1].name].get(production.head)
        if dest is None:
            raise UnexpectedToken(
                "No transition on %s from state %s after reduction (%r)"
                % (production.head, top[1].name, sym)
            )
        self._stack.append((production.head, dest))


def parse(tables: Tables, tokens: Iterable[str]) -> ParseResult:
    """Accept or reject tokens, returning the full parse trace."""
    return Lr(tables).parse(tokens)
