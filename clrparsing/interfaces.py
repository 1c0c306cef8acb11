"""
This module declares several structural ("duck typing") interfaces
that objects or classes can implement to be used in the library
"""

from __future__ import annotations
from typing import TYPE_CHECKING, Dict, Iterable, List, Optional

import abc

from clrparsing.grammar import Action, Grammar, Production

if TYPE_CHECKING:
    from clrparsing.automaton import Closure
    from clrparsing.lrparser import ParseResult

    ActionState = Dict[str, Action]
    GotoState = Dict[str, Optional[Closure]]


class Tables(abc.ABC):
    @abc.abstractmethod
    def actions(self) -> Dict[str, ActionState]:
        raise NotImplementedError

    @abc.abstractmethod
    def goto(self) -> Dict[str, GotoState]:
        raise NotImplementedError

    @abc.abstractproperty
    def startState(self) -> Closure:
        raise NotImplementedError

    @abc.abstractproperty
    def grammar(self) -> Grammar:
        raise NotImplementedError


class GrammarSource(abc.ABC):
    @abc.abstractmethod
    def get_terminals(self) -> List[str]:
        raise NotImplementedError

    @abc.abstractmethod
    def get_nonterminals(self) -> List[str]:
        raise NotImplementedError

    @abc.abstractmethod
    def get_start(self) -> str:
        raise NotImplementedError

    @abc.abstractmethod
    def get_productions(self) -> List[Production]:
        raise NotImplementedError


class Parser(abc.ABC):
    def __init__(self, tables: Tables) -> None:
        raise NotImplementedError

    @abc.abstractmethod
    def parse(self, tokens: Iterable[str]) -> ParseResult:
        raise NotImplementedError
