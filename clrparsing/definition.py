"""
This module contains functionality for reading a grammar from plain data:
either a definition mapping (as decoded from JSON), or a block of text
rules.
"""
from __future__ import annotations
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple

import json
import re

from clrparsing.errors import GrammarError
from clrparsing.grammar import EPSILON, Production
from clrparsing.interfaces import GrammarSource


def _lookup(mapping: Mapping[str, Any], *keys: str) -> Any:
    for key in keys:
        if key in mapping:
            return mapping[key]
    raise GrammarError("Grammar definition is missing '%s'" % keys[0])


def _symbols(value: Any, what: str) -> List[str]:
    if isinstance(value, str) or not isinstance(value, Sequence):
        raise GrammarError(
            "%s must be a list of strings. e.g. [\"c\", \"d\"]" % what
        )
    for sym in value:
        if not isinstance(sym, str):
            raise GrammarError("%s must be a list of strings" % what)
    return list(value)


class DefinitionSource(GrammarSource):
    """
    DefinitionSource reads the four-tuple of a context-free grammar from a
    mapping:

        {
          "terminals": ["c", "d"],
          "nonTerminals": ["S", "C"],
          "startSymbol": "S",
          "productions": [
            {"symbol": "S", "produces": ["C", "C"]},
            {"symbol": "C", "produces": ["c", "C"]},
            {"symbol": "C", "produces": ["d"]}
          ]
        }

    snake_case keys (non_terminals, start) are accepted as well, and a
    production may also be given as a [head, body] pair.
    """

    def __init__(self, definition: Mapping[str, Any]) -> None:
        if not isinstance(definition, Mapping):
            raise GrammarError("Grammar definition must be a mapping")
        self._terminals = _symbols(
            _lookup(definition, "terminals"), "Terminals"
        )
        self._nonterms = _symbols(
            _lookup(definition, "nonTerminals", "non_terminals"),
            "Non terminals",
        )
        start = _lookup(definition, "startSymbol", "start")
        if not isinstance(start, str):
            raise GrammarError(
                "Start symbol must be a valid string e.g \"S\"."
            )
        self._start = start

        self._productions: List[Production] = []
        for prod in _lookup(definition, "productions"):
            if isinstance(prod, Mapping):
                head = _lookup(prod, "symbol", "head")
                body = _lookup(prod, "produces", "body")
            else:
                head, body = prod
            self._productions.append(
                Production(head, _symbols(body, "Production body"))
            )

    @classmethod
    def from_json(cls, text: str) -> DefinitionSource:
        try:
            definition = json.loads(text)
        except ValueError as e:
            raise GrammarError("Invalid grammar definition: %s" % e) from e
        return cls(definition)

    def get_terminals(self) -> List[str]:
        return list(self._terminals)

    def get_nonterminals(self) -> List[str]:
        return list(self._nonterms)

    def get_start(self) -> str:
        return self._start

    def get_productions(self) -> List[Production]:
        return list(self._productions)


class RuleSource(GrammarSource):
    """
    RuleSource reads a grammar from text rules, one non-terminal per line,
    with alternatives separated by '|':

        %token c d
        %start S
        S -> C C
        C -> c C
           | d

    A line that starts with '|' continues the previous rule.  An empty
    alternative (or %empty, or the epsilon symbol) denotes an empty
    production.  '::=' may be used in place of '->'.  Without a %token
    directive, every body symbol that never appears as a rule head is a
    terminal.  Without %start, the head of the first rule is the start
    symbol.  '#' starts a comment.
    """

    rule_re = re.compile(r"^\s*([^\s|]+)\s*(?:->|::=)(.*)$")

    def __init__(self, text: str) -> None:
        self._declaredTokens: Optional[List[str]] = None
        self._declaredNonterms: List[str] = []
        self._start: Optional[str] = None
        self._rules: List[Tuple[str, List[List[str]]]] = []

        for lineno, line in enumerate(text.splitlines(), 1):
            line = line.split("#", 1)[0].strip()
            if not line:
                continue
            if line.startswith("%"):
                self._directive(lineno, self._split(line))
                continue
            if line.startswith("|"):
                if not self._rules:
                    raise GrammarError(
                        "line %d: alternative without a rule" % lineno
                    )
                self._rules[-1][1].extend(self._alternatives(line[1:]))
                continue
            m = RuleSource.rule_re.match(line)
            if m is None:
                raise GrammarError(
                    "line %d: invalid rule specification: %s"
                    % (lineno, line)
                )
            self._rules.append((m.group(1), self._alternatives(m.group(2))))

        if not self._rules:
            raise GrammarError("No rules specified")

    @staticmethod
    def _split(s: str) -> List[str]:
        return list(filter(None, re.split(r"\s+", s)))

    def _alternatives(self, s: str) -> List[List[str]]:
        ret = []
        for alt in s.split("|"):
            body = [
                sym for sym in self._split(alt) if sym not in ("%empty",)
            ]
            if body == [EPSILON]:
                body = []
            ret.append(body)
        return ret

    def _directive(self, lineno: int, dirtoks: List[str]) -> None:
        if dirtoks[0] == "%token":
            if self._declaredTokens is None:
                self._declaredTokens = []
            self._declaredTokens.extend(dirtoks[1:])
        elif dirtoks[0] == "%nonterm":
            self._declaredNonterms.extend(dirtoks[1:])
        elif dirtoks[0] == "%start":
            if len(dirtoks) != 2:
                raise GrammarError(
                    "line %d: %%start takes exactly one symbol" % lineno
                )
            if self._start is not None:
                raise GrammarError("line %d: duplicate %%start" % lineno)
            self._start = dirtoks[1]
        else:
            raise GrammarError(
                "line %d: unknown directive %s" % (lineno, dirtoks[0])
            )

    def get_nonterminals(self) -> List[str]:
        ret: Dict[str, None] = dict.fromkeys(self._declaredNonterms)
        for head, _ in self._rules:
            ret.setdefault(head, None)
        return list(ret)

    def get_terminals(self) -> List[str]:
        if self._declaredTokens is not None:
            return list(dict.fromkeys(self._declaredTokens))
        nonterms = set(self.get_nonterminals())
        ret: Dict[str, None] = {}
        for _, alternatives in self._rules:
            for body in alternatives:
                for sym in body:
                    if sym not in nonterms:
                        ret.setdefault(sym, None)
        return list(ret)

    def get_start(self) -> str:
        if self._start is not None:
            return self._start
        return self._rules[0][0]

    def get_productions(self) -> List[Production]:
        return [
            Production(head, body)
            for head, alternatives in self._rules
            for body in alternatives
        ]
