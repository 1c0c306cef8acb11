import clrparsing

# x reduces to either A or B under the same lookahead.
rules = """
%token x
S -> A | B
A -> x
B -> x
"""


def grammar() -> clrparsing.Grammar:
    return clrparsing.Grammar.from_source(clrparsing.RuleSource(rules))
