import clrparsing

# Dangling else: i S e S is ambiguous with i S.
rules = """
S -> i S
   | i S e S
   | a
"""


def grammar() -> clrparsing.Grammar:
    return clrparsing.Grammar.from_source(clrparsing.RuleSource(rules))
