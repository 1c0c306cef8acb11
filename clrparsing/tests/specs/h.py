import clrparsing

definition = """
{
  "terminals": ["a", "b"],
  "nonTerminals": ["S", "A"],
  "startSymbol": "S",
  "productions": [
    {"symbol": "S", "produces": ["A", "b"]},
    {"symbol": "A", "produces": ["a", "A"]},
    {"symbol": "A", "produces": []}
  ]
}
"""


def grammar() -> clrparsing.Grammar:
    return clrparsing.Grammar.from_source(
        clrparsing.DefinitionSource.from_json(definition)
    )
