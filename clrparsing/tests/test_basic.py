import unittest
import clrparsing


class TestParsing(unittest.TestCase):
    def test_basic_a(self):
        from clrparsing.tests.specs import a

        table = clrparsing.build_tables(a.grammar()).unwrap()
        self.assertEqual(len(table.states), 10)
        self.assertEqual(table.startState.name, "I0")
        self.assertEqual(table.conflicts, ())

        parser = clrparsing.Lr(table)
        for text in ["dd", "cdcd", "cdd", "dcd", "cccdcd"]:
            self.assertTrue(parser.parse(text).accepted, text)
        for text in ["d", "c", "ddd", "", "cc", "dc", "cdc"]:
            self.assertFalse(parser.parse(text).accepted, text)

    def test_basic_b(self):
        from clrparsing.tests.specs import b

        table = clrparsing.build_tables(b.grammar()).unwrap()
        self.assertEqual(table.conflicts, ())

        parser = clrparsing.Lr(table)
        result = parser.parse(["id", "plus", "id", "star", "id"])
        self.assertTrue(result.accepted)

        result = parser.parse(
            ["lparen", "id", "plus", "id", "rparen", "star", "id"]
        )
        self.assertTrue(result.accepted)

        self.assertFalse(parser.parse(["id", "plus"]).accepted)
        self.assertFalse(parser.parse(["lparen", "id"]).accepted)
        self.assertFalse(parser.parse(["id", "id"]).accepted)
        self.assertFalse(parser.parse(["rparen"]).accepted)

    def test_basic_d(self):
        from clrparsing.tests.specs import d

        result = clrparsing.build_tables(d.grammar())
        self.assertTrue(result.ok)
        table = result.unwrap()

        self.assertGreater(len(table.conflicts), 0)
        for conflict in table.conflicts:
            self.assertIs(
                conflict.kind, clrparsing.ConflictKind.SHIFT_REDUCE
            )
            self.assertEqual(conflict.symbol, "e")
            action = table.actions()[conflict.state][conflict.symbol]
            self.assertIsInstance(action, clrparsing.ReduceAction)
            self.assertEqual(action, conflict.existing)
            self.assertIsInstance(conflict.rejected, clrparsing.ShiftAction)

        self.assertTrue(clrparsing.parse(table, "a").accepted)
        self.assertTrue(clrparsing.parse(table, "iaea").accepted)
        self.assertTrue(clrparsing.parse(table, "iiaea").accepted)
        self.assertFalse(clrparsing.parse(table, "iae").accepted)
        self.assertFalse(clrparsing.parse(table, "ea").accepted)

    def test_basic_h(self):
        from clrparsing.tests.specs import h

        table = clrparsing.build_tables(h.grammar()).unwrap()

        parser = clrparsing.Lr(table)
        self.assertTrue(parser.parse("b").accepted)
        self.assertTrue(parser.parse("aab").accepted)
        self.assertFalse(parser.parse("a").accepted)
        self.assertFalse(parser.parse("ba").accepted)

    def test_basic_i(self):
        from clrparsing.tests.specs import i

        result = clrparsing.build_tables(i.grammar())
        self.assertFalse(result.ok)
        self.assertIsInstance(result, clrparsing.BuildFailure)
        self.assertIs(
            result.conflict.kind, clrparsing.ConflictKind.REDUCE_REDUCE
        )
        self.assertEqual(result.conflict.symbol, "$")
        self.assertIsInstance(
            result.conflict.existing, clrparsing.ReduceAction
        )
        self.assertIsInstance(
            result.conflict.rejected, clrparsing.ReduceAction
        )
        self.assertNotEqual(
            result.conflict.existing.production,
            result.conflict.rejected.production,
        )
        self.assertFalse(hasattr(result, "table"))

        with self.assertRaises(clrparsing.ConflictError) as cm:
            result.unwrap()
        self.assertIs(cm.exception.conflict, result.conflict)

    def test_basic_pickle(self):
        from clrparsing.tests.specs import a

        table = clrparsing.build_tables(a.grammar()).unwrap()
        import pickle

        tablePickle = pickle.dumps(table)
        table2 = pickle.loads(tablePickle)

        self.assertEqual(
            [state.name for state in table2.states],
            [state.name for state in table.states],
        )
        parser = clrparsing.Lr(table2)
        self.assertTrue(parser.parse("cdcd").accepted)
        self.assertFalse(parser.parse("ddd").accepted)


if __name__ == "__main__":
    unittest.main()
