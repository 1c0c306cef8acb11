import io
import unittest
import unittest.mock
import clrparsing
from clrparsing import END


class TestLr(unittest.TestCase):
    def setUp(self):
        from clrparsing.tests.specs import a

        self.table = clrparsing.build_tables(a.grammar()).unwrap()

    def assertStackEffects(self, trace):
        for step, following in zip(trace, trace[1:]):
            if isinstance(step.action, clrparsing.ShiftAction):
                self.assertEqual(len(following.stack), len(step.stack) + 1)
                self.assertEqual(
                    following.remaining_input, step.remaining_input[1:]
                )
            elif isinstance(step.action, clrparsing.ReduceAction):
                self.assertEqual(
                    len(following.stack),
                    len(step.stack) - step.action.production.popCount + 1,
                )
                self.assertEqual(
                    following.top_of_stack, step.action.production.head
                )
                self.assertEqual(
                    following.remaining_input, step.remaining_input
                )
            else:
                self.fail("step after %r" % (step.action,))

    def test_trace_accept(self):
        result = clrparsing.parse(self.table, "dd")
        self.assertTrue(result.accepted)
        trace = result.trace

        self.assertEqual(
            [step.stack for step in trace],
            [(), ("d",), ("C",), ("C", "d"), ("C", "C"), ("S",)],
        )
        self.assertEqual(
            [step.top_of_stack for step in trace],
            [None, "d", "C", "d", "C", "S"],
        )
        self.assertEqual(
            [step.remaining_input for step in trace],
            [
                ("d", "d", END),
                ("d", END),
                ("d", END),
                (END,),
                (END,),
                (END,),
            ],
        )
        self.assertEqual(
            [type(step.action) for step in trace],
            [
                clrparsing.ShiftAction,
                clrparsing.ReduceAction,
                clrparsing.ShiftAction,
                clrparsing.ReduceAction,
                clrparsing.ReduceAction,
                clrparsing.AcceptAction,
            ],
        )
        self.assertEqual(
            trace[4].action.production, clrparsing.Production("S", ["C", "C"])
        )
        self.assertStackEffects(trace)

    def test_trace_reject(self):
        result = clrparsing.parse(self.table, "d")
        self.assertFalse(result.accepted)
        self.assertEqual(len(result.trace), 2)
        self.assertIsNone(result.trace[-1].action)
        self.assertEqual(result.trace[-1].remaining_input, (END,))
        self.assertStackEffects(result.trace)

        result = clrparsing.parse(self.table, [])
        self.assertFalse(result.accepted)
        self.assertEqual(len(result.trace), 1)
        self.assertEqual(result.trace[0].stack, ())
        self.assertIsNone(result.trace[0].action)

        result = clrparsing.parse(self.table, "ddd")
        self.assertFalse(result.accepted)
        self.assertEqual(result.trace[-1].remaining_input, ("d", END))
        self.assertStackEffects(result.trace)

        # Symbols outside the grammar are simply rejected.
        result = clrparsing.parse(self.table, ["x"])
        self.assertFalse(result.accepted)
        self.assertEqual(result.trace[-1].remaining_input, ("x", END))

    def test_end_marker_in_input(self):
        result = clrparsing.parse(self.table, ["d", "d", END, "c", "c"])
        self.assertFalse(result.accepted)
        self.assertIsNone(result.trace[-1].action)
        self.assertEqual(
            result.trace[-1].remaining_input, (END, "c", "c", END)
        )
        self.assertEqual(result.trace[-1].stack, ("S",))

        result = clrparsing.parse(self.table, ["d", "d", END])
        self.assertFalse(result.accepted)
        self.assertEqual(result.trace[-1].remaining_input, (END, END))

    def test_stack_effects(self):
        from clrparsing.tests.specs import b, h

        table = clrparsing.build_tables(b.grammar()).unwrap()
        result = clrparsing.parse(
            table, ["lparen", "id", "plus", "id", "rparen", "star", "id"]
        )
        self.assertTrue(result.accepted)
        self.assertStackEffects(result.trace)

        # Epsilon reductions push without popping.
        table = clrparsing.build_tables(h.grammar()).unwrap()
        result = clrparsing.parse(table, "ab")
        self.assertTrue(result.accepted)
        self.assertStackEffects(result.trace)
        epsilon = [
            step
            for step in result.trace
            if isinstance(step.action, clrparsing.ReduceAction)
            and step.action.production.isEpsilon
        ]
        self.assertEqual(len(epsilon), 1)

    def test_reuse(self):
        parser = clrparsing.Lr(self.table)
        self.assertIs(parser.tables, self.table)
        first = parser.parse("cdd")
        self.assertTrue(first.accepted)
        self.assertEqual(parser.trace, first.trace)
        self.assertFalse(parser.parse("c").accepted)
        self.assertEqual(parser.parse("cdd"), first)

    def test_verbose(self):
        parser = clrparsing.Lr(self.table, verbose=True)
        with unittest.mock.patch("sys.stdout", new=io.StringIO()) as out:
            parser.parse("dd")
            parser.parse("d")
        output = out.getvalue()
        self.assertIn("--> accept", output)
        self.assertIn("--> reject", output)


if __name__ == "__main__":
    unittest.main()
