import time
import unittest

from pysheets.config import CELL_TEXT_MAX
from pysheets.elements.grid import Grid
from pysheets.formula.evaluator import evaluate
from pysheets.formula.recalc import parse_number, recalculate
from pysheets.utils.errors import OutOfRange, SheetsError


class TestGrid(unittest.TestCase):

    def setUp(self):
        self.grid = Grid(10, 5)

    def test_starts_blank(self):
        self.assertEqual(list(self.grid.occupied()), [])
        self.assertEqual(self.grid.extent(), (0, 0))
        self.assertEqual(self.grid.display(9, 4), "")

    def test_bounds(self):
        with self.assertRaises(OutOfRange):
            self.grid.cell(10, 0)
        with self.assertRaises(OutOfRange):
            self.grid.set_text(0, 5, "x")
        with self.assertRaises(SheetsError):
            Grid(0, 5)

    def test_set_text_resets_value(self):
        self.grid.set_text(0, 0, "5")
        recalculate(self.grid)
        self.assertTrue(self.grid.cell(0, 0).has_value)
        self.grid.set_text(0, 0, "6")
        cell = self.grid.cell(0, 0)
        self.assertFalse(cell.has_value)
        self.assertEqual(cell.value, 0)

    def test_set_text_truncates(self):
        self.grid.set_text(0, 0, "x" * (CELL_TEXT_MAX + 10))
        self.assertEqual(len(self.grid.text(0, 0)), CELL_TEXT_MAX)

    def test_clear(self):
        self.grid.set_text(1, 1, "5")
        recalculate(self.grid)
        self.grid.clear(1, 1)
        cell = self.grid.cell(1, 1)
        self.assertEqual((cell.text, cell.value, cell.has_value), ("", 0, False))

    def test_extent_and_occupied(self):
        self.grid.set_text(0, 2, "a")
        self.grid.set_text(3, 1, "b")
        self.assertEqual(self.grid.extent(), (4, 3))
        self.assertEqual(list(self.grid.occupied()), [(0, 2, "a"), (3, 1, "b")])

    def test_lookup(self):
        self.grid.set_text(0, 0, "2.5")
        self.grid.set_text(0, 1, "text")
        recalculate(self.grid)
        self.assertEqual(self.grid.lookup("A1"), 2.5)
        self.assertIsNone(self.grid.lookup("B1"))
        self.assertIsNone(self.grid.lookup("C1"))
        self.assertIsNone(self.grid.lookup("a1"))
        self.assertIsNone(self.grid.lookup("F1"))
        self.assertIsNone(self.grid.lookup("A11"))

    def test_lookup_overlong_address(self):
        self.assertIsNone(self.grid.lookup("A" + "9" * 5000))
        self.assertEqual(evaluate("A" + "9" * 5000 + "+1", self.grid.lookup), 1)

    def test_display(self):
        self.grid.set_text(0, 0, "3")
        self.grid.set_text(0, 1, "0.5")
        self.grid.set_text(0, 2, "hello")
        self.grid.set_text(0, 3, "=1/3")
        self.grid.set_text(0, 4, "=A1*1000000")
        recalculate(self.grid)
        self.assertEqual(self.grid.display(0, 0), "3")
        self.assertEqual(self.grid.display(0, 1), "0.5")
        self.assertEqual(self.grid.display(0, 2), "hello")
        self.assertEqual(self.grid.display(0, 3), "0.333333")
        self.assertEqual(self.grid.display(0, 4), "3e+06")

    def test_address(self):
        self.assertEqual(self.grid.address(9, 4), "E10")


class TestRecalculate(unittest.TestCase):

    def setUp(self):
        self.grid = Grid(10, 5)

    def test_parse_number(self):
        self.assertEqual(parse_number("42"), 42)
        self.assertEqual(parse_number("  42"), 42)
        self.assertEqual(parse_number("-3.5"), -3.5)
        self.assertEqual(parse_number("1e2"), 100)
        for text in ["", "42abc", "42 ", "abc", "1_000", "inf", "nan", "0x10", "."]:
            self.assertIsNone(parse_number(text), text)

    def test_classification(self):
        texts = {(0, 0): "42", (0, 1): "abc", (0, 2): "=A1*2", (0, 3): "12x"}
        for (r, c), text in texts.items():
            self.grid.set_text(r, c, text)
        recalculate(self.grid)
        self.assertTrue(self.grid.cell(0, 0).has_value)
        self.assertEqual(self.grid.cell(0, 0).value, 42)
        self.assertFalse(self.grid.cell(0, 1).has_value)
        self.assertTrue(self.grid.cell(0, 2).has_value)
        self.assertEqual(self.grid.cell(0, 2).value, 84)
        self.assertFalse(self.grid.cell(0, 3).has_value)
        self.assertFalse(self.grid.cell(5, 0).has_value)

    def test_formula_over_blank_cells_is_zero(self):
        self.grid.set_text(2, 2, "=A1+A2")
        recalculate(self.grid)
        self.assertTrue(self.grid.cell(2, 2).has_value)
        self.assertEqual(self.grid.cell(2, 2).value, 0)

    def test_formula_over_text_is_zero(self):
        self.grid.set_text(0, 0, "abc")
        self.grid.set_text(0, 1, "=A1+1")
        recalculate(self.grid)
        self.assertEqual(self.grid.cell(0, 1).value, 1)

    def test_range_functions_on_grid(self):
        for r, text in enumerate(["1", "2", "3"]):
            self.grid.set_text(r, 0, text)
        self.grid.set_text(4, 1, "=SUM(A1:A3)")
        self.grid.set_text(5, 1, "=AVG(A1:A3)")
        self.grid.set_text(6, 1, "=MIN(A1:A3)")
        self.grid.set_text(7, 1, "=MAX(A1:A3)")
        recalculate(self.grid)
        self.assertEqual([self.grid.cell(r, 1).value for r in range(4, 8)], [6, 2, 1, 3])

    def test_range_past_grid_edge_reads_zero(self):
        self.grid.set_text(0, 0, "4")
        self.grid.set_text(1, 0, "=AVG(A1:A20)")
        recalculate(self.grid)
        self.assertEqual(self.grid.cell(1, 0).value, 0.2)

    def test_huge_range_recalculates_quickly(self):
        def value_of(formula):
            grid = Grid(100, 26)
            for r, text in enumerate(["1", "2", "3"]):
                grid.set_text(r, 0, text)
            grid.set_text(5, 1, formula)
            recalculate(grid)
            return grid.cell(5, 1).value

        start = time.monotonic()
        huge = {name: value_of(f"={name}(A1:ZZ999999)") for name in ["SUM", "AVG", "MIN", "MAX"]}
        self.assertLess(time.monotonic() - start, 1.0)
        self.assertEqual(huge["SUM"], value_of("=SUM(A1:Z100)"))
        self.assertEqual(huge["SUM"], 6)
        self.assertEqual(huge["AVG"], 6 / (702 * 999999))
        self.assertEqual(huge["MIN"], value_of("=MIN(A1:Z100)"))
        self.assertEqual(huge["MAX"], value_of("=MAX(A1:Z100)"))
        self.assertEqual((huge["MIN"], huge["MAX"]), (0, 3))

    def test_forward_reference_is_stale_for_one_pass(self):
        self.grid.set_text(0, 0, "=A2")
        self.grid.set_text(1, 0, "5")
        recalculate(self.grid)
        self.assertEqual(self.grid.cell(0, 0).value, 0)
        recalculate(self.grid)
        self.assertEqual(self.grid.cell(0, 0).value, 5)

    def test_self_reference_reads_stored_value(self):
        self.grid.set_text(0, 0, "=A1+1")
        recalculate(self.grid)
        self.assertEqual(self.grid.cell(0, 0).value, 1)
        recalculate(self.grid)
        self.assertEqual(self.grid.cell(0, 0).value, 2)

    def test_cleared_text_loses_value(self):
        self.grid.set_text(0, 0, "7")
        recalculate(self.grid)
        self.grid.cells[0][0].text = ""
        recalculate(self.grid)
        self.assertFalse(self.grid.cell(0, 0).has_value)


if __name__ == "__main__":
    unittest.main()
