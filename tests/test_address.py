import unittest

from pysheets.utils import address
from pysheets.utils.errors import InvalidAddress, OutOfRange, SheetsError


class TestColumnLabels(unittest.TestCase):

    def test_known_labels(self):
        cases = {0: "A", 1: "B", 25: "Z", 26: "AA", 27: "AB", 51: "AZ", 52: "BA", 701: "ZZ", 702: "AAA"}
        for index, label in cases.items():
            self.assertEqual(address.column_label(index), label)
            self.assertEqual(address.column_index(label), index)

    def test_negative_column_rejected(self):
        with self.assertRaises(OutOfRange):
            address.column_label(-1)


class TestCodec(unittest.TestCase):

    def test_round_trip_default_grid(self):
        for row in range(100):
            for col in range(26):
                text = address.encode(row, col, 100, 26)
                self.assertEqual(address.decode(text, 100, 26), (row, col))

    def test_round_trip_wide_grid(self):
        for col in range(0, 800, 7):
            text = address.encode(999, col, 1000, 800)
            self.assertEqual(address.decode(text, 1000, 800), (999, col))

    def test_encode(self):
        self.assertEqual(address.encode(0, 0, 100, 26), "A1")
        self.assertEqual(address.encode(1, 1, 100, 26), "B2")
        self.assertEqual(address.encode(99, 25, 100, 26), "Z100")

    def test_encode_out_of_range(self):
        for row, col in [(-1, 0), (0, -1), (100, 0), (0, 26)]:
            with self.assertRaises(OutOfRange):
                address.encode(row, col, 100, 26)

    def test_malformed_addresses_rejected(self):
        for text in ["a1", "b2", "A", "1", "1A", "", " A1", "A1 ", "A 1", "A-1", "A1B", "A1:B2", "$A$1", "Ä1"]:
            with self.assertRaises(InvalidAddress, msg=text):
                address.decode(text, 100, 26)

    def test_out_of_bounds_rejected(self):
        for text in ["A0", "A101", "AA1", "ZZ5"]:
            with self.assertRaises(OutOfRange, msg=text):
                address.decode(text, 100, 26)

    def test_errors_share_base_class(self):
        for text in ["a1", "A0"]:
            with self.assertRaises(SheetsError):
                address.decode(text, 100, 26)

    def test_split_address_is_unbounded(self):
        self.assertEqual(address.split_address("A0"), (-1, 0))
        self.assertEqual(address.split_address("ZZ1000"), (999, 701))

    def test_overlong_address_is_out_of_range(self):
        for text in ["A" + "9" * 5000, "Z" * 11 + "1", "A" + "1" * 19]:
            with self.assertRaises(OutOfRange):
                address.split_address(text)
            with self.assertRaises(OutOfRange):
                address.decode(text, 100, 26)
        self.assertEqual(address.split_address("A" + "1" * 18), (111111111111111110, 0))


if __name__ == "__main__":
    unittest.main()
