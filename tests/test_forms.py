import unittest

from svalutation.utils.forms import parse_id_list, FormDecodeError


class TestParseIdList(unittest.TestCase):
    def test_valid(self):
        self.assertEqual(parse_id_list("[1,2]"), [1, 2])
        self.assertEqual(parse_id_list(" [ 3 ] "), [3])
        self.assertEqual(parse_id_list("[]"), [])

    def test_duplicates_dropped(self):
        self.assertEqual(parse_id_list("[2, 1, 2]"), [2, 1])

    def test_rejected(self):
        for raw in ("", "[1,", "1", '"1"', "[1.5]", '["1"]', "[null]", "[false]", "{}"):
            with self.subTest(raw=raw):
                with self.assertRaises(FormDecodeError):
                    parse_id_list(raw)

    def test_message_names_field(self):
        with self.assertRaises(FormDecodeError) as cm:
            parse_id_list("nope", field="classes")
        self.assertIn("classes", str(cm.exception))
