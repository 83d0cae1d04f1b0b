import unittest

from app.core.errors import InvalidJson, InvalidShape, MissingJsonBlock
from app.services.response_parser import (
    RAW_JSON_MAX_CHARS,
    extract_json_block,
    parse_response,
)

MEAL_JSON = '{"meals":[{"id":"M1","title":"Chicken stir fry","items":["I-1"]}]}'

REPLY = f"""Monday Dinner Plan
You're doing great!
• Chicken stir fry
• Pasta
• Soup
{MEAL_JSON}
"""


class TestParseResponse(unittest.TestCase):
    def test_full_reply(self):
        r = parse_response(REPLY)
        self.assertEqual(r.date_line, "Monday Dinner Plan")
        self.assertEqual(r.meals, ["Chicken stir fry", "Pasta", "Soup"])
        self.assertEqual(r.encouragement, "You're doing great!")
        self.assertEqual(r.raw_json, MEAL_JSON)
        self.assertEqual(r.parsed.meals[0]["id"], "M1")
        self.assertEqual(r.parsed.meals[0]["items"], ["I-1"])
        self.assertFalse(r.ambiguous_json)

    def test_reparse_is_stable(self):
        a, b = parse_response(REPLY), parse_response(REPLY)
        self.assertEqual(
            (a.date_line, a.meals, a.encouragement),
            (b.date_line, b.meals, b.encouragement),
        )

    def test_bullet_markers_and_cap(self):
        text = "Tue\n  - one\n*   two\n•three\n- four\n" + MEAL_JSON
        r = parse_response(text)
        self.assertEqual(r.meals, ["one", "two", "three"])

    def test_missing_bullets_default_to_empty(self):
        r = parse_response("Wed\n- only one\n" + MEAL_JSON)
        self.assertEqual(r.meals, ["only one", "", ""])

    def test_encouragement_skips_bullets_and_json_lines(self):
        text = "Thu\n- a\n{\n\"meals\": []\n}"
        r = parse_response(text)
        # first plain line that is not the header, a bullet or a brace line
        self.assertEqual(r.encouragement, '"meals": []')

    def test_no_encouragement(self):
        r = parse_response("Fri\n- a\n" + MEAL_JSON)
        self.assertEqual(r.encouragement, "")

    def test_crlf_and_blank_lines(self):
        r = parse_response("\r\n  Sat  \r\n\r\nKeep going\r\n- x\r\n" + MEAL_JSON + "\r\n")
        self.assertEqual(r.date_line, "Sat")
        self.assertEqual(r.encouragement, "Keep going")
        self.assertEqual(r.meals[0], "x")

    def test_raw_json_is_truncated(self):
        long_title = "x" * 3000
        text = 'Sun\n{"meals":[{"id":"M1","title":"%s","items":["I-1"]}]}' % long_title
        r = parse_response(text)
        self.assertEqual(len(r.raw_json), RAW_JSON_MAX_CHARS)
        self.assertEqual(r.parsed.meals[0]["title"], long_title)


class TestParseFailures(unittest.TestCase):
    def test_missing_block(self):
        with self.assertRaises(MissingJsonBlock):
            parse_response("Monday\n- pasta\nEnjoy!")

    def test_json_not_at_end_is_missing_not_invalid(self):
        with self.assertRaises(MissingJsonBlock):
            parse_response('Monday\n{"meals": []}\nEnjoy!')

    def test_empty_text(self):
        with self.assertRaises(MissingJsonBlock):
            parse_response("")

    def test_invalid_json(self):
        with self.assertRaises(InvalidJson) as ctx:
            parse_response(REPLY.replace(MEAL_JSON, '{"meals":[}'))
        self.assertIn("Invalid JSON", ctx.exception.message)

    def test_missing_meals_array(self):
        with self.assertRaises(InvalidShape):
            parse_response('Mon\n{"dinners": []}')

    def test_meals_not_a_list(self):
        with self.assertRaises(InvalidShape):
            parse_response('Mon\n{"meals": {"id": "M1"}}')

    def test_malformed_sibling_entries_are_kept(self):
        r = parse_response(
            'Mon\n{"meals": [{"id": "M1", "items": ["I-1"]}, {"id": "M2", "items": "I-2"}, "oops"]}'
        )
        self.assertEqual(len(r.parsed.meals), 3)
        self.assertEqual(r.parsed.meal_ids(), ["M1", "M2"])


class TestExtractJsonBlock(unittest.TestCase):
    def test_nested_object(self):
        block = extract_json_block('intro\n{"meals": [{"id": "M1", "x": {"y": 1}}]}  \n')
        self.assertEqual(block.text, '{"meals": [{"id": "M1", "x": {"y": 1}}]}')

    def test_braces_in_prose_before_json(self):
        block = extract_json_block('Use {leftovers} first\n{"meals": []}')
        self.assertEqual(block.text, '{"meals": []}')
        self.assertTrue(block.ambiguous)

    def test_two_objects_takes_the_last(self):
        block = extract_json_block('{"draft": true}\n{"meals": []}')
        self.assertEqual(block.text, '{"meals": []}')
        self.assertTrue(block.ambiguous)

    def test_braces_inside_strings(self):
        block = extract_json_block('x\n{"meals": [{"title": "curly } brace {"}]}')
        self.assertEqual(block.text, '{"meals": [{"title": "curly } brace {"}]}')
        self.assertFalse(block.ambiguous)

    def test_unparsable_span_matches_braces(self):
        block = extract_json_block('note {a}\n{"meals":[}')
        self.assertEqual(block.text, '{"meals":[}')

    def test_none_without_closing_brace(self):
        self.assertIsNone(extract_json_block('{"meals": ['))
        self.assertIsNone(extract_json_block("} only"))


if __name__ == "__main__":
    unittest.main()
