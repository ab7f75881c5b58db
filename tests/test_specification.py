"""
test_specification.py - Specification parser, formatter and validator

Run:
  PYTHONPATH=src pytest tests/test_specification.py -v
"""

import unittest

from specdelta.specification import (
    Requirement,
    Scenario,
    format_specification,
    parse_specification,
    requirement_headers,
    validate_specification_format,
)

AUTH_SPEC = """# Authentication API

### Requirement: User Login
Users should be able to log in with email and password.

#### Scenario: Valid Credentials
System returns auth token for valid credentials.

#### Scenario: Invalid Credentials
System returns 401.
Nothing else is revealed.

### Requirement: Password Reset

#### Scenario: Reset Email
A reset link is emailed.
"""


class TestParseSpecification(unittest.TestCase):

    def test_parses_requirements_and_scenarios_in_order(self):
        reqs = parse_specification(AUTH_SPEC)
        self.assertEqual([r.header for r in reqs], ["User Login", "Password Reset"])
        self.assertEqual(
            reqs[0].scenario_headers(),
            ["Valid Credentials", "Invalid Credentials"],
        )
        self.assertEqual(reqs[1].scenario_headers(), ["Reset Email"])

    def test_descriptions_are_trimmed_and_keep_inner_lines(self):
        reqs = parse_specification(AUTH_SPEC)
        self.assertEqual(
            reqs[0].scenarios[1].description,
            "System returns 401.\nNothing else is revealed.",
        )
        self.assertEqual(reqs[1].scenarios[0].description, "A reset link is emailed.")

    def test_headers_are_trimmed(self):
        reqs = parse_specification("###   Requirement:   Spaced Out   \n####  Scenario:  Inner  ")
        self.assertEqual(reqs[0].header, "Spaced Out")
        self.assertEqual(reqs[0].scenarios[0].header, "Inner")

    def test_preamble_text_is_dropped(self):
        text = (
            "Intro before anything\n"
            "### Requirement: R\n"
            "Preamble under the requirement\n"
            "#### Scenario: S\n"
            "Body\n"
        )
        reqs = parse_specification(text)
        self.assertEqual(reqs, [Requirement("R", (Scenario("S", "Body"),))])
        self.assertNotIn("Preamble", format_specification(reqs))
        self.assertNotIn("Intro", format_specification(reqs))

    def test_requirement_without_scenarios(self):
        reqs = parse_specification("### Requirement: Lonely\nsome text only")
        self.assertEqual(reqs, [Requirement("Lonely")])

    def test_scenario_outside_requirement_is_ignored(self):
        reqs = parse_specification("#### Scenario: Orphan\ntext\n### Requirement: R")
        self.assertEqual(reqs, [Requirement("R")])

    def test_empty_and_headerless_input(self):
        self.assertEqual(parse_specification(""), [])
        self.assertEqual(parse_specification("# Title\n\nJust prose.\n"), [])

    def test_empty_requirement_header_is_not_a_requirement(self):
        self.assertEqual(parse_specification("### Requirement:"), [])

    def test_requirement_headers_helper(self):
        self.assertEqual(requirement_headers(AUTH_SPEC), ["User Login", "Password Reset"])


class TestFormatSpecification(unittest.TestCase):

    def test_format_layout(self):
        reqs = [
            Requirement("A", (Scenario("S1", "one"), Scenario("S2", "two"))),
            Requirement("B"),
        ]
        self.assertEqual(
            format_specification(reqs),
            "### Requirement: A\n\n"
            "#### Scenario: S1\n\none\n\n"
            "#### Scenario: S2\n\ntwo\n\n"
            "### Requirement: B",
        )

    def test_format_empty(self):
        self.assertEqual(format_specification([]), "")

    def test_round_trip_of_parsed_tree(self):
        reqs = parse_specification(AUTH_SPEC)
        self.assertEqual(parse_specification(format_specification(reqs)), reqs)

    def test_formatted_output_validates(self):
        formatted = format_specification(parse_specification(AUTH_SPEC))
        result = validate_specification_format(formatted)
        self.assertTrue(result.is_valid, result.issues)


class TestValidateSpecificationFormat(unittest.TestCase):

    def test_valid_document(self):
        result = validate_specification_format(AUTH_SPEC)
        self.assertTrue(result.is_valid)
        self.assertEqual(result.issues, [])

    def test_misnamed_requirement_header(self):
        result = validate_specification_format("### Requirement: A\n### Notes")
        self.assertFalse(result.is_valid)
        self.assertEqual(
            result.issues,
            ['Line 2: Requirement header should start with "Requirement:"'],
        )

    def test_empty_requirement_header(self):
        result = validate_specification_format("### Requirement: A\n### Requirement:   ")
        self.assertIn("Line 2: Requirement header cannot be empty", result.issues)

    def test_misnamed_and_empty_scenario_headers(self):
        text = "### Requirement: A\n#### Example\n#### Scenario:"
        result = validate_specification_format(text)
        self.assertEqual(
            result.issues,
            [
                'Line 2: Scenario header should start with "Scenario:"',
                "Line 3: Scenario header cannot be empty",
            ],
        )

    def test_no_requirements(self):
        result = validate_specification_format("# Title\n\nprose")
        self.assertEqual(
            result.issues,
            ['No requirement headers found. Specifications should include at least '
             'one "### Requirement:" header.'],
        )

    def test_duplicate_requirements_reported_once(self):
        text = (
            "### Requirement: A\n### Requirement: B\n"
            "### Requirement: A\n### Requirement: B\n### Requirement: A"
        )
        result = validate_specification_format(text)
        self.assertEqual(
            result.issues,
            ["Duplicate requirement headers found: Requirement: A, Requirement: B"],
        )

    def test_duplicate_scenarios(self):
        text = (
            "### Requirement: A\n#### Scenario: S\n"
            "### Requirement: B\n#### Scenario: S"
        )
        result = validate_specification_format(text)
        self.assertEqual(result.issues, ["Duplicate scenario headers found: Scenario: S"])

    def test_level_two_and_five_headers_are_ignored(self):
        text = "## Overview\n### Requirement: A\n##### Detail"
        self.assertTrue(validate_specification_format(text).is_valid)


if __name__ == "__main__":
    unittest.main()
