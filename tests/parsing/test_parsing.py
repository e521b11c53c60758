"""Tests for the plan parsing strategies."""

import json
import os
import sys
import unittest

sys.path.insert(0, os.path.join(os.path.dirname(os.path.abspath(__file__)), "..", ".."))

from astrolabe.server.errors import UpstreamFormatError
from astrolabe.server.parsing import (
    DEFAULT_STEPS,
    BestEffortSplitParser,
    StrictJsonParser,
    default_steps,
)

LETTERS = ["A", "S", "T", "R", "O", "L", "A", "B", "E"]
TITLES = [
    "Attune", "Signal", "Test the Tale", "Run Futures", "Options Triangle",
    "Lock-in", "Account", "Buddy & Broadcast", "Evolve",
]


def _plan(n=9):
    return {
        "steps": [
            {"letter": LETTERS[i % 9], "title": TITLES[i % 9], "text": f"Guidance {i}."}
            for i in range(n)
        ]
    }


# ── Tests: default skeleton ────────────────────────────────────────────

class TestDefaultSteps(unittest.TestCase):
    def test_nine_steps_spell_astrolabe(self):
        self.assertEqual("".join(s["letter"] for s in DEFAULT_STEPS), "ASTROLABE")

    def test_titles_in_order(self):
        self.assertEqual([s["title"] for s in DEFAULT_STEPS], TITLES)

    def test_default_steps_is_a_copy(self):
        steps = default_steps()
        steps[0]["text"] = "changed"
        self.assertNotEqual(DEFAULT_STEPS[0]["text"], "changed")


# ── Tests: StrictJsonParser ────────────────────────────────────────────

class TestStrictJsonParser(unittest.TestCase):
    def setUp(self):
        self.parser = StrictJsonParser()

    def test_valid_plan_passes_through(self):
        plan = _plan()
        self.assertEqual(self.parser.parse(json.dumps(plan)), plan["steps"])

    def test_code_fence_is_stripped(self):
        plan = _plan()
        raw = "```json\n" + json.dumps(plan) + "\n```"
        self.assertEqual(self.parser.parse(raw), plan["steps"])

    def test_bare_code_fence_is_stripped(self):
        plan = _plan()
        raw = "  ```\n" + json.dumps(plan, indent=2) + "\n```\n"
        self.assertEqual(self.parser.parse(raw), plan["steps"])

    def test_prose_around_fence_is_not_salvaged(self):
        raw = "Here you go:\n```json\n" + json.dumps(_plan()) + "\n```"
        with self.assertRaises(UpstreamFormatError):
            self.parser.parse(raw)

    def test_letters_are_not_repaired(self):
        plan = _plan()
        plan["steps"][0]["letter"] = "Z"
        self.assertEqual(self.parser.parse(json.dumps(plan))[0]["letter"], "Z")

    def test_empty_raises(self):
        for raw in ("", "   ", None):
            with self.assertRaises(UpstreamFormatError):
                self.parser.parse(raw)

    def test_not_json_raises(self):
        with self.assertRaises(UpstreamFormatError) as ctx:
            self.parser.parse("A — Attune: breathe first.")
        self.assertIn("not valid JSON", str(ctx.exception))

    def test_array_top_level_raises(self):
        with self.assertRaises(UpstreamFormatError):
            self.parser.parse(json.dumps(_plan()["steps"]))

    def test_missing_steps_raises(self):
        with self.assertRaises(UpstreamFormatError) as ctx:
            self.parser.parse('{"plan": []}')
        self.assertIn("steps", str(ctx.exception))

    def test_wrong_count_raises(self):
        for n in (0, 8, 10):
            with self.assertRaises(UpstreamFormatError) as ctx:
                self.parser.parse(json.dumps(_plan(n)))
            self.assertIn(f"got {n}", str(ctx.exception))

    def test_step_missing_text_raises(self):
        plan = _plan()
        del plan["steps"][4]["text"]
        with self.assertRaises(UpstreamFormatError) as ctx:
            self.parser.parse(json.dumps(plan))
        self.assertIn("step 4", str(ctx.exception))

    def test_step_not_object_raises(self):
        plan = _plan()
        plan["steps"][2] = "Test the Tale"
        with self.assertRaises(UpstreamFormatError):
            self.parser.parse(json.dumps(plan))


# ── Tests: BestEffortSplitParser ───────────────────────────────────────

class TestBestEffortSplitParser(unittest.TestCase):
    def setUp(self):
        self.parser = BestEffortSplitParser()

    def test_empty_text_gives_defaults(self):
        self.assertEqual(self.parser.parse(""), DEFAULT_STEPS)
        self.assertEqual(self.parser.parse(None), DEFAULT_STEPS)

    def test_single_block_fills_first_step_only(self):
        steps = self.parser.parse("Just one paragraph of advice.")
        self.assertEqual(steps[0]["text"], "Just one paragraph of advice.")
        self.assertEqual(steps[1:], DEFAULT_STEPS[1:])

    def test_split_on_letter_dash_lines(self):
        raw = "A — notice it\nS — name the virtue\nT—question the story"
        steps = self.parser.parse(raw)
        self.assertEqual(steps[0]["text"], "A — notice it")
        self.assertEqual(steps[1]["text"], "S — name the virtue")
        self.assertEqual(steps[2]["text"], "T—question the story")
        self.assertEqual(steps[3]["text"], DEFAULT_STEPS[3]["text"])

    def test_letters_and_titles_never_change(self):
        raw = "\n".join(f"{c} — part {i}" for i, c in enumerate("ASTROLABEXY"))
        steps = self.parser.parse(raw)
        self.assertEqual(len(steps), 9)
        self.assertEqual([s["letter"] for s in steps], LETTERS)
        self.assertEqual([s["title"] for s in steps], TITLES)
        self.assertEqual(steps[8]["text"], "E — part 8")

    def test_hyphen_is_not_a_break(self):
        steps = self.parser.parse("A - one\nS - two")
        self.assertEqual(steps[0]["text"], "A - one\nS - two")
        self.assertEqual(steps[1]["text"], DEFAULT_STEPS[1]["text"])


if __name__ == "__main__":
    unittest.main()
