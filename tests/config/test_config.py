"""Tests for configuration loading."""

import os
import sys
import unittest

sys.path.insert(0, os.path.join(os.path.dirname(os.path.abspath(__file__)), "..", ".."))

from astrolabe.server.config import (
    DEFAULT_MAX_TOKENS,
    TEMPERATURE,
    VARIANTS,
    load_settings,
)


class TestLoadSettings(unittest.TestCase):
    def test_defaults(self):
        settings = load_settings({})
        self.assertEqual(settings.variant.name, "openai-json")
        self.assertEqual(settings.model, "gpt-4o-mini")
        self.assertIsNone(settings.api_key)
        self.assertEqual(settings.temperature, TEMPERATURE)
        self.assertEqual(settings.max_tokens, DEFAULT_MAX_TOKENS)

    def test_key_is_read_from_variant_env(self):
        env = {"ASTROLABE_VARIANT": "anthropic-json", "ANTHROPIC_API_KEY": "k", "OPENAI_API_KEY": "o"}
        self.assertEqual(load_settings(env).api_key, "k")

    def test_blank_key_is_none(self):
        self.assertIsNone(load_settings({"OPENAI_API_KEY": ""}).api_key)

    def test_unknown_variant_raises(self):
        with self.assertRaises(ValueError) as ctx:
            load_settings({"ASTROLABE_VARIANT": "gemini"})
        self.assertIn("gemini", str(ctx.exception))

    def test_max_tokens(self):
        self.assertEqual(load_settings({"ASTROLABE_MAX_TOKENS": "800"}).max_tokens, 800)
        self.assertEqual(
            load_settings({"ASTROLABE_MAX_TOKENS": "lots"}).max_tokens, DEFAULT_MAX_TOKENS
        )

    def test_every_variant_has_a_parser_and_prompt(self):
        for variant in VARIANTS.values():
            self.assertIn(variant.parser, ("strict", "split"))
            self.assertIn(variant.prompt, ("framework", "legacy"))
            self.assertTrue(variant.key_env.endswith("_API_KEY"))


if __name__ == "__main__":
    unittest.main()
