# server/parsing.py
# ---------------------------------------------------------
# Turning raw provider text into nine ASTROLABE steps.
#
#   - StrictJsonParser:       JSON or bust (UpstreamFormatError)
#   - BestEffortSplitParser:  never fails, falls back to DEFAULT_STEPS
# ---------------------------------------------------------

import copy
import json
import re
from typing import Any, Dict, List, Optional, Protocol

from .errors import UpstreamFormatError

STEP_COUNT = 9

# letter "A" appears twice: the letters spell ASTROLABE
DEFAULT_STEPS: List[Dict[str, str]] = [
    {"letter": "A", "title": "Attune", "text": "Fact, feeling, body cue."},
    {"letter": "S", "title": "Signal", "text": "Virtue and 1% upgrade."},
    {"letter": "T", "title": "Test the Tale", "text": "Snap-story vs better belief."},
    {"letter": "R", "title": "Run Futures", "text": "If pattern repeats + premortem."},
    {"letter": "O", "title": "Options Triangle", "text": "Conserve / Experiment / Leap."},
    {"letter": "L", "title": "Lock-in", "text": "Routine (If–Then) + ethics check."},
    {"letter": "A", "title": "Account", "text": "Metric to track."},
    {"letter": "B", "title": "Buddy & Broadcast", "text": "Who to share with."},
    {"letter": "E", "title": "Evolve", "text": "Review date + adjust."},
]

# a newline followed by "A —", "S—", ...
STEP_BREAK = re.compile(r"\n(?=[A-Z]\s?—)")

# the whole reply wrapped in one ``` / ```json block
FENCED = re.compile(r"^```[\w-]*[ \t]*\n?(.*?)\n?```$", re.S)


class PlanParser(Protocol):
    """Strategy interface: raw provider text -> list of step dicts."""

    def parse(self, raw: Optional[str]) -> List[Dict[str, Any]]: ...


def default_steps() -> List[Dict[str, str]]:
    return copy.deepcopy(DEFAULT_STEPS)


def _strip_fences(raw: str) -> str:
    """Unwrap a whole-reply markdown block (```json ... ```), if any."""
    text = raw.strip()
    m = FENCED.match(text)
    return m.group(1).strip() if m else text


class StrictJsonParser:
    """
    Requires `{"steps": [...]}` with exactly nine
    `{letter, title, text}` objects. Steps are returned as-is.
    """

    def parse(self, raw: Optional[str]) -> List[Dict[str, Any]]:
        if not raw or not raw.strip():
            raise UpstreamFormatError("empty response")

        try:
            data = json.loads(_strip_fences(raw))
        except json.JSONDecodeError as e:
            raise UpstreamFormatError(f"response is not valid JSON ({e.msg})") from e

        if not isinstance(data, dict):
            raise UpstreamFormatError("top-level JSON value is not an object")

        steps = data.get("steps")
        if not isinstance(steps, list):
            raise UpstreamFormatError("missing 'steps' array")
        if len(steps) != STEP_COUNT:
            raise UpstreamFormatError(
                f"expected {STEP_COUNT} steps, got {len(steps)}"
            )

        for i, step in enumerate(steps):
            if not isinstance(step, dict):
                raise UpstreamFormatError(f"step {i} is not an object")
            for key in ("letter", "title", "text"):
                if not isinstance(step.get(key), str):
                    raise UpstreamFormatError(f"step {i} has no string '{key}'")

        return steps


class BestEffortSplitParser:
    """
    Splits free text on lines that start with "<LETTER> —" and drops each
    segment into the default step at the same index. Missing segments keep
    the default text; extra segments are ignored.
    """

    def parse(self, raw: Optional[str]) -> List[Dict[str, Any]]:
        steps = default_steps()
        if not raw:
            return steps

        parts = STEP_BREAK.split(raw)
        for i, step in enumerate(steps):
            if i < len(parts) and parts[i]:
                step["text"] = parts[i]
        return steps
