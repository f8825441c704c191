"""Parse the multi-perspective interpretation returned by the LLM."""
from __future__ import annotations

import json
import logging
import re
from dataclasses import dataclass, field
from typing import Any, Dict, List

logger = logging.getLogger(__name__)

_JUNGIAN = re.compile(r"\*\*JUNGIAN PERSPECTIVE\*\*\n([\s\S]*?)\n\*\*FREUDIAN PERSPECTIVE\*\*")
_FREUDIAN = re.compile(r"\*\*FREUDIAN PERSPECTIVE\*\*\n([\s\S]*?)\n\*\*COGNITIVE/EVOLUTIONARY PERSPECTIVE\*\*")
_COGNITIVE = re.compile(r"\*\*COGNITIVE/EVOLUTIONARY PERSPECTIVE\*\*\n([\s\S]*?)\n\*\*SYNTHESIZED INTERPRETATION\*\*")
_SYNTHESIZED = re.compile(r"\*\*SYNTHESIZED INTERPRETATION\*\*\n([\s\S]*?)\n\*\*REFLECTION QUESTIONS\*\*")
_QUESTIONS = re.compile(r"\*\*REFLECTION QUESTIONS\*\*\n([\s\S]*?)(?:\n\{|$)")
_JSON_BLOCK = re.compile(r"\{[\s\S]*\"symbols\"[\s\S]*?\}")

LABEL_FIELDS = (
    "symbols",
    "emotions",
    "themes",
    "archetypal_figures",
    "cognitive_patterns",
    "wish_indicators",
)


@dataclass
class ParsedInterpretation:
    full_interpretation: str
    jungian_analysis: str = ""
    freudian_analysis: str = ""
    cognitive_analysis: str = ""
    synthesized_analysis: str = ""
    reflection_questions: List[str] = field(default_factory=list)
    symbols: List[str] = field(default_factory=list)
    emotions: List[str] = field(default_factory=list)
    themes: List[str] = field(default_factory=list)
    archetypal_figures: List[str] = field(default_factory=list)
    cognitive_patterns: List[str] = field(default_factory=list)
    wish_indicators: List[str] = field(default_factory=list)

    def labels(self) -> Dict[str, List[str]]:
        return {name: getattr(self, name) for name in LABEL_FIELDS}


def parse_interpretation_response(text: str) -> ParsedInterpretation:
    parsed = ParsedInterpretation(
        full_interpretation=text,
        jungian_analysis=_section(_JUNGIAN, text),
        freudian_analysis=_section(_FREUDIAN, text),
        cognitive_analysis=_section(_COGNITIVE, text),
        synthesized_analysis=_section(_SYNTHESIZED, text),
        reflection_questions=_reflection_questions(text),
    )
    for name, values in _structured_labels(text).items():
        setattr(parsed, name, values)
    return parsed


def _section(pattern: re.Pattern, text: str) -> str:
    match = pattern.search(text)
    return match.group(1).strip() if match else ""


def _reflection_questions(text: str) -> List[str]:
    match = _QUESTIONS.search(text)
    if not match:
        return []
    return [
        line.strip()[1:].strip()
        for line in match.group(1).split("\n")
        if line.strip().startswith("-")
    ]


def _structured_labels(text: str) -> Dict[str, List[str]]:
    match = _JSON_BLOCK.search(text)
    if not match:
        return {}
    try:
        data: Any = json.loads(match.group(0))
    except json.JSONDecodeError as e:
        logger.warning(f"Could not parse label JSON from interpretation: {e}")
        return {}
    if not isinstance(data, dict):
        return {}

    labels: Dict[str, List[str]] = {}
    for name in LABEL_FIELDS:
        values = data.get(name)
        if isinstance(values, list):
            labels[name] = [str(v) for v in values if v]
    return labels
