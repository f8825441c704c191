"""Tests for parsing multi-perspective interpretation responses."""

from lucid_backend.services.dream.interpretation import parse_interpretation_response
from dream_test_utils import interpretation_text


class TestParseInterpretation:

    def test_sections_are_extracted(self):
        parsed = parse_interpretation_response(interpretation_text())

        assert parsed.jungian_analysis == "Flight points to transcendence."
        assert parsed.freudian_analysis == "A wish for release from constraint."
        assert parsed.cognitive_analysis == "Rehearsing escape from waking stress."
        assert parsed.synthesized_analysis == "The dreamer is seeking freedom."

    def test_full_text_is_kept(self):
        text = interpretation_text()

        assert parse_interpretation_response(text).full_interpretation == text

    def test_reflection_questions(self):
        parsed = parse_interpretation_response(interpretation_text())

        assert parsed.reflection_questions == [
            "Where do you feel constrained?",
            "What would freedom look like?",
        ]

    def test_structured_labels(self):
        parsed = parse_interpretation_response(interpretation_text())

        assert parsed.symbols == ["flying", "water"]
        assert parsed.emotions == ["joy"]
        assert parsed.themes == ["freedom"]
        assert parsed.archetypal_figures == ["the hero"]
        assert parsed.cognitive_patterns == ["escape rehearsal"]
        assert parsed.wish_indicators == ["release"]

    def test_labels_mapping(self):
        labels = parse_interpretation_response(interpretation_text()).labels()

        assert set(labels) == {
            "symbols", "emotions", "themes",
            "archetypal_figures", "cognitive_patterns", "wish_indicators",
        }

    def test_invalid_json_yields_empty_labels(self):
        parsed = parse_interpretation_response(interpretation_text(symbols='"flying",,'))

        assert parsed.symbols == []
        assert parsed.emotions == []
        # sections are still parsed
        assert parsed.synthesized_analysis == "The dreamer is seeking freedom."

    def test_unstructured_text(self):
        parsed = parse_interpretation_response("Just a paragraph with no headings.")

        assert parsed.full_interpretation == "Just a paragraph with no headings."
        assert parsed.jungian_analysis == ""
        assert parsed.reflection_questions == []
        assert parsed.symbols == []
