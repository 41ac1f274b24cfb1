"""Tests for prompt loading utilities."""

import pytest

from src.utils.prompt_loader import (
    format_prompt,
    load_prompt,
    render_prompt,
)


class TestLoadPrompt:
    """Tests for load_prompt function."""

    @pytest.mark.parametrize("category", ["matching", "grouping", "criteria"])
    def test_system_and_user_prompts_exist(self, category):
        assert load_prompt("system", category)
        assert load_prompt("user", category)

    def test_matching_prompt_asks_for_array(self):
        prompt = load_prompt("system", "matching")
        
        assert "JSON array" in prompt
        assert "Never invent identifiers" in prompt

    def test_grouping_prompt_lists_grouping_types(self):
        prompt = load_prompt("system", "grouping")
        
        for grouping_type in ("visual-group", "highlight-filter", "risk-stratify", "condition-cluster"):
            assert grouping_type in prompt
        assert "highlightedPatients" in prompt

    def test_medication_prompt_describes_sections(self):
        prompt = load_prompt("system", "medications")
        
        assert "Alternatives:" in prompt
        assert "Recommendations:" in prompt

    def test_missing_prompt(self):
        with pytest.raises(FileNotFoundError, match="nonexistent"):
            load_prompt("nonexistent", "matching")


class TestFormatPrompt:
    """Tests for format_prompt."""

    def test_substitutes_variables(self):
        assert format_prompt("Hello {name}", name="World") == "Hello World"

    def test_leaves_json_braces_alone(self):
        template = 'Return {"HbA1c": 8.0} for {update_text}'
        
        result = format_prompt(template, update_text="the update")
        
        assert result == 'Return {"HbA1c": 8.0} for the update'

    def test_unknown_placeholder_kept(self):
        assert format_prompt("{missing}", other="x") == "{missing}"


class TestRenderPrompt:
    """Tests for render_prompt."""

    def test_matching_user_prompt(self):
        prompt = render_prompt("user", "matching", prompt="COPD patients", patients_json="[]")
        
        assert "COPD patients" in prompt
        assert "{patients_json}" not in prompt
        assert prompt == prompt.strip()

    def test_criteria_user_prompt(self):
        prompt = render_prompt("user", "criteria", update_text="HbA1c > 8.0")
        assert prompt.endswith("HbA1c > 8.0")
