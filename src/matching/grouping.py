"""
AI grouping of patients for the canvas.

Requests the object contract (analysis, groupings, highlightedPatients,
recommendations, summary) with a JSON response format, parses it
leniently, and whitelists every id list against the pool. Output is
advisory positioning data only; patient records are never touched.
"""

import logging
from typing import Any, Iterable, Optional, Sequence, Union

from src.errors import LLMProviderError
from src.matching.validation import filter_known_ids, known_ids
from src.models.enums import GroupingType
from src.models.grouping import Grouping, GroupingResult
from src.models.llm import Structured
from src.models.patient import Patient, PatientContext, as_patient_contexts
from src.utils.parsing import join_or, parse_llm_output, string_list
from src.utils.prompt_loader import render_prompt
from src.utils.protocols import LLMClientProtocol


logger = logging.getLogger(__name__)


def format_patient_lines(patients: Sequence[PatientContext]) -> str:
    """Readable per-patient block for the grouping prompt."""
    blocks = []
    for patient in patients:
        labs = join_or(f"{lab.name}: {lab.value} ({lab.status})" for lab in patient.labs)
        blocks.append(
            f"Patient: {patient.name} (ID: {patient.id})\n"
            f"- Age: {patient.age if patient.age is not None else 'Unknown'}\n"
            f"- Conditions: {join_or(patient.conditions)}\n"
            f"- Medications: {join_or(patient.meds)}\n"
            f"- Labs: {labs}\n"
            f"- Priority: {patient.priority or 'Unknown'}\n"
            f"- Risk Score: {patient.risk_score if patient.risk_score is not None else 'Unknown'}"
        )
    return "\n\n".join(blocks)


def _text(value: Any, default: str = "") -> str:
    if value is None:
        return default
    if isinstance(value, str):
        return value
    return str(value)


class AIGroupingService:
    """Proposes named patient groupings from a free-text request."""
    
    def __init__(
        self,
        llm_client: LLMClientProtocol,
        model: str = "gpt-4o-mini",
        temperature: float = 0.1,
        max_tokens: int = 1500,
    ):
        self.llm_client = llm_client
        self.model = model
        self.temperature = temperature
        self.max_tokens = max_tokens
    
    def build_messages(
        self,
        prompt: str,
        patients: Sequence[PatientContext],
        grouping_type: str,
        highlighted: Sequence[str],
    ) -> list[dict]:
        return [
            {"role": "system", "content": render_prompt("system", "grouping")},
            {
                "role": "user",
                "content": render_prompt(
                    "user",
                    "grouping",
                    prompt=prompt.strip(),
                    grouping_type=grouping_type,
                    patient_lines=format_patient_lines(patients),
                    highlighted=join_or(highlighted),
                ),
            },
        ]
    
    def _coerce_grouping(self, item: Any, valid_ids: set[str]) -> Optional[Grouping]:
        if not isinstance(item, dict):
            return None
        
        raw_ids = item.get("patientIds", item.get("patient_ids"))
        patient_ids, _ = filter_known_ids(raw_ids if isinstance(raw_ids, list) else [], valid_ids)
        
        return Grouping(
            name=_text(item.get("name"), "Unnamed group") or "Unnamed group",
            description=_text(item.get("description")),
            patient_ids=patient_ids,
            criteria=_text(item.get("criteria")),
            priority=_text(item.get("priority"), "medium").lower() or "medium",
            visual_hint=_text(item.get("visualHint", item.get("visual_hint"))),
        )
    
    def _from_payload(self, payload: dict, valid_ids: set[str]) -> GroupingResult:
        raw_groupings = payload.get("groupings")
        groupings = [
            grouping
            for grouping in (
                self._coerce_grouping(item, valid_ids)
                for item in (raw_groupings if isinstance(raw_groupings, list) else [])
            )
            if grouping is not None
        ]
        
        raw_highlighted = payload.get("highlightedPatients", payload.get("highlighted_patients"))
        highlighted, _ = filter_known_ids(
            raw_highlighted if isinstance(raw_highlighted, list) else [],
            valid_ids,
        )
        
        return GroupingResult(
            analysis=_text(payload.get("analysis")),
            groupings=groupings,
            highlighted_patients=highlighted,
            recommendations=string_list(payload.get("recommendations")),
            summary=_text(payload.get("summary")),
        )
    
    async def group(
        self,
        prompt: str,
        patients: Sequence[Union[Patient, PatientContext]],
        grouping_type: Union[GroupingType, str] = GroupingType.VISUAL_GROUP,
        highlighted: Iterable[str] = (),
    ) -> GroupingResult:
        """
        Ask the model to group ``patients`` according to ``prompt``.
        
        Returns:
            GroupingResult with whitelisted ids. On provider or shape errors the
            content is empty and ``error`` is set.
        """
        if not prompt or not prompt.strip():
            return GroupingResult(error="Prompt is required")
        
        contexts = as_patient_contexts(patients)
        valid_ids = known_ids(contexts)
        grouping_type = grouping_type.value if isinstance(grouping_type, GroupingType) else str(grouping_type)
        
        logger.info(
            f"Processing AI grouping request ({grouping_type}) for {len(contexts)} patients: "
            f"{prompt.strip()[:100]!r}"
        )
        
        try:
            response = await self.llm_client.complete(
                model=self.model,
                messages=self.build_messages(prompt, contexts, grouping_type, list(highlighted)),
                temperature=self.temperature,
                max_tokens=self.max_tokens,
                response_format={"type": "json_object"},
            )
        except LLMProviderError as e:
            logger.error(f"AI grouping failed at provider: {e}")
            return GroupingResult(error="Failed to process AI analysis", details=str(e))
        
        parsed = parse_llm_output(response.content)
        if not isinstance(parsed, Structured):
            logger.warning(f"Grouping output did not match the object contract: {type(parsed).__name__}")
            return GroupingResult(
                error="Failed to process AI analysis",
                details="Invalid JSON response from AI",
            )
        
        result = self._from_payload(parsed.payload, valid_ids)
        logger.info(
            f"AI grouping completed: {len(result.groupings)} grouping(s), "
            f"{len(result.highlighted_patients)} highlighted"
        )
        return result
