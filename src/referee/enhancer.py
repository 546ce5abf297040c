"""Optional AI enhancement of comparison explanations.

Asks an external text generator for a richer write-up of a comparison.
This sits outside the deterministic pipeline: any failure (missing key,
network error, timeout, unparsable answer) yields None and the caller
keeps the deterministic explanation unchanged. No retries.
"""

import json
import logging
import re
from typing import Optional

import requests
from pydantic import ValidationError

from .config import EnhancementConfig, ProviderConfig, get_config
from .schema import (
    AIComparisonResult,
    ComparisonResult,
    Constraints,
    PivotResult,
    ProviderKind,
    TradeOffExplanation,
)

logger = logging.getLogger(__name__)

DEFAULT_AUDIENCE = "general developer"

_FENCE_RE = re.compile(r"```(?:json)?\s*")
_OBJECT_RE = re.compile(r"\{[\s\S]*\}")


class EnhancementError(Exception):
    """Raised internally when a provider call fails."""


def build_comparison_prompt(
    comparison: ComparisonResult,
    constraints: Constraints,
    additional_context: Optional[str] = None,
) -> str:
    """Build the prompt asking for a structured JSON comparison."""
    options = comparison.options
    first = options[0].name if len(options) > 0 else "Option 1"
    second = options[1].name if len(options) > 1 else "Option 2"

    option_details = "\n".join(
        f"{opt.name}: Cost={opt.attributes.cost_model.value}, "
        f"Scalability={opt.attributes.scalability.value}, "
        f"Complexity={opt.attributes.complexity.value}, "
        f"Maintenance={opt.attributes.maintenance.value}"
        for opt in options
    )
    audience = additional_context or DEFAULT_AUDIENCE

    return f"""Compare {first} vs {second} for a {audience}.
Priority: Scalability={constraints.scalability_priority.value}

{option_details}

Return ONLY this JSON with DETAILED explanations:

{{
  "summary": "2-3 sentences comparing both options, highlighting key differences and trade-offs",
  "recommendation": "{first} or {second} with a detailed explanation of why (2-3 sentences)",
  "decisionGuidance": "Detailed guidance on when to pick each option (3-4 sentences covering different scenarios)",
  "personalizedInsights": [
    "Detailed insight 1 with specific advice (1-2 sentences)",
    "Detailed insight 2 with actionable recommendation (1-2 sentences)",
    "Detailed insight 3 with context-specific tip (1-2 sentences)"
  ],
  "detailedAnalysis": [
    {{
      "optionName": "{first}",
      "pros": ["Detailed pro 1 (1-2 sentences)", "Detailed pro 2 (1-2 sentences)"],
      "cons": ["Detailed con 1 (1-2 sentences)", "Detailed con 2 (1-2 sentences)"],
      "bestFor": "Ideal use cases and scenarios (2-3 sentences)"
    }},
    {{
      "optionName": "{second}",
      "pros": ["Detailed pro 1 (1-2 sentences)", "Detailed pro 2 (1-2 sentences)"],
      "cons": ["Detailed con 1 (1-2 sentences)", "Detailed con 2 (1-2 sentences)"],
      "bestFor": "Ideal use cases and scenarios (2-3 sentences)"
    }}
  ],
  "pivotStatement": "Conditional decision statement: {first} for [specific scenarios], {second} for [other scenarios]",
  "confidenceScore": 85
}}

RULES: Keep every recommendation conditional on the stated priorities. Return ONLY valid JSON."""


def parse_ai_response(text: str) -> Optional[AIComparisonResult]:
    """Extract and validate the JSON block from a generator's answer.

    Returns None if no usable block is found.
    """
    cleaned = _FENCE_RE.sub("", text)
    match = _OBJECT_RE.search(cleaned)
    if not match:
        logger.warning("No JSON object found in AI response")
        return None

    try:
        data = json.loads(match.group(0))
        return AIComparisonResult.model_validate(data)
    except json.JSONDecodeError as exc:
        logger.warning("AI response is not valid JSON: %s", exc)
    except ValidationError as exc:
        logger.warning("AI response is missing required fields: %s", exc)
    return None


class AIEnhancer:
    """Calls configured providers in order until one gives a usable answer."""

    def __init__(self, config: Optional[EnhancementConfig] = None):
        self.config = config or get_config().enhancement

    def generate(
        self,
        comparison: ComparisonResult,
        constraints: Constraints,
        additional_context: Optional[str] = None,
    ) -> Optional[AIComparisonResult]:
        """Generate an AI comparison, or None if no provider succeeds."""
        prompt = build_comparison_prompt(comparison, constraints, additional_context)

        for provider in self.config.providers:
            api_key = provider.api_key()
            if not api_key:
                logger.debug("Skipping provider %s: %s not set", provider.name, provider.api_key_env)
                continue

            try:
                text = self._call_provider(provider, api_key, prompt)
            except EnhancementError as exc:
                logger.warning("Provider %s failed: %s", provider.name, exc)
                continue

            result = parse_ai_response(text)
            if result is not None:
                logger.info("AI enhancement produced by %s", provider.name)
                return result

        return None

    def _call_provider(self, provider: ProviderConfig, api_key: str, prompt: str) -> str:
        if provider.kind == ProviderKind.GEMINI:
            url = f"{provider.url.rstrip('/')}/{provider.model}:generateContent"
            params = {"key": api_key}
            headers = {"Content-Type": "application/json"}
            payload = {
                "contents": [{"parts": [{"text": prompt}]}],
                "generationConfig": {
                    "temperature": self.config.temperature,
                    "maxOutputTokens": self.config.max_tokens,
                },
            }
        else:
            url = provider.url
            params = None
            headers = {
                "Content-Type": "application/json",
                "Authorization": f"Bearer {api_key}",
            }
            payload = {
                "model": provider.model,
                "messages": [{"role": "user", "content": prompt}],
                "temperature": self.config.temperature,
                "max_tokens": self.config.max_tokens,
            }

        try:
            resp = requests.post(
                url,
                json=payload,
                params=params,
                headers=headers,
                timeout=self.config.timeout_seconds,
            )
        except requests.Timeout as exc:
            raise EnhancementError("request timed out") from exc
        except requests.RequestException as exc:
            raise EnhancementError(f"network error: {exc}") from exc

        if resp.status_code != 200:
            raise EnhancementError(f"HTTP {resp.status_code}: {resp.text[:200]}")

        try:
            data = resp.json()
        except ValueError as exc:
            raise EnhancementError(f"response is not JSON: {exc}") from exc

        text = _extract_text(provider.kind, data)
        if not text:
            raise EnhancementError("response contained no text")
        return text


def _extract_text(kind: ProviderKind, data: dict) -> Optional[str]:
    """Generated text of a provider reply, or None if it holds no string."""
    try:
        if kind == ProviderKind.GEMINI:
            text = data["candidates"][0]["content"]["parts"][0]["text"]
        else:
            text = data["choices"][0]["message"]["content"]
    except (KeyError, IndexError, TypeError):
        return None
    return text if isinstance(text, str) else None


def apply_enhancement(
    explanation: TradeOffExplanation,
    pivot: PivotResult,
    ai_result: AIComparisonResult,
) -> tuple[TradeOffExplanation, PivotResult]:
    """Overlay AI text on the deterministic explanation and pivot.

    Per-option analyses are matched by position; analyses without an AI
    counterpart are kept as they are.
    """
    analyses = []
    for index, analysis in enumerate(explanation.option_analysis):
        if index < len(ai_result.detailed_analysis):
            detail = ai_result.detailed_analysis[index]
            analysis = analysis.model_copy(update={
                "strengths": list(detail.pros),
                "weaknesses": list(detail.cons),
                "fit_reason": detail.best_for,
            })
        analyses.append(analysis)

    enhanced_explanation = explanation.model_copy(update={
        "summary": ai_result.summary,
        "option_analysis": analyses,
    })
    enhanced_pivot = pivot.model_copy(update={
        "statement": ai_result.pivot_statement or pivot.statement,
    })
    return enhanced_explanation, enhanced_pivot
