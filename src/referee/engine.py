"""Comparison Engine - orchestrates the comparison pipeline.

Validates a request, pulls the reference rows for the two options from the
catalog, then runs scoring, explanation and (optionally) AI enhancement.
"""

import logging
from pathlib import Path
from typing import Any, Optional, Union

from pydantic import ValidationError

from .catalog import ReferenceCatalog, load_catalog
from .enhancer import AIEnhancer, apply_enhancement
from .exceptions import (
    InsufficientOptionsError,
    OptionNotFoundError,
    RequestValidationError,
)
from .explainer import TradeOffExplainer
from .schema import (
    AttributeType,
    CompareRequest,
    CompareResponse,
    Constraints,
    ScalabilityPriority,
)
from .scorer import ComparisonScorer
from .weight_resolver import WeightResolver

logger = logging.getLogger(__name__)


class ComparisonEngine:
    """Main comparison engine.

    Usage:
        engine = ComparisonEngine()
        engine.load_catalog("catalog.json")
        response = engine.compare({
            "optionIds": ["lambda-id", "ec2-id"],
            "constraints": {"budgetMin": 0, "budgetMax": 500,
                            "scalabilityPriority": "high"},
        })
    """

    def __init__(
        self,
        catalog: Optional[ReferenceCatalog] = None,
        enhancer: Optional[AIEnhancer] = None,
    ):
        """Initialize the engine, optionally with a preloaded catalog."""
        self.catalog = catalog
        self.enhancer = enhancer
        self.resolver = WeightResolver()
        self.scorer = ComparisonScorer(resolver=self.resolver)
        self.explainer = TradeOffExplainer(resolver=self.resolver)

    def load_catalog(self, path: Union[str, Path]) -> ReferenceCatalog:
        self.catalog = load_catalog(path)
        return self.catalog

    def _require_catalog(self) -> ReferenceCatalog:
        if self.catalog is None:
            raise RuntimeError("Catalog not loaded. Call load_catalog() first.")
        return self.catalog

    def validate_request(self, payload: Union[CompareRequest, dict[str, Any]]) -> CompareRequest:
        """Validate a raw request payload.

        Raises:
            RequestValidationError: With a field path -> message mapping.
        """
        if isinstance(payload, CompareRequest):
            return payload
        try:
            return CompareRequest.model_validate(payload)
        except ValidationError as exc:
            details = {}
            for error in exc.errors():
                path = ".".join(str(part) for part in error["loc"])
                details[path or "root"] = error["msg"]
            raise RequestValidationError("Validation failed", details=details) from exc

    def compare(
        self,
        request: Union[CompareRequest, dict[str, Any]],
        use_ai: bool = False,
    ) -> CompareResponse:
        """Compare two options under the request's constraints.

        Args:
            request: A CompareRequest or its wire-format dict
            use_ai: Try to overlay AI-generated explanation text

        Returns:
            CompareResponse with comparison, explanation and pivot

        Raises:
            RequestValidationError: Malformed request
            OptionNotFoundError: An option id is not in the catalog
            InsufficientOptionsError: An option lacks required integrations
        """
        request = self.validate_request(request)
        catalog = self._require_catalog()
        option_ids = list(request.option_ids)
        constraints = request.constraints

        logger.info(
            "Comparing %s with priority=%s",
            " vs ".join(option_ids), constraints.scalability_priority.value,
        )

        options = catalog.get_options_by_ids(option_ids)
        if len(options) != len(option_ids):
            found = {option.id for option in options}
            raise OptionNotFoundError([i for i in option_ids if i not in found])

        comparison = self.scorer.compare(
            options=options,
            attributes=catalog.get_attributes_for(option_ids),
            weights=catalog.weights,
            integration_support=catalog.get_integration_support_for(option_ids),
            constraints=constraints,
        )

        if len(comparison.options) < 2:
            raise InsufficientOptionsError(
                "One or both options do not support the required integrations"
            )

        explanation = self.explainer.generate(comparison, constraints)
        pivot = self.explainer.generate_pivot(comparison, constraints, catalog.weights)

        if use_ai:
            enhancer = self.enhancer or AIEnhancer()
            ai_result = enhancer.generate(comparison, constraints, request.additional_context)
            if ai_result is not None:
                explanation, pivot = apply_enhancement(explanation, pivot, ai_result)
                return CompareResponse(
                    comparison=comparison,
                    explanation=explanation,
                    pivot=pivot,
                    ai_enhanced=True,
                    ai_analysis=ai_result,
                )
            logger.warning("AI enhancement unavailable, using deterministic explanation")

        return CompareResponse(
            comparison=comparison,
            explanation=explanation,
            pivot=pivot,
            ai_enhanced=False,
        )

    def effective_weights(
        self, priority: ScalabilityPriority
    ) -> dict[AttributeType, float]:
        """Effective weights of the loaded catalog for a priority."""
        constraints = _constraints_for(priority)
        return self.resolver.resolve(self._require_catalog().weights, constraints)

    def primary_attribute(self, priority: ScalabilityPriority) -> AttributeType:
        constraints = _constraints_for(priority)
        return self.resolver.primary_attribute(self._require_catalog().weights, constraints)


def _constraints_for(priority: ScalabilityPriority) -> Constraints:
    """Constraints carrying only a priority; budget does not affect weights."""
    return Constraints(budget_min=0, budget_max=0, scalability_priority=priority)
