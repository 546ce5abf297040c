"""Explainer - Phase 3 of the comparison pipeline.

Generates human-readable trade-off explanations and the conditional
pivot statement. Every statement stays conditional on the user's
priorities; no option is ever declared an absolute winner.
"""

from types import MappingProxyType
from typing import Optional

from .config import get_config
from .schema import (
    ATTRIBUTE_TYPES,
    AttributeType,
    ComparisonResult,
    ConstraintImpact,
    Constraints,
    OptionAnalysis,
    OptionComparison,
    PivotResult,
    Rating,
    ScalabilityPriority,
    TradeOffExplanation,
    Weight,
)
from .weight_resolver import WeightResolver

ATTRIBUTE_NAMES = MappingProxyType({
    AttributeType.COST_MODEL: "cost efficiency",
    AttributeType.SCALABILITY: "scalability",
    AttributeType.COMPLEXITY: "operational simplicity",
    AttributeType.MAINTENANCE: "maintenance overhead",
})

STRENGTH_PHRASES = MappingProxyType({
    AttributeType.COST_MODEL: "excellent cost efficiency",
    AttributeType.SCALABILITY: "excellent scalability characteristics",
    AttributeType.COMPLEXITY: "straightforward operations",
    AttributeType.MAINTENANCE: "minimal maintenance burden",
})

WEAKNESS_PHRASES = MappingProxyType({
    AttributeType.COST_MODEL: "higher cost requirements",
    AttributeType.SCALABILITY: "limited scalability options",
    AttributeType.COMPLEXITY: "significant operational complexity",
    AttributeType.MAINTENANCE: "substantial maintenance requirements",
})

NO_STRENGTHS = "balanced performance across attributes"
NO_WEAKNESSES = "no significant weaknesses identified"

SCALABILITY_IMPACTS = MappingProxyType({
    ScalabilityPriority.LOW: (
        "Lower scalability priority reduces weight on scaling capabilities, "
        "favoring cost efficiency"
    ),
    ScalabilityPriority.MEDIUM: (
        "Balanced scalability priority maintains equal consideration across attributes"
    ),
    ScalabilityPriority.HIGH: (
        "High scalability priority increases weight on scaling capabilities significantly"
    ),
})

NOT_APPLICABLE = "N/A"


class TradeOffExplainer:
    """Generates explanations and pivot statements for a comparison.

    Principles:
    - Strengths and weaknesses come straight from attribute ratings
    - Summaries name the trade-off, not a winner
    - The pivot always names two different options

    Configuration:
    - Wording thresholds can be customized via referee-config.yaml
    """

    def __init__(self, resolver: Optional[WeightResolver] = None):
        """Initialize explainer with configuration."""
        cfg = get_config().explanation
        self.close_match_margin = cfg.close_match_margin
        self.good_fit_score = cfg.good_fit_score
        self.moderate_fit_score = cfg.moderate_fit_score
        self.resolver = resolver or WeightResolver()

    def generate(
        self,
        comparison: ComparisonResult,
        constraints: Constraints,
    ) -> TradeOffExplanation:
        """Generate the trade-off explanation.

        Args:
            comparison: Output of the scorer
            constraints: Constraints the comparison was scored under

        Returns:
            Summary, per-option analysis and constraint impacts
        """
        return TradeOffExplanation(
            summary=self._generate_summary(comparison),
            option_analysis=[
                self._analyze_option(option, constraints)
                for option in comparison.options
            ],
            constraint_impact=self._constraint_impacts(constraints),
        )

    def _analyze_option(
        self,
        option: OptionComparison,
        constraints: Constraints,
    ) -> OptionAnalysis:
        return OptionAnalysis(
            id=option.id,
            name=option.name,
            strengths=self._strengths(option),
            weaknesses=self._weaknesses(option),
            fit_score=option.score,
            fit_reason=self._fit_reason(option, constraints),
        )

    def _strengths(self, option: OptionComparison) -> list[str]:
        """Canned phrases for each high-rated attribute."""
        strengths = [
            STRENGTH_PHRASES[attribute_type]
            for attribute_type in ATTRIBUTE_TYPES
            if option.attributes.get(attribute_type).rating == Rating.HIGH
        ]
        return strengths or [NO_STRENGTHS]

    def _weaknesses(self, option: OptionComparison) -> list[str]:
        """Canned phrases for each low-rated attribute."""
        weaknesses = [
            WEAKNESS_PHRASES[attribute_type]
            for attribute_type in ATTRIBUTE_TYPES
            if option.attributes.get(attribute_type).rating == Rating.LOW
        ]
        return weaknesses or [NO_WEAKNESSES]

    def _fit_reason(
        self,
        option: OptionComparison,
        constraints: Constraints,
    ) -> str:
        """First matching rule wins."""
        priority = constraints.scalability_priority
        scalability = option.attributes.scalability.rating

        if priority == ScalabilityPriority.HIGH and scalability == Rating.HIGH:
            return (
                "Strong fit for high-scalability requirements "
                f"with {scalability.value} scalability rating"
            )
        if priority == ScalabilityPriority.LOW and option.attributes.cost_model.rating == Rating.HIGH:
            return "Well-suited for cost-conscious scenarios with excellent cost efficiency"
        if option.score >= self.good_fit_score:
            return "Good overall fit based on weighted attribute scores"
        if option.score >= self.moderate_fit_score:
            return "Moderate fit with some trade-offs to consider"
        return "May require careful consideration of trade-offs for your constraints"

    def _generate_summary(self, comparison: ComparisonResult) -> str:
        options = comparison.options
        if len(options) < 2:
            return "Insufficient options available for comparison based on current constraints."

        option_a, option_b = options[0], options[1]

        if abs(option_a.score - option_b.score) < self.close_match_margin:
            return (
                f"{option_a.name} and {option_b.name} are closely matched under your "
                "current constraints. The decision depends on which specific attributes "
                "matter most to your use case."
            )

        higher, lower = (option_a, option_b) if option_a.score > option_b.score else (option_b, option_a)
        return (
            f"Based on your constraints, {higher.name} shows a stronger fit "
            f"(score: {higher.score}) compared to {lower.name} (score: {lower.score}). "
            f"However, {lower.name} may be preferable if certain attributes are more "
            "critical to your specific needs."
        )

    def _constraint_impacts(self, constraints: Constraints) -> list[ConstraintImpact]:
        impacts = [
            ConstraintImpact(
                constraint="Budget Range",
                impact=(
                    f"Budget constraints (${_format_amount(constraints.budget_min)}"
                    f"-${_format_amount(constraints.budget_max)}) "
                    "influence cost model weighting"
                ),
            ),
            ConstraintImpact(
                constraint="Scalability Priority",
                impact=SCALABILITY_IMPACTS[constraints.scalability_priority],
            ),
        ]

        if constraints.required_integrations:
            impacts.append(ConstraintImpact(
                constraint="Required Integrations",
                impact=(
                    f"{len(constraints.required_integrations)} required integration(s) "
                    "filter available options"
                ),
            ))

        return impacts

    def generate_pivot(
        self,
        comparison: ComparisonResult,
        constraints: Constraints,
        weights: list[Weight],
    ) -> PivotResult:
        """Generate the "if X matters more than Y" pivot statement.

        Args:
            comparison: Output of the scorer
            constraints: Constraints the comparison was scored under
            weights: Weight rows used for scoring

        Returns:
            PivotResult naming a different option on each side of the condition
        """
        options = comparison.options
        if len(options) < 2:
            return PivotResult(
                statement="Unable to generate pivot statement with fewer than two options.",
                primary_factor=NOT_APPLICABLE,
                secondary_factor=NOT_APPLICABLE,
                option_a=options[0].name if options else NOT_APPLICABLE,
                option_b=NOT_APPLICABLE,
            )

        option_a, option_b = options[0], options[1]

        primary = self.resolver.primary_attribute(weights, constraints)
        secondary = self.resolver.secondary_attribute(weights, constraints)

        a_primary = option_a.attributes.get(primary).rating.rank
        b_primary = option_b.attributes.get(primary).rating.rank
        a_secondary = option_a.attributes.get(secondary).rating.rank
        b_secondary = option_b.attributes.get(secondary).rating.rank

        if b_primary > a_primary:
            for_primary, for_secondary = option_b.name, option_a.name
        else:
            for_primary = option_a.name
            for_secondary = option_a.name if a_secondary > b_secondary else option_b.name

        # The two sides of the statement must name different options
        if for_primary == for_secondary:
            for_secondary = option_b.name if for_primary == option_a.name else option_a.name

        primary_name = ATTRIBUTE_NAMES[primary]
        secondary_name = ATTRIBUTE_NAMES[secondary]

        return PivotResult(
            statement=(
                f"If {primary_name} matters more than {secondary_name}, "
                f"choose {for_primary}; otherwise choose {for_secondary}"
            ),
            primary_factor=primary_name,
            secondary_factor=secondary_name,
            option_a=option_a.name,
            option_b=option_b.name,
        )


def _format_amount(amount: float) -> str:
    """Render a budget figure without a trailing '.0'."""
    if float(amount).is_integer():
        return str(int(amount))
    return str(amount)
