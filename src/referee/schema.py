"""Pydantic models for the trade-off referee.

Reference rows (options, attributes, weights, integration support), the
user-supplied constraints, and the derived comparison, explanation and
pivot outputs. Wire names are camelCase; Python attributes are snake_case.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel


# =============================================================================
# Enums
# =============================================================================


class AttributeType(str, Enum):
    """The four fixed dimensions every option is described by."""
    COST_MODEL = "cost_model"
    SCALABILITY = "scalability"
    COMPLEXITY = "complexity"
    MAINTENANCE = "maintenance"


# Fixed iteration order for attribute types
ATTRIBUTE_TYPES: tuple[AttributeType, ...] = (
    AttributeType.COST_MODEL,
    AttributeType.SCALABILITY,
    AttributeType.COMPLEXITY,
    AttributeType.MAINTENANCE,
)


class Rating(str, Enum):
    """Qualitative rating of an attribute."""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"

    @property
    def rank(self) -> int:
        """Ordinal rank (low=1, medium=2, high=3)."""
        return _RATING_RANKS[self]


_RATING_RANKS = {Rating.LOW: 1, Rating.MEDIUM: 2, Rating.HIGH: 3}


class ScalabilityPriority(str, Enum):
    """How much the user cares about scaling headroom."""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class SupportLevel(str, Enum):
    """How an option supports an integration. Not used for scoring."""
    NATIVE = "native"
    PLUGIN = "plugin"
    CUSTOM = "custom"


class ProviderKind(str, Enum):
    """Wire protocol spoken by an AI provider."""
    OPENAI_COMPATIBLE = "openai_compatible"
    GEMINI = "gemini"


# =============================================================================
# Base model
# =============================================================================


class CamelModel(BaseModel):
    """Base model serialized with camelCase keys, populated by either name."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# =============================================================================
# Reference Data
# =============================================================================


class Option(CamelModel):
    """A named technical choice that can be compared."""
    id: str
    name: str
    description: str = ""
    category: str = ""


class Attribute(CamelModel):
    """One dimension of an option, rated low/medium/high."""
    option_id: str
    attribute_type: AttributeType
    value: str
    rating: Rating
    description: Optional[str] = None


class Weight(CamelModel):
    """Base importance of an attribute type plus scalability modifiers."""
    attribute_type: AttributeType
    default_weight: float = Field(..., ge=0)
    low_modifier: float = Field(1.0, ge=0)
    medium_modifier: float = Field(1.0, ge=0)
    high_modifier: float = Field(1.0, ge=0)

    def modifier_for(self, priority: ScalabilityPriority) -> float:
        """Return the modifier matching a scalability priority."""
        if priority == ScalabilityPriority.LOW:
            return self.low_modifier
        if priority == ScalabilityPriority.MEDIUM:
            return self.medium_modifier
        return self.high_modifier


class Integration(CamelModel):
    """An external tool or service an option may integrate with."""
    id: str
    name: str
    category: str = ""


class IntegrationSupport(CamelModel):
    """Links an option to an integration it supports."""
    option_id: str
    integration_id: str
    support_level: SupportLevel = SupportLevel.NATIVE


# =============================================================================
# User Input
# =============================================================================


class Constraints(CamelModel):
    """User-supplied constraints shaping the comparison."""
    budget_min: float = Field(..., ge=0)
    budget_max: float = Field(..., ge=0)
    scalability_priority: ScalabilityPriority
    required_integrations: list[str] = Field(default_factory=list)

    @field_validator("required_integrations")
    @classmethod
    def dedupe_integrations(cls, value: list[str]) -> list[str]:
        """Collapse duplicate integration ids, keeping first occurrence."""
        return list(dict.fromkeys(value))

    @model_validator(mode="after")
    def check_budget_range(self) -> "Constraints":
        if self.budget_max < self.budget_min:
            raise ValueError("budgetMax must be greater than or equal to budgetMin")
        return self


class CompareRequest(CamelModel):
    """A request to compare exactly two options."""
    constraints: Constraints
    option_ids: tuple[str, str]
    additional_context: Optional[str] = None

    @field_validator("option_ids")
    @classmethod
    def check_distinct(cls, value: tuple[str, str]) -> tuple[str, str]:
        if value[0] == value[1]:
            raise ValueError("Option IDs must be different")
        return value


# =============================================================================
# Comparison Output
# =============================================================================


class AttributeValue(CamelModel):
    """Display form of an attribute."""
    value: str
    rating: Rating
    icon: str


class OptionAttributes(CamelModel):
    """The four attribute values of one option, keyed by type."""
    cost_model: AttributeValue
    scalability: AttributeValue
    complexity: AttributeValue
    maintenance: AttributeValue

    def get(self, attribute_type: AttributeType) -> AttributeValue:
        return getattr(self, attribute_type.value)


class OptionComparison(CamelModel):
    """A scored option that survived integration filtering."""
    id: str
    name: str
    description: str = ""
    attributes: OptionAttributes
    score: int = Field(..., ge=0, le=100)


class ComparisonResult(CamelModel):
    """Surviving options plus the attribute lookup matrix."""
    options: list[OptionComparison] = Field(default_factory=list)
    matrix: dict[AttributeType, dict[str, AttributeValue]] = Field(default_factory=dict)


class ExcludedOption(CamelModel):
    """An option dropped because it lacks required integrations."""
    option_id: str
    name: str
    missing_integrations: list[str] = Field(default_factory=list)


# =============================================================================
# Explanation Output
# =============================================================================


class OptionAnalysis(CamelModel):
    """Strengths, weaknesses and fit of one option."""
    id: str
    name: str
    strengths: list[str] = Field(default_factory=list)
    weaknesses: list[str] = Field(default_factory=list)
    fit_score: int
    fit_reason: str


class ConstraintImpact(CamelModel):
    """How one constraint shaped the comparison."""
    constraint: str
    impact: str


class TradeOffExplanation(CamelModel):
    summary: str
    option_analysis: list[OptionAnalysis] = Field(default_factory=list)
    constraint_impact: list[ConstraintImpact] = Field(default_factory=list)


class PivotResult(CamelModel):
    """Conditional recommendation: which option wins on which factor."""
    statement: str
    primary_factor: str
    secondary_factor: str
    option_a: str
    option_b: str


# =============================================================================
# AI Enhancement
# =============================================================================


class AIDetailedAnalysis(CamelModel):
    option_name: str
    pros: list[str] = Field(default_factory=list)
    cons: list[str] = Field(default_factory=list)
    best_for: str = ""


class AIComparisonResult(CamelModel):
    """Structured block returned by an external text generator."""
    summary: str = Field(..., min_length=1)
    recommendation: str = Field(..., min_length=1)
    decision_guidance: str = ""
    personalized_insights: Optional[list[str]] = None
    detailed_analysis: list[AIDetailedAnalysis]
    pivot_statement: str = ""
    confidence_score: float = Field(0, ge=0, le=100)


# =============================================================================
# Response
# =============================================================================


class CompareResponse(CamelModel):
    """Complete output of a comparison request."""
    comparison: ComparisonResult
    explanation: TradeOffExplanation
    pivot: PivotResult
    ai_enhanced: bool = False
    ai_analysis: Optional[AIComparisonResult] = None
    generated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
