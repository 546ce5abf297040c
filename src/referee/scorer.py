"""Scorer - Phase 2b of the comparison pipeline.

Scores options against effective weights and builds the attribute matrix.
Produces a 0-100 fit score per option.
"""

import logging
import math
from types import MappingProxyType
from typing import Optional

from .integration_filter import IntegrationFilter
from .schema import (
    ATTRIBUTE_TYPES,
    Attribute,
    AttributeType,
    AttributeValue,
    ComparisonResult,
    Constraints,
    IntegrationSupport,
    Option,
    OptionAttributes,
    OptionComparison,
    Rating,
    Weight,
)
from .weight_resolver import WeightResolver

logger = logging.getLogger(__name__)

# Numeric score per rating
RATING_SCORES = MappingProxyType({
    Rating.LOW: 1,
    Rating.MEDIUM: 2,
    Rating.HIGH: 3,
})

MAX_RATING_SCORE = 3

ATTRIBUTE_ICONS = MappingProxyType({
    AttributeType.COST_MODEL: "💰",
    AttributeType.SCALABILITY: "📈",
    AttributeType.COMPLEXITY: "⚙️",
    AttributeType.MAINTENANCE: "🔧",
})

# Shown in an option's display record when seed data lacks the attribute
PLACEHOLDER_VALUE = "N/A"
PLACEHOLDER_ICON = "❓"


class ComparisonScorer:
    """Scores options and assembles the comparison result.

    Scoring principles:
    - Only options supporting all required integrations are scored
    - Missing data degrades (skip, placeholder, omission), never raises
    - A perfect "high" on every weighted attribute scores 100
    """

    def __init__(
        self,
        resolver: Optional[WeightResolver] = None,
        integration_filter: Optional[IntegrationFilter] = None,
    ):
        self.resolver = resolver or WeightResolver()
        self.integration_filter = integration_filter or IntegrationFilter()

    def compare(
        self,
        options: list[Option],
        attributes: list[Attribute],
        weights: list[Weight],
        integration_support: list[IntegrationSupport],
        constraints: Constraints,
    ) -> ComparisonResult:
        """Filter, score and tabulate options.

        Args:
            options: Options to compare
            attributes: Attribute rows for (at least) these options
            weights: One weight row per attribute type
            integration_support: Integration support rows for these options
            constraints: User constraints

        Returns:
            ComparisonResult with the surviving options in input order.
            Fewer than two options means the comparison cannot proceed.
        """
        retained, excluded = self.integration_filter.filter(
            options, integration_support, constraints
        )
        for ex in excluded:
            logger.debug(
                "Excluded option %s: missing integrations %s",
                ex.option_id, ", ".join(ex.missing_integrations),
            )

        effective_weights = self.resolver.resolve(weights, constraints)
        by_option = self._index_attributes(attributes)

        comparisons = []
        for option in retained:
            option_attrs = by_option.get(option.id, {})
            comparison = OptionComparison(
                id=option.id,
                name=option.name,
                description=option.description,
                attributes=self._display_attributes(option_attrs),
                score=self.score_option(option_attrs, effective_weights),
            )
            logger.debug("Scored option %s: %d", option.id, comparison.score)
            comparisons.append(comparison)

        return ComparisonResult(
            options=comparisons,
            matrix=self._build_matrix(retained, by_option),
        )

    def score_option(
        self,
        option_attrs: dict[AttributeType, Attribute],
        effective_weights: dict[AttributeType, float],
    ) -> int:
        """Weighted, normalized score of one option.

        Attribute types lacking either an attribute row or a weight are
        skipped entirely rather than defaulted.
        """
        weighted_sum = 0.0
        total_weight = 0.0

        for attribute_type in ATTRIBUTE_TYPES:
            attr = option_attrs.get(attribute_type)
            weight = effective_weights.get(attribute_type)
            if attr is None or weight is None:
                continue
            weighted_sum += RATING_SCORES[attr.rating] * weight
            total_weight += weight

        if total_weight == 0:
            return 0

        normalized = (weighted_sum / (total_weight * MAX_RATING_SCORE)) * 100
        # Round half up
        return max(0, min(100, math.floor(normalized + 0.5)))

    def _index_attributes(
        self, attributes: list[Attribute]
    ) -> dict[str, dict[AttributeType, Attribute]]:
        """Group attribute rows by option, first row per type wins."""
        index: dict[str, dict[AttributeType, Attribute]] = {}
        for attr in attributes:
            index.setdefault(attr.option_id, {}).setdefault(attr.attribute_type, attr)
        return index

    def _display_attributes(
        self, option_attrs: dict[AttributeType, Attribute]
    ) -> OptionAttributes:
        values = {}
        for attribute_type in ATTRIBUTE_TYPES:
            attr = option_attrs.get(attribute_type)
            if attr is not None:
                values[attribute_type.value] = to_attribute_value(attr)
            else:
                values[attribute_type.value] = AttributeValue(
                    value=PLACEHOLDER_VALUE,
                    rating=Rating.MEDIUM,
                    icon=PLACEHOLDER_ICON,
                )
        return OptionAttributes(**values)

    def _build_matrix(
        self,
        options: list[Option],
        by_option: dict[str, dict[AttributeType, Attribute]],
    ) -> dict[AttributeType, dict[str, AttributeValue]]:
        """Attribute type -> option id -> value. Absent pairs are omitted."""
        matrix: dict[AttributeType, dict[str, AttributeValue]] = {}
        for attribute_type in ATTRIBUTE_TYPES:
            row = {}
            for option in options:
                attr = by_option.get(option.id, {}).get(attribute_type)
                if attr is not None:
                    row[option.id] = to_attribute_value(attr)
            matrix[attribute_type] = row
        return matrix


def to_attribute_value(attr: Attribute) -> AttributeValue:
    """Display form of an attribute row."""
    return AttributeValue(
        value=attr.value,
        rating=attr.rating,
        icon=ATTRIBUTE_ICONS[attr.attribute_type],
    )
