"""Weight Resolver - Phase 1 of the comparison pipeline.

Turns base attribute weights into effective weights for the user's
scalability priority, and picks the attributes that drive the pivot.
"""

from .schema import AttributeType, Constraints, Weight


class WeightResolver:
    """Resolves constraint-adjusted ("effective") attribute weights.

    Effective weight = default_weight x modifier for the scalability
    priority. Iteration order always follows the order of the input
    weights, so tie-breaks are deterministic.
    """

    # Returned when no attribute carries positive weight
    DEFAULT_PRIMARY = AttributeType.SCALABILITY

    # Starting candidate for the secondary attribute
    DEFAULT_SECONDARY = AttributeType.COST_MODEL

    def effective_weight(self, weight: Weight, constraints: Constraints) -> float:
        """Effective weight of a single weight row.

        A zero modifier is treated as unset and counts as 1.0.
        """
        modifier = weight.modifier_for(constraints.scalability_priority) or 1.0
        return weight.default_weight * modifier

    def resolve(
        self,
        weights: list[Weight],
        constraints: Constraints,
    ) -> dict[AttributeType, float]:
        """Map each attribute type to its effective weight, in input order."""
        effective: dict[AttributeType, float] = {}
        for weight in weights:
            effective[weight.attribute_type] = self.effective_weight(weight, constraints)
        return effective

    def primary_attribute(
        self,
        weights: list[Weight],
        constraints: Constraints,
    ) -> AttributeType:
        """Attribute type with the strictly highest effective weight.

        Ties go to the type seen first.
        """
        primary = self.DEFAULT_PRIMARY
        max_weight = 0.0
        for attribute_type, weight in self.resolve(weights, constraints).items():
            if weight > max_weight:
                max_weight = weight
                primary = attribute_type
        return primary

    def secondary_attribute(
        self,
        weights: list[Weight],
        constraints: Constraints,
    ) -> AttributeType:
        """Highest-weighted attribute type other than the primary one."""
        primary = self.primary_attribute(weights, constraints)
        secondary = self.DEFAULT_SECONDARY
        max_weight = 0.0
        for attribute_type, weight in self.resolve(weights, constraints).items():
            if attribute_type != primary and weight > max_weight:
                max_weight = weight
                secondary = attribute_type
        return secondary
