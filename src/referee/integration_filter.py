"""Integration Filter - Phase 2a of the comparison pipeline.

Drops options that do not support every required integration.
Returns the retained options and records why the others were excluded.
"""

from .schema import (
    Constraints,
    ExcludedOption,
    IntegrationSupport,
    Option,
)


class IntegrationFilter:
    """Filters options by required integrations.

    Key rule: an option with no integration support rows at all has not
    been mapped yet and is assumed compatible. It is never excluded.
    The support level of a row does not matter, only its presence.
    """

    def filter(
        self,
        options: list[Option],
        integration_support: list[IntegrationSupport],
        constraints: Constraints,
    ) -> tuple[list[Option], list[ExcludedOption]]:
        """Filter options based on required integrations.

        Args:
            options: Candidate options
            integration_support: Support rows for (at least) these options
            constraints: User constraints holding the required integration ids

        Returns:
            Tuple of (retained_options, excluded_options)
        """
        required = constraints.required_integrations
        if not required:
            return list(options), []

        supported: dict[str, set[str]] = {}
        for row in integration_support:
            supported.setdefault(row.option_id, set()).add(row.integration_id)

        retained = []
        excluded = []

        for option in options:
            missing = self._missing_integrations(supported.get(option.id, set()), required)
            if missing:
                excluded.append(ExcludedOption(
                    option_id=option.id,
                    name=option.name,
                    missing_integrations=missing,
                ))
            else:
                retained.append(option)

        return retained, excluded

    def _missing_integrations(
        self, supported_ids: set[str], required: list[str]
    ) -> list[str]:
        """Required ids the option lacks (empty if it is unmapped)."""
        if not supported_ids:
            return []
        return [integration_id for integration_id in required if integration_id not in supported_ids]
