"""Reference catalog of options, attributes, weights and integrations.

The catalog is a single JSON or YAML file holding every reference row the
comparison pipeline reads. It is validated on load so the pipeline can rely
on its uniqueness invariants.
"""

import json
import logging
from pathlib import Path
from typing import Optional, Union

import yaml
from pydantic import Field, ValidationError, model_validator

from .exceptions import CatalogError
from .schema import (
    Attribute,
    CamelModel,
    Integration,
    IntegrationSupport,
    Option,
    Weight,
)

logger = logging.getLogger(__name__)


class ReferenceCatalog(CamelModel):
    """All reference data needed to run comparisons."""
    version: str = "1.0.0"
    options: list[Option] = Field(default_factory=list)
    attributes: list[Attribute] = Field(default_factory=list)
    weights: list[Weight] = Field(default_factory=list)
    integrations: list[Integration] = Field(default_factory=list)
    option_integrations: list[IntegrationSupport] = Field(default_factory=list)

    @model_validator(mode="after")
    def check_consistency(self) -> "ReferenceCatalog":
        option_ids = set()
        for option in self.options:
            if option.id in option_ids:
                raise ValueError(f"Duplicate option id: {option.id}")
            option_ids.add(option.id)

        seen_attributes = set()
        for attr in self.attributes:
            if attr.option_id not in option_ids:
                raise ValueError(f"Attribute references unknown option: {attr.option_id}")
            key = (attr.option_id, attr.attribute_type)
            if key in seen_attributes:
                raise ValueError(
                    f"Duplicate {attr.attribute_type.value} attribute for option {attr.option_id}"
                )
            seen_attributes.add(key)

        seen_weights = set()
        for weight in self.weights:
            if weight.attribute_type in seen_weights:
                raise ValueError(f"Duplicate weight for {weight.attribute_type.value}")
            seen_weights.add(weight.attribute_type)

        integration_ids = set()
        for integration in self.integrations:
            if integration.id in integration_ids:
                raise ValueError(f"Duplicate integration id: {integration.id}")
            integration_ids.add(integration.id)

        seen_support = set()
        for row in self.option_integrations:
            if row.option_id not in option_ids:
                raise ValueError(f"Integration support references unknown option: {row.option_id}")
            if row.integration_id not in integration_ids:
                raise ValueError(
                    f"Integration support references unknown integration: {row.integration_id}"
                )
            key = (row.option_id, row.integration_id)
            if key in seen_support:
                raise ValueError(
                    f"Duplicate support row for option {row.option_id} "
                    f"and integration {row.integration_id}"
                )
            seen_support.add(key)

        return self

    def get_option(self, option_id: str) -> Optional[Option]:
        for option in self.options:
            if option.id == option_id:
                return option
        return None

    def get_options_by_ids(self, option_ids: list[str]) -> list[Option]:
        """Options in the order requested; unknown ids are skipped."""
        options = []
        for option_id in option_ids:
            option = self.get_option(option_id)
            if option is not None:
                options.append(option)
        return options

    def get_attributes_for(self, option_ids: list[str]) -> list[Attribute]:
        wanted = set(option_ids)
        return [a for a in self.attributes if a.option_id in wanted]

    def get_integration_support_for(self, option_ids: list[str]) -> list[IntegrationSupport]:
        wanted = set(option_ids)
        return [r for r in self.option_integrations if r.option_id in wanted]

    def integration_counts(self, option_ids: Optional[list[str]] = None) -> dict[str, int]:
        """Number of options supporting each integration.

        Only support rows of ``option_ids`` are counted when given.
        """
        wanted = set(option_ids) if option_ids is not None else None
        counts = {integration.id: 0 for integration in self.integrations}
        for row in self.option_integrations:
            if wanted is None or row.option_id in wanted:
                counts[row.integration_id] += 1
        return counts

    def supported_integrations(self, option_ids: Optional[list[str]] = None) -> list[Integration]:
        """Integrations supported by every one of ``option_ids``.

        This is the list required integrations are picked from. With no
        ids, every integration is returned. Catalog order is kept.
        """
        wanted = list(dict.fromkeys(option_ids or []))
        if not wanted:
            return list(self.integrations)

        counts = self.integration_counts(wanted)
        return [i for i in self.integrations if counts[i.id] >= len(wanted)]


def load_catalog(path: Union[str, Path]) -> ReferenceCatalog:
    """Load and validate a reference catalog.

    Args:
        path: Path to a .json, .yaml or .yml catalog file.

    Returns:
        The validated ReferenceCatalog.

    Raises:
        CatalogError: If the file cannot be read, parsed or validated.
    """
    path = Path(path)
    try:
        with open(path, 'r', encoding='utf-8') as f:
            if path.suffix.lower() in (".yaml", ".yml"):
                data = yaml.safe_load(f)
            else:
                data = json.load(f)
    except OSError as exc:
        raise CatalogError(f"Could not read catalog {path}: {exc}") from exc
    except (json.JSONDecodeError, yaml.YAMLError) as exc:
        raise CatalogError(f"Catalog {path} is not valid: {exc}") from exc

    try:
        catalog = ReferenceCatalog.model_validate(data or {})
    except ValidationError as exc:
        raise CatalogError(f"Catalog {path} failed schema validation: {exc}") from exc

    logger.info(
        "Loaded catalog %s: %d options, %d weights, %d integrations",
        path, len(catalog.options), len(catalog.weights), len(catalog.integrations),
    )
    return catalog
