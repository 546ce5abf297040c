"""Shared fixtures for the referee test suite."""

from pathlib import Path

import pytest

from referee.catalog import ReferenceCatalog
from referee.config import reset_config
from referee.schema import (
    Attribute,
    AttributeType,
    Constraints,
    IntegrationSupport,
    Integration,
    Option,
    Rating,
    ScalabilityPriority,
    Weight,
)

SAMPLE_CATALOG_PATH = Path(__file__).parent.parent / "data" / "sample-catalog.json"

OPTION_A = "opt-a"
OPTION_B = "opt-b"
UNMAPPED = "opt-unmapped"

S3 = "int-s3"
DOCKER = "int-docker"


def make_attributes(option_id: str, **ratings: str) -> list[Attribute]:
    """Attribute rows for an option, e.g. make_attributes("x", scalability="high")."""
    return [
        Attribute(
            option_id=option_id,
            attribute_type=AttributeType(attribute_type),
            value=f"{attribute_type} {rating}",
            rating=Rating(rating),
        )
        for attribute_type, rating in ratings.items()
    ]


def make_constraints(priority: str = "medium", integrations=None, budget=(0, 1000)) -> Constraints:
    return Constraints(
        budget_min=budget[0],
        budget_max=budget[1],
        scalability_priority=ScalabilityPriority(priority),
        required_integrations=list(integrations or []),
    )


@pytest.fixture(autouse=True)
def default_config():
    """Every test starts from the default configuration."""
    reset_config()
    yield
    reset_config()


@pytest.fixture
def seed_weights() -> list[Weight]:
    """Default weights, matching the sample catalog."""
    return [
        Weight(attribute_type=AttributeType.COST_MODEL, default_weight=0.30,
               low_modifier=1.2, medium_modifier=1.0, high_modifier=0.8),
        Weight(attribute_type=AttributeType.SCALABILITY, default_weight=0.25,
               low_modifier=0.6, medium_modifier=1.0, high_modifier=1.5),
        Weight(attribute_type=AttributeType.COMPLEXITY, default_weight=0.25,
               low_modifier=1.0, medium_modifier=1.0, high_modifier=0.9),
        Weight(attribute_type=AttributeType.MAINTENANCE, default_weight=0.20,
               low_modifier=1.1, medium_modifier=1.0, high_modifier=0.9),
    ]


@pytest.fixture
def options() -> list[Option]:
    return [
        Option(id=OPTION_A, name="Option A", description="Scales out", category="compute"),
        Option(id=OPTION_B, name="Option B", description="Cheap to run", category="compute"),
    ]


@pytest.fixture
def attributes() -> list[Attribute]:
    """A scales well but costs more; B is the reverse."""
    return (
        make_attributes(OPTION_A, cost_model="low", scalability="high",
                        complexity="medium", maintenance="medium")
        + make_attributes(OPTION_B, cost_model="high", scalability="low",
                          complexity="medium", maintenance="medium")
    )


@pytest.fixture
def catalog(options, attributes, seed_weights) -> ReferenceCatalog:
    """Two mapped options and one option with no integration rows."""
    return ReferenceCatalog(
        options=options + [Option(id=UNMAPPED, name="Unmapped", category="compute")],
        attributes=attributes + make_attributes(
            UNMAPPED, cost_model="medium", scalability="medium",
            complexity="medium", maintenance="medium",
        ),
        weights=seed_weights,
        integrations=[
            Integration(id=S3, name="S3", category="storage"),
            Integration(id=DOCKER, name="Docker", category="containerization"),
        ],
        option_integrations=[
            IntegrationSupport(option_id=OPTION_A, integration_id=S3),
            IntegrationSupport(option_id=OPTION_A, integration_id=DOCKER),
            IntegrationSupport(option_id=OPTION_B, integration_id=S3),
        ],
    )
