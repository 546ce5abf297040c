"""Tests for filtering options by required integrations."""

from referee.integration_filter import IntegrationFilter
from referee.schema import IntegrationSupport, Option

from conftest import DOCKER, OPTION_A, OPTION_B, S3, UNMAPPED, make_constraints


def _options():
    return [
        Option(id=OPTION_A, name="Option A"),
        Option(id=OPTION_B, name="Option B"),
        Option(id=UNMAPPED, name="Unmapped"),
    ]


SUPPORT = [
    IntegrationSupport(option_id=OPTION_A, integration_id=S3),
    IntegrationSupport(option_id=OPTION_A, integration_id=DOCKER, support_level="plugin"),
    IntegrationSupport(option_id=OPTION_B, integration_id=S3),
]


class TestIntegrationFilter:
    """Tests for IntegrationFilter.filter()."""

    def test_no_requirements_keeps_everything(self):
        retained, excluded = IntegrationFilter().filter(_options(), SUPPORT, make_constraints())

        assert [o.id for o in retained] == [OPTION_A, OPTION_B, UNMAPPED]
        assert excluded == []

    def test_option_missing_integration_is_excluded(self):
        retained, excluded = IntegrationFilter().filter(
            _options(), SUPPORT, make_constraints(integrations=[S3, DOCKER])
        )

        assert OPTION_B not in [o.id for o in retained]
        assert len(excluded) == 1
        assert excluded[0].option_id == OPTION_B
        assert excluded[0].missing_integrations == [DOCKER]

    def test_option_supporting_all_is_kept(self):
        retained, _ = IntegrationFilter().filter(
            _options(), SUPPORT, make_constraints(integrations=[S3, DOCKER])
        )

        assert OPTION_A in [o.id for o in retained]

    def test_unmapped_option_is_assumed_compatible(self):
        """An option with zero support rows must never be excluded by this rule."""
        retained, excluded = IntegrationFilter().filter(
            _options(), SUPPORT, make_constraints(integrations=[S3, DOCKER, "int-unknown"])
        )

        assert UNMAPPED in [o.id for o in retained]
        assert UNMAPPED not in [e.option_id for e in excluded]

    def test_unknown_integration_excludes_mapped_options(self):
        retained, excluded = IntegrationFilter().filter(
            _options(), SUPPORT, make_constraints(integrations=["int-unknown"])
        )

        assert [o.id for o in retained] == [UNMAPPED]
        assert {e.option_id for e in excluded} == {OPTION_A, OPTION_B}

    def test_support_level_does_not_matter(self):
        retained, _ = IntegrationFilter().filter(
            _options()[:1], SUPPORT, make_constraints(integrations=[DOCKER])
        )

        assert [o.id for o in retained] == [OPTION_A]

    def test_preserves_input_order(self):
        reversed_options = list(reversed(_options()))
        retained, _ = IntegrationFilter().filter(
            reversed_options, SUPPORT, make_constraints(integrations=[S3])
        )

        assert [o.id for o in retained] == [UNMAPPED, OPTION_B, OPTION_A]
