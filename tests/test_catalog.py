"""Tests for loading and querying the reference catalog."""

import json

import pytest
import yaml

from referee.catalog import ReferenceCatalog, load_catalog
from referee.exceptions import CatalogError
from referee.schema import AttributeType, SupportLevel

from conftest import DOCKER, OPTION_A, OPTION_B, S3, SAMPLE_CATALOG_PATH, UNMAPPED

LAMBDA = "11111111-1111-1111-1111-111111111111"
EC2 = "22222222-2222-2222-2222-222222222222"
POSTGRES = "33333333-3333-3333-3333-333333333333"


def _minimal_catalog():
    return {
        "options": [{"id": "x", "name": "X"}],
        "attributes": [
            {"optionId": "x", "attributeType": "scalability", "value": "Elastic", "rating": "high"},
        ],
        "weights": [{"attributeType": "scalability", "defaultWeight": 0.5}],
        "integrations": [{"id": "i", "name": "I", "category": "storage"}],
        "optionIntegrations": [{"optionId": "x", "integrationId": "i"}],
    }


class TestLoadCatalog:

    def test_sample_catalog(self):
        catalog = load_catalog(SAMPLE_CATALOG_PATH)

        assert [o.name for o in catalog.options] == ["AWS Lambda", "AWS EC2", "PostgreSQL"]
        assert len(catalog.attributes) == 12
        assert len(catalog.weights) == 4
        assert catalog.option_integrations[0].support_level == SupportLevel.NATIVE

    def test_yaml_catalog(self, tmp_path):
        path = tmp_path / "catalog.yaml"
        path.write_text(yaml.safe_dump(_minimal_catalog()))

        catalog = load_catalog(path)

        assert catalog.options[0].name == "X"
        assert catalog.attributes[0].attribute_type == AttributeType.SCALABILITY
        # Modifiers default to 1.0
        assert catalog.weights[0].high_modifier == 1.0
        assert catalog.option_integrations[0].support_level == SupportLevel.NATIVE

    def test_missing_file(self, tmp_path):
        with pytest.raises(CatalogError) as exc_info:
            load_catalog(tmp_path / "nope.json")

        assert exc_info.value.code == "CATALOG_ERROR"

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "catalog.json"
        path.write_text("{not json")

        with pytest.raises(CatalogError, match="not valid"):
            load_catalog(path)

    def test_invalid_rating(self, tmp_path):
        data = _minimal_catalog()
        data["attributes"][0]["rating"] = "excellent"
        path = tmp_path / "catalog.json"
        path.write_text(json.dumps(data))

        with pytest.raises(CatalogError, match="schema validation"):
            load_catalog(path)

    def test_empty_file_is_empty_catalog(self, tmp_path):
        path = tmp_path / "catalog.yaml"
        path.write_text("")

        catalog = load_catalog(path)

        assert catalog.options == []


class TestConsistency:

    def test_duplicate_option(self):
        data = _minimal_catalog()
        data["options"].append({"id": "x", "name": "Again"})

        with pytest.raises(ValueError, match="Duplicate option id"):
            ReferenceCatalog.model_validate(data)

    def test_duplicate_attribute(self):
        data = _minimal_catalog()
        data["attributes"].append(dict(data["attributes"][0], rating="low"))

        with pytest.raises(ValueError, match="Duplicate scalability attribute"):
            ReferenceCatalog.model_validate(data)

    def test_attribute_for_unknown_option(self):
        data = _minimal_catalog()
        data["attributes"][0]["optionId"] = "ghost"

        with pytest.raises(ValueError, match="unknown option"):
            ReferenceCatalog.model_validate(data)

    def test_duplicate_weight(self):
        data = _minimal_catalog()
        data["weights"].append({"attributeType": "scalability", "defaultWeight": 0.1})

        with pytest.raises(ValueError, match="Duplicate weight"):
            ReferenceCatalog.model_validate(data)

    def test_support_for_unknown_option(self):
        data = _minimal_catalog()
        data["optionIntegrations"][0]["optionId"] = "ghost"

        with pytest.raises(ValueError, match="unknown option"):
            ReferenceCatalog.model_validate(data)

    def test_support_for_unknown_integration(self):
        data = _minimal_catalog()
        data["optionIntegrations"][0]["integrationId"] = "ghost"

        with pytest.raises(ValueError, match="unknown integration"):
            ReferenceCatalog.model_validate(data)

    def test_duplicate_support_row(self):
        data = _minimal_catalog()
        data["optionIntegrations"].append({"optionId": "x", "integrationId": "i", "supportLevel": "plugin"})

        with pytest.raises(ValueError, match="Duplicate support row"):
            ReferenceCatalog.model_validate(data)

    def test_duplicate_integration(self):
        data = _minimal_catalog()
        data["integrations"].append({"id": "i", "name": "Again"})

        with pytest.raises(ValueError, match="Duplicate integration id"):
            ReferenceCatalog.model_validate(data)

    def test_negative_weight(self):
        data = _minimal_catalog()
        data["weights"][0]["defaultWeight"] = -0.1

        with pytest.raises(ValueError):
            ReferenceCatalog.model_validate(data)


class TestQueries:

    def test_get_options_by_ids_keeps_order(self):
        catalog = load_catalog(SAMPLE_CATALOG_PATH)

        options = catalog.get_options_by_ids([POSTGRES, "missing", LAMBDA])

        assert [o.id for o in options] == [POSTGRES, LAMBDA]

    def test_get_option(self, catalog):
        assert catalog.get_option(OPTION_A).name == "Option A"
        assert catalog.get_option("missing") is None

    def test_attributes_and_support_for(self, catalog):
        attrs = catalog.get_attributes_for([OPTION_B])
        support = catalog.get_integration_support_for([OPTION_A, UNMAPPED])

        assert {a.option_id for a in attrs} == {OPTION_B}
        assert len(attrs) == 4
        assert {r.option_id for r in support} == {OPTION_A}

    def test_supported_integrations_without_ids(self, catalog):
        assert [i.id for i in catalog.supported_integrations()] == [S3, DOCKER]
        assert [i.id for i in catalog.supported_integrations([])] == [S3, DOCKER]

    def test_supported_integrations_shared_by_all(self, catalog):
        assert [i.id for i in catalog.supported_integrations([OPTION_A])] == [S3, DOCKER]
        assert [i.id for i in catalog.supported_integrations([OPTION_A, OPTION_B])] == [S3]

    def test_supported_integrations_ignore_repeated_ids(self, catalog):
        assert [i.id for i in catalog.supported_integrations([OPTION_B, OPTION_B])] == [S3]

    def test_unmapped_option_supports_nothing(self, catalog):
        assert catalog.supported_integrations([OPTION_A, UNMAPPED]) == []

    def test_integration_counts_for_selection(self, catalog):
        counts = catalog.integration_counts([OPTION_B])

        assert counts == {S3: 1, DOCKER: 0}

    def test_integration_counts(self):
        catalog = load_catalog(SAMPLE_CATALOG_PATH)

        assert set(catalog.integration_counts().values()) == {3}

    def test_integration_counts_include_unsupported(self, catalog):
        counts = catalog.integration_counts()

        assert counts[S3] == 2
        assert counts[DOCKER] == 1

    def test_round_trip_uses_camel_case(self):
        catalog = load_catalog(SAMPLE_CATALOG_PATH)

        data = catalog.model_dump(by_alias=True, mode="json")

        assert "optionIntegrations" in data
        assert data["attributes"][0]["attributeType"] == "cost_model"
        assert ReferenceCatalog.model_validate(data) == catalog
        assert len(catalog.get_attributes_for([EC2])) == 4
