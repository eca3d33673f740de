import json

import pytest

from nl2sql_guard.policy import AllowedTablesPolicy, PolicyError
from nl2sql_guard.schema.registry import RegistryError, build_registry, load_registry


def test_indexes_are_precomputed(registry):
    customers = registry["customers"]

    assert customers.dim_index == {"customer_name", "country", "Order Channel"}
    assert customers.time_index == {"signup_date"}
    assert customers.measure_index == {"lifetime_value"}
    assert customers.reverse_alias_index == {
        "region": "country",
        "joined_on": "signup_date",
        "ltv": "lifetime_value",
    }


def test_metric_index_includes_measures_and_metrics(registry):
    assert registry["products"].metric_index == {"unit_price", "avg_margin"}


def test_known_identifiers_cover_names_tables_fields_and_aliases(registry):
    assert {
        "customers",
        "dim_customers",
        "country",
        "region",
        "signup_date",
        "lifetime_value",
        "dim_products",
    } <= registry.known_identifiers
    assert "order channel" in registry.known_identifiers_lower


def test_registry_is_a_read_only_mapping(registry):
    assert set(registry) == {"customers", "products"}
    assert len(registry) == 2
    assert registry.tables == {"dim_customers", "dim_products"}
    with pytest.raises(TypeError):
        registry["orders"] = registry["customers"]


def test_table_defaults_to_entity_name():
    registry = build_registry([{"name": "orders"}])

    assert registry["orders"].table == "orders"
    assert not registry.has_time_dimensions()


def test_conflicting_alias_is_rejected():
    payload = [
        {
            "name": "orders",
            "dimensions": [
                {"name": "status", "aliases": ["state"]},
                {"name": "ship_state", "aliases": ["state"]},
            ],
        }
    ]

    with pytest.raises(RegistryError, match="alias 'state'"):
        build_registry(payload)


def test_duplicate_entity_is_rejected():
    with pytest.raises(RegistryError, match="Duplicate entity"):
        build_registry([{"name": "orders"}, {"name": "orders"}])


@pytest.mark.parametrize(
    "payload",
    [
        {"entities": "orders"},
        [{"table": "orders"}],
        [{"name": "orders", "dimensions": {"name": "x"}}],
        [{"name": "orders", "measures": [{"aliases": ["x"]}]}],
        [{"name": "orders", "dimensions": [{"name": "x", "aliases": "y"}]}],
    ],
)
def test_invalid_payloads_raise_registry_error(payload):
    with pytest.raises(RegistryError):
        build_registry(payload)


def test_load_registry_round_trips_file(tmp_path, registry_payload):
    path = tmp_path / "registry.json"
    path.write_text(json.dumps(registry_payload), encoding="utf-8")

    loaded = load_registry(path)

    assert set(loaded) == {"customers", "products"}
    assert loaded.to_dict()["entities"][0]["name"] == "customers"


def test_load_registry_missing_file(tmp_path):
    with pytest.raises(RegistryError, match="does not exist"):
        load_registry(tmp_path / "missing.json")


def test_load_registry_invalid_json(tmp_path):
    path = tmp_path / "registry.json"
    path.write_text("{not json", encoding="utf-8")

    with pytest.raises(RegistryError, match="not valid JSON"):
        load_registry(path)


def test_allowed_tables_policy(registry):
    AllowedTablesPolicy()(registry)
    AllowedTablesPolicy.from_names(["dim_customers", "dim_products"])(registry)

    with pytest.raises(PolicyError, match="dim_products"):
        AllowedTablesPolicy.from_names(["dim_customers", " "])(registry)


def test_reverse_alias_index_is_read_only(registry):
    customers = registry["customers"]

    with pytest.raises(TypeError):
        customers.reverse_alias_index["zzz"] = "country"

    assert customers.canonical("zzz") is None
