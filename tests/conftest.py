import pytest

from nl2sql_guard.schema.registry import build_registry

REGISTRY_PAYLOAD = {
    "entities": [
        {
            "name": "customers",
            "table": "dim_customers",
            "dimensions": [
                {"name": "customer_name"},
                {"name": "country", "aliases": ["region"]},
                {"name": "Order Channel"},
            ],
            "time_dimensions": [{"name": "signup_date", "aliases": ["joined_on"]}],
            "measures": [{"name": "lifetime_value", "aliases": ["ltv"]}],
        },
        {
            "name": "products",
            "table": "dim_products",
            "dimensions": [{"name": "category"}, {"name": "product_name"}],
            "measures": [{"name": "unit_price"}],
            "metrics": [{"name": "avg_margin"}],
        },
    ]
}


@pytest.fixture
def registry_payload():
    return REGISTRY_PAYLOAD


@pytest.fixture
def registry():
    return build_registry(REGISTRY_PAYLOAD)
