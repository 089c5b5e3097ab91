"""
Pytest Configuration and Shared Fixtures

Provides common test fixtures and configuration for the entire test suite.
"""

from decimal import Decimal
from pathlib import Path

import pytest

from cargo_intake.core import config as config_module
from cargo_intake.customers.models import Customer

# The end-to-end packing list: two rows for the same person, names spelled
# differently, same phone.
SCENARIO_PASTE = (
    "CJ\t10\tLee Hanna(SiemReap)\t150.0\t010-9999-8888\n"
    "용차\t5\tLee Han-na\t50.0\t010-9999-8888\n"
)


@pytest.fixture
def temp_dir(tmp_path: Path) -> Path:
    """Temporary directory for test files."""
    return tmp_path


@pytest.fixture
def lee_customer() -> Customer:
    """Active customer with a 10% discount, matching the scenario paste."""
    return Customer(
        id="cust-001",
        name="Rev. Lee Han-na (Siem Reap)",
        phone="010-9999-8888",
        region="Siem Reap",
        discount_percent=Decimal("10"),
        discount_info="선교사 missionary",
        pod_code=101,
        address="Street 63, Siem Reap",
    )


@pytest.fixture
def sample_customers(lee_customer: Customer) -> list[Customer]:
    """Small ledger with active, inactive and discounted customers."""
    return [
        lee_customer,
        Customer(id="cust-002", name="김철수", phone="010-1234-5678", region="Phnom Penh"),
        Customer(id="cust-003", name="Park Minsu", phone="010-2222-3333", discount_info="VIP"),
        Customer(id="cust-004", name="Choi Old", phone="010-4444-5555", is_active=False),
    ]


@pytest.fixture
def scenario_paste() -> str:
    return SCENARIO_PASTE


@pytest.fixture
def customers_csv(temp_dir: Path) -> Path:
    """Customer ledger CSV as exported from the spreadsheet."""
    path = temp_dir / "customers.csv"
    path.write_text(
        "id,name,phone,region,is_active,discount_percent,discount_info,pod_code\n"
        "cust-001,Rev. Lee Han-na (Siem Reap),010-9999-8888,Siem Reap,true,10,missionary,101\n"
        "cust-002,김철수,010-1234-5678,Phnom Penh,true,,,102\n"
        "cust-004,Choi Old,010-4444-5555,,false,,,104\n",
        encoding="utf-8",
    )
    return path


@pytest.fixture(autouse=True)
def setup_test_environment(monkeypatch, tmp_path):
    """Set up test environment variables."""
    # Ensure tests don't use real shipment data
    monkeypatch.setenv("CARGO_ENV", "test")
    monkeypatch.setenv("CARGO_DATA_DIR", str(tmp_path / "cargo_data"))

    for name in ("CARGO_UNIT_PRICE", "CARGO_PARSE_BATCH_SIZE", "CARGO_RULES_FILE", "CARGO_OPERATOR", "DEBUG"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("LOG_LEVEL", "INFO")

    # Drop any configuration cached by an earlier test
    monkeypatch.setattr(config_module, "_config", None)


# Test markers for categorizing tests
def pytest_configure(config):
    """Configure custom pytest markers."""
    config.addinivalue_line("markers", "unit: Unit tests for individual components")
    config.addinivalue_line("markers", "integration: Integration tests for complete workflows")
    config.addinivalue_line("markers", "currency: Tests for money handling and precision")
    config.addinivalue_line("markers", "parsing: Tests for packing list parsing")
    config.addinivalue_line("markers", "matching: Tests for customer matching")
    config.addinivalue_line("markers", "pricing: Tests for the pricing engine")
    config.addinivalue_line("markers", "staging: Tests for staging sessions and the shipment store")
