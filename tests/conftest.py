import os

# Keep test runs from writing a log file into the working directory.
os.environ.setdefault("LOG_FILE", "")

import pytest
from fastapi.testclient import TestClient

from rewards_service import config
from rewards_service.cart import CartSession
from rewards_service.catalog import CatalogStore
from rewards_service.employees import EmployeeDirectory
from rewards_service.intake import OrderIntake
from rewards_service.ledger import OrderLedger
from rewards_service.main import create_app


@pytest.fixture()
def catalog():
    return CatalogStore.from_path(config.DEFAULT_CATALOG_PATH)


@pytest.fixture()
def amazon(catalog):
    return catalog.find_item("U163059")


@pytest.fixture()
def starbucks(catalog):
    return catalog.find_item("U761382")


@pytest.fixture()
def session():
    return CartSession()


@pytest.fixture()
def directory():
    return EmployeeDirectory()


@pytest.fixture()
def ledger():
    return OrderLedger()


@pytest.fixture()
def intake(ledger):
    return OrderIntake(ledger)


@pytest.fixture()
def client(ledger):
    app = create_app(ledger=ledger, catalog_path=config.DEFAULT_CATALOG_PATH)
    return TestClient(app)


@pytest.fixture()
def make_submission():
    return build_submission


def build_submission(**order_info):
    info = {
        "utid": "U163059",
        "amount": 50,
        "recipient": {"email": "sarah.johnson@kyronhr.com", "firstName": "Sarah", "lastName": "Johnson"},
        "senderFirstName": "Emily",
        "senderLastName": "Davis",
    }
    info.update(order_info)
    return {
        "customer_identifier": "kyron-hr-customer",
        "account_identifier": "kyron-hr-main-account",
        "order_info": info,
    }
