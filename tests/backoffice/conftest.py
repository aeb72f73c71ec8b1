import pytest

from backoffice.composition import build_backoffice
from shared.backend.fake_adapter import FakeBackend
from shared.status import StatusChannel


@pytest.fixture()
def backend(products, categories):
    return FakeBackend(products=products, categories=categories)


@pytest.fixture()
def status():
    return StatusChannel()


@pytest.fixture()
def office(backend, status):
    office = build_backoffice(backend, status)
    yield office
    office.inbox.close()
