import pytest
from protean.integrations.pytest import DomainFixture

from shared.backend.fake_adapter import FakeBackend
from shared.config import PaymentInstructions, StoreSettings
from shared.scheduler import ManualScheduler
from shared.status import StatusChannel
from storefront.cart.storage import InMemoryCartStorage


@pytest.fixture(scope="session")
def storefront_bed():
    from storefront.domain import storefront

    bed = DomainFixture(storefront)
    bed.setup()
    yield bed
    bed.teardown()


@pytest.fixture(autouse=True)
def _ctx(storefront_bed):
    with storefront_bed.domain_context():
        yield


@pytest.fixture()
def backend(products, categories):
    return FakeBackend(products=products, categories=categories)


@pytest.fixture()
def storage():
    return InMemoryCartStorage()


@pytest.fixture()
def status():
    return StatusChannel()


@pytest.fixture()
def scheduler():
    return ManualScheduler()


@pytest.fixture()
def settings(tmp_path):
    return StoreSettings(
        cart_file=tmp_path / "cart.json",
        handoff_delay=1.0,
        payment=PaymentInstructions(momo_number="0240000000", momo_name="Outlet Store"),
    )


@pytest.fixture()
def cart_store(storage):
    from storefront.cart.store import CartStore

    return CartStore(storage)


@pytest.fixture()
def shop(settings, backend, storage, scheduler, status):
    """Fully wired storefront running against fakes."""
    from storefront.composition import build_storefront

    return build_storefront(settings=settings, backend=backend, storage=storage, scheduler=scheduler, status=status)
