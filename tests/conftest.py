import pytest

from shopcore.domain.model.cart import CartItem
from shopcore.domain.model.principal import Principal
from shopcore.domain.model.product import Product
from shopcore.domain.model.value_objects import Money, Quantity
from shopcore.infrastructure.bootstrap import Container, build_container
from shopcore.infrastructure.config import Settings
from tests.fakes import FakeShop, RecordingNotifier


@pytest.fixture
def alice() -> Principal:
    return Principal(user_id="u-alice", email="alice@example.com", name="Alice")


@pytest.fixture
def bob() -> Principal:
    return Principal(user_id="u-bob", email="bob@example.com", name="Bob")


@pytest.fixture
def admin() -> Principal:
    return Principal(user_id="u-admin", email="ops@example.com", name="Ops", is_admin=True)


@pytest.fixture
def shop() -> FakeShop:
    return FakeShop(
        products=[
            Product("p-widget", "Widget", Money.of("15.00"), stock=10),
            Product("p-gadget", "Gadget", Money.of("25.00"), stock=5),
            Product("p-last", "LastOne", Money.of("9.50"), stock=1),
        ],
        cart=[
            CartItem("u-alice", "p-widget", Quantity(1)),
            CartItem("u-bob", "p-gadget", Quantity(2)),
        ],
    )


@pytest.fixture
def notifier() -> RecordingNotifier:
    return RecordingNotifier()


@pytest.fixture
async def container(tmp_path, notifier) -> Container:
    settings = Settings(database_url=f"sqlite+aiosqlite:///{tmp_path / 'shop.db'}")
    c = build_container(settings, notifier=notifier)
    await c.database.create_all()

    async with c.unit_of_work() as uow:
        for product in (
            Product("p-widget", "Widget", Money.of("15.00"), stock=10),
            Product("p-gadget", "Gadget", Money.of("25.00"), stock=5),
            Product("p-last", "LastOne", Money.of("9.50"), stock=1),
        ):
            await uow.products.save(product)
        await uow.carts.replace("u-alice", [CartItem("u-alice", "p-widget", Quantity(2))])
        await uow.commit()

    yield c
    await c.aclose()

