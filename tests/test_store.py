"""SQL store tests against a temporary SQLite file."""

import pytest
import pytest_asyncio
from sqlalchemy import update

from src.core.conversation.states import ConversationState
from src.core.orders import OrderItem, OrderStatus
from src.db.models import Customer, OrderRecord
from src.db.sqlite import Database
from src.db.store import SqlStore


@pytest_asyncio.fixture
async def database(tmp_path):
    database = Database(url=f"sqlite+aiosqlite:///{tmp_path / 'test.db'}", echo=False)
    await database.init()
    yield database
    await database.close()


@pytest.fixture
def sql_store(database) -> SqlStore:
    return SqlStore(database)


class TestProfiles:
    @pytest.mark.asyncio
    async def test_get_or_create(self, sql_store) -> None:
        first = await sql_store.get_or_create_profile("100")
        second = await sql_store.get_or_create_profile("100")

        assert first.phone_id == second.phone_id == "100"
        assert first.state == ConversationState.DEFAULT
        assert first.name is None

    @pytest.mark.asyncio
    async def test_missing_state_is_backfilled(self, sql_store, database) -> None:
        await sql_store.get_or_create_profile("100")
        async with database.session() as session:
            await session.execute(update(Customer).where(Customer.phone_id == "100").values(state=None))

        profile = await sql_store.get_or_create_profile("100")

        assert profile.state == ConversationState.DEFAULT
        async with database.session() as session:
            customer = await sql_store._get_customer(session, "100")
            assert customer.state == "default"

    @pytest.mark.asyncio
    async def test_set_state_and_fields(self, sql_store) -> None:
        await sql_store.get_or_create_profile("100")
        await sql_store.set_state("100", ConversationState.AWAITING_ADDRESS)
        await sql_store.update_fields("100", name="Alice", address="123 Main St")

        profile = await sql_store.get_or_create_profile("100")

        assert profile.state == ConversationState.AWAITING_ADDRESS
        assert profile.name == "Alice"
        assert profile.address == "123 Main St"

    @pytest.mark.asyncio
    async def test_unknown_field_rejected(self, sql_store) -> None:
        with pytest.raises(ValueError):
            await sql_store.update_fields("100", state="default")


class TestCart:
    @pytest.mark.asyncio
    async def test_same_sku_accumulates(self, sql_store) -> None:
        await sql_store.add_cart_item("100", "GRC-RICE-5KG", 2)
        item = await sql_store.add_cart_item("100", "GRC-RICE-5KG", 3)

        cart = await sql_store.list_cart("100")

        assert item.quantity == 5
        assert [(i.sku, i.quantity) for i in cart] == [("GRC-RICE-5KG", 5)]

    @pytest.mark.asyncio
    async def test_carts_are_per_user(self, sql_store) -> None:
        await sql_store.add_cart_item("100", "GRC-OIL-1L", 1)
        await sql_store.add_cart_item("200", "GRC-OIL-1L", 4)

        await sql_store.clear_cart("100")

        assert await sql_store.list_cart("100") == []
        assert [i.quantity for i in await sql_store.list_cart("200")] == [4]

    @pytest.mark.asyncio
    async def test_non_positive_quantity_rejected(self, sql_store) -> None:
        with pytest.raises(ValueError):
            await sql_store.add_cart_item("100", "GRC-OIL-1L", 0)


class TestOrders:
    @pytest.mark.asyncio
    async def test_create_and_get(self, sql_store) -> None:
        order_id = await sql_store.create_order(
            "100", "Alice", "123 Main St", [OrderItem("GRC-RICE-5KG", 2)]
        )

        order = await sql_store.get_order(order_id)

        assert order_id.startswith("ORD-")
        assert order.customer_name == "Alice"
        assert order.address == "123 Main St"
        assert order.items == (OrderItem("GRC-RICE-5KG", 2),)
        assert order.status == OrderStatus.PROCESSING

    @pytest.mark.asyncio
    async def test_snapshot_is_independent_of_cart(self, sql_store) -> None:
        await sql_store.add_cart_item("100", "GRC-TEA-250G", 1)
        cart = await sql_store.list_cart("100")
        order_id = await sql_store.create_order(
            "100", "Bob", "1 Elm Rd", [OrderItem(i.sku, i.quantity) for i in cart]
        )

        await sql_store.add_cart_item("100", "GRC-TEA-250G", 9)
        await sql_store.clear_cart("100")

        order = await sql_store.get_order(order_id)
        assert order.items == (OrderItem("GRC-TEA-250G", 1),)

    @pytest.mark.asyncio
    async def test_unknown_order(self, sql_store) -> None:
        assert await sql_store.get_order("ORD-000000") is None

    @pytest.mark.asyncio
    async def test_update_status(self, sql_store) -> None:
        order_id = await sql_store.create_order("100", "Alice", "x", [])

        assert await sql_store.update_order_status(order_id, OrderStatus.SHIPPED) is True
        assert (await sql_store.get_order(order_id)).status == OrderStatus.SHIPPED
        assert await sql_store.update_order_status("ORD-000000", OrderStatus.SHIPPED) is False

    @pytest.mark.asyncio
    async def test_order_id_collision_retries(self, sql_store, monkeypatch) -> None:
        ids = iter(["ORD-111111", "ORD-111111", "ORD-222222"])
        monkeypatch.setattr("src.db.store.generate_order_id", lambda: next(ids))

        first = await sql_store.create_order("100", "A", "x", [])
        second = await sql_store.create_order("200", "B", "y", [])

        assert (first, second) == ("ORD-111111", "ORD-222222")

    @pytest.mark.asyncio
    async def test_status_written_by_fulfillment_is_kept_raw(self, sql_store, database) -> None:
        order_id = await sql_store.create_order("100", "Alice", "x", [])
        async with database.session() as session:
            await session.execute(
                update(OrderRecord).where(OrderRecord.order_id == order_id).values(status="Out for delivery")
            )

        order = await sql_store.get_order(order_id)

        assert order.status == "Out for delivery"
        assert order.status_label == "Out for delivery"
