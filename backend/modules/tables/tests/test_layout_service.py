from datetime import datetime

import pytest

from core.exceptions import (
    ConflictError, LayoutOverflowError, NotFoundError, ValidationError
)
from modules.orders.enums.order_enums import OrderStatus
from modules.orders.models.order_models import Order
from modules.tables.models.table_models import Table, TableConfig, TableStatus
from modules.tables.schemas.table_schemas import (
    FloorTableCount, LayoutRequest, TableConfigBase, TableConfigUpdate,
    TableCreate
)
from modules.tables.services.geometry import (
    FloorBounds, Rect, find_overlaps, validate_placement
)
from modules.tables.services.layout_service import layout_service
from tests.factories import (
    FloorPlanFactory, OrderFactory, RestaurantFactory, TableConfigFactory
)


def layout_request(restaurant_id, counts, mode="automatic", starting_number=1):
    return LayoutRequest(
        restaurant_id=restaurant_id,
        floors=[FloorTableCount(floor_plan_id=fid, table_count=count)
                for fid, count in counts.items()],
        mode=mode,
        starting_number=starting_number,
    )


def tables_on(db_session, floor_plan_id):
    return db_session.query(Table).join(TableConfig).filter(
        TableConfig.floor_plan_id == floor_plan_id
    ).order_by(Table.table_number).all()


@pytest.fixture
def restaurant(db_session):
    return RestaurantFactory()


@pytest.fixture
def floor_plan(restaurant):
    return FloorPlanFactory(restaurant_id=restaurant.id, floor_number=1,
                            width=20, height=15)


class TestConfigureTables:

    @pytest.mark.asyncio
    async def test_full_setup_scenario(self, db_session, restaurant,
                                       floor_plan):
        result = await layout_service.configure_tables(
            db_session, layout_request(restaurant.id, {floor_plan.id: 8})
        )

        assert result.persisted is True
        assert result.total_tables == 8
        tables = tables_on(db_session, floor_plan.id)
        assert [t.table_number for t in tables] == list(range(1, 9))
        assert all(t.status == TableStatus.AVAILABLE for t in tables)
        assert tables[0].qr_code_url == "/table/1/1"
        assert tables[7].qr_code_url == "/table/1/8"

        floor = FloorBounds(20, 15)
        rects = [Rect(t.config.x_position, t.config.y_position,
                      t.config.width, t.config.height) for t in tables]
        assert all(validate_placement(r, floor) == [] for r in rects)
        assert find_overlaps(rects) == []

        db_session.refresh(restaurant)
        assert restaurant.is_configured is True

    @pytest.mark.asyncio
    async def test_preview_matches_configure_and_writes_nothing(
            self, db_session, restaurant, floor_plan):
        request = layout_request(restaurant.id, {floor_plan.id: 5})

        preview = await layout_service.preview_layout(db_session, request)
        assert preview.persisted is False
        assert db_session.query(Table).count() == 0

        configured = await layout_service.configure_tables(db_session, request)
        preview_tables = preview.floors[0].tables
        configured_tables = configured.floors[0].tables
        assert [(t.table_number, t.table_config) for t in preview_tables] == \
            [(t.table_number, t.table_config) for t in configured_tables]
        assert all(t.id is None for t in preview_tables)
        assert all(t.id is not None for t in configured_tables)

    @pytest.mark.asyncio
    async def test_numbers_continue_across_floors(self, db_session,
                                                  restaurant):
        upper = FloorPlanFactory(restaurant_id=restaurant.id, floor_number=2)
        ground = FloorPlanFactory(restaurant_id=restaurant.id, floor_number=1)

        await layout_service.configure_tables(
            db_session,
            layout_request(restaurant.id, {upper.id: 2, ground.id: 3},
                           starting_number=101)
        )

        assert [t.table_number for t in tables_on(db_session, ground.id)] == \
            [101, 102, 103]
        upper_tables = tables_on(db_session, upper.id)
        assert [t.table_number for t in upper_tables] == [104, 105]
        assert upper_tables[0].qr_code_url == "/table/2/104"

    @pytest.mark.asyncio
    async def test_overflow_rejected_before_any_write(self, db_session,
                                                      restaurant, floor_plan):
        small = FloorPlanFactory(restaurant_id=restaurant.id, floor_number=2,
                                 width=8, height=8)

        with pytest.raises(LayoutOverflowError) as exc_info:
            await layout_service.configure_tables(
                db_session,
                layout_request(restaurant.id, {floor_plan.id: 4, small.id: 6})
            )

        assert exc_info.value.floor_plan_id == small.id
        assert db_session.query(Table).count() == 0

    @pytest.mark.asyncio
    async def test_count_above_limit_rejected(self, db_session, restaurant,
                                              floor_plan):
        with pytest.raises(ValidationError):
            await layout_service.configure_tables(
                db_session, layout_request(restaurant.id, {floor_plan.id: 51})
            )
        assert db_session.query(Table).count() == 0

    @pytest.mark.asyncio
    async def test_unknown_floor_plan(self, db_session, restaurant):
        with pytest.raises(NotFoundError):
            await layout_service.configure_tables(
                db_session, layout_request(restaurant.id, {9999: 2})
            )

    @pytest.mark.asyncio
    async def test_floor_of_another_restaurant_not_found(self, db_session,
                                                         restaurant):
        foreign = FloorPlanFactory()
        with pytest.raises(NotFoundError):
            await layout_service.configure_tables(
                db_session, layout_request(restaurant.id, {foreign.id: 2})
            )

    @pytest.mark.asyncio
    async def test_regeneration_replaces_floor_tables(self, db_session,
                                                      restaurant, floor_plan):
        await layout_service.configure_tables(
            db_session, layout_request(restaurant.id, {floor_plan.id: 6})
        )
        await layout_service.configure_tables(
            db_session, layout_request(restaurant.id, {floor_plan.id: 2})
        )

        assert [t.table_number for t in tables_on(db_session, floor_plan.id)] \
            == [1, 2]
        assert db_session.query(TableConfig).count() == 2

    @pytest.mark.asyncio
    async def test_preserve_mode_keeps_existing_numbers(
            self, db_session, restaurant, floor_plan):
        second = FloorPlanFactory(restaurant_id=restaurant.id, floor_number=2)
        await layout_service.configure_tables(
            db_session, layout_request(restaurant.id, {floor_plan.id: 3},
                                       starting_number=20)
        )

        await layout_service.configure_tables(
            db_session,
            layout_request(restaurant.id, {floor_plan.id: 3, second.id: 2},
                           mode="preserve")
        )

        assert [t.table_number for t in tables_on(db_session, floor_plan.id)] \
            == [20, 21, 22]
        assert [t.table_number for t in tables_on(db_session, second.id)] == \
            [23, 24]

    @pytest.mark.asyncio
    async def test_clash_with_untouched_floor_rejected(self, db_session,
                                                       restaurant, floor_plan):
        second = FloorPlanFactory(restaurant_id=restaurant.id, floor_number=2)
        await layout_service.configure_tables(
            db_session, layout_request(restaurant.id, {floor_plan.id: 3})
        )

        with pytest.raises(ValidationError) as exc_info:
            await layout_service.configure_tables(
                db_session, layout_request(restaurant.id, {second.id: 2})
            )
        assert "Table 1 already exists" in exc_info.value.violations
        assert tables_on(db_session, second.id) == []

    @pytest.mark.asyncio
    async def test_floor_with_active_order_is_not_regenerated(
            self, db_session, restaurant, floor_plan):
        await layout_service.configure_tables(
            db_session, layout_request(restaurant.id, {floor_plan.id: 2})
        )
        table = tables_on(db_session, floor_plan.id)[0]
        order = OrderFactory(table=table, status=OrderStatus.SERVED.value)

        with pytest.raises(ConflictError) as exc_info:
            await layout_service.configure_tables(
                db_session, layout_request(restaurant.id, {floor_plan.id: 4})
            )

        assert exc_info.value.context["existing_order_id"] == order.id
        assert len(tables_on(db_session, floor_plan.id)) == 2

    @pytest.mark.asyncio
    async def test_busy_floor_blocks_request_before_any_write(
            self, db_session, restaurant, floor_plan):
        second = FloorPlanFactory(restaurant_id=restaurant.id, floor_number=2)
        await layout_service.configure_tables(
            db_session,
            layout_request(restaurant.id, {floor_plan.id: 1, second.id: 1},
                           starting_number=10)
        )
        busy_table = tables_on(db_session, second.id)[0]
        OrderFactory(table=busy_table)

        with pytest.raises(ConflictError):
            await layout_service.configure_tables(
                db_session,
                layout_request(restaurant.id, {floor_plan.id: 3, second.id: 3})
            )

        assert [t.table_number for t in tables_on(db_session, floor_plan.id)] \
            == [10]
        assert [t.id for t in tables_on(db_session, second.id)] == \
            [busy_table.id]

    @pytest.mark.asyncio
    async def test_earlier_floors_stay_committed_when_later_floor_fails(
            self, db_session, restaurant, floor_plan, monkeypatch):
        second = FloorPlanFactory(restaurant_id=restaurant.id, floor_number=2)
        await layout_service.configure_tables(
            db_session,
            layout_request(restaurant.id, {floor_plan.id: 1, second.id: 1},
                           starting_number=10)
        )
        original_insert = layout_service._insert_floor_tables

        def failing_insert(db, floor, numbers, slots):
            if floor.id == second.id:
                raise RuntimeError("write failed")
            return original_insert(db, floor, numbers, slots)

        monkeypatch.setattr(layout_service, "_insert_floor_tables",
                            failing_insert)

        with pytest.raises(RuntimeError):
            await layout_service.configure_tables(
                db_session,
                layout_request(restaurant.id, {floor_plan.id: 2, second.id: 2})
            )

        assert [t.table_number for t in tables_on(db_session, floor_plan.id)] \
            == [1, 2]
        assert [t.table_number for t in tables_on(db_session, second.id)] == \
            [11]

    @pytest.mark.asyncio
    async def test_growing_floor_takes_numbers_from_next_floor(
            self, db_session, restaurant, floor_plan):
        second = FloorPlanFactory(restaurant_id=restaurant.id, floor_number=2)
        await layout_service.configure_tables(
            db_session,
            layout_request(restaurant.id, {floor_plan.id: 2, second.id: 2})
        )

        await layout_service.configure_tables(
            db_session,
            layout_request(restaurant.id, {floor_plan.id: 3, second.id: 2})
        )

        assert [t.table_number for t in tables_on(db_session, floor_plan.id)] \
            == [1, 2, 3]
        assert [t.table_number for t in tables_on(db_session, second.id)] == \
            [4, 5]

    @pytest.mark.asyncio
    async def test_paid_orders_survive_regeneration(self, db_session,
                                                    restaurant, floor_plan):
        await layout_service.configure_tables(
            db_session, layout_request(restaurant.id, {floor_plan.id: 1})
        )
        table = tables_on(db_session, floor_plan.id)[0]
        order = OrderFactory(table=table, status=OrderStatus.PAID.value)

        await layout_service.configure_tables(
            db_session, layout_request(restaurant.id, {floor_plan.id: 1})
        )

        db_session.expire_all()
        kept = db_session.query(Order).filter(Order.id == order.id).one()
        assert kept.table_id is None
        assert kept.status == OrderStatus.PAID.value


class TestManualTables:

    @pytest.mark.asyncio
    async def test_create_table(self, db_session, restaurant, floor_plan):
        table = await layout_service.create_table(
            db_session, restaurant.id,
            TableCreate(floor_plan_id=floor_plan.id, table_number=12,
                        config=TableConfigBase(x_position=5, y_position=5))
        )

        assert table.qr_code_url == "/table/1/12"
        assert table.floor_number == 1
        assert table.config.floor_plan_id == floor_plan.id
        assert (table.config.width, table.config.seats) == (3, 4)

    @pytest.mark.asyncio
    async def test_create_table_inside_margin_rejected(self, db_session,
                                                       restaurant, floor_plan):
        with pytest.raises(ValidationError) as exc_info:
            await layout_service.create_table(
                db_session, restaurant.id,
                TableCreate(floor_plan_id=floor_plan.id, table_number=1,
                            config=TableConfigBase(x_position=0, y_position=5))
            )
        assert len(exc_info.value.violations) == 1

    @pytest.mark.asyncio
    async def test_duplicate_table_number_conflicts(self, db_session,
                                                    restaurant, floor_plan):
        data = TableCreate(floor_plan_id=floor_plan.id, table_number=3,
                           config=TableConfigBase(x_position=2, y_position=2))
        await layout_service.create_table(db_session, restaurant.id, data)

        with pytest.raises(ConflictError):
            await layout_service.create_table(
                db_session, restaurant.id,
                TableCreate(floor_plan_id=floor_plan.id, table_number=3,
                            config=TableConfigBase(x_position=10,
                                                   y_position=10))
            )

    @pytest.mark.asyncio
    async def test_move_onto_other_table_rejected(self, db_session,
                                                  floor_plan):
        TableConfigFactory(floor_plan=floor_plan, x_position=2, y_position=2)
        moving = TableConfigFactory(floor_plan=floor_plan, x_position=10,
                                    y_position=2)

        with pytest.raises(ValidationError) as exc_info:
            await layout_service.update_table_config(
                db_session, moving.table_id,
                TableConfigUpdate(x_position=3)
            )
        assert "overlaps" in exc_info.value.violations[0]

    @pytest.mark.asyncio
    async def test_move_within_floor(self, db_session, floor_plan):
        config = TableConfigFactory(floor_plan=floor_plan, x_position=2,
                                    y_position=2)

        table = await layout_service.update_table_config(
            db_session, config.table_id,
            TableConfigUpdate(x_position=15, y_position=10, shape="round")
        )

        assert (table.config.x_position, table.config.y_position) == (15, 10)
        assert table.config.shape == "round"

    @pytest.mark.asyncio
    async def test_move_past_edge_rejected(self, db_session, floor_plan):
        config = TableConfigFactory(floor_plan=floor_plan)
        with pytest.raises(ValidationError):
            await layout_service.update_table_config(
                db_session, config.table_id, TableConfigUpdate(width=17)
            )


class TestTableStatusAndLookup:

    @pytest.mark.asyncio
    async def test_reserve_and_release(self, db_session, floor_plan):
        config = TableConfigFactory(floor_plan=floor_plan)

        table = await layout_service.set_reservation(
            db_session, config.table_id, True)
        assert table.status == TableStatus.RESERVED
        assert table.reservation_time is not None

        table = await layout_service.set_reservation(
            db_session, config.table_id, False)
        assert table.status == TableStatus.AVAILABLE
        assert table.reservation_time is None

    @pytest.mark.asyncio
    async def test_reservation_records_expected_arrival(self, db_session,
                                                        floor_plan):
        config = TableConfigFactory(floor_plan=floor_plan)
        arrival = datetime(2026, 10, 19, 19, 30)

        table = await layout_service.set_reservation(
            db_session, config.table_id, True, arrival)

        assert table.reservation_time == arrival

    @pytest.mark.asyncio
    async def test_occupied_table_cannot_be_reserved(self, db_session,
                                                     floor_plan):
        config = TableConfigFactory(floor_plan=floor_plan)
        config.table.status = TableStatus.OCCUPIED
        db_session.commit()

        with pytest.raises(ConflictError):
            await layout_service.set_reservation(
                db_session, config.table_id, True)

    @pytest.mark.asyncio
    async def test_qr_code_is_png_data_url(self, db_session, floor_plan):
        config = TableConfigFactory(floor_plan=floor_plan)

        qr = await layout_service.generate_qr_code(db_session, config.table_id)

        assert qr["qr_code_url"] == config.table.qr_code_url
        assert qr["qr_code_image"].startswith("data:image/png;base64,")

    @pytest.mark.asyncio
    async def test_resolve_scanned_table(self, db_session, restaurant,
                                         floor_plan):
        await layout_service.configure_tables(
            db_session, layout_request(restaurant.id, {floor_plan.id: 3})
        )

        table = await layout_service.resolve_table(db_session, restaurant.id, 2)
        assert table.table_number == 2

        with pytest.raises(NotFoundError):
            await layout_service.resolve_table(db_session, restaurant.id, 99)

    @pytest.mark.asyncio
    async def test_missing_table(self, db_session):
        with pytest.raises(NotFoundError):
            await layout_service.get_table(db_session, 12345)
