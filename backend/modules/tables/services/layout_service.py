# backend/modules/tables/services/layout_service.py

from datetime import datetime
from typing import List, Optional, Dict, Any, Tuple
from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError
import logging
import qrcode
import base64
from io import BytesIO

from core.config import settings
from core.exceptions import ConflictError, NotFoundError, ValidationError
from modules.core.models.core_models import Restaurant, FloorPlan
from modules.orders.enums.order_enums import ACTIVE_ORDER_STATUSES
from modules.orders.models.order_models import Order
from ..models.table_models import Table, TableConfig, TableStatus
from ..schemas.table_schemas import (
    TableCreate,
    TableConfigUpdate,
    LayoutRequest,
    LayoutResponse,
    FloorLayoutResult,
    LayoutTable,
    LayoutTableConfig,
)
from .geometry import FloorBounds, Rect, validate_placement, rectangles_overlap
from .grid_layout import LayoutSlot, allocate_grid
from .numbering import NumberingMode, assign_table_numbers

logger = logging.getLogger(__name__)


def build_qr_code_url(floor_number: int, table_number: int) -> str:
    """Path printed into a table's QR code"""
    return f"/table/{floor_number}/{table_number}"


class LayoutService:
    """Service for generating and editing table layouts on floor plans"""

    def _grid_options(self) -> Dict[str, int]:
        return {
            "margin": settings.TABLE_LAYOUT_EDGE_MARGIN,
            "max_columns": settings.TABLE_LAYOUT_MAX_COLUMNS,
            "table_width": settings.TABLE_LAYOUT_TABLE_WIDTH,
            "table_height": settings.TABLE_LAYOUT_TABLE_HEIGHT,
            "min_gap": settings.TABLE_LAYOUT_MIN_GAP,
            "seats": settings.TABLE_LAYOUT_DEFAULT_SEATS,
        }

    async def preview_layout(self, db: Session, request: LayoutRequest) -> LayoutResponse:
        """Number and place the requested tables without writing anything"""
        floor_plans, numbers, slots = self._plan(db, request)
        floors = [
            self._floor_result(fp, numbers[fp.id], slots[fp.id])
            for fp in floor_plans
            if fp.id in numbers
        ]
        return LayoutResponse(
            restaurant_id=request.restaurant_id,
            mode=request.mode,
            total_tables=sum(len(f.tables) for f in floors),
            floors=floors,
            persisted=False,
        )

    async def configure_tables(self, db: Session, request: LayoutRequest) -> LayoutResponse:
        """
        Regenerate the tables of every requested floor.

        Numbering, grid allocation and the active-order check for all floors
        run up front, so bad counts, an overflowing floor or a busy table
        reject the request before any write. Each floor is then replaced in
        its own transaction: floors committed before a failure stay committed
        and the failing floor is rolled back. Floors whose new numbers are
        still held by another requested floor's old tables cannot be swapped
        one at a time, so they share a single transaction.

        Raises:
            ValidationError: bad counts, starting number, or a number clash
                with tables on floors outside the request
            LayoutOverflowError: a floor is too small for its tables
            ConflictError: a floor still has tables with active orders
        """
        floor_plans, numbers, slots = self._plan(db, request)
        floor_plans = [fp for fp in floor_plans if fp.id in numbers]
        self._check_untouched_numbers(db, request.restaurant_id, numbers)
        self._check_active_orders(db, floor_plans)

        created: Dict[int, List[Table]] = {}
        for batch in self._transaction_batches(db, floor_plans, numbers):
            try:
                for floor_plan in batch:
                    self._delete_floor_tables(db, floor_plan)
                db.flush()
                for floor_plan in batch:
                    created[floor_plan.id] = self._insert_floor_tables(
                        db, floor_plan, numbers[floor_plan.id], slots[floor_plan.id]
                    )
                db.commit()
            except IntegrityError as e:
                db.rollback()
                logger.warning(f"Layout regeneration failed for floor plans {[fp.id for fp in batch]}: {e}")
                raise ConflictError(
                    detail="Table numbers clash with existing tables",
                    context={"floor_plan_ids": [fp.id for fp in batch]},
                )
            except Exception:
                db.rollback()
                raise

            for floor_plan in batch:
                logger.info(
                    f"Regenerated {len(created[floor_plan.id])} tables on floor plan "
                    f"{floor_plan.id} (restaurant {request.restaurant_id})"
                )

        restaurant = db.query(Restaurant).filter(Restaurant.id == request.restaurant_id).first()
        restaurant.is_configured = True
        db.commit()

        results = [
            self._floor_result(fp, numbers[fp.id], slots[fp.id], created[fp.id])
            for fp in floor_plans
        ]
        return LayoutResponse(
            restaurant_id=request.restaurant_id,
            mode=request.mode,
            total_tables=sum(len(f.tables) for f in results),
            floors=results,
            persisted=True,
        )

    async def create_table(self, db: Session, restaurant_id: int, table_data: TableCreate) -> Table:
        """Create a single table with a manually chosen placement"""
        floor_plan = self._get_floor_plan(db, table_data.floor_plan_id, restaurant_id)

        existing = (
            db.query(Table)
            .filter(
                Table.restaurant_id == restaurant_id,
                Table.table_number == table_data.table_number,
            )
            .first()
        )
        if existing:
            raise ConflictError(
                detail=f"Table {table_data.table_number} already exists",
                context={"table_id": existing.id},
            )

        config = table_data.config
        rect = Rect(config.x_position, config.y_position, config.width, config.height)
        self._validate_rect(db, floor_plan, rect)

        table = Table(
            restaurant_id=restaurant_id,
            table_number=table_data.table_number,
            floor_number=floor_plan.floor_number,
            qr_code_url=build_qr_code_url(floor_plan.floor_number, table_data.table_number),
            status=TableStatus.AVAILABLE,
        )
        table.config = TableConfig(
            floor_plan_id=floor_plan.id,
            x_position=config.x_position,
            y_position=config.y_position,
            width=config.width,
            height=config.height,
            shape=config.shape.value,
            seats=config.seats,
        )
        db.add(table)
        db.commit()
        db.refresh(table)

        logger.info(f"Created table {table.table_number} on floor plan {floor_plan.id}")
        return table

    async def update_table_config(
        self, db: Session, table_id: int, update_data: TableConfigUpdate
    ) -> Table:
        """Move, resize or reshape a table; rejected if it leaves the floor or overlaps"""
        table = self._get_table(db, table_id)
        config = table.config
        if config is None:
            raise NotFoundError(f"Table {table_id} has no placement")

        changes = update_data.model_dump(exclude_unset=True)
        rect = Rect(
            changes.get("x_position", config.x_position),
            changes.get("y_position", config.y_position),
            changes.get("width", config.width),
            changes.get("height", config.height),
        )
        if changes.get("is_active", config.is_active):
            self._validate_rect(db, config.floor_plan, rect, exclude_config_id=config.id)

        for field, value in changes.items():
            if field == "shape":
                value = value.value
            setattr(config, field, value)

        db.commit()
        db.refresh(table)
        return table

    async def set_reservation(
        self,
        db: Session,
        table_id: int,
        reserved: bool,
        reservation_time: Optional[datetime] = None,
    ) -> Table:
        """Toggle a table between available and reserved; releasing clears the time"""
        table = self._get_table(db, table_id)

        if table.status == TableStatus.OCCUPIED:
            raise ConflictError(
                detail=f"Table {table.table_number} is occupied",
                context={"table_id": table.id},
            )

        if reserved:
            table.status = TableStatus.RESERVED
            table.reservation_time = reservation_time or datetime.now()
        else:
            table.status = TableStatus.AVAILABLE
            table.reservation_time = None
        db.commit()
        db.refresh(table)
        logger.info(f"Table {table.id} is now {table.status.value}")
        return table

    async def generate_qr_code(self, db: Session, table_id: int) -> Dict[str, Any]:
        """Render the table's QR code as a PNG data URL"""
        table = self._get_table(db, table_id)
        qr_data = table.qr_code_url or build_qr_code_url(table.floor_number, table.table_number)

        qr = qrcode.QRCode(
            version=1,
            error_correction=qrcode.constants.ERROR_CORRECT_L,
            box_size=settings.QR_BOX_SIZE,
            border=settings.QR_BORDER,
        )
        qr.add_data(qr_data)
        qr.make(fit=True)

        img = qr.make_image(fill_color="black", back_color="white")

        buffer = BytesIO()
        img.save(buffer, format="PNG")
        img_str = base64.b64encode(buffer.getvalue()).decode()

        return {
            "table_id": table.id,
            "table_number": table.table_number,
            "qr_code_url": qr_data,
            "qr_code_image": f"data:image/png;base64,{img_str}",
        }

    async def resolve_table(self, db: Session, restaurant_id: int, table_number: int) -> Table:
        """Find the table a scanned QR code points at"""
        table = (
            db.query(Table)
            .filter(
                Table.restaurant_id == restaurant_id,
                Table.table_number == table_number,
            )
            .first()
        )
        if not table:
            raise NotFoundError(
                f"Table {table_number} not found in restaurant {restaurant_id}"
            )
        return table

    async def get_table(self, db: Session, table_id: int) -> Table:
        return self._get_table(db, table_id)

    async def list_tables(
        self, db: Session, restaurant_id: int, floor_plan_id: Optional[int] = None
    ) -> List[Table]:
        query = db.query(Table).filter(Table.restaurant_id == restaurant_id)
        if floor_plan_id is not None:
            query = query.join(TableConfig).filter(TableConfig.floor_plan_id == floor_plan_id)
        return query.order_by(Table.table_number).all()

    # Helper methods
    def _plan(
        self, db: Session, request: LayoutRequest
    ) -> Tuple[List[FloorPlan], Dict[int, List[int]], Dict[int, List[LayoutSlot]]]:
        restaurant = db.query(Restaurant).filter(Restaurant.id == request.restaurant_id).first()
        if not restaurant:
            raise NotFoundError(f"Restaurant {request.restaurant_id} not found")

        counts = {f.floor_plan_id: f.table_count for f in request.floors}
        floor_plans = (
            db.query(FloorPlan)
            .filter(
                FloorPlan.restaurant_id == request.restaurant_id,
                FloorPlan.id.in_(counts.keys()),
            )
            .order_by(FloorPlan.floor_number, FloorPlan.id)
            .all()
        )
        missing = set(counts) - {fp.id for fp in floor_plans}
        if missing:
            raise NotFoundError(
                f"Floor plans {sorted(missing)} not found in restaurant {request.restaurant_id}"
            )

        existing_numbers = None
        if request.mode == NumberingMode.PRESERVE:
            existing_numbers = self._existing_numbers(db, [fp.id for fp in floor_plans])

        numbers = assign_table_numbers(
            floor_plans,
            counts,
            mode=request.mode,
            starting_number=request.starting_number,
            existing_numbers=existing_numbers,
            max_tables_per_floor=settings.MAX_TABLES_PER_FLOOR,
        )

        options = self._grid_options()
        slots = {
            fp.id: allocate_grid(
                FloorBounds(fp.width, fp.height),
                len(numbers[fp.id]),
                floor_plan_id=fp.id,
                **options,
            )
            for fp in floor_plans
            if fp.id in numbers
        }
        return floor_plans, numbers, slots

    def _existing_numbers(self, db: Session, floor_plan_ids: List[int]) -> Dict[int, List[int]]:
        rows = (
            db.query(TableConfig.floor_plan_id, Table.table_number)
            .join(Table, Table.id == TableConfig.table_id)
            .filter(TableConfig.floor_plan_id.in_(floor_plan_ids))
            .all()
        )
        existing: Dict[int, List[int]] = {}
        for floor_plan_id, table_number in rows:
            existing.setdefault(floor_plan_id, []).append(table_number)
        return existing

    def _check_untouched_numbers(
        self, db: Session, restaurant_id: int, numbers: Dict[int, List[int]]
    ) -> None:
        """Assigned numbers must not clash with tables on floors left as they are"""
        regenerated = list(numbers.keys())
        rows = (
            db.query(Table.table_number)
            .outerjoin(TableConfig, TableConfig.table_id == Table.id)
            .filter(Table.restaurant_id == restaurant_id)
            .filter(
                (TableConfig.floor_plan_id.is_(None))
                | (TableConfig.floor_plan_id.notin_(regenerated))
            )
            .all()
        )
        kept = {row[0] for row in rows}
        clashes = sorted(kept.intersection(n for nums in numbers.values() for n in nums))
        if clashes:
            raise ValidationError(
                detail="Table numbers already used on other floors",
                violations=[f"Table {n} already exists" for n in clashes],
            )

    def _floor_tables(self, db: Session, floor_plan_id: int) -> List[Table]:
        return (
            db.query(Table)
            .join(TableConfig, TableConfig.table_id == Table.id)
            .filter(TableConfig.floor_plan_id == floor_plan_id)
            .all()
        )

    def _check_active_orders(self, db: Session, floor_plans: List[FloorPlan]) -> None:
        for floor_plan in floor_plans:
            table_ids = [t.id for t in self._floor_tables(db, floor_plan.id)]
            if not table_ids:
                continue
            active = (
                db.query(Order)
                .filter(
                    Order.table_id.in_(table_ids),
                    Order.status.in_([s.value for s in ACTIVE_ORDER_STATUSES]),
                )
                .first()
            )
            if active:
                raise ConflictError(
                    detail=f"Floor {floor_plan.floor_number} has tables with active orders",
                    context={"floor_plan_id": floor_plan.id, "existing_order_id": active.id},
                )

    def _transaction_batches(
        self, db: Session, floor_plans: List[FloorPlan], numbers: Dict[int, List[int]]
    ) -> List[List[FloorPlan]]:
        """One batch per floor, or a single batch if numbers move between floors"""
        old = self._existing_numbers(db, [fp.id for fp in floor_plans])
        for floor_plan in floor_plans:
            new = set(numbers[floor_plan.id])
            for other_id, other_numbers in old.items():
                if other_id != floor_plan.id and new.intersection(other_numbers):
                    return [floor_plans]
        return [[fp] for fp in floor_plans]

    def _delete_floor_tables(self, db: Session, floor_plan: FloorPlan) -> None:
        for table in self._floor_tables(db, floor_plan.id):
            db.delete(table)

    def _insert_floor_tables(
        self,
        db: Session,
        floor_plan: FloorPlan,
        numbers: List[int],
        slots: List[LayoutSlot],
    ) -> List[Table]:
        tables = []
        for number, slot in zip(numbers, slots):
            table = Table(
                restaurant_id=floor_plan.restaurant_id,
                table_number=number,
                floor_number=floor_plan.floor_number,
                qr_code_url=build_qr_code_url(floor_plan.floor_number, number),
                status=TableStatus.AVAILABLE,
            )
            table.config = TableConfig(
                floor_plan_id=floor_plan.id,
                x_position=slot.rect.x,
                y_position=slot.rect.y,
                width=slot.rect.width,
                height=slot.rect.height,
                shape=slot.shape,
                seats=slot.seats,
            )
            db.add(table)
            tables.append(table)
        db.flush()
        return tables

    def _floor_result(
        self,
        floor_plan: FloorPlan,
        numbers: List[int],
        slots: List[LayoutSlot],
        tables: Optional[List[Table]] = None,
    ) -> FloorLayoutResult:
        ids = [t.id for t in tables] if tables else [None] * len(numbers)
        return FloorLayoutResult(
            floor_plan_id=floor_plan.id,
            floor_number=floor_plan.floor_number,
            tables=[
                LayoutTable(
                    id=table_id,
                    table_number=number,
                    floor_number=floor_plan.floor_number,
                    floor_plan_id=floor_plan.id,
                    qr_code_url=build_qr_code_url(floor_plan.floor_number, number),
                    table_config=LayoutTableConfig(
                        x_position=slot.rect.x,
                        y_position=slot.rect.y,
                        width=slot.rect.width,
                        height=slot.rect.height,
                        shape=slot.shape,
                        seats=slot.seats,
                    ),
                )
                for table_id, number, slot in zip(ids, numbers, slots)
            ],
        )

    def _validate_rect(
        self,
        db: Session,
        floor_plan: FloorPlan,
        rect: Rect,
        exclude_config_id: Optional[int] = None,
    ) -> None:
        violations = [
            v.message
            for v in validate_placement(
                rect,
                FloorBounds(floor_plan.width, floor_plan.height),
                settings.TABLE_LAYOUT_EDGE_MARGIN,
            )
        ]

        query = db.query(TableConfig).filter(
            TableConfig.floor_plan_id == floor_plan.id,
            TableConfig.is_active.is_(True),
        )
        if exclude_config_id is not None:
            query = query.filter(TableConfig.id != exclude_config_id)
        for other in query.all():
            other_rect = Rect(other.x_position, other.y_position, other.width, other.height)
            if rectangles_overlap(rect, other_rect):
                violations.append(f"Table overlaps table {other.table.table_number}")

        if violations:
            raise ValidationError(detail="Invalid table placement", violations=violations)

    def _get_floor_plan(self, db: Session, floor_plan_id: int, restaurant_id: int) -> FloorPlan:
        floor_plan = (
            db.query(FloorPlan)
            .filter(FloorPlan.id == floor_plan_id, FloorPlan.restaurant_id == restaurant_id)
            .first()
        )
        if not floor_plan:
            raise NotFoundError(f"Floor plan {floor_plan_id} not found")
        return floor_plan

    def _get_table(self, db: Session, table_id: int) -> Table:
        table = db.query(Table).filter(Table.id == table_id).first()
        if not table:
            raise NotFoundError(f"Table {table_id} not found")
        return table


# Create singleton service
layout_service = LayoutService()
