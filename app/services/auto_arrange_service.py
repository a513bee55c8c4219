"""
Auto-arrange service: runs the allocation planner and persists its result

Each run executes inside a single transaction. Either the whole new table
set is written (and, when replacing, the old one removed) or nothing is.
"""

import logging
from typing import List, Optional, Sequence

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.db import atomic
from app.models import Guest, SeatingTable, TableAssignment
from app.schemas.seating import AutoArrangeConfigsRequest, AutoArrangeRequest, TableConfigIn
from app.services.allocation import (
    AllocationState,
    AllocationSummary,
    ExistingTable,
    PlannedTable,
    TableConfig,
    place_tables,
    plan_auto_arrange,
    plan_with_configs,
    summarize,
)
from app.services.errors import AllGuestsSeatedError, AllocationFailedError, NoMatchingGuestsError
from app.services.guest_selection import GuestFilter, GuestRecord, order_guests, select_guests
from app.services.labels import LabelLookup, make_label_lookup
from app.services.layout import Canvas
from app.services.repositories import EventRepo, GuestRepo, TableRepo
from app.services.seating_service import build_seats

logger = logging.getLogger(__name__)

def default_canvas() -> Canvas:
    return Canvas(
        width=settings.CANVAS_WIDTH,
        height=settings.CANVAS_HEIGHT,
        padding=settings.CANVAS_PADDING,
        min_spacing=settings.TABLE_MIN_SPACING,
    )

def to_table_config(config: TableConfigIn) -> TableConfig:
    return TableConfig(
        shape=config.shape,
        capacity=config.capacity,
        count=config.count,
        width=config.width,
        height=config.height,
        group_assignments=tuple(config.group_assignments or ()),
        arrangement=config.seating_arrangement,
    )

class AutoArrangeService:
    """Service for automatic table arrangement"""

    @staticmethod
    def _candidates(db: Session, event_id: int, guest_filter: GuestFilter) -> List[GuestRecord]:
        records = [GuestRecord.from_model(guest) for guest in GuestRepo.list_for_event(db, event_id)]
        return order_guests(select_guests(records, guest_filter))

    @staticmethod
    def _clear_tables(db: Session, event_id: int) -> None:
        tables = db.query(SeatingTable).filter(SeatingTable.event_id == event_id).all()
        db.query(Guest).filter(Guest.arrived_table_id.in_([table.id for table in tables])).update(
            {Guest.arrived_table_id: None}, synchronize_session=False
        )
        for table in tables:
            db.delete(table)
        db.flush()

    @staticmethod
    def _persist(db: Session, event_id: int, planned: Sequence[PlannedTable]) -> None:
        for plan in planned:
            seats, _ = build_seats(plan.capacity, plan.shape.value, plan.arrangement.value, plan.width, plan.height)
            table = SeatingTable(
                event_id=event_id,
                name=plan.name,
                capacity=plan.capacity,
                shape=plan.shape.value,
                seating_arrangement=plan.arrangement.value,
                width=plan.width,
                height=plan.height,
                position_x=plan.position[0] if plan.position else None,
                position_y=plan.position[1] if plan.position else None,
                seats=seats,
                assignments=[TableAssignment(guest_id=guest.id) for guest in plan.guests],
            )
            db.add(table)
        db.flush()

    @staticmethod
    def auto_arrange_tables(
        event_id: int,
        request: AutoArrangeRequest,
        db: Session,
        labels: Optional[LabelLookup] = None,
    ) -> AllocationSummary:
        """Replace the event's tables with one table per packed bucket of guests"""
        EventRepo.require(db, event_id)
        guest_filter = GuestFilter(
            side=request.side_filter,
            group_name=request.group_filter,
            rsvp_statuses=frozenset(request.include_rsvp_status),
        )
        candidates = AutoArrangeService._candidates(db, event_id, guest_filter)
        if not candidates:
            raise NoMatchingGuestsError()

        config = TableConfig(
            shape=request.table_shape,
            capacity=request.table_size,
            width=request.width,
            height=request.height,
            arrangement=request.seating_arrangement,
        )
        state = plan_auto_arrange(
            candidates,
            config,
            strategy=request.grouping_strategy,
            labels=labels or make_label_lookup(settings.TABLE_LABEL_LOCALE),
        )
        place_tables(state, default_canvas())

        try:
            with atomic(db, settings.AUTO_ARRANGE_TIMEOUT_SECONDS):
                AutoArrangeService._clear_tables(db, event_id)
                AutoArrangeService._persist(db, event_id, state.tables)
        except SQLAlchemyError as exc:
            logger.exception("Auto-arrange failed for event %s", event_id)
            raise AllocationFailedError(exc) from exc

        summary = summarize(state, candidates)
        logger.info(
            "Auto-arranged event %s: %d tables, %d guests seated",
            event_id, summary.tables_created, summary.guests_seated,
        )
        return summary

    @staticmethod
    def auto_arrange_tables_with_configs(
        event_id: int,
        request: AutoArrangeConfigsRequest,
        db: Session,
        labels: Optional[LabelLookup] = None,
    ) -> AllocationSummary:
        """Create tables from configurations, seating groups and optionally mixing the rest.

        With ``clear_existing`` the event's tables are replaced. Otherwise guests
        who already have a table are left alone and new tables are numbered
        after the existing ones.
        """
        EventRepo.require(db, event_id)
        guest_filter = GuestFilter(
            side=request.filters.side,
            group_name=request.filters.group_name,
            rsvp_statuses=frozenset(request.filters.rsvp_status),
        )
        candidates = AutoArrangeService._candidates(db, event_id, guest_filter)
        if not candidates:
            raise NoMatchingGuestsError()

        existing: List[ExistingTable] = []
        if not request.clear_existing:
            assigned = TableRepo.assigned_guest_ids(db, event_id)
            candidates = [guest for guest in candidates if guest.id not in assigned]
            if not candidates:
                raise AllGuestsSeatedError()
            existing = [
                ExistingTable(
                    id=table.id,
                    capacity=table.capacity,
                    occupant_ids=tuple(a.guest_id for a in table.assignments),
                )
                for table in TableRepo.list_for_event(db, event_id)
            ]

        demand = {
            guest.id: GuestRecord.from_model(guest).seats_needed
            for guest in GuestRepo.list_for_event(db, event_id)
        }
        state = plan_with_configs(
            candidates,
            [to_table_config(config) for config in request.table_configs],
            existing_tables=existing,
            demand_by_guest=demand,
            mix_remaining=request.mix_remaining,
            assign_guests=request.assign_guests,
            labels=labels or make_label_lookup(settings.TABLE_LABEL_LOCALE),
            state=AllocationState(next_table_number=len(existing) + 1),
        )
        place_tables(state, default_canvas(), start_index=len(existing))

        try:
            with atomic(db, settings.AUTO_ARRANGE_TIMEOUT_SECONDS):
                if request.clear_existing:
                    AutoArrangeService._clear_tables(db, event_id)
                AutoArrangeService._persist(db, event_id, state.tables)
                for table_id, guests in state.existing_fills.items():
                    for guest in guests:
                        db.add(TableAssignment(table_id=table_id, guest_id=guest.id))
                db.flush()
        except SQLAlchemyError as exc:
            logger.exception("Auto-arrange with configs failed for event %s", event_id)
            raise AllocationFailedError(exc) from exc

        summary = summarize(state, candidates)
        logger.info(
            "Auto-arranged event %s from %d configs: %d tables, %d seated, %d remaining",
            event_id, len(request.table_configs),
            summary.tables_created, summary.guests_seated, summary.remaining_unseated,
        )
        return summary
