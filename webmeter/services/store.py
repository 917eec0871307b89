"""
Reading Store queries.

Range query over ``parameters_value`` by inclusive time bounds and an
optional slave id set, plus the meter directory lookup used to label
charge records. Every query runs under a deadline; timeouts and driver
errors are re-raised as :class:`StoreUnavailableError` and never retried
here.

CHANGELOG:
- 2026-10-19: Initial creation
"""

import asyncio
import logging
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import datetime
from typing import Any

from sqlalchemy import Select, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from webmeter.db.models import Meter, ParameterValue
from webmeter.errors import StoreUnavailableError
from webmeter.models import Reading

logger = logging.getLogger(__name__)

DEFAULT_METER_CLASS = "3.1"


@dataclass(frozen=True)
class MeterInfo:
    """Display attributes of a meter.

    Attributes:
        slave_id: Modbus slave id.
        name: Display name, ``Meter-<slave_id>`` when the directory has none.
        meter_class: Tariff class code, ``3.1`` when the directory has none.
    """

    slave_id: int
    name: str
    meter_class: str

    @classmethod
    def fallback(cls, slave_id: int) -> "MeterInfo":
        """Placeholder info for a meter missing from the directory."""
        return cls(slave_id=slave_id, name=f"Meter-{slave_id}", meter_class=DEFAULT_METER_CLASS)


async def _execute(db: AsyncSession, stmt: Select, timeout_s: float) -> Any:
    """Execute *stmt* under a deadline, mapping failures to StoreUnavailableError."""
    try:
        return await asyncio.wait_for(db.execute(stmt), timeout=timeout_s)
    except TimeoutError as exc:
        logger.error("Reading Store query exceeded %.1fs deadline", timeout_s)
        raise StoreUnavailableError(
            f"Reading Store query timed out after {timeout_s:g}s"
        ) from exc
    except (SQLAlchemyError, OSError) as exc:
        logger.error("Reading Store query failed: %s", exc, exc_info=True)
        raise StoreUnavailableError("Reading Store query failed") from exc


async def fetch_readings(
    db: AsyncSession,
    start: datetime,
    end: datetime,
    slave_ids: Iterable[int] | None = None,
    *,
    timeout_s: float,
) -> list[Reading]:
    """Return readings with ``start <= timestamp <= end`` ordered by timestamp.

    Args:
        db: Async database session.
        start: Inclusive lower bound.
        end: Inclusive upper bound.
        slave_ids: Optional meters to restrict to. ``None`` or empty means
            all meters.
        timeout_s: Query deadline in seconds.

    Returns:
        list[Reading]: Readings in ascending timestamp order.

    Raises:
        StoreUnavailableError: If the query fails or times out.
    """
    stmt = select(ParameterValue).where(
        ParameterValue.timestamp >= start,
        ParameterValue.timestamp <= end,
    )
    ids = sorted(set(slave_ids)) if slave_ids else []
    if ids:
        stmt = stmt.where(ParameterValue.slave_id.in_(ids))
    stmt = stmt.order_by(ParameterValue.timestamp.asc(), ParameterValue.slave_id.asc())

    result = await _execute(db, stmt, timeout_s)
    rows = result.scalars().all()

    logger.debug(
        "Fetched %d reading(s) between %s and %s for slave ids %s",
        len(rows),
        start,
        end,
        ids or "all",
    )
    return [Reading.model_validate(row) for row in rows]


async def fetch_meters(
    db: AsyncSession,
    slave_ids: Iterable[int],
    *,
    timeout_s: float,
) -> dict[int, MeterInfo]:
    """Look up directory entries for *slave_ids*.

    Meters missing from the directory, or with empty name/class columns,
    get the :meth:`MeterInfo.fallback` values.

    Raises:
        StoreUnavailableError: If the query fails or times out.
    """
    ids = sorted(set(slave_ids))
    if not ids:
        return {}

    stmt = select(Meter).where(Meter.slave_id.in_(ids))
    result = await _execute(db, stmt, timeout_s)

    meters = {slave_id: MeterInfo.fallback(slave_id) for slave_id in ids}
    for meter in result.scalars().all():
        fallback = meters[meter.slave_id]
        meters[meter.slave_id] = MeterInfo(
            slave_id=meter.slave_id,
            name=meter.name or fallback.name,
            meter_class=meter.meter_class or fallback.meter_class,
        )
    return meters
