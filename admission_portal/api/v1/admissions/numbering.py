"""
Admission numbers: ADM/{yy}/{serial:04d}, unique per school per admission year.

Auto numbers come from a per-school-year counter row bumped with a single
UPDATE ... RETURNING, so concurrent approvals never read the same serial.
A missing counter is seeded from the count of approved records for that year.
Manual numbers are taken verbatim after a per-school duplicate check. The auto
path skips serials whose number a record of the school already holds.
"""

import logging
from datetime import date
from typing import Dict, Optional

from sqlalchemy import delete, func, select, update
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.ext.asyncio import AsyncSession

from admission_portal.core.enums import AdmissionStatus
from admission_portal.core.exceptions import ConfigurationError, DuplicateError
from admission_portal.core.models import Admission, AdmissionCounter
from admission_portal.db.errors import translate_store_errors

logger = logging.getLogger(__name__)

ADMISSION_NUMBER_PREFIX = "ADM"


def format_admission_number(year: int, serial: int) -> str:
    return f"{ADMISSION_NUMBER_PREFIX}/{year % 100:02d}/{serial:04d}"


def _dialect_insert(db: AsyncSession):
    """INSERT construct with ON CONFLICT support for the bound dialect."""
    name = db.get_bind().dialect.name
    if name == "postgresql":
        return postgresql.insert
    if name == "sqlite":
        return sqlite.insert
    raise ConfigurationError(f"Admission counters are not supported on the {name} dialect")


async def count_approved_for_year(db: AsyncSession, school_code: str, year: int) -> int:
    stmt = select(func.count(Admission.id)).where(
        Admission.school_code == school_code,
        Admission.status == AdmissionStatus.APPROVED.value,
        Admission.admission_date >= date(year, 1, 1),
        Admission.admission_date <= date(year, 12, 31),
    )
    return (await db.execute(stmt)).scalar_one()


async def admission_number_taken(
    db: AsyncSession,
    school_code: str,
    admission_number: str,
    exclude_id: Optional[str] = None,
) -> bool:
    stmt = select(Admission.id).where(
        Admission.school_code == school_code,
        Admission.admission_number == admission_number,
    )
    if exclude_id:
        stmt = stmt.where(Admission.id != exclude_id)
    with translate_store_errors("check admission number"):
        return (await db.execute(stmt.limit(1))).first() is not None


async def ensure_admission_number_available(
    db: AsyncSession,
    school_code: str,
    admission_number: str,
    exclude_id: Optional[str] = None,
) -> None:
    """Raise DuplicateError if any record of the school already carries this number."""
    if await admission_number_taken(db, school_code, admission_number, exclude_id):
        raise DuplicateError(
            f"Admission number {admission_number} is already in use for this school. "
            "Please use a different one or leave it blank to auto-generate.",
            admission_number,
        )


async def _increment_counter(db: AsyncSession, school_code: str, year: int) -> Optional[int]:
    stmt = (
        update(AdmissionCounter)
        .where(AdmissionCounter.school_code == school_code, AdmissionCounter.year == year)
        .values(last_serial=AdmissionCounter.last_serial + 1)
        .returning(AdmissionCounter.last_serial)
        .execution_options(synchronize_session=False)
    )
    return (await db.execute(stmt)).scalar_one_or_none()


async def _seed_counter(db: AsyncSession, school_code: str, year: int) -> None:
    seed = await count_approved_for_year(db, school_code, year)
    insert = _dialect_insert(db)
    stmt = (
        insert(AdmissionCounter.__table__)
        .values(school_code=school_code, year=year, last_serial=seed)
        .on_conflict_do_nothing(index_elements=["school_code", "year"])
    )
    await db.execute(stmt)


async def next_admission_serial(db: AsyncSession, school_code: str, year: int) -> int:
    with translate_store_errors("generate admission number"):
        serial = await _increment_counter(db, school_code, year)
        if serial is None:
            await _seed_counter(db, school_code, year)
            serial = await _increment_counter(db, school_code, year)
    return serial


async def generate_admission_number(
    db: AsyncSession,
    school_code: str,
    year: int,
    manual_number: Optional[str] = None,
) -> str:
    """
    Next admission number for the school's admission year, or the manual number
    verbatim when it is not taken. Runs in the caller's transaction; caller commits.
    """
    if manual_number and manual_number.strip():
        number = manual_number.strip()
        await ensure_admission_number_available(db, school_code, number)
        return number

    while True:
        number = format_admission_number(year, await next_admission_serial(db, school_code, year))
        if not await admission_number_taken(db, school_code, number):
            break
        logger.info("Admission number %s is already taken in %s, skipping", number, school_code)
    logger.debug("Generated admission number %s for %s", number, school_code)
    return number


async def reset_counters(db: AsyncSession, school_code: str, last_serials: Dict[int, int]) -> None:
    """Set each year's counter to the given last serial (insert or overwrite)."""
    if not last_serials:
        return
    insert = _dialect_insert(db)
    for year, last_serial in last_serials.items():
        stmt = insert(AdmissionCounter.__table__).values(
            school_code=school_code, year=year, last_serial=last_serial
        )
        stmt = stmt.on_conflict_do_update(
            index_elements=["school_code", "year"],
            set_={"last_serial": stmt.excluded.last_serial},
        )
        await db.execute(stmt)


async def delete_counters(db: AsyncSession, school_code: str) -> None:
    await db.execute(delete(AdmissionCounter).where(AdmissionCounter.school_code == school_code))
