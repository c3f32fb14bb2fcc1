"""
Administrative jobs over a school's admission records.

- Repair: renumber approved admissions per year in admission-date order.
- Clear: delete every admission record of a school.

Both write in chunks no larger than the store batch limit. A chunk commits
atomically; a failure stops the job without undoing earlier chunks.
"""

import logging
from collections import defaultdict
from typing import Dict, List, Optional, Sequence, Tuple

from fastapi import status
from sqlalchemy import delete
from sqlalchemy.ext.asyncio import AsyncSession

from admission_portal.core.exceptions import ServiceError
from admission_portal.core.models import Admission
from admission_portal.db.batch import commit_in_batches
from admission_portal.db.errors import translate_store_errors

from admission_portal.api.v1.admissions import numbering
from admission_portal.api.v1.admissions import service as admissions_service

from .schemas import DeleteResult, RepairResult

logger = logging.getLogger(__name__)

UDISE_LENGTH = 11


def plan_admission_numbers(admissions: Sequence[Admission]) -> Tuple[List[Tuple[Admission, str]], Dict[int, int]]:
    """
    Expected number for every approved admission with a date.

    Returns (records whose number must change with the new number, last serial per year).
    Input order breaks ties between equal admission dates.
    """
    by_year: Dict[int, List[Admission]] = defaultdict(list)
    for admission in admissions:
        if admission.admission_date is None:
            continue
        by_year[admission.admission_date.year].append(admission)

    changes: List[Tuple[Admission, str]] = []
    last_serials: Dict[int, int] = {}
    for year in sorted(by_year):
        group = sorted(by_year[year], key=lambda a: a.admission_date)
        for serial, admission in enumerate(group, start=1):
            expected = numbering.format_admission_number(year, serial)
            if admission.admission_number != expected:
                changes.append((admission, expected))
        last_serials[year] = len(group)
    return changes, last_serials


async def _apply_number_changes(db: AsyncSession, chunk: Sequence[Tuple[Admission, str]]) -> None:
    for admission, number in chunk:
        admission.admission_number = number


async def repair_duplicate_admission_numbers(
    db: AsyncSession,
    school_code: str,
    batch_limit: Optional[int] = None,
) -> RepairResult:
    """Renumber approved admissions ADM/{yy}/0001... per year. Safe to re-run."""
    approved = await admissions_service.list_approved_admissions(db, school_code)
    changes, last_serials = plan_admission_numbers(approved)

    batches: List[int] = []
    if changes:
        batches = await commit_in_batches(
            db,
            changes,
            _apply_number_changes,
            batch_limit=batch_limit,
            action="fix admission numbers",
        )

    with translate_store_errors("reset admission counters"):
        await numbering.reset_counters(db, school_code, last_serials)
        await db.commit()

    updated_count = len(changes)
    logger.info(
        "Admission number repair for %s: %d of %d approved record(s) updated in %d batch(es)",
        school_code,
        updated_count,
        len(approved),
        len(batches),
    )
    if updated_count:
        message = f"Successfully fixed {updated_count} duplicate or incorrect admission number(s)."
    else:
        message = "No duplicate admission numbers found. Everything looks correct."
    return RepairResult(success=True, message=message, updated_count=updated_count, batches=batches)


async def _delete_chunk(db: AsyncSession, chunk: Sequence[str]) -> None:
    await db.execute(
        delete(Admission)
        .where(Admission.id.in_(list(chunk)))
        .execution_options(synchronize_session=False)
    )


async def delete_all_admissions_for_school(
    db: AsyncSession,
    school_code: str,
    batch_limit: Optional[int] = None,
) -> DeleteResult:
    """
    Delete every admission record of the school, one committed batch at a time.
    Raises PartialBatchFailure (with deleted_count) if a batch fails; earlier batches stay deleted.
    """
    if not school_code or len(school_code) != UDISE_LENGTH:
        raise ServiceError("A valid 11-digit UDISE code is required.", status.HTTP_422_UNPROCESSABLE_ENTITY)

    ids = await admissions_service.get_all_admission_ids_for_school(db, school_code)
    if not ids:
        return DeleteResult(
            success=True,
            message="No admission records found for this school to delete.",
            deleted_count=0,
        )

    batches = await commit_in_batches(
        db,
        ids,
        _delete_chunk,
        batch_limit=batch_limit,
        action="delete admission records",
    )
    with translate_store_errors("reset admission counters"):
        await numbering.delete_counters(db, school_code)
        await db.commit()

    logger.info("Deleted %d admission record(s) for %s in %d batch(es)", len(ids), school_code, len(batches))
    return DeleteResult(
        success=True,
        message=f"Successfully deleted {len(ids)} admission records for UDISE {school_code}.",
        deleted_count=len(ids),
        batches=batches,
    )
