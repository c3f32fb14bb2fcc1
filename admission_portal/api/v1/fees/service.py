"""
Fees service: fee structure persistence, resolution with fallback and migration, calculation.

Resolution never fails: a store error or a missing document degrades to the
school's default structure and then to the canonical table, so receipts can
always be produced.
"""

import logging
from datetime import date
from typing import Any, Dict, List, Mapping, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from admission_portal.core.enums import FeeBucket
from admission_portal.core.models import FeeStructure
from admission_portal.core.models.fee_structure import DEFAULT_SESSION, fee_structure_id
from admission_portal.db.errors import translate_store_errors

from .calculator import calculate_fees
from .defaults import DEFAULT_FEE_STRUCTURE, default_fee_structure
from .schemas import FeeBreakdown, FeeHead, FeeStructureResponse, FeeStructureSave

logger = logging.getLogger(__name__)

# Two-bucket structures saved before the six-bucket model only carry class9/class11.
_LEGACY_BUCKET_SOURCES: Dict[str, str] = {
    FeeBucket.CLASS_10.value: "class9",
    FeeBucket.CLASS_11_AC.value: "class11",
    FeeBucket.CLASS_11_S.value: "class11",
    FeeBucket.CLASS_12_AC.value: "class11",
    FeeBucket.CLASS_12_S.value: "class11",
}


def session_for_date(d: date) -> str:
    """Academic session string an admission date falls under, e.g. 2025-2026."""
    return f"{d.year}-{d.year + 1}"


def _amount(value: Any) -> Optional[int]:
    if value is None or isinstance(value, bool):
        return None
    try:
        amount = int(value)
    except (TypeError, ValueError):
        return None
    return amount if amount >= 0 else None


def _stored_amounts(raw: Mapping[str, Any], canonical: FeeHead) -> Dict[str, int]:
    amounts: Dict[str, int] = {}
    for bucket in FeeBucket:
        key = bucket.value
        amount = _amount(raw.get(key))
        if amount is None and key in _LEGACY_BUCKET_SOURCES:
            amount = _amount(raw.get(_LEGACY_BUCKET_SOURCES[key]))
        amounts[key] = amount if amount is not None else getattr(canonical, key)
    return amounts


def migrate_fee_heads(stored_heads: Optional[List[Any]]) -> List[FeeHead]:
    """
    Reshape a saved head list to the canonical table.

    Output follows canonical order. Saved amounts win; names and fund type always come
    from the canonical table. Canonical heads missing from the saved list are inserted
    with default amounts; saved heads with unknown ids are dropped.
    """
    by_id: Dict[int, Mapping[str, Any]] = {}
    for raw in stored_heads or []:
        if isinstance(raw, FeeHead):
            raw = raw.model_dump()
        if not isinstance(raw, Mapping):
            continue
        try:
            by_id.setdefault(int(raw.get("id")), raw)
        except (TypeError, ValueError):
            continue

    migrated: List[FeeHead] = []
    for canonical in DEFAULT_FEE_STRUCTURE:
        raw = by_id.get(canonical.id)
        if raw is None:
            migrated.append(canonical.model_copy())
        else:
            migrated.append(canonical.model_copy(update=_stored_amounts(raw, canonical)))
    return migrated


async def get_fee_structure(db: AsyncSession, school_code: str, session: str) -> Optional[FeeStructure]:
    """Stored structure for the session, else the school's default one, else None."""
    structure = await db.get(FeeStructure, fee_structure_id(school_code, session))
    if structure is None and session != DEFAULT_SESSION:
        structure = await db.get(FeeStructure, fee_structure_id(school_code, DEFAULT_SESSION))
    return structure


async def resolve_fee_structure(
    db: AsyncSession,
    school_code: str,
    session: str,
) -> List[FeeHead]:
    """Fee heads that apply to a school and session, always in canonical shape."""
    try:
        structure = await get_fee_structure(db, school_code, session)
    except SQLAlchemyError as e:
        logger.warning(
            "Falling back to default fee structure for %s session %s: %s",
            school_code,
            session,
            e.__class__.__name__,
        )
        structure = None
    if structure is None:
        return default_fee_structure()
    return migrate_fee_heads(structure.heads)


async def save_fee_structure(
    db: AsyncSession,
    school_code: str,
    payload: FeeStructureSave,
) -> FeeStructureResponse:
    """Create or overwrite the school's structure for one session."""
    heads = [h.model_dump(mode="json") for h in payload.heads]
    with translate_store_errors("save fee details to the database"):
        doc_id = fee_structure_id(school_code, payload.session)
        structure = await db.get(FeeStructure, doc_id)
        if structure is None:
            structure = FeeStructure(
                id=doc_id,
                school_code=school_code,
                session=payload.session,
                heads=heads,
            )
            db.add(structure)
        else:
            structure.heads = heads
        await db.commit()
        await db.refresh(structure)
    logger.info("Saved fee structure %s with %d head(s)", structure.id, len(heads))
    return FeeStructureResponse(
        school_code=structure.school_code,
        session=structure.session,
        heads=migrate_fee_heads(structure.heads),
        updated_at=structure.updated_at,
    )


async def get_resolved_fee_structure(
    db: AsyncSession,
    school_code: str,
    session: str,
) -> FeeStructureResponse:
    heads = await resolve_fee_structure(db, school_code, session)
    return FeeStructureResponse(school_code=school_code, session=session, heads=heads)


async def calculate_student_fees(
    db: AsyncSession,
    school_code: str,
    class_selection: str,
    caste: str,
    session: str,
) -> FeeBreakdown:
    heads = await resolve_fee_structure(db, school_code, session)
    return calculate_fees(class_selection, caste, heads)
