"""Fee calculation for one student. Pure: no store access."""

from typing import Iterable, List

from admission_portal.core.enums import FundType

from .defaults import EXEMPT_CASTES, EXEMPTION_ELIGIBLE_HEAD_IDS, fee_bucket_for_class, fund_type_for_head
from .schemas import FeeBreakdown, FeeHead, FeeItem


def is_exempt_caste(caste: str) -> bool:
    return (caste or "").strip().lower() in EXEMPT_CASTES


def calculate_fees(student_class: str, caste: str, fee_heads: Iterable[FeeHead]) -> FeeBreakdown:
    """
    Per-head amounts for the student's class bucket, with Tuition and Development fee
    zeroed for exempt castes, split into Student Fund and Development Fund by fund type.
    """
    exempt = is_exempt_caste(caste)
    bucket = fee_bucket_for_class(student_class).value

    all_heads: List[FeeItem] = []
    for head in fee_heads:
        amount = getattr(head, bucket) or 0
        exempted = exempt and head.id in EXEMPTION_ELIGIBLE_HEAD_IDS
        if exempted:
            amount = 0
        all_heads.append(
            FeeItem(
                id=head.id,
                name_en=head.name_en,
                name_hi=head.name_hi,
                fund_type=head.fund_type or fund_type_for_head(head.id),
                amount=amount,
                is_exempted=exempted,
            )
        )

    student_fund_items = [i for i in all_heads if i.fund_type == FundType.STUDENT_FUND]
    development_fund_items = [i for i in all_heads if i.fund_type == FundType.DEVELOPMENT_FUND]
    student_fund_total = sum(i.amount for i in student_fund_items)
    development_fund_total = sum(i.amount for i in development_fund_items)

    return FeeBreakdown(
        student_fund_items=student_fund_items,
        development_fund_items=development_fund_items,
        all_heads=all_heads,
        student_fund_total=student_fund_total,
        development_fund_total=development_fund_total,
        total_fee=student_fund_total + development_fund_total,
        is_exempt=exempt,
    )
