"""
Canonical fee heads and the class-to-bucket mapping.

The canonical table fixes head order, bilingual names and fund type. Saved
structures keep their amounts but are always reshaped to this table.
"""

from typing import Dict, List

from admission_portal.core.enums import FeeBucket, FundType

from .schemas import FeeHead

SF = FundType.STUDENT_FUND
DF = FundType.DEVELOPMENT_FUND

# Heads zeroed for exempt castes: Tuition Fee, Development Fee.
EXEMPTION_ELIGIBLE_HEAD_IDS = frozenset({2, 3})
EXEMPT_CASTES = frozenset({"sc", "st"})

CLASS_BUCKETS: Dict[str, FeeBucket] = {
    "9": FeeBucket.CLASS_9,
    "10": FeeBucket.CLASS_10,
    "11-arts": FeeBucket.CLASS_11_AC,
    "11-commerce": FeeBucket.CLASS_11_AC,
    "11-science": FeeBucket.CLASS_11_S,
    "12-arts": FeeBucket.CLASS_12_AC,
    "12-commerce": FeeBucket.CLASS_12_AC,
    "12-science": FeeBucket.CLASS_12_S,
}


def _head(id, name_en, name_hi, fund_type, c9, c10, c11ac, c11s, c12ac, c12s) -> FeeHead:
    return FeeHead(
        id=id,
        name_en=name_en,
        name_hi=name_hi,
        fund_type=fund_type,
        class9=c9,
        class10=c10,
        class11ac=c11ac,
        class11s=c11s,
        class12ac=c12ac,
        class12s=c12s,
    )


DEFAULT_FEE_STRUCTURE: List[FeeHead] = [
    # Student Fund
    _head(1, "Admission Fee", "प्रवेश शुल्क", SF, 50, 50, 50, 50, 50, 50),
    _head(2, "Tuition Fee", "शिक्षण शुल्क", SF, 240, 240, 240, 240, 240, 240),
    _head(3, "Development Fee", "विकास शुल्क", SF, 480, 480, 480, 480, 480, 480),
    _head(4, "Transfer Fee", "स्थानांतरण शुल्क", SF, 100, 100, 100, 100, 100, 100),
    # Development Fund
    _head(5, "Science Fee", "विज्ञान शुल्क", DF, 0, 0, 0, 20, 0, 20),
    _head(6, "Absence Fee", "अनुपस्थिति शुल्क", DF, 0, 0, 0, 0, 0, 0),
    _head(7, "Late Fine", "विलंब दंड शुल्क", DF, 0, 0, 0, 0, 0, 0),
    _head(8, "Migration Fee", "पलायन शुल्क", DF, 0, 0, 0, 0, 0, 0),
    _head(9, "Re-admission Fee", "पुन: प्रवेश शुल्क", DF, 0, 0, 0, 0, 0, 0),
    _head(10, "Sports Fee", "क्रीड़ा शुल्क", DF, 40, 40, 40, 40, 40, 40),
    _head(11, "Entertainment Fee", "मनोरंजन शुल्क", DF, 0, 0, 0, 0, 0, 0),
    _head(12, "Poor Student Fund", "निर्धन छात्रा कोश", DF, 10, 10, 10, 10, 10, 10),
    _head(13, "Electricity Fee", "विद्युत शुल्क", DF, 20, 20, 20, 20, 20, 20),
    _head(14, "Library Fee", "पुस्तकालय शुल्क", DF, 10, 10, 10, 10, 10, 10),
    _head(15, "Maintenance Fee", "विद्यालय रख-रखाव शुल्क", DF, 20, 20, 20, 20, 20, 20),
    _head(16, "Balchar / Scout Fee", "बालचर/स्काउट शुल्क", DF, 0, 0, 0, 0, 0, 0),
    _head(17, "Miscellaneous Fee", "विविध शुल्क", DF, 0, 0, 0, 0, 0, 0),
    _head(18, "Exam Fee", "परीक्षा शुल्क", DF, 150, 150, 150, 150, 150, 150),
    _head(19, "Form / Prospectus Fee", "फॉर्म/प्रॉस्पेक्टस शुल्क", DF, 0, 0, 0, 0, 0, 0),
    _head(20, "ID Card Fee", "पहचान पत्र शुल्क", DF, 20, 20, 20, 20, 20, 20),
]

FEE_HEADS_MAP: Dict[int, FeeHead] = {head.id: head for head in DEFAULT_FEE_STRUCTURE}


def default_fee_structure() -> List[FeeHead]:
    """Fresh copy of the canonical table, safe for callers to mutate."""
    return [head.model_copy() for head in DEFAULT_FEE_STRUCTURE]


def fee_bucket_for_class(class_selection: str) -> FeeBucket:
    """Amount column for a class/stream; anything unrecognised reads the class 9 column."""
    return CLASS_BUCKETS.get(class_selection, FeeBucket.CLASS_9)


def fund_type_for_head(head_id: int) -> FundType:
    canonical = FEE_HEADS_MAP.get(head_id)
    return canonical.fund_type if canonical and canonical.fund_type else DF
