from enum import Enum


class AdmissionStatus(str, Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class ClassSelection(str, Enum):
    CLASS_9 = "9"
    CLASS_10 = "10"
    CLASS_11_ARTS = "11-arts"
    CLASS_11_SCIENCE = "11-science"
    CLASS_11_COMMERCE = "11-commerce"
    CLASS_12_ARTS = "12-arts"
    CLASS_12_SCIENCE = "12-science"
    CLASS_12_COMMERCE = "12-commerce"


class Caste(str, Enum):
    GEN = "gen"
    EBC = "ebc"
    BC = "bc"
    SC = "sc"
    ST = "st"


class FundType(str, Enum):
    STUDENT_FUND = "student_fund"
    DEVELOPMENT_FUND = "development_fund"


class FeeBucket(str, Enum):
    """Per-class amount columns of a fee head."""

    CLASS_9 = "class9"
    CLASS_10 = "class10"
    CLASS_11_AC = "class11ac"
    CLASS_11_S = "class11s"
    CLASS_12_AC = "class12ac"
    CLASS_12_S = "class12s"
