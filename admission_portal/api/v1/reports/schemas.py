from datetime import date
from typing import List, Optional

from pydantic import BaseModel, Field

from admission_portal.api.v1.fees.schemas import FeeBreakdown


class AdmissionFeeRow(BaseModel):
    """One approved admission with the fees that apply to it."""

    id: str
    admission_number: Optional[str] = None
    roll_number: Optional[str] = None
    admission_date: Optional[date] = None
    class_selection: str
    name_en: str = ""
    name_hi: str = ""
    father_name_en: str = ""
    caste: Optional[str] = None
    session: str
    fees: FeeBreakdown


class ReportTotals(BaseModel):
    student_fund: int = 0
    development_fund: int = 0
    grand_total: int = 0


class AdmissionReport(BaseModel):
    start_date: date
    end_date: date
    class_selection: Optional[str] = None
    caste: Optional[str] = None
    rows: List[AdmissionFeeRow]
    totals: ReportTotals


class DailyCollectionRegister(BaseModel):
    date: date
    rows: List[AdmissionFeeRow]
    totals: ReportTotals


class ReceiptParticular(BaseModel):
    serial: int
    name_hi: str = Field(..., description='Hindi name, with "(छूट)" when the head is exempted')
    name_en: str
    amount: int
    is_exempted: bool = False


class ReceiptSchool(BaseModel):
    udise: str
    name: str
    address: Optional[str] = None
    mobile: Optional[str] = None


class FeeReceipt(BaseModel):
    school: ReceiptSchool
    admission: AdmissionFeeRow
    student_fund_particulars: List[ReceiptParticular]
    development_fund_particulars: List[ReceiptParticular]
    total_fee: int
    amount_in_words: str
