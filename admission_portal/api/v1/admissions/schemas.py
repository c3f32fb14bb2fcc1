from datetime import date, datetime
from typing import Any, Dict, Literal, Optional

from pydantic import BaseModel, EmailStr, Field, model_validator

from admission_portal.core.enums import AdmissionStatus, Caste, ClassSelection


# ----- Form sections -----

class StudentDetails(BaseModel):
    name_en: str = Field(..., min_length=1, max_length=255)
    name_hi: str = Field(..., min_length=1, max_length=255)
    mother_name_en: str = Field(..., min_length=1, max_length=255)
    mother_name_hi: str = Field(..., min_length=1, max_length=255)
    father_name_en: str = Field(..., min_length=1, max_length=255)
    father_name_hi: str = Field(..., min_length=1, max_length=255)
    dob: date
    gender: Literal["male", "female"]
    caste: Caste
    nationality: Literal["indian", "other"] = "indian"
    is_differently_abled: bool = False
    disability_details: Optional[str] = None
    religion: Literal["hindu", "islam", "sikh", "jain", "buddhism", "christ", "other"]
    marital_status: Literal["married", "unmarried"] = "unmarried"

    @model_validator(mode="after")
    def disability_needs_details(self) -> "StudentDetails":
        if self.is_differently_abled and not (self.disability_details or "").strip():
            raise ValueError("Disability details are required when the student is differently abled")
        return self


class ContactDetails(BaseModel):
    mobile_number: str = Field(..., pattern=r"^\d{10}$")
    email_id: Optional[EmailStr] = None
    aadhar_number: Optional[str] = Field(None, pattern=r"^\d{12}$")


class AddressDetails(BaseModel):
    village: str = ""
    post: str = ""
    block: str = ""
    district: str = ""
    ps: str = Field("", description="Police station")
    pin: Optional[str] = Field(None, pattern=r"^\d{6}$")
    area: Literal["rural", "urban"] = "rural"


class BankDetails(BaseModel):
    account_no: str = ""
    ifsc: Optional[str] = Field(None, min_length=11, max_length=11)
    bank_name: str = ""
    branch: str = ""


# ----- Requests -----

class AdmissionCreate(BaseModel):
    """Full admission form. Saved as pending; numbers are assigned on approval."""

    class_selection: ClassSelection
    student_details: StudentDetails
    contact_details: ContactDetails
    address_details: AddressDetails = Field(default_factory=AddressDetails)
    bank_details: BankDetails = Field(default_factory=BankDetails)
    other_details: Dict[str, Any] = Field(default_factory=dict)
    prev_school_details: Dict[str, Any] = Field(default_factory=dict)
    subject_details: Dict[str, Any] = Field(default_factory=dict, description="Subject choices; depend on class")


class AdmissionUpdate(BaseModel):
    """Edit a record. Sections that are sent replace the stored section."""

    class_selection: Optional[ClassSelection] = None
    roll_number: Optional[str] = Field(None, min_length=1, max_length=20)
    admission_number: Optional[str] = Field(None, min_length=1, max_length=50)
    student_details: Optional[StudentDetails] = None
    contact_details: Optional[ContactDetails] = None
    address_details: Optional[AddressDetails] = None
    bank_details: Optional[BankDetails] = None
    other_details: Optional[Dict[str, Any]] = None
    prev_school_details: Optional[Dict[str, Any]] = None
    subject_details: Optional[Dict[str, Any]] = None


class QuickAdmissionCreate(BaseModel):
    """Partial record for an existing student who only needs a receipt. Approved on creation."""

    name_en: str = Field(..., min_length=1)
    name_hi: str = Field(..., min_length=1)
    father_name_en: str = Field(..., min_length=1)
    father_name_hi: str = Field(..., min_length=1)
    mobile_number: str = Field(..., pattern=r"^\d{10}$")
    class_selection: ClassSelection
    caste: Caste
    roll_number: str = Field(..., min_length=1, max_length=20)
    admission_number: Optional[str] = Field(None, max_length=50, description="Leave blank to auto-generate")
    admission_date: Optional[date] = Field(None, description="Defaults to today")


class AdmissionApprove(BaseModel):
    admission_date: date = Field(..., description="Date of admission set by the school")


# ----- Responses -----

class AdmissionDetails(BaseModel):
    admission_number: Optional[str] = None
    roll_number: Optional[str] = None
    admission_date: Optional[date] = None
    class_selection: str
    udise: str
    status: AdmissionStatus
    submitted_at: datetime


class AdmissionResponse(BaseModel):
    id: str
    admission_details: AdmissionDetails
    student_details: Dict[str, Any]
    contact_details: Dict[str, Any]
    address_details: Dict[str, Any]
    bank_details: Dict[str, Any]
    other_details: Dict[str, Any]
    prev_school_details: Dict[str, Any]
    subject_details: Dict[str, Any]
    updated_at: datetime


class QuickAdmissionResponse(BaseModel):
    id: str
    admission_number: str


class ClassCountResponse(BaseModel):
    class_selection: str
    approved_count: int
