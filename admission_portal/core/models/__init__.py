from admission_portal.core.models.school import School
from admission_portal.core.models.admission import Admission
from admission_portal.core.models.fee_structure import FeeStructure
from admission_portal.core.models.admission_counter import AdmissionCounter

__all__ = [
    "School",
    "Admission",
    "FeeStructure",
    "AdmissionCounter",
]
