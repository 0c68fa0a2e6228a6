"""The fixed childhood immunization schedule.

Order is the clinical administration sequence, not due-date order: several
doses share an age and later entries never get re-sorted.
"""

from typing import Tuple

from .unit import OffsetUnit
from .vaccine import VaccineDefinition

_D = OffsetUnit.DAYS
_W = OffsetUnit.WEEKS
_M = OffsetUnit.MONTHS
_Y = OffsetUnit.YEARS

VACCINE_SCHEDULE: Tuple[VaccineDefinition, ...] = (
    # Birth
    VaccineDefinition("BCG", 0, _D),
    VaccineDefinition("Hepatitis B (1st dose)", 0, _D),
    VaccineDefinition("OPV (Birth dose)", 0, _D),
    # 6 weeks
    VaccineDefinition("DPT (1st dose)", 6, _W),
    VaccineDefinition("IPV (1st dose)", 6, _W),
    VaccineDefinition("Hepatitis B (2nd dose)", 6, _W),
    VaccineDefinition("Hib (1st dose)", 6, _W),
    VaccineDefinition("Rotavirus (1st dose)", 6, _W),
    VaccineDefinition("PCV (1st dose)", 6, _W),
    # 10 weeks
    VaccineDefinition("DPT (2nd dose)", 10, _W),
    VaccineDefinition("IPV (2nd dose)", 10, _W),
    VaccineDefinition("Hib (2nd dose)", 10, _W),
    VaccineDefinition("Rotavirus (2nd dose)", 10, _W),
    VaccineDefinition("PCV (2nd dose)", 10, _W),
    # 14 weeks
    VaccineDefinition("DPT (3rd dose)", 14, _W),
    VaccineDefinition("IPV (3rd dose)", 14, _W),
    VaccineDefinition("Hib (3rd dose)", 14, _W),
    VaccineDefinition("Rotavirus (3rd dose)", 14, _W),
    VaccineDefinition("PCV (3rd dose)", 14, _W),
    # 9 months to 18 months
    VaccineDefinition("MMR (1st dose)", 9, _M),
    VaccineDefinition("Typhoid", 9, _M),
    VaccineDefinition("Hepatitis A (1st dose)", 12, _M),
    VaccineDefinition("MMR (2nd dose)", 15, _M),
    VaccineDefinition("Varicella (Chickenpox)", 15, _M),
    VaccineDefinition("PCV Booster", 15, _M),
    VaccineDefinition("DPT Booster", 18, _M),
    # School age
    VaccineDefinition("DPT Booster", 4, _Y),
    VaccineDefinition("OPV Booster", 4, _Y),
    VaccineDefinition("MMR Booster", 4, _Y),
    VaccineDefinition("Tdap Booster", 10, _Y),
    VaccineDefinition("HPV (for girls)", 10, _Y),
    VaccineDefinition("Meningococcal", 10, _Y),
)
