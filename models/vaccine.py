"""VaccineDefinition class for the fixed immunization schedule."""

from dataclasses import dataclass

from .unit import OffsetUnit


@dataclass(frozen=True)
class VaccineDefinition:
    """A vaccine dose and its age offset from birth."""

    name: str
    offset: int
    unit: OffsetUnit

    def __post_init__(self):
        if self.offset < 0:
            raise ValueError(f"Offset must be non-negative, got {self.offset}")

    @property
    def age_label(self) -> str:
        """Human-readable age at which the dose is given."""
        if self.offset == 0:
            return "At birth"
        unit = self.unit.value
        if self.offset == 1:
            unit = unit[:-1]
        return f"{self.offset} {unit}"
