from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional, Sequence


@dataclass(frozen=True)
class FaceProfile:
    """Enrolled face reference of one employee (1:1, stored on the employee row)."""

    employee_id: int
    descriptor: tuple[float, ...]
    enrolled_at: datetime
    image_path: Optional[str] = None

    @classmethod
    def from_values(
        cls,
        *,
        employee_id: int,
        descriptor: Sequence[float],
        enrolled_at: datetime,
        image_path: Optional[str] = None,
    ) -> "FaceProfile":
        return cls(
            employee_id=int(employee_id),
            descriptor=tuple(float(v) for v in descriptor),
            enrolled_at=enrolled_at,
            image_path=image_path,
        )


@dataclass(frozen=True)
class MatchResult:
    accepted: bool
    distance: float
    threshold: float

    def to_dict(self) -> dict:
        return {"accepted": self.accepted, "distance": round(self.distance, 4), "threshold": self.threshold}
