"""Domain enums for staffing gaps."""

from enum import Enum


class CompetenceStatus(str, Enum):
    """Overall competence status of one machine for a shift."""

    OK = "OK"
    GAP = "GAP"
    RISK = "RISK"
    NO_GO = "NO-GO"

    @property
    def rank(self) -> int:
        """Precedence used when combining findings (higher wins)."""
        return {
            CompetenceStatus.OK: 0,
            CompetenceStatus.GAP: 1,
            CompetenceStatus.RISK: 2,
            CompetenceStatus.NO_GO: 3,
        }[self]


class GapSeverity(str, Enum):
    """Severity of a single employee/skill shortfall."""

    OK = "OK"
    GAP = "GAP"
    RISK = "RISK"


class SuggestedAction(str, Enum):
    """Remediation suggested for a competence gap."""

    NO_ACTION = "No action"
    TRAIN = "Train"
    SWAP = "Swap"
    BUDDY = "Buddy"


class LineMachineStatus(str, Enum):
    """Hours-based staffing status of a machine in the line overview."""

    OK = "ok"
    PARTIAL = "partial"
    GAP = "gap"
    OVER = "over"
    NO_DEMAND = "no_demand"


class ShiftType(str, Enum):
    """Shift names as stored in the planning tables."""

    DAY = "Day"
    EVENING = "Evening"
    NIGHT = "Night"

    @classmethod
    def from_param(cls, value: str | None) -> "ShiftType":
        """Map a request parameter (any case) to a stored shift, defaulting to Day."""
        lookup = {member.value.lower(): member for member in cls}
        return lookup.get((value or "").strip().lower(), cls.DAY)
