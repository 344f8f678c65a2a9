from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """Caller roles used for authorization checks."""

    ADMIN = "admin"
    HR_MANAGER = "hr_manager"
    SCHEDULER = "scheduler"
    STAFF = "staff"


# Manage rotations and override critical conflicts.
MANAGER_ROLES = frozenset({Role.ADMIN, Role.HR_MANAGER})
# Create and edit shift assignments.
SCHEDULING_ROLES = MANAGER_ROLES | {Role.SCHEDULER}


class RotationPatternType(str, Enum):
    FOUR_BY_TWO = "4x2"
    FIVE_BY_TWO = "5x2"
    SIX_BY_ONE = "6x1"
    CUSTOM = "custom"


class ShiftType(str, Enum):
    MORNING = "morning"
    AFTERNOON = "afternoon"
    NIGHT = "night"
    GRAVEYARD = "graveyard"
    CUSTOM = "custom"


class AssignmentStatus(str, Enum):
    """Lifecycle of a shift assignment."""

    SCHEDULED = "scheduled"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class ConflictType(str, Enum):
    OVERLAP = "overlap"
    UNAVAILABLE = "unavailable"
    EXCEEDED_HOURS = "exceeded_hours"
    ROTATION_CONFLICT = "rotation_conflict"
    NONE = "none"


class ConflictSeverity(str, Enum):
    CRITICAL = "critical"
    WARNING = "warning"
    INFO = "info"
    NONE = "none"


class CoverageStatus(str, Enum):
    OVERSTAFFED = "overstaffed"
    ADEQUATE = "adequate"
    UNDERSTAFFED = "understaffed"


class ScheduleStatus(str, Enum):
    ACTIVE = "active"
    EXPIRED = "expired"
    DRAFT = "draft"
