from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from types import MappingProxyType
from typing import Iterable, Mapping, Optional

from ..common.datetime_utils import coerce_date, format_iso_date
from ..core.enums import AttendanceStatus, DayStatus


@dataclass(frozen=True)
class AttendanceEntry:
    """One member's attendance for one class and date.

    Identity for upserts is ``(member_id, class_id, session_date)``; a later
    write with the same key replaces every field of the earlier one.
    """

    member_id: str
    class_id: str
    session_date: date
    status: AttendanceStatus
    recorded_by: Optional[str] = None

    @property
    def key(self) -> tuple[str, str, date]:
        return (self.member_id, self.class_id, self.session_date)

    def to_record(self) -> dict:
        return {
            "member_id": self.member_id,
            "class_id": self.class_id,
            "session_date": self.session_date,
            "status": self.status.value,
            "recorded_by": self.recorded_by,
        }

    @classmethod
    def from_record(cls, r: Mapping) -> "AttendanceEntry":
        return cls(
            member_id=str(r["member_id"]),
            class_id=str(r["class_id"]),
            session_date=coerce_date(r["session_date"]),
            status=AttendanceStatus(r["status"]),
            recorded_by=r.get("recorded_by"),
        )


@dataclass(frozen=True)
class AttendanceBoard:
    """In-memory member -> status mapping for exactly one (class, date)."""

    class_id: str
    session_date: date
    statuses: Mapping[str, AttendanceStatus] = field(default_factory=dict)

    def __post_init__(self):
        object.__setattr__(self, "statuses", MappingProxyType(dict(self.statuses)))

    @classmethod
    def from_entries(cls, class_id: str, session_date: date, entries: Iterable[AttendanceEntry]) -> "AttendanceBoard":
        statuses: dict[str, AttendanceStatus] = {}
        for e in entries:
            if e.class_id == class_id and e.session_date == session_date:
                statuses[e.member_id] = e.status
        return cls(class_id=class_id, session_date=session_date, statuses=statuses)

    @property
    def key(self) -> tuple[str, date]:
        return (self.class_id, self.session_date)

    def status_of(self, member_id: str) -> AttendanceStatus:
        return self.statuses.get(member_id, AttendanceStatus.ABSENT)

    def same_statuses(self, other: "AttendanceBoard") -> bool:
        """Equal as seen through status_of: an explicit absent matches a missing entry."""

        if self.key != other.key:
            return False
        members = set(self.statuses) | set(other.statuses)
        return all(self.status_of(m) == other.status_of(m) for m in members)

    def with_status(self, member_id: str, status: AttendanceStatus) -> "AttendanceBoard":
        statuses = dict(self.statuses)
        statuses[member_id] = AttendanceStatus(status)
        return AttendanceBoard(class_id=self.class_id, session_date=self.session_date, statuses=statuses)

    def to_dict(self) -> dict:
        return {
            "class_id": self.class_id,
            "date": format_iso_date(self.session_date),
            "statuses": {m: s.value for m, s in self.statuses.items()},
        }


def status_of(board: AttendanceBoard, member_id: str) -> AttendanceStatus:
    """Status of a member on the board; members without an entry are absent."""

    return board.status_of(member_id)


def toggle(board: AttendanceBoard, member_id: str, requested: AttendanceStatus) -> AttendanceBoard:
    """Clicking the member's current status clears it to absent, anything else replaces it."""

    requested = AttendanceStatus(requested)
    if status_of(board, member_id) == requested:
        return board.with_status(member_id, AttendanceStatus.ABSENT)
    return board.with_status(member_id, requested)


@dataclass(frozen=True)
class DaySummary:
    """Counters for one class and date over its roster."""

    present: int = 0
    late: int = 0
    excused: int = 0
    absent: int = 0

    @property
    def attended(self) -> int:
        return self.present + self.late

    @property
    def total(self) -> int:
        return self.present + self.late + self.excused + self.absent

    def to_dict(self) -> dict:
        return {
            "present": self.present,
            "late": self.late,
            "excused": self.excused,
            "absent": self.absent,
            "attended": self.attended,
            "total": self.total,
        }


def summarize(board: AttendanceBoard, roster: Iterable[str]) -> DaySummary:
    """Count roster members by status; duplicate ids count once."""

    counts = {s: 0 for s in AttendanceStatus}
    for member_id in dict.fromkeys(roster):
        counts[status_of(board, member_id)] += 1
    return DaySummary(
        present=counts[AttendanceStatus.PRESENT],
        late=counts[AttendanceStatus.LATE],
        excused=counts[AttendanceStatus.EXCUSED],
        absent=counts[AttendanceStatus.ABSENT],
    )


@dataclass(frozen=True)
class ClassDayStatus:
    """A class is done for a day once any attendance row exists for it."""

    class_id: str
    name: str
    status: DayStatus
    recorded: int = 0

    def to_dict(self) -> dict:
        return {"class_id": self.class_id, "name": self.name, "status": self.status.value, "recorded": self.recorded}
