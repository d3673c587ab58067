from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional

from logic.formatting import format_timestamp, parse_timestamp

NATURE_OF_CASE = ("Emergency", "Urgent", "Standard")
DEFAULT_STATUS = "Pending"
DEFAULT_STAGE = "Front Office Receipt"


def _text(record: Dict[str, Any], key: str, default: str = "") -> str:
    value = record.get(key)
    if value is None or value == "":
        return default
    return str(value)


@dataclass
class ProgressNote:
    note: str
    created_at: str  # raw server timestamp

    @classmethod
    def from_record(cls, record: Dict[str, Any]) -> "ProgressNote":
        return cls(note=_text(record, "note"), created_at=_text(record, "created_at"))

    @property
    def created_display(self) -> str:
        return format_timestamp(self.created_at)


@dataclass
class Case:
    id: Any
    reference_number: str = ""
    sender_name: str = ""
    subject: str = ""
    country_of_origin: str = ""
    distressed_person_name: str = ""
    nature_of_case: str = ""
    case_details: str = ""
    status: str = DEFAULT_STATUS
    stage: str = DEFAULT_STAGE
    receiving_date: str = ""
    progress_notes: List[ProgressNote] = field(default_factory=list)

    @classmethod
    def from_record(cls, record: Dict[str, Any]) -> "Case":
        """Build a Case from a server record, filling display defaults."""
        notes = record.get("progress_notes") or []
        return cls(
            id=record.get("id"),
            reference_number=_text(record, "reference_number"),
            sender_name=_text(record, "sender_name"),
            subject=_text(record, "subject"),
            country_of_origin=_text(record, "country_of_origin"),
            distressed_person_name=_text(record, "distressed_person_name"),
            nature_of_case=_text(record, "nature_of_case"),
            # older records carry the free text under "description"
            case_details=_text(record, "case_details") or _text(record, "description"),
            status=_text(record, "status", DEFAULT_STATUS),
            stage=_text(record, "stage", DEFAULT_STAGE),
            receiving_date=_text(record, "receiving_date"),
            progress_notes=[ProgressNote.from_record(n) for n in notes],
        )


@dataclass
class CaseRow:
    """One row of the case list table."""
    id: Any
    reference_number: str
    sender_name: str
    receiving_date: str  # already formatted for display
    subject: str
    status: str
    stage: str
    received_at: Optional[datetime] = None  # for sorting by date

    @classmethod
    def from_record(cls, record: Dict[str, Any]) -> "CaseRow":
        raw_date = record.get("receiving_date")
        return cls(
            id=record.get("id"),
            reference_number=_text(record, "reference_number"),
            sender_name=_text(record, "sender_name"),
            receiving_date=format_timestamp(raw_date),
            subject=_text(record, "subject"),
            status=_text(record, "status", DEFAULT_STATUS),
            stage=_text(record, "stage", DEFAULT_STAGE),
            received_at=_parsed(raw_date),
        )


@dataclass
class DashboardStats:
    """Case counts for the dashboard strip."""
    total_cases: int = 0
    cases_by_status: Dict[str, int] = field(default_factory=dict)
    cases_by_nature: Dict[str, int] = field(default_factory=dict)

    @classmethod
    def from_record(cls, record: Dict[str, Any]) -> "DashboardStats":
        return cls(
            total_cases=int(record.get("totalCases") or 0),
            cases_by_status=_counts(record.get("casesByStatus")),
            cases_by_nature=_counts(record.get("casesByNature")),
        )

    @property
    def summary(self) -> str:
        parts = [f"Total cases: {self.total_cases}"]
        parts += [f"{status}: {count}" for status, count in sorted(self.cases_by_status.items())]
        return "  ·  ".join(parts)


def _counts(value: Any) -> Dict[str, int]:
    if not isinstance(value, dict):
        return {}
    return {str(k or "Unknown"): int(v or 0) for k, v in value.items()}


def _parsed(value: Any) -> Optional[datetime]:
    if value is None or value == "":
        return None
    try:
        return parse_timestamp(value)
    except ValueError:
        return None
