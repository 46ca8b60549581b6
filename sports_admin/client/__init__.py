from sports_admin.client.api import BulkImportResult, Snapshot, SportsApiClient
from sports_admin.client.records import EventRecord, HouseRecord, ParticipantRecord, StudentRecord
from sports_admin.client.session import Session, get_session, reset_session

__all__ = [
    "SportsApiClient",
    "Snapshot",
    "BulkImportResult",
    "StudentRecord",
    "EventRecord",
    "ParticipantRecord",
    "HouseRecord",
    "Session",
    "get_session",
    "reset_session",
]
