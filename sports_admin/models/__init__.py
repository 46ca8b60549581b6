from sports_admin.models.admin import Admin
from sports_admin.models.event import Event, EventParticipant
from sports_admin.models.house import House
from sports_admin.models.student import Student

__all__ = [
    "Admin",
    "Student",
    "Event",
    "EventParticipant",
    "House",
]
