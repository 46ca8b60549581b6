from enum import Enum


class HouseName(str, Enum):
    YELLOW = "Yellow"
    BLUE = "Blue"
    GREEN = "Green"
    RED = "Red"


class EventType(str, Enum):
    INDIVIDUAL = "Individual"
    TEAM = "Team"


class EventStatus(str, Enum):
    UPCOMING = "Upcoming"
    ONGOING = "Ongoing"
    COMPLETED = "Completed"


class AgeCategory(str, Enum):
    U13 = "U13"
    U16 = "U16"
    U19 = "U19"


# Display order used by dashboards, imports and lazy house creation.
HOUSE_NAMES: tuple[str, ...] = tuple(house.value for house in HouseName)
AGE_CATEGORIES: tuple[str, ...] = tuple(category.value for category in AgeCategory)
EVENT_STATUSES: tuple[str, ...] = tuple(status.value for status in EventStatus)
