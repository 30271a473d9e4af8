from enum import Enum


class TableNames(str, Enum):
    EVENTS = "events"
    EVENT_RESPONSES = "event_responses"
