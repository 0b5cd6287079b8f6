from enum import Enum


class TableNames(str, Enum):
    RSVPS = "rsvps"
    NOTIFICATION_LOGS = "notification_logs"
