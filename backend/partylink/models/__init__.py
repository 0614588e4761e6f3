from .enums import InviteMethod, InviteStatus, RsvpStatus
from .user import User
from .login_code import LoginCode
from .event import Event
from .participant import Participant
from .event_invite import EventInvite
from .attendance import Attendance

__all__ = [
    "InviteMethod",
    "InviteStatus",
    "RsvpStatus",
    "User",
    "LoginCode",
    "Event",
    "Participant",
    "EventInvite",
    "Attendance",
]
