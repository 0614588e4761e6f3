import enum


class InviteMethod(str, enum.Enum):
    WHATSAPP = "whatsapp"
    MANUAL = "manual"


class InviteStatus(str, enum.Enum):
    NOT_SENT = "not_sent"
    WHATSAPP_SENT = "whatsapp_sent"
    ACKNOWLEDGED = "acknowledged"


class RsvpStatus(str, enum.Enum):
    PENDING = "pending"
    YES = "yes"
    NO = "no"
    MAYBE = "maybe"


# what a guest can answer on the RSVP page
GUEST_RSVP_CHOICES = (RsvpStatus.YES, RsvpStatus.NO, RsvpStatus.MAYBE)
