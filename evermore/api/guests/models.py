from pydantic import BaseModel

from evermore.models import RsvpStatus


class RsvpUpdate(BaseModel):
    rsvp_status: RsvpStatus
