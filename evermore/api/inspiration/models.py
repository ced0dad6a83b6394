from pydantic import BaseModel


class ShareToggle(BaseModel):
    """The sharing state the client currently shows."""

    shared_with_vendors: bool
