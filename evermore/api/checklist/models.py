from pydantic import BaseModel


class TaskToggle(BaseModel):
    """The completion state the client currently shows."""

    completed: bool
