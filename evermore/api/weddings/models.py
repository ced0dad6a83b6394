from typing import Optional

from pydantic import BaseModel

from evermore.models import Wedding


class WeddingResponse(BaseModel):
    onboarded: bool
    wedding: Optional[Wedding] = None
