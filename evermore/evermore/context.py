import logging
from typing import Any, Dict, Optional

from pydantic import BaseModel, ValidationError

from evermore.db import select_rows
from evermore.exceptions import DuplicateWeddingError
from evermore.models import Collection, Wedding


class PlannerContext(BaseModel):
    """Who is asking, and which wedding (if any) they own.

    Built fresh for every request and every live-view mount.
    """

    user_id: str
    wedding: Optional[Wedding] = None

    @property
    def wedding_id(self) -> Optional[str]:
        return self.wedding.id if self.wedding else None

    @property
    def onboarded(self) -> bool:
        return self.wedding is not None


async def load_planner_context(user_id: str) -> Dict[str, Any]:
    """Look up the wedding owned by user_id.

    Returns {"status": "success", "context": PlannerContext}. Zero rows is a
    valid, not-onboarded context; more than one row is an integrity error.
    """
    logging.info(f"load_planner_context: user_id={user_id}")
    result = await select_rows(Collection.WEDDINGS, filters={"user_id": user_id})
    if result.get("status") != "success":
        return {"status": "error", "error_type": "store", "message": result.get("error", "Failed to load wedding.")}

    rows = result.get("data", [])
    try:
        if len(rows) > 1:
            raise DuplicateWeddingError(user_id, len(rows))
        wedding = Wedding.model_validate(rows[0]) if rows else None
    except DuplicateWeddingError as e:
        logging.error(str(e))
        return {"status": "error", "error_type": "integrity", "message": str(e)}
    except ValidationError as e:
        logging.error(f"Invalid wedding row for user_id={user_id}: {e}")
        return {"status": "error", "error_type": "store", "message": "Wedding record is malformed."}

    logging.debug(f"user_id={user_id}, wedding_id={wedding.id if wedding else None}")
    return {"status": "success", "context": PlannerContext(user_id=user_id, wedding=wedding)}
