"""Response envelope shared by all error responses and the auth/user endpoints."""
from typing import Any
from pydantic import BaseModel

SUCCESS_CODE = 20000


class Report(BaseModel):
    """Schema for the ``{code, result}`` envelope."""
    code: int
    result: Any
