"""
Response envelope shared by every enveloped endpoint.
"""

from typing import Optional
from pydantic import BaseModel, ConfigDict

SUCCESS_CODE = 0


class Envelope(BaseModel):
    """{"code": 0, "msg": "success", ...payload fields}"""

    model_config = ConfigDict(extra="allow")

    code: Optional[int] = None
    msg: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.code is None or self.code == SUCCESS_CODE
