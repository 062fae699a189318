from __future__ import annotations

from pydantic import BaseModel


class Sms(BaseModel):
    """An SMS message and, once classified, the model's verdict.

    The body is forwarded as-is; an empty message is the model's call.
    """

    sms: str
    result: str | None = None
