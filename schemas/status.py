from typing import Literal, Optional

from pydantic import BaseModel


class ConnectionStatus(BaseModel):
    service: str
    status: Literal["connected", "error"]
    message: Optional[str] = None
    latency: Optional[int] = None  # ms
