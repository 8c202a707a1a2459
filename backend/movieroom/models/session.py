from typing import Optional

from pydantic import BaseModel


class Session(BaseModel):
    id: str # Socket ID
    username: str
    room_id: Optional[str] = None
