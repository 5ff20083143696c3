"""
Request bodies.

Field constraints are checked by the services so that every rejection
carries the same error shape.
"""

from typing import Optional

from pydantic import BaseModel


class AddCharacterRequest(BaseModel):
    name: Optional[str] = None


class MessageRequest(BaseModel):
    name: Optional[str] = None
    message: Optional[str] = None
