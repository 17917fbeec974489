from __future__ import annotations

from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, Field

TWITCH = "TWITCH"


class GqlError(BaseModel):
    message: str
    path: Optional[List[Union[str, int]]] = None
    extensions: Optional[Dict[str, Any]] = None

    def __str__(self) -> str:
        return self.message


class GqlResponse(BaseModel):
    data: Optional[Dict[str, Any]] = None
    errors: Optional[List[GqlError]] = None


class Emote(BaseModel):
    id: str
    name: str


class EmoteSet(BaseModel):
    id: str
    name: Optional[str] = None
    emotes: List[Emote] = Field(default_factory=list)


class UserConnection(BaseModel):
    platform: str
    emote_set_id: Optional[str] = None


class User(BaseModel):
    id: str
    username: str
    connections: List[UserConnection] = Field(default_factory=list)

    def emote_set_for(self, platform: str = TWITCH) -> Optional[str]:
        for connection in self.connections:
            if connection.platform.upper() == platform and connection.emote_set_id:
                return connection.emote_set_id
        return None
