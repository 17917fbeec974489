from __future__ import annotations

from typing import Any, Dict, List, Optional

import requests
from pydantic import ValidationError

from ..core.config import DEFAULT_ENDPOINT
from ..core.logger import get_logger
from .models import EmoteSet, GqlError, GqlResponse, User
from .queries import EMOTE_RENAME, GET_EMOTE_SET, GET_USER_ACTIVE_EMOTE_SET

logger = get_logger(__name__)

AUTH_COOKIE = "seventv-auth"


class SevenTvGqlError(Exception):
    pass


class NotFound(SevenTvGqlError):
    pass


class UserNotFound(NotFound):
    def __init__(self, username: str) -> None:
        self.username = username
        super().__init__(f"未找到用户: {username}")


class EmoteSetNotFound(NotFound):
    def __init__(self, set_id: str) -> None:
        self.set_id = set_id
        super().__init__(f"未找到表情集: {set_id}")


class EmoteRenameFailed(SevenTvGqlError):
    def __init__(self, errors: List[GqlError]) -> None:
        self.errors = errors
        super().__init__("; ".join(str(error) for error in errors) or "改名失败")


class RequestError(SevenTvGqlError):
    pass


class SevenTvGqlClient:
    def __init__(
        self,
        token: Optional[str] = None,
        endpoint: str = DEFAULT_ENDPOINT,
        timeout: int = 30,
        session: Optional[requests.Session] = None,
    ) -> None:
        self.token = token
        self.endpoint = endpoint
        self.timeout = timeout
        self._session = session or requests.Session()

    def close(self) -> None:
        self._session.close()

    def __enter__(self) -> "SevenTvGqlClient":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def _post(
        self,
        query: str,
        variables: Dict[str, Any],
        authenticated: bool = False,
    ) -> GqlResponse:
        headers: Dict[str, str] = {}
        if authenticated:
            if not self.token:
                raise SevenTvGqlError("缺少 7TV 登录令牌, 无法改名")
            headers["Cookie"] = f"{AUTH_COOKIE}={self.token}"
        payload = {"query": query, "variables": variables}
        try:
            resp = self._session.post(
                self.endpoint, json=payload, headers=headers, timeout=self.timeout
            )
            resp.raise_for_status()
            return GqlResponse.model_validate(resp.json())
        except requests.RequestException as exc:
            raise RequestError(f"请求失败: {exc}") from exc
        except (ValueError, ValidationError) as exc:
            raise RequestError(f"响应格式错误: {exc}") from exc

    def get_user_emote_set(self, username: str) -> EmoteSet:
        body = self._post(GET_USER_ACTIVE_EMOTE_SET, {"username": username})
        found = (body.data or {}).get("users") or []
        if not found:
            raise UserNotFound(username)
        try:
            user = User.model_validate(found[0])
        except ValidationError as exc:
            raise RequestError(f"用户数据格式错误: {exc}") from exc
        # the search is fuzzy, only an exact match counts
        if user.username.lower() != username.lower():
            raise UserNotFound(username)
        set_id = user.emote_set_for()
        if set_id is None:
            raise UserNotFound(username)
        logger.info("用户 %s 当前表情集: %s", user.username, set_id)
        return self.get_emote_set(set_id)

    def get_emote_set(self, set_id: str) -> EmoteSet:
        body = self._post(GET_EMOTE_SET, {"set_id": set_id})
        raw = (body.data or {}).get("emoteSet")
        if raw is None:
            raise EmoteSetNotFound(set_id)
        try:
            return EmoteSet.model_validate(raw)
        except ValidationError as exc:
            raise RequestError(f"表情集数据格式错误: {exc}") from exc

    def rename_emote(self, set_id: str, emote_id: str, name: str) -> None:
        body = self._post(
            EMOTE_RENAME,
            {"set_id": set_id, "emote_id": emote_id, "name": name},
            authenticated=True,
        )
        if body.errors:
            raise EmoteRenameFailed(body.errors)
