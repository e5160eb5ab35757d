import logging
from functools import lru_cache, wraps

import requests

from cloudbot.core.auth import TwitchAuth
from cloudbot.core.errors import CollaboratorError, InvalidTokenError

bot_logger = logging.getLogger("cloudbot.api")


class TwitchAPI:
    def __init__(self, auth: TwitchAuth, api_url: str = "https://api.twitch.tv/helix"):
        self.auth = auth
        self.api_url = api_url

    @staticmethod
    def requires_auth(func):
        """Refresh the token once and retry when Twitch rejects it."""

        @wraps(func)
        def aux(self, *args, **kwargs):
            try:
                return func(self, *args, **kwargs)
            except InvalidTokenError:
                self.auth.refresh_token()
                return func(self, *args, **kwargs)

        return aux

    @property
    def headers(self) -> dict[str, str]:
        return {
            "Authorization": f"Bearer {self.auth.token.token}",
            "Client-Id": self.auth.client_id,
        }

    def check(self, response: requests.Response, action: str) -> requests.Response:
        if response.status_code == 401:
            raise InvalidTokenError(f"{action}: {response.text}")
        if not response.ok:
            bot_logger.error(
                f"Failed to {action}. "
                f"API call returned status code {response.status_code}"
            )
            bot_logger.error(response.text)
            raise CollaboratorError(
                f"Failed to {action} ({response.status_code}): {response.text}"
            )
        return response

    @requires_auth
    def user_info_by_login(self, login: str) -> dict:
        response = requests.get(
            f"{self.api_url}/users",
            params={"login": login},
            headers=self.headers,
            timeout=10,
        )
        return self.check(response, f"look up {login}").json()

    @lru_cache
    def get_id_from_login(self, login: str) -> str:
        data = self.user_info_by_login(login).get("data")
        if not data:
            raise CollaboratorError(f"Couldn't find user {login}.")
        user_id = data[0]["id"]
        bot_logger.info(f"{login}'s id is {user_id}")
        return user_id

    @requires_auth
    def send_chat_message(self, broadcaster_id: str, sender_id: str, msg: str):
        response = requests.post(
            f"{self.api_url}/chat/messages",
            json={
                "broadcaster_id": broadcaster_id,
                "sender_id": sender_id,
                "message": msg,
            },
            headers=self.headers,
            timeout=10,
        )
        data = self.check(response, "send chat message").json()
        for sent in data.get("data", []):
            if not sent.get("is_sent", True):
                reason = (sent.get("drop_reason") or {}).get("message", "unknown")
                raise CollaboratorError(f"Chat message dropped: {reason}")
        bot_logger.info(f"Sent message: [{msg}]")
