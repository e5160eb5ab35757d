"""User access tokens for the Twitch Helix API."""

import json
import logging
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Optional

import requests

from cloudbot.core.errors import InvalidTokenError, NoTokenError

bot_logger = logging.getLogger("cloudbot.auth")


@dataclass
class TwitchAuthToken:
    token: str
    refresh: str

    @classmethod
    def from_json(cls, json_data: dict, source: str = "token file"):
        """Accept both Twitch's token response and our own saved shape."""
        token = json_data.get("access_token") or json_data.get("token")
        if not token:
            raise InvalidTokenError(f"No access token in {source}")
        return cls(token, json_data.get("refresh_token") or json_data.get("refresh") or "")


class TwitchAuth:
    def __init__(
        self,
        twitch_auth_url: Optional[str] = None,
        client_id: str = "",
        client_secret: str = "",
        auth_json: str = "data/auth.json",
    ) -> None:
        twitch_auth_url = twitch_auth_url or "https://id.twitch.tv/oauth2"
        self.token_endpoint = f"{twitch_auth_url}/token"
        self.client_id = client_id
        self.client_secret = client_secret
        self.auth_file = Path(auth_json).expanduser()
        self._token = None

    @property
    def token(self) -> TwitchAuthToken:
        if self._token is None:
            try:
                saved = json.loads(self.auth_file.read_text(encoding="utf8"))
            except FileNotFoundError as exc:
                raise NoTokenError(f"No token found at {self.auth_file}") from exc
            except (OSError, ValueError) as exc:
                raise InvalidTokenError(f"Unreadable token file {self.auth_file}: {exc}") from exc
            if not isinstance(saved, dict):
                raise InvalidTokenError(f"Unexpected token file layout in {self.auth_file}")
            self._token = TwitchAuthToken.from_json(saved, str(self.auth_file))
        return self._token

    def save(self, auth_token: TwitchAuthToken) -> None:
        self.auth_file.parent.mkdir(parents=True, exist_ok=True)
        self.auth_file.write_text(json.dumps(asdict(auth_token)), encoding="utf8")
        self._token = auth_token

    def refresh_token(self) -> None:
        if not self.token.refresh:
            raise InvalidTokenError(f"Token in {self.auth_file} can't be refreshed")
        response = requests.post(
            self.token_endpoint,
            data={
                "grant_type": "refresh_token",
                "refresh_token": self.token.refresh,
                "client_id": self.client_id,
                "client_secret": self.client_secret,
            },
            timeout=10,
        )
        if not response.ok:
            bot_logger.error(f"Unable to refresh token ({response.status_code}).")
            raise InvalidTokenError(f"{response.status_code}: {response.text}")
        self.save(TwitchAuthToken.from_json(response.json(), "refresh response"))
        bot_logger.info("Token refreshed!")
