# Асинхронний клієнт до Pulse API з явним власником токена
# (замість глобальної змінної з кешованим токеном).

import datetime
import logging
from dataclasses import dataclass
from typing import Awaitable, Callable

import httpx

logger = logging.getLogger(__name__)


@dataclass
class IssuedToken:
    value: str
    expires_at: datetime.datetime


TokenRefresher = Callable[[], Awaitable[IssuedToken]]


class PulseClientError(Exception):
    def __init__(self, status_code: int, detail: str):
        super().__init__(f"{status_code}: {detail}")
        self.status_code = status_code
        self.detail = detail


class IdTokenHolder:
    """
    Тримає Firebase ID token та оновлює його через refresher,
    коли він прострочений (з невеликим запасом) або коли сервер повернув 401.
    """

    def __init__(
        self,
        refresher: TokenRefresher,
        leeway: datetime.timedelta = datetime.timedelta(seconds=60),
        clock: Callable[[], datetime.datetime] | None = None,
    ):
        self._refresher = refresher
        self._leeway = leeway
        self._clock = clock or (lambda: datetime.datetime.now(datetime.timezone.utc))
        self._token: IssuedToken | None = None

    def is_expired(self) -> bool:
        if self._token is None:
            return True
        return self._clock() + self._leeway >= self._token.expires_at

    async def get(self) -> str:
        if self.is_expired():
            await self.refresh()
        return self._token.value

    async def refresh(self) -> str:
        self._token = await self._refresher()
        logger.info(f"ID token refreshed, expires at {self._token.expires_at.isoformat()}")
        return self._token.value

    def invalidate(self) -> None:
        self._token = None


class PulseClient:
    def __init__(self, base_url: str, token_holder: IdTokenHolder, transport: httpx.AsyncBaseTransport | None = None):
        self.token_holder = token_holder
        self._client = httpx.AsyncClient(base_url=base_url, transport=transport)

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc):
        await self.aclose()

    async def aclose(self):
        await self._client.aclose()

    async def _request(self, method: str, url: str, json: dict | None = None) -> dict:
        token = await self.token_holder.get()
        response = await self._send(method, url, token, json)

        if response.status_code == 401:
            # Токен міг бути відкликаний раніше строку — одна спроба з новим
            self.token_holder.invalidate()
            token = await self.token_holder.refresh()
            response = await self._send(method, url, token, json)

        try:
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            try:
                detail = e.response.json().get("detail", e.response.text)
            except ValueError:
                detail = e.response.text
            raise PulseClientError(e.response.status_code, str(detail)) from e

        return response.json()

    async def _send(self, method: str, url: str, token: str, json: dict | None) -> httpx.Response:
        return await self._client.request(
            method,
            url,
            json=json,
            headers={"Authorization": f"Bearer {token}"},
        )

    async def spending_advisor(self, amount) -> dict:
        return await self._request("POST", "/api/v1/spending-advisor", {"amount": str(amount)})

    async def financial_advisor(self, query: str) -> dict:
        return await self._request("POST", "/api/v1/financial-advisor", {"query": query})

    async def get_summary(self) -> dict:
        return await self._request("GET", "/api/v1/summary")

    async def set_account_balance(self, balance) -> dict:
        return await self._request("POST", "/api/v1/account-balance", {"balance": str(balance)})
