"""
backend/matka/providers/matka_api.py

Purpose:
    Adapter for the matka backend REST contract (wallet, bets, markets).
    Returns lightly validated payloads; shape problems raise DataError.

Dependencies:
    - matka.providers.http_client
    - matka.config
"""

import logging
from typing import Any, Optional
from urllib.parse import quote

from matka.auth import CredentialProvider, SettingsCredentialProvider
from matka.config import settings
from matka.errors import DataError
from matka.providers.http_client import ApiClient

logger = logging.getLogger("matka.matka_api")

PROVIDER_NAME = "matka"


class MatkaApi:
    """One method per backend endpoint."""

    def __init__(
        self,
        credentials: Optional[CredentialProvider] = None,
        base_url: Optional[str] = None,
        client: Optional[ApiClient] = None,
    ):
        self.credentials = credentials or SettingsCredentialProvider()
        self._client = client or ApiClient(
            PROVIDER_NAME,
            base_url or settings.MATKA_API_BASE_URL,
            self.credentials,
            timeout=settings.HTTP_TIMEOUT_SECONDS,
        )

    async def get_wallet_balance(self) -> int:
        data = await self._client.get("/wallet/balance")
        if not isinstance(data, dict) or "walletBalance" not in data:
            raise DataError("bad-wallet-payload")
        try:
            return int(data["walletBalance"])
        except (TypeError, ValueError) as exc:
            raise DataError("bad-wallet-payload") from exc

    async def get_user_bets(self) -> list[dict[str, Any]]:
        data = await self._client.get("/bets/user/")
        bets = data.get("bets") if isinstance(data, dict) else None
        if not isinstance(bets, list):
            raise DataError("bad-bets-payload")
        return [b for b in bets if isinstance(b, dict)]

    async def place_bet(
        self,
        *,
        market_name: str,
        game_name: str,
        number: str,
        amount: int,
        winning_ratio: int,
        bet_type: str,
    ) -> dict[str, Any]:
        data = await self._client.post(
            "/bets/place",
            json={
                "marketName": market_name,
                "gameName": game_name,
                "number": number,
                "amount": amount,
                "winningRatio": winning_ratio,
                "betType": bet_type,
            },
        )
        return data if isinstance(data, dict) else {}

    async def get_market_id(self, market_name: str) -> str:
        data = await self._client.get(
            f"/markets/get-market-id/{quote(market_name, safe='')}",
            require_auth=False,
        )
        market_id = data.get("marketId") if isinstance(data, dict) else None
        if not market_id:
            raise DataError("bad-market-payload")
        return str(market_id)

    async def get_results(self, market_id: str) -> list[Any]:
        data = await self._client.get(
            f"/markets/get-results/{quote(str(market_id), safe='')}"
        )
        if not isinstance(data, list):
            raise DataError("bad-results-payload")
        return data

    async def aclose(self) -> None:
        await self._client.aclose()
