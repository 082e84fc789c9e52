"""Etherscan API v2 client for ERC-20 transfer history and balances.

Every call needs an API key; callers are expected to skip this client
entirely when no key is configured.
"""

from typing import Any, TypedDict

import backoff
import requests

from ..constants import ETHERSCAN_API_V2_URL, ETHEREUM_CHAIN_ID
from ..errors import MalformedResponse, NetworkUnavailable, RateLimited, Unauthorized
from ..logger import get_logger
from ..units import parse_raw_amount

logger = get_logger(__name__)

ETHERSCAN_MAX_RETRY_SECONDS = 30
NO_RECORDS_MESSAGES = {"no transactions found", "no records found"}


class EtherscanRateLimitError(RateLimited):
    """Raised when Etherscan returns a rate limit error."""

    kind = "RateLimited"


# Raw Etherscan ``tokentx`` entry; every value is a string.
TokenTransfer = TypedDict(
    "TokenTransfer",
    {
        "hash": str,
        "blockNumber": str,
        "timeStamp": str,
        "from": str,
        "to": str,
        "value": str,
        "tokenSymbol": str,
        "tokenDecimal": str,
    },
    total=False,
)


class EtherscanClient:
    """Client for the Etherscan ``account`` module.

    Provides:
    - Paginated ERC-20 transfer history (``tokentx``)
    - ERC-20 balance (``tokenbalance``)
    - Exponential backoff on transport errors and rate limiting
    """

    def __init__(
        self,
        api_key: str,
        chain_id: int = ETHEREUM_CHAIN_ID,
        *,
        page_size: int = 1000,
        max_pages: int = 10,
        request_timeout: float = 15,
        max_retry_seconds: float | None = None,
        session: requests.Session | None = None,
    ):
        """Initialize the Etherscan client.

        Args:
            api_key: Etherscan API key
            chain_id: Chain ID for the network (1 for mainnet, etc.)
            page_size: Number of results per page (max 1000)
            max_pages: Upper bound on pages fetched per history request
            request_timeout: HTTP request timeout in seconds
            max_retry_seconds: Retry window, capped at ETHERSCAN_MAX_RETRY_SECONDS
            session: Optional pre-configured requests session
        """
        self._api_key = api_key
        self._chain_id = chain_id
        self._page_size = max(1, min(page_size, 1000))
        self._max_pages = max(1, max_pages)
        self._request_timeout = request_timeout
        self._max_retry_seconds = max_retry_seconds
        self._owns_session = session is None
        self._session = session or requests.Session()

    def close(self) -> None:
        if self._owns_session:
            self._session.close()

    def retry_window(self) -> float:
        """Seconds spent retrying one call before giving up."""
        if self._max_retry_seconds is None:
            return ETHERSCAN_MAX_RETRY_SECONDS
        return min(ETHERSCAN_MAX_RETRY_SECONDS, self._max_retry_seconds)

    def fetch_token_transfers(
        self, contract_address: str, address: str
    ) -> list[TokenTransfer]:
        """Fetch ERC-20 transfers of ``contract_address`` touching ``address``.

        Returns:
            Newest-first list of raw transfer records.

        Raises:
            Unauthorized: If the API key is rejected.
            MalformedResponse: If the payload is not in the expected shape.
        """
        transfers: list[TokenTransfer] = []
        for page in range(1, self._max_pages + 1):
            result = self._call(
                {
                    "module": "account",
                    "action": "tokentx",
                    "contractaddress": contract_address,
                    "address": address,
                    "startblock": "0",
                    "endblock": "99999999",
                    "page": page,
                    "offset": self._page_size,
                    "sort": "desc",
                }
            )
            if not isinstance(result, list):
                raise MalformedResponse(f"Unexpected Etherscan tokentx result: {result}")

            transfers.extend(result)
            if len(result) < self._page_size:
                break

        logger.debug(
            "Etherscan tokentx: token=%s address=%s found=%d",
            contract_address,
            address,
            len(transfers),
        )
        return transfers

    def fetch_token_balance(self, contract_address: str, address: str) -> int:
        """Return the raw ERC-20 balance of ``address``."""
        result = self._call(
            {
                "module": "account",
                "action": "tokenbalance",
                "contractaddress": contract_address,
                "address": address,
                "tag": "latest",
            }
        )
        return parse_raw_amount(result)

    def _call(self, params: dict[str, Any]) -> Any:
        """Make a request to the Etherscan API and return its ``result``.

        Transport errors and rate limiting are retried with exponential
        backoff for at most ``retry_window()`` seconds.
        """
        retrying = backoff.on_exception(
            backoff.expo,
            (NetworkUnavailable, EtherscanRateLimitError),
            max_time=self.retry_window,
            jitter=backoff.full_jitter,
        )(self._call_once)
        return retrying(params)

    def _call_once(self, params: dict[str, Any]) -> Any:
        query: dict[str, Any] = {
            "chainid": str(self._chain_id),
            **params,
            "apikey": self._api_key,
        }

        try:
            response = self._session.get(
                ETHERSCAN_API_V2_URL,
                params=query,
                timeout=self._request_timeout,
            )
        except requests.RequestException as e:
            raise NetworkUnavailable(f"Etherscan request failed: {e}") from e

        if response.status_code == 429:
            raise EtherscanRateLimitError("Etherscan HTTP 429")
        if response.status_code >= 400:
            raise NetworkUnavailable(f"Etherscan HTTP {response.status_code}")

        try:
            payload = response.json()
        except ValueError as e:
            raise MalformedResponse("Invalid JSON from Etherscan") from e
        if not isinstance(payload, dict):
            raise MalformedResponse("Unexpected Etherscan payload format")

        status = str(payload.get("status", "")).strip()
        message = str(payload.get("message", "")).strip()
        result = payload.get("result")

        if status == "1":
            return result

        if message.lower() in NO_RECORDS_MESSAGES:
            return []
        detail = result if isinstance(result, str) else message
        if "rate limit" in detail.lower():
            raise EtherscanRateLimitError(detail)
        if "api key" in detail.lower():
            raise Unauthorized(f"Etherscan rejected the API key: {detail}")
        raise MalformedResponse(f"Etherscan {params.get('action')} failed: {detail}")
