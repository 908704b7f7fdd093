"""Account aggregation HTTP client for refreshing linked account balances"""

import httpx
from typing import List
from credit_health.domain.models import Account
from credit_health.domain.exceptions import AggregationAPIError
from credit_health.config import settings


class AggregatorClient:
    """Client for the external account aggregation provider"""

    def __init__(self, base_url: str | None = None, timeout: float | None = None):
        self.base_url = base_url or settings.aggregator_api_base
        self.timeout = timeout or settings.http_timeout_seconds

    async def refresh_accounts(self, user_id: str) -> List[Account]:
        """
        Trigger a balance refresh for all of a user's linked accounts.

        Each call is billed by the provider; callers gate it with the
        refresh rate limiter.

        Raises:
            AggregationAPIError: On timeout, HTTP errors, or invalid response
        """
        async with httpx.AsyncClient(timeout=self.timeout) as client:
            try:
                response = await client.post(
                    f"{self.base_url}/accounts/refresh",
                    json={"user_id": user_id},
                )
                response.raise_for_status()
                data = response.json()

                return [
                    Account(
                        external_id=str(acc["account_id"]),
                        name=acc["name"],
                        account_type=acc["type"],
                        balance=float(acc["balance"]),
                        institution_name=acc.get("institution_name", ""),
                    )
                    for acc in data.get("accounts", [])
                ]

            except httpx.TimeoutException as e:
                raise AggregationAPIError(f"Aggregation API timeout after {self.timeout}s") from e
            except httpx.HTTPStatusError as e:
                raise AggregationAPIError(f"Aggregation API error: {e.response.status_code}") from e
            except httpx.RequestError as e:
                raise AggregationAPIError(f"Aggregation API unreachable: {e}") from e
            except (KeyError, ValueError, TypeError) as e:
                raise AggregationAPIError(f"Invalid account data from aggregator: {e}") from e
