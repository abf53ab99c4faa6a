"""Stripe REST client

Overview
--------
Thin async client over Stripe's form-encoded REST API, covering just the
calls TowGo needs:

- customers: ``create_customer``
- products/prices: ``create_product``, ``list_products``, ``create_price``,
  ``retrieve_price``, ``list_prices``
- checkout: ``create_checkout_session``, ``retrieve_checkout_session``

Requests authenticate with the secret key as a Bearer token. Nested
parameters are flattened with ``encode_form`` the way Stripe expects
(``metadata[userId]=1``, ``line_items[0][price]=price_123``).

Errors
------
Non-2xx responses raise ``StripeError`` carrying the status code and Stripe's
``error`` object as ``details``.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Tuple

import httpx

from ..errors import StripeError


def encode_form(params: Dict[str, Any], prefix: str = "") -> List[Tuple[str, str]]:
    """Flatten nested params into Stripe's bracketed form encoding.

    Args:
        params: Parameters; values may be dicts, lists, booleans or scalars.
        prefix: Key prefix used for recursion.

    Returns:
        A list of ``(key, value)`` pairs suitable for ``httpx`` ``data=``.
    """
    pairs: List[Tuple[str, str]] = []
    for key, value in params.items():
        full_key = f"{prefix}[{key}]" if prefix else str(key)
        if value is None:
            continue
        if isinstance(value, dict):
            pairs.extend(encode_form(value, full_key))
        elif isinstance(value, (list, tuple)):
            for index, item in enumerate(value):
                item_key = f"{full_key}[{index}]"
                if isinstance(item, dict):
                    pairs.extend(encode_form(item, item_key))
                else:
                    pairs.append((item_key, _scalar(item)))
        else:
            pairs.append((full_key, _scalar(value)))
    return pairs


def _scalar(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


class StripeClient:
    """Async HTTP client for the subset of the Stripe API used by TowGo."""

    def __init__(
        self,
        secret_key: Optional[str],
        *,
        api_base: str = "https://api.stripe.com/v1",
        timeout: float = 30.0,
        client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        """Create a Stripe client.

        Args:
            secret_key: Stripe secret key (``sk_...``).
            api_base: REST API base URL including the version path.
            timeout: Default HTTP timeout for the internal client.
            client: Optional preconfigured ``httpx.AsyncClient`` to use.
        """
        self.secret_key = secret_key
        self.api_base = api_base.rstrip("/")
        self._client = client or httpx.AsyncClient(timeout=timeout)
        self._logger = logging.getLogger(__name__)

    @property
    def is_configured(self) -> bool:
        return bool(self.secret_key)

    def _headers(self) -> Dict[str, str]:
        return {"Authorization": f"Bearer {self.secret_key}"}

    async def aclose(self) -> None:
        await self._client.aclose()

    async def _request(self, method: str, path: str, params: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        if not self.is_configured:
            raise StripeError("Stripe is not configured")
        url = f"{self.api_base}{path}"
        self._logger.debug("StripeClient: %s %s", method, path)
        try:
            if method == "GET":
                response = await self._client.get(url, headers=self._headers(), params=encode_form(params or {}))
            else:
                response = await self._client.post(url, headers=self._headers(), data=dict(encode_form(params or {})))
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            body: Any
            try:
                body = e.response.json().get("error", e.response.text)
            except ValueError:
                body = e.response.text
            message = body.get("message") if isinstance(body, dict) else None
            raise StripeError(
                message or f"Stripe request failed: {e.response.status_code}",
                status_code=e.response.status_code,
                details=body,
            ) from e
        except httpx.HTTPError as e:
            raise StripeError(f"Stripe request failed: {e}") from e
        return response.json()

    # ----------------------
    # Customers
    # ----------------------
    async def create_customer(self, *, email: Optional[str] = None, metadata: Optional[Dict[str, str]] = None) -> Dict[str, Any]:
        """``POST /customers``"""
        return await self._request("POST", "/customers", {"email": email, "metadata": metadata or {}})

    # ----------------------
    # Products and prices
    # ----------------------
    async def create_product(
        self, *, name: str, description: Optional[str] = None, metadata: Optional[Dict[str, str]] = None
    ) -> Dict[str, Any]:
        """``POST /products``"""
        return await self._request(
            "POST", "/products", {"name": name, "description": description or None, "metadata": metadata or {}}
        )

    async def list_products(self, *, active: bool = True, limit: int = 100) -> List[Dict[str, Any]]:
        """``GET /products``; returns the ``data`` list."""
        result = await self._request("GET", "/products", {"active": active, "limit": limit})
        return list(result.get("data", []))

    async def create_price(
        self,
        *,
        product: str,
        unit_amount: int,
        currency: str = "usd",
        recurring: Optional[Dict[str, Any]] = None,
    ) -> Dict[str, Any]:
        """``POST /prices``; ``unit_amount`` is in the smallest currency unit."""
        return await self._request(
            "POST",
            "/prices",
            {"product": product, "unit_amount": unit_amount, "currency": currency, "recurring": recurring},
        )

    async def retrieve_price(self, price_id: str) -> Dict[str, Any]:
        """``GET /prices/{id}``"""
        return await self._request("GET", f"/prices/{price_id}")

    async def list_prices(self, *, product: str, active: bool = True, limit: int = 100) -> List[Dict[str, Any]]:
        """``GET /prices?product=...``; returns the ``data`` list."""
        result = await self._request("GET", "/prices", {"product": product, "active": active, "limit": limit})
        return list(result.get("data", []))

    # ----------------------
    # Checkout
    # ----------------------
    async def create_checkout_session(
        self,
        *,
        customer: str,
        price_id: str,
        mode: str,
        success_url: str,
        cancel_url: str,
        metadata: Optional[Dict[str, str]] = None,
        trial_period_days: Optional[int] = None,
    ) -> Dict[str, Any]:
        """``POST /checkout/sessions`` for a single line item.

        Args:
            customer: Stripe customer id.
            price_id: Price to charge.
            mode: ``payment`` for one-off purchases, ``subscription`` for plans.
            success_url: Redirect after a successful payment.
            cancel_url: Redirect after the user cancels.
            metadata: Metadata copied onto the session.
            trial_period_days: Trial length for subscription mode.
        """
        params: Dict[str, Any] = {
            "customer": customer,
            "payment_method_types": ["card"],
            "line_items": [{"price": price_id, "quantity": 1}],
            "mode": mode,
            "success_url": success_url,
            "cancel_url": cancel_url,
            "metadata": metadata or {},
        }
        if mode == "subscription":
            params["subscription_data"] = {"metadata": metadata or {}, "trial_period_days": trial_period_days or None}
        return await self._request("POST", "/checkout/sessions", params)

    async def retrieve_checkout_session(self, session_id: str) -> Dict[str, Any]:
        """``GET /checkout/sessions/{id}``"""
        return await self._request("GET", f"/checkout/sessions/{session_id}")
