"""Tuya OpenAPI REST client using HMAC-SHA256 auth.

Two signing modes:
  - Token mode (no access_token): clientId + timestamp + nonce + signStr
  - Business mode (with access_token): clientId + accessToken + timestamp + nonce + signStr
"""

from __future__ import annotations

import asyncio
import hashlib
import hmac
import json
import time
from typing import Any
from urllib.parse import urlencode

import aiohttp

from .config import CloudConfig
from .const import REQUEST_TIMEOUT
from .customerlogging import logger
from .errors import SmartLifeAPIError, TransportError, error_for_response


# ── Token Info ───────────────────────────────────────────────


class SmartLifeTokenInfo:
    """Token information for the Tuya OpenAPI."""

    def __init__(
        self,
        token_response: dict[str, Any] | None = None,
    ) -> None:
        """Initialize token info from a token response envelope."""
        if token_response:
            result = token_response.get("result") or {}
            self.access_token: str = result.get("access_token", "")
            self.refresh_token: str = result.get("refresh_token", "")
            self.uid: str = result.get("uid", "")
            self.expire_time: int = result.get("expire_time", 0)
            # Absolute expiry timestamp (ms), relative to the server clock
            t = token_response.get("t") or int(time.time() * 1000)
            self.expire_at: int = t + self.expire_time * 1000
        else:
            self.access_token = ""
            self.refresh_token = ""
            self.uid = ""
            self.expire_time = 0
            self.expire_at = 0

    @property
    def is_expired(self) -> bool:
        """Check if token is expired (60s buffer)."""
        if not self.access_token:
            return True
        now_ms = int(time.time() * 1000)
        return self.expire_at - 60_000 <= now_ms


# ── HMAC-SHA256 Signing ─────────────────────────────────────


def _calc_sign(
    client_id: str,
    secret: str,
    timestamp: str,
    nonce: str,
    sign_str: str,
    access_token: str = "",
) -> str:
    """Calculate HMAC-SHA256 signature.

    Token mode:    str = clientId + timestamp + nonce + signStr
    Business mode: str = clientId + accessToken + timestamp + nonce + signStr
    """
    raw = client_id + access_token + timestamp + nonce + sign_str
    h = hmac.new(
        secret.encode("utf-8"),
        raw.encode("utf-8"),
        hashlib.sha256,
    )
    return h.hexdigest().upper()


def _string_to_sign(
    method: str,
    path: str,
    query: dict[str, Any] | None = None,
    body: str = "",
) -> str:
    """Build the string-to-sign per Tuya OpenAPI spec.

    Format: METHOD\nSHA256(body)\nheaders_str\nurl
    """
    body_hash = hashlib.sha256(body.encode("utf-8")).hexdigest()

    url = path
    if query:
        qs = "&".join(f"{k}={query[k]}" for k in sorted(query))
        url = f"{path}?{qs}"

    # No custom signature headers
    headers_str = ""

    return f"{method}\n{body_hash}\n{headers_str}\n{url}"


# ── Main API Client ─────────────────────────────────────────


class CustomerApi:
    """Signed session handle for one set of credentials.

    A handle never changes credentials; build a new one instead.
    """

    def __init__(
        self,
        config: CloudConfig,
        session: aiohttp.ClientSession,
        timeout: float = REQUEST_TIMEOUT,
    ) -> None:
        """Initialize the API client."""
        self.config = config
        self.api_url = config.endpoint.rstrip("/")
        self.token_info = SmartLifeTokenInfo()
        self._session = session
        self._timeout = aiohttp.ClientTimeout(total=timeout)
        self._token_lock = asyncio.Lock()

    @property
    def uid(self) -> str:
        """Return the uid bound to the current token."""
        return self.token_info.uid

    def _headers(
        self, sign: str, timestamp: str, access_token: str = ""
    ) -> dict[str, str]:
        headers = {
            "client_id": self.config.api_key,
            "sign": sign,
            "t": timestamp,
            "sign_method": "HMAC-SHA256",
            "Content-Type": "application/json",
        }
        if access_token:
            headers["access_token"] = access_token
        return headers

    async def _send(
        self,
        method: str,
        url: str,
        headers: dict[str, str],
        body: str = "",
    ) -> dict[str, Any]:
        """Send a request, mapping network failures to TransportError."""
        kwargs: dict[str, Any] = {"headers": headers, "timeout": self._timeout}
        if body:
            kwargs["data"] = body
        try:
            async with self._session.request(method, url, **kwargs) as resp:
                if not resp.ok:
                    text = await resp.text()
                    logger.error("HTTP error: %s %s", resp.status, text)
                    return {"success": False, "code": resp.status, "msg": text}
                try:
                    return await resp.json(content_type=None)
                except ValueError as exc:
                    logger.error("Invalid JSON from %s (%s)", url, resp.content_type)
                    raise SmartLifeAPIError(
                        f"Invalid response from {self.api_url}: expected JSON, "
                        f"got {resp.content_type or 'unknown content'}"
                    ) from exc
        except asyncio.TimeoutError as exc:
            raise TransportError(f"Request to {url} timed out") from exc
        except aiohttp.ClientError as exc:
            raise TransportError(f"Cannot reach {self.api_url}: {exc}") from exc

    # ── Token Management ────────────────────────────────

    async def get_access_token(self) -> dict[str, Any]:
        """Get initial access token (grant_type=1).

        Uses token-mode signing (no access_token in sign).
        """
        path = "/v1.0/token"
        query_params = {"grant_type": "1"}
        return await self._token_request(path, query_params)

    async def _refresh_access_token(self) -> dict[str, Any]:
        """Refresh the access token, falling back to a new one."""
        path = f"/v1.0/token/{self.token_info.refresh_token}"
        try:
            return await self._token_request(path)
        except TransportError:
            raise
        except Exception:
            logger.warning("Token refresh failed, getting new token")
            return await self.get_access_token()

    async def _token_request(
        self, path: str, query_params: dict[str, Any] | None = None
    ) -> dict[str, Any]:
        timestamp = str(int(time.time() * 1000))
        sign_str = _string_to_sign("GET", path, query_params)
        sign = _calc_sign(
            self.config.api_key,
            self.config.api_secret,
            timestamp,
            "",
            sign_str,
        )

        url = f"{self.api_url}{path}"
        if query_params:
            url += f"?{urlencode(query_params)}"
        logger.debug("Getting access token from %s", url)

        response = await self._send("GET", url, self._headers(sign, timestamp))
        logger.debug("Token response success=%s", response.get("success"))

        if response.get("success"):
            self.token_info = SmartLifeTokenInfo(response)
            return response

        logger.error(
            "Failed to get access token: %s (code: %s)",
            response.get("msg"),
            response.get("code"),
        )
        raise error_for_response(response)

    async def ensure_token(self) -> None:
        """Ensure we have a valid (non-expired) token."""
        async with self._token_lock:
            if not self.token_info.is_expired:
                return
            if self.token_info.refresh_token:
                await self._refresh_access_token()
            else:
                await self.get_access_token()

    # ── Authenticated Request ───────────────────────────

    async def request(
        self,
        method: str,
        path: str,
        params: dict[str, Any] | None = None,
        body: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        """Make an authenticated business API request.

        Returns the raw response envelope, including failures.
        """
        await self.ensure_token()

        method = method.upper()
        timestamp = str(int(time.time() * 1000))
        body_str = json.dumps(body) if body else ""
        sign_str = _string_to_sign(method, path, params, body_str)
        access_token = self.token_info.access_token
        sign = _calc_sign(
            self.config.api_key,
            self.config.api_secret,
            timestamp,
            "",
            sign_str,
            access_token=access_token,
        )

        url = f"{self.api_url}{path}"
        if params:
            url += f"?{urlencode(params)}"

        logger.debug("API %s %s body=%s", method, url, body_str)
        response = await self._send(
            method, url, self._headers(sign, timestamp, access_token), body_str
        )
        logger.debug("API response: %s", response)

        if not response.get("success"):
            logger.error(
                "API error: %s (code: %s)",
                response.get("msg", "Unknown error"),
                response.get("code", "N/A"),
            )
        return response
