"""
RaiAccept bank gateway client

Authentication goes through RaiAccept's Cognito front door (USER_PASSWORD_AUTH)
and yields a bearer IdToken; the token is reused until shortly before expiry.
Every failure surfaces as GatewayError so callers can degrade instead of crash.
"""

import time
from typing import Any, Optional

import anyio
import httpx
import orjson

from src.platform.config.core_setting import Settings, settings as default_settings
from src.platform.exception.exceptions import GatewayError
from src.platform.logging.loguru_io import Logger
from src.service.reconciliation.app.interface.i_payment_gateway_client import (
    IPaymentGatewayClient,
)

COGNITO_TARGET = 'AWSCognitoIdentityProviderService.InitiateAuth'
COGNITO_CONTENT_TYPE = 'application/x-amz-json-1.1'
TOKEN_REFRESH_MARGIN_SECONDS = 60
DEFAULT_TOKEN_TTL_SECONDS = 3600


def _parse_auth_result(data: Any) -> tuple[str, float]:
    """Token and lifetime in seconds from an InitiateAuth response"""
    result = data.get('AuthenticationResult') if isinstance(data, dict) else None
    if not isinstance(result, dict):
        raise GatewayError('Authentication failed: no token in response')
    token = result.get('IdToken') or result.get('AccessToken')
    if not isinstance(token, str) or not token:
        raise GatewayError('Authentication failed: no token in response')
    try:
        ttl = float(result.get('ExpiresIn') or DEFAULT_TOKEN_TTL_SECONDS)
    except (TypeError, ValueError):
        raise GatewayError('Authentication failed: ExpiresIn is not a number')
    return token, ttl


class RaiAcceptClient(IPaymentGatewayClient):
    def __init__(
        self,
        *,
        settings: Settings = default_settings,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.settings = settings
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None
        self._token: Optional[str] = None
        self._token_expires_at = 0.0
        self._auth_lock = anyio.Lock()

    def _http(self) -> httpx.AsyncClient:
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                timeout=httpx.Timeout(self.settings.RAIACCEPT_TIMEOUT_SECONDS),
                transport=self._transport,
            )
        return self._client

    async def aclose(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def _authenticate(self) -> str:
        async with self._auth_lock:
            if self._token and time.monotonic() < self._token_expires_at:
                return self._token

            if not self.settings.RAIACCEPT_COGNITO_CLIENT_ID:
                raise GatewayError('RaiAccept is not configured: missing Cognito client id')
            if not (
                self.settings.RAIACCEPT_USERNAME
                and self.settings.RAIACCEPT_PASSWORD.get_secret_value()
            ):
                raise GatewayError('RaiAccept is not configured: missing API credentials')

            body = {
                'AuthFlow': 'USER_PASSWORD_AUTH',
                'ClientId': self.settings.RAIACCEPT_COGNITO_CLIENT_ID,
                'AuthParameters': {
                    'USERNAME': self.settings.RAIACCEPT_USERNAME,
                    'PASSWORD': self.settings.RAIACCEPT_PASSWORD.get_secret_value(),
                },
            }
            data = await self._send(
                'POST',
                self.settings.RAIACCEPT_AUTH_URL,
                operation='authenticate',
                headers={'Content-Type': COGNITO_CONTENT_TYPE, 'X-Amz-Target': COGNITO_TARGET},
                content=orjson.dumps(body),
            )

            token, ttl = _parse_auth_result(data)
            self._token = token
            self._token_expires_at = time.monotonic() + ttl - TOKEN_REFRESH_MARGIN_SECONDS
            Logger.base.info('🔑 [RAIACCEPT] Authenticated')
            return token

    async def _send(self, method: str, url: str, *, operation: str, **kwargs: Any) -> Any:
        try:
            response = await self._http().request(method, url, **kwargs)
        except httpx.TimeoutException:
            raise GatewayError(f'{operation} timed out')
        except httpx.HTTPError as e:
            raise GatewayError(f'{operation} failed: {type(e).__name__}: {e}')

        if response.is_error:
            raise GatewayError(
                f'{operation} failed: {response.status_code} {response.reason_phrase}'
            )
        try:
            return orjson.loads(response.content)
        except orjson.JSONDecodeError:
            raise GatewayError(f'{operation} failed: response is not valid JSON')

    async def _get(self, path: str, *, operation: str) -> Any:
        token = await self._authenticate()
        return await self._send(
            'GET',
            f'{self.settings.RAIACCEPT_API_URL}{path}',
            operation=operation,
            headers={'Authorization': f'Bearer {token}'},
        )

    @Logger.io
    async def get_order_details(self, *, order_id: str) -> dict[str, Any]:
        data = await self._get(f'/v1/orders/{order_id}', operation='Get order details')
        if not isinstance(data, dict):
            raise GatewayError('Get order details failed: unexpected response shape')
        return data

    @Logger.io
    async def get_order_transactions(self, *, order_id: str) -> Any:
        return await self._get(
            f'/v1/orders/{order_id}/transactions', operation='Get order transactions'
        )
