import logging
from dataclasses import dataclass, field
from typing import Any, Optional
import httpx
from app.core.config import Settings

logger = logging.getLogger(__name__)


class WhatsAppConfigError(RuntimeError):
    """Gateway URL or token is missing."""


@dataclass
class GatewayResponse:
    ok: bool
    status_code: int
    body: Any = field(default=None)


class FonnteClient:
    """
    Async client for the Fonnte WhatsApp gateway.

    Fonnte answers HTTP 200 even for rejected messages and reports the real
    outcome in a JSON `status` flag, so both are checked.
    Transport errors (connection refused, DNS, timeouts) are raised to the caller.
    """

    def __init__(
        self,
        api_url: Optional[str],
        token: Optional[str],
        country_code: str = "62",
        timeout: float = 15.0,
        http_client: Optional[httpx.AsyncClient] = None,
    ):
        self.api_url = api_url
        self.token = token
        self.country_code = country_code
        self._client = http_client or httpx.AsyncClient(timeout=timeout)

    @classmethod
    def from_settings(cls, settings: Settings) -> "FonnteClient":
        if not (settings.FONNTE_API_URL and settings.FONNTE_API_TOKEN):
            logger.warning("⚠️ FONNTE_API_URL / FONNTE_API_TOKEN not configured, reminders will fail to send")
        return cls(
            api_url=settings.FONNTE_API_URL,
            token=settings.FONNTE_API_TOKEN,
            country_code=settings.FONNTE_COUNTRY_CODE,
            timeout=settings.FONNTE_TIMEOUT_SECONDS,
        )

    async def send_message(self, target: str, message: str) -> GatewayResponse:
        if not (self.api_url and self.token):
            raise WhatsAppConfigError("Fonnte gateway URL or token is not configured")

        response = await self._client.post(
            self.api_url,
            headers={"Authorization": self.token},
            data={
                "target": target,
                "message": message,
                "countryCode": self.country_code,
            },
        )

        try:
            body = response.json()
        except ValueError:
            body = {"raw": response.text}

        ok = response.is_success
        if isinstance(body, dict) and body.get("status") is False:
            ok = False

        if ok:
            logger.info(f"✅ WhatsApp message accepted for {target}")
        else:
            logger.warning(f"⚠️ WhatsApp gateway rejected message for {target}: {response.status_code} {body}")
        return GatewayResponse(ok=ok, status_code=response.status_code, body=body)

    async def aclose(self):
        await self._client.aclose()
