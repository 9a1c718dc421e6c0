"""Client for the AI assistant webhooks (chat and ad-hoc reports).

The assistant lives behind plain HTTP: we POST a JSON body and expect
``{"output": ...}`` back.
"""

import logging
from typing import Any, Optional

import httpx
from tenacity import Retrying, retry_if_exception_type, stop_after_attempt, wait_exponential

import settings
from app.errors import ExternalServiceError, InternalError

logger = logging.getLogger(__name__)


class AIWebhookClient:
    def __init__(
        self,
        url: Optional[str],
        token: Optional[str] = None,
        timeout: float = 30.0,
        client: Optional[httpx.Client] = None,
        wait=None,
    ):
        self.url = url
        self.token = token
        self.timeout = timeout
        self._client = client
        self._wait = wait if wait is not None else wait_exponential(multiplier=1, min=2, max=10)

    def _post(self, client: httpx.Client, payload: dict) -> httpx.Response:
        headers = {"token": self.token} if self.token else {}
        for attempt in Retrying(
            stop=stop_after_attempt(3),
            wait=self._wait,
            retry=retry_if_exception_type(httpx.TransportError),
            reraise=True,
        ):
            with attempt:
                return client.post(self.url, json=payload, headers=headers, timeout=self.timeout)

    def send(self, payload: dict) -> Any:
        """POST ``payload`` and return the ``output`` member of the reply."""
        if not self.url:
            raise InternalError("The AI assistant webhook is not configured")
        client = self._client or httpx.Client()
        try:
            response = self._post(client, payload)
        except httpx.TimeoutException as exc:
            logger.error(f"AI webhook timed out: {exc}")
            raise ExternalServiceError("The AI assistant did not answer in time", timeout=True)
        except httpx.TransportError as exc:
            logger.error(f"AI webhook unreachable: {exc}")
            raise ExternalServiceError("The AI assistant is unreachable")
        finally:
            if self._client is None:
                client.close()

        if response.is_error:
            logger.error(f"AI webhook answered {response.status_code}: {response.text[:500]}")
            raise ExternalServiceError(f"The AI assistant returned an error ({response.status_code})")
        try:
            body = response.json()
        except ValueError:
            raise ExternalServiceError("The AI assistant returned a malformed response")
        output = body.get("output") if isinstance(body, dict) else None
        if output in (None, "", {}, []):
            raise ExternalServiceError("The AI assistant returned an empty response")
        return output

    def ask(self, question: str, conversation_id: int, user_id: int) -> str:
        output = self.send({"question": question, "conversationId": conversation_id, "userId": user_id})
        if isinstance(output, dict):
            output = output.get("prompt") or output.get("text")
        if not output:
            raise ExternalServiceError("The AI assistant returned an empty response")
        return str(output)


def get_chat_client() -> AIWebhookClient:
    return AIWebhookClient(settings.AI_CHAT_WEBHOOK_URL, settings.AI_WEBHOOK_TOKEN, settings.AI_WEBHOOK_TIMEOUT)


def get_report_client() -> AIWebhookClient:
    return AIWebhookClient(settings.AI_REPORT_WEBHOOK_URL, settings.AI_WEBHOOK_TOKEN, settings.AI_WEBHOOK_TIMEOUT)
