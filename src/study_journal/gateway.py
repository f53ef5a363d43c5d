"""Client for the external chat-completion service."""
import logging

import requests

from study_journal.config import DEFAULT_API_BASE, DEFAULT_MODEL, DEFAULT_TIMEOUT, Settings
from study_journal.errors import (
    ChatTimeoutError, MissingCredentialError, TransportError, UpstreamError, ValidationError,
)
from study_journal.models import Prompt

logger = logging.getLogger(__name__)

DEFAULT_TEMPERATURE = 0.7


def _response_body(response: requests.Response):
    try:
        return response.json()
    except ValueError:
        return response.text


def extract_content(data) -> str:
    """Return ``choices[0].message.content`` or raise if the payload lacks it."""
    try:
        content = data["choices"][0]["message"]["content"]
    except (KeyError, IndexError, TypeError):
        content = None
    if not isinstance(content, str):
        raise UpstreamError(502, data, message="Invalid AI response format.")
    return content


class ChatGateway:
    """Sends chat requests with the server-held credential.

    One attempt per call: no retries and no caching. Callers decide whether a
    failure is worth retrying.
    """

    def __init__(
        self,
        api_key: str | None,
        model: str = DEFAULT_MODEL,
        api_base: str = DEFAULT_API_BASE,
        timeout: float = DEFAULT_TIMEOUT,
        session: requests.Session | None = None,
    ):
        self.api_key = api_key
        self.model = model
        self.url = f"{api_base.rstrip('/')}/chat/completions"
        self.timeout = timeout
        self.session = session or requests.Session()

    @classmethod
    def from_settings(cls, settings: Settings) -> "ChatGateway":
        return cls(
            api_key=settings.api_key,
            model=settings.model,
            api_base=settings.api_base,
            timeout=settings.timeout,
        )

    @property
    def configured(self) -> bool:
        return bool(self.api_key)

    def forward(self, payload: dict) -> dict:
        """POST a chat-completion payload and return the upstream JSON."""
        if not self.api_key:
            raise MissingCredentialError()
        body = dict(payload)
        body.setdefault("model", self.model)
        logger.debug("Requesting completion from %s with model %s", self.url, body["model"])
        try:
            response = self.session.post(
                self.url,
                headers={
                    "Authorization": f"Bearer {self.api_key}",
                    "Content-Type": "application/json",
                },
                json=body,
                timeout=self.timeout,
            )
        except requests.Timeout as e:
            logger.warning("Completion request timed out after %ss", self.timeout)
            raise ChatTimeoutError(f"AI service did not answer within {self.timeout:g}s.") from e
        except requests.RequestException as e:
            logger.warning("Completion request failed: %s", e)
            raise TransportError(f"Could not reach AI service: {e}") from e

        data = _response_body(response)
        if not response.ok:
            logger.warning("AI service error %s: %s", response.status_code, data)
            raise UpstreamError(response.status_code, data)
        if not isinstance(data, dict):
            raise UpstreamError(502, data, message="AI service returned a non-JSON reply.")
        return data

    def complete(self, prompt: Prompt, temperature: float = DEFAULT_TEMPERATURE) -> str:
        """Send a system/user prompt pair and return the raw assistant text."""
        if isinstance(temperature, bool) or not isinstance(temperature, (int, float)) or not 0 <= temperature <= 2:
            raise ValidationError("Temperature must be a number between 0 and 2.")
        data = self.forward({"messages": prompt.to_messages(), "temperature": temperature})
        return extract_content(data)
