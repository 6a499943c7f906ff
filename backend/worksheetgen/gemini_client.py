from __future__ import annotations
import httpx
import logging
from typing import Any, Dict, Optional
from .errors import ConfigError, RemoteError
from .settings import settings

logger = logging.getLogger(__name__)

class GeminiClient:
	"""Single-attempt transport to the Generative Language API.

	Retries are the caller's business; every failure surfaces as RemoteError
	except a missing API key, which is a ConfigError raised before any I/O.
	"""

	def __init__(
		self,
		api_key: Optional[str] = None,
		*,
		base_url: Optional[str] = None,
		model: Optional[str] = None,
		temperature: Optional[float] = None,
		max_output_tokens: Optional[int] = None,
		http_client: Optional[httpx.AsyncClient] = None,
	) -> None:
		self.api_key = api_key if api_key is not None else settings.gemini_api_key
		self.model = model or settings.gemini_model
		# Google AI Studio (Generative Language API)
		self.base_url = base_url or settings.gemini_base_url or (
			f"https://generativelanguage.googleapis.com/v1beta/models/{self.model}:generateContent"
		)
		self.temperature = settings.gemini_temperature if temperature is None else temperature
		self.max_output_tokens = max_output_tokens or settings.gemini_max_output_tokens
		self._client = http_client or httpx.AsyncClient(timeout=settings.gemini_timeout_seconds)

	@property
	def configured(self) -> bool:
		return bool(self.api_key and self.api_key.strip())

	async def invoke(self, prompt: str) -> str:
		if not self.configured:
			raise ConfigError("GEMINI_API_KEY is not configured")
		payload: Dict[str, Any] = {
			"contents": [{"parts": [{"text": prompt}]}],
			"generationConfig": {
				"temperature": self.temperature,
				"maxOutputTokens": self.max_output_tokens,
			},
		}
		try:
			r = await self._client.post(self.base_url, params={"key": self.api_key}, json=payload)
		except httpx.RequestError as net_err:
			raise RemoteError(f"Gemini request failed: {net_err}") from net_err
		if r.is_error:
			raise RemoteError(
				f"Gemini API error ({r.status_code}): {_upstream_message(r)}",
				status_code=r.status_code,
			)
		try:
			data = r.json()
			text = data["candidates"][0]["content"]["parts"][0]["text"]
		except (ValueError, KeyError, IndexError, TypeError) as err:
			raise RemoteError(f"Unexpected Gemini response: {r.text[:500]}", status_code=r.status_code) from err
		if not isinstance(text, str):
			raise RemoteError("Unexpected Gemini response: text part is not a string", status_code=r.status_code)
		logger.debug("Gemini returned %d characters", len(text))
		return text

	async def aclose(self) -> None:
		await self._client.aclose()


def _upstream_message(r: httpx.Response) -> str:
	try:
		data = r.json()
		message = data.get("error", {}).get("message")
		if message:
			return str(message)
	except (ValueError, AttributeError):
		pass
	return r.reason_phrase or "unknown error"
