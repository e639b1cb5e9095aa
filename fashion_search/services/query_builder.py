# fashion_search/services/query_builder.py

"""Turn free text or an image into a shopping query via Gemini.

Every public entry point always yields a usable query: any failure of
the model call (missing key, HTTP error, timeout, refusal) falls back
to the deterministic heuristics in
:mod:`fashion_search.filters.query_fallback`.
"""

import asyncio
import base64
import json
import logging
from typing import Any

from curl_cffi import requests as curl_requests

from fashion_search.config.settings import Settings
from fashion_search.filters.query_fallback import QueryFallback, clamp_query
from fashion_search.filters.vocabulary import DEFAULT_VOCABULARY, Vocabulary

logger = logging.getLogger("fashion_search.ai")

# Base64 payloads shorter than this cannot be a real picture
_MIN_IMAGE_B64_LENGTH = 100

TEXT_PROMPT = "\n".join(
    [
        "You are a fashion expert creating shopping search queries.",
        "TASK: Convert this description into a precise shopping search "
        "query for fashion items.",
        "",
        "INCLUDE THESE ELEMENTS:",
        "- Clothing type (shirt, dress, pants, shoes, bag, etc.)",
        "- Color if mentioned",
        "- Material if specified (cotton, denim, leather, silk, etc.)",
        "- Style (casual, formal, vintage, sporty, elegant, etc.)",
        "- Gender if clear (men's, women's, unisex)",
        "- Distinctive features (buttons, patterns, fit, design elements)",
        "",
        "EXAMPLES:",
        "- red cotton t-shirt casual women's fashion",
        "- black leather jacket men's biker style",
        "- blue denim jeans high-waisted women's",
        "- white sneakers casual footwear",
        "",
        "Write ONLY the search query - no explanations or quotes.",
    ]
)

SPELL_ONLY_PROMPT = "\n".join(
    [
        "You are a shopping assistant.",
        "Task: Correct spelling and normalize the phrase for product "
        "search.",
        "Return ONLY the corrected phrase without quotes.",
    ]
)

IMAGE_PROMPT = "\n".join(
    [
        "You are a fashion expert analyzing clothing images. Look at "
        "this image carefully and identify the specific fashion items.",
        "",
        "TASK: Create a precise shopping search query for the "
        "clothing/fashion items you see.",
        "",
        "ANALYSIS STEPS:",
        "1. Identify the main clothing item (shirt, dress, jeans, "
        "jacket, shoes, bag, etc.)",
        "2. Note the color(s) visible",
        "3. Identify the material if clear (cotton, denim, leather, "
        "silk, etc.)",
        "4. Determine the style (casual, formal, vintage, sporty, "
        "elegant, etc.)",
        "5. Specify gender if obvious (men's, women's, unisex)",
        "6. Note any distinctive features (buttons, patterns, fit)",
        "",
        "EXAMPLES OF GOOD QUERIES:",
        "- striped polo shirt men's cotton",
        "- black handbag leather women's",
        "- floral summer dress women's casual",
        "",
        "Write ONLY the search query - no explanations, quotes, or "
        "additional text.",
    ]
)


class AIQueryError(Exception):
    """The model call failed or returned nothing usable."""


class InvalidAIResponse(AIQueryError):
    """The model answered, but the answer is not a shopping query."""


def validate_ai_output(
    raw: str | None,
    min_length: int,
    max_length: int | None = None,
    vocabulary: Vocabulary = DEFAULT_VOCABULARY,
) -> str:
    """Return the cleaned model answer or raise :class:`InvalidAIResponse`.

    Surrounding quotes are stripped before checking the length bounds
    and the refusal phrases.
    """
    limit = max_length or Settings.MAX_QUERY_LENGTH
    text = (raw or "").strip().strip("\"'`").strip()
    if not text:
        raise InvalidAIResponse("empty response")
    if len(text) < min_length or len(text) > limit:
        msg = f"response length {len(text)} out of bounds: {text!r}"
        raise InvalidAIResponse(msg)
    lower = text.lower()
    for phrase in vocabulary.refusal_phrases:
        if phrase in lower:
            msg = f"refusal phrase {phrase!r} in response: {text!r}"
            raise InvalidAIResponse(msg)
    return text


class GeminiClient:
    """Minimal blocking client for the Gemini ``generateContent`` API."""

    def __init__(
        self,
        api_key: str,
        model: str | None = None,
        timeout: float | None = None,
        session: Any = None,
    ) -> None:
        self.api_key = api_key
        self.model = model or Settings.GEMINI_MODEL
        self.timeout = timeout or Settings.AI_TIMEOUT
        self.session = session or curl_requests.Session(
            impersonate=Settings.IMPERSONATE_BROWSER
        )

    @property
    def endpoint(self) -> str:
        return Settings.GEMINI_ENDPOINT.format(model=self.model)

    @staticmethod
    def _parse_text(data: dict[str, Any]) -> str:
        """Concatenate the text parts of the first candidate."""
        candidates: list[Any] = data.get("candidates") or []
        if not candidates:
            return ""
        content = candidates[0].get("content") or {}
        parts: list[Any] = content.get("parts") or []
        return "".join(
            str(part.get("text", "")) for part in parts
            if isinstance(part, dict)
        ).strip()

    def generate(self, parts: list[dict[str, Any]]) -> str:
        """POST the prompt parts and return the model's text answer.

        Raises:
            AIQueryError: On transport errors, non-200 status or an
                empty answer.
        """
        body = {"contents": [{"role": "user", "parts": parts}]}
        try:
            resp = self.session.post(
                self.endpoint,
                params={"key": self.api_key},
                headers={"Content-Type": "application/json"},
                data=json.dumps(body),
                timeout=self.timeout,
            )
        except Exception as exc:
            raise AIQueryError(f"Gemini request failed: {exc}") from exc

        if resp.status_code != 200:
            msg = f"Gemini HTTP {resp.status_code}: {resp.text[:200]}"
            raise AIQueryError(msg)

        try:
            data: dict[str, Any] = json.loads(resp.text)
        except ValueError as exc:
            raise AIQueryError("Gemini returned invalid JSON") from exc

        text = self._parse_text(data)
        if not text:
            raise AIQueryError("Empty Gemini result")
        return text


def fetch_image(url: str, session: Any = None) -> tuple[bytes, str]:
    """Download an image for analysis, returning bytes and MIME type."""
    http = session or curl_requests.Session(
        impersonate=Settings.IMPERSONATE_BROWSER
    )
    resp = http.get(url, timeout=Settings.REQUEST_TIMEOUT)
    if resp.status_code != 200:
        raise AIQueryError(f"Image fetch HTTP {resp.status_code}")
    mime = str(resp.headers.get("content-type") or "image/jpeg")
    return bytes(resp.content), mime.split(";", 1)[0].strip()


class QueryBuilder:
    """Derive a search query from user input, AI first, heuristics second."""

    def __init__(
        self,
        client: GeminiClient | None = None,
        fallback: QueryFallback | None = None,
        spell_only: bool = False,
        timeout: float | None = None,
        vocabulary: Vocabulary = DEFAULT_VOCABULARY,
    ) -> None:
        self.client = client
        self.fallback = fallback or QueryFallback(vocabulary)
        self.spell_only = spell_only
        self.timeout = timeout or Settings.AI_TIMEOUT
        self.vocabulary = vocabulary

    @classmethod
    def from_settings(cls) -> "QueryBuilder":
        """Builder wired to Gemini when an API key is configured."""
        client = (
            GeminiClient(Settings.GEMINI_API_KEY)
            if Settings.GEMINI_API_KEY
            else None
        )
        return cls(client=client, spell_only=Settings.SPELL_ONLY)

    async def _generate(self, parts: list[dict[str, Any]]) -> str:
        if self.client is None:
            raise AIQueryError("GEMINI_API_KEY is not configured")
        try:
            return await asyncio.wait_for(
                asyncio.to_thread(self.client.generate, parts),
                timeout=self.timeout,
            )
        except asyncio.TimeoutError as exc:
            msg = f"Gemini call exceeded {self.timeout:.0f}s"
            raise AIQueryError(msg) from exc

    async def from_text(self, text: str) -> str:
        """Shopping query for a free-text description."""
        prompt = SPELL_ONLY_PROMPT if self.spell_only else TEXT_PROMPT
        parts = [{"text": f"{prompt}\n\nUser description:\n{text}"}]
        try:
            raw = await self._generate(parts)
            query = validate_ai_output(
                raw, Settings.MIN_QUERY_LENGTH, vocabulary=self.vocabulary
            )
            logger.info("AI text query: %r -> %r", text, query)
        except Exception as exc:
            logger.warning(
                "AI text query failed, using fallback: %s",
                exc,
                exc_info=True,
            )
            query = self.fallback.from_text(text)
        return clamp_query(query)

    async def from_image(
        self,
        image_bytes: bytes,
        mime_type: str,
        caption: str | None = None,
        image_url: str | None = None,
    ) -> str:
        """Shopping query for an image, optionally with a user caption."""
        try:
            encoded = base64.b64encode(image_bytes).decode("ascii")
            if len(encoded) < _MIN_IMAGE_B64_LENGTH:
                raise AIQueryError(
                    "Invalid image data: image too small or corrupted"
                )
            parts: list[dict[str, Any]] = [{"text": IMAGE_PROMPT}]
            if caption and caption.strip():
                parts.append(
                    {
                        "text": "Additional context from user: "
                        f"{caption.strip()}"
                    }
                )
            parts.append(
                {"inline_data": {"mime_type": mime_type, "data": encoded}}
            )
            raw = await self._generate(parts)
            query = validate_ai_output(
                raw,
                Settings.MIN_IMAGE_QUERY_LENGTH,
                vocabulary=self.vocabulary,
            )
            logger.info("AI image query (%d bytes) -> %r", len(image_bytes), query)
        except Exception as exc:
            logger.warning(
                "AI image query failed, using fallback: %s",
                exc,
                exc_info=True,
            )
            query = self.fallback.from_image(
                len(image_bytes), caption=caption, image_url=image_url
            )
        return clamp_query(query)
