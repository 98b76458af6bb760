"""OpenAI chat-completions client that rewrites a draft into a final imagery prompt."""

from __future__ import annotations

import json
import random

import httpx

from newswall.core.extract import dig
from newswall.core.exceptions import MissingCredential, ProviderResponseError
from newswall.core.http import json_body, open_client, send
from newswall.core.models import PromptContext, RefinedPrompt

BASE_URL = "https://api.openai.com/v1"
HEADLINE_SAMPLE_SIZE = 8
TEMPERATURE = 0.8

SYSTEM_PROMPT = " ".join(
    [
        "You are an elite prompt writer for text-to-image models.",
        "Task: craft ONE final imagery prompt for a desktop wallpaper.",
        "Requirements:",
        "- Be concise but evocative (1–3 sentences).",
        "- Incorporate the supplied keywords/themes and time-of-day.",
        "- Select 1–3 concrete subjects (people, places, or objects) from the themes/headlines"
        " to feature prominently as focal points; compose the scene around them.",
        "- Weave in the provided style/vibe and the randomly chosen art/photography style.",
        '- Include a short, compact negative prompt at the end prefixed with "Avoid:".',
        "- Do NOT include any other text, labels, or formatting.",
        "Output ONLY the final prompt line.",
    ]
)


class PromptRefiner:
    """Single-request prompt refinement. No retries; callers treat failure as non-fatal."""

    def __init__(
        self,
        api_key: str | None,
        model: str,
        *,
        client: httpx.AsyncClient | None = None,
        rng: random.Random | None = None,
        timeout_s: float = 60.0,
        base_url: str = BASE_URL,
    ):
        self.api_key = api_key or ""
        self.model = model
        self.base_url = base_url.rstrip("/")
        self.timeout_s = timeout_s
        self._client = client
        self._rng = rng or random.Random()

    def build_messages(self, context: PromptContext, selected_style: str) -> list[dict[str, str]]:
        user_payload = {
            "timeOfDay": context.time_of_day,
            "keywords": context.keywords,
            "style": context.style,
            "vibe": context.vibe,
            "selectedStyle": selected_style,
            "negative": context.negative,
            "headlineSamples": context.headlines[:HEADLINE_SAMPLE_SIZE],
        }
        return [
            {"role": "system", "content": SYSTEM_PROMPT},
            {"role": "user", "content": json.dumps(user_payload, ensure_ascii=False)},
        ]

    async def refine(self, context: PromptContext) -> RefinedPrompt:
        """Ask the model for one final imagery prompt.

        Args:
            context: Keywords, time of day, style hints, headline sample, style pool

        Returns:
            RefinedPrompt with the prompt and the randomly selected style ("" if no pool)

        Raises:
            MissingCredential: Empty API key (no request made)
            ProviderHTTPError: Non-success status (status and body kept)
            ProviderResponseError: Success but no message content
        """
        if not self.api_key:
            raise MissingCredential("OPENAI_API_KEY is required for prompt refinement")

        selected_style = self._rng.choice(context.style_pool) if context.style_pool else ""
        body = {
            "model": self.model,
            "temperature": TEMPERATURE,
            "messages": self.build_messages(context, selected_style),
        }

        async with open_client(self._client, self.timeout_s) as client:
            response = await send(
                client,
                "POST",
                f"{self.base_url}/chat/completions",
                endpoint="chat/completions",
                headers={"Authorization": f"Bearer {self.api_key}"},
                json=body,
            )
            payload = json_body(response, "chat/completions")

        content = dig(payload, "choices", 0, "message", "content")
        if not isinstance(content, str) or not content.strip():
            raise ProviderResponseError("OpenAI returned empty prompt content")
        return RefinedPrompt(prompt=content.strip(), selected_style=selected_style)
