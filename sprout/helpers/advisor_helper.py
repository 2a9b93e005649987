import json
import os
from typing import Any, Optional

from openai import AsyncOpenAI

from ..models import DailyEvent, GameStateView
from .event_helper import EventHelper
from .logging_helper import LoggingHelper


class AdvisorHelper:
    """
    Client for the external advisor model, reached through OpenRouter's OpenAI-compatible API.
    Generates daily events, plant tips and free-text advice. No method ever raises: failures are
    logged and turned into None or a canned reply so the game never stalls.
    """

    OPENROUTER_BASE_URL = "https://openrouter.ai/api/v1"
    API_KEY_ENV = "OPENROUTER_API_KEY"
    ADVICE_FALLBACK = "I'm having trouble connecting to the satellite. Try again later!"

    def __init__(self, logger: LoggingHelper, model: str, timeout: float = 30.0, client: Optional[Any] = None):
        self.logger = logger
        self.model = model
        self.timeout = timeout
        self._client = client

    def _get_client(self) -> Any:
        if self._client is None:
            api_key = os.getenv(self.API_KEY_ENV)
            if not api_key:
                raise ValueError(f"{self.API_KEY_ENV} not set")
            self._client = AsyncOpenAI(base_url=self.OPENROUTER_BASE_URL, api_key=api_key)
        return self._client

    async def close(self):
        """Closes the HTTP connection pool of the client, if one was created."""
        if self._client is not None:
            await self._client.close()
            self._client = None

    async def _complete(self, prompt: str, json_mode: bool = False) -> str:
        client = self._get_client()

        extra = {"response_format": {"type": "json_object"}} if json_mode else {}
        response = await client.chat.completions.create(
            model=self.model,
            messages=[{"role": "user", "content": prompt}],
            timeout=self.timeout,
            **extra,
        )

        content = response.choices[0].message.content
        if not content or not content.strip():
            raise ValueError("Advisor returned an empty response.")
        return content.strip()

    @staticmethod
    def _strip_code_fence(text: str) -> str:
        if text.startswith("```"):
            text = text.strip("`")
            if text.lower().startswith("json"):
                text = text[4:]
        return text.strip()

    async def generate_daily_event(self, day: int) -> Optional[DailyEvent]:
        prompt = (
            f"Generate a random daily event for an urban farming simulator game on Day {day}.\n"
            "The event should be realistic for a city rooftop garden (e.g., pests, weather change, market crash, "
            "neighbor gift).\n\n"
            "Return JSON format:\n"
            "{\n"
            '  "title": "Short Title",\n'
            '  "description": "One sentence description.",\n'
            '  "effectType": "water" | "money" | "health" | "growth" | "none",\n'
            '  "effectValue": number (positive or negative integer),\n'
            '  "weatherChange": "Sunny" | "Rainy" | "Cloudy" | "Heatwave" | null\n'
            "}"
        )

        try:
            raw = await self._complete(prompt, json_mode=True)
            payload = json.loads(self._strip_code_fence(raw))
        except Exception as e:
            await self.logger.log_to_discord(f"Advisor: Daily event generation for day {day} failed: {e}", "WARNING")
            return None

        event = EventHelper.parse_daily_event(payload)
        if event is None:
            await self.logger.log_to_discord(
                f"Advisor: Discarded malformed daily event for day {day}: {str(payload)[:500]}", "WARNING")
        return event

    async def analyze_plant_selection(self, plant: str) -> str:
        prompt = (
            f"Give a quick tip for growing {plant} in an urban environment.\n"
            "Keep it under 20 words."
        )

        try:
            return await self._complete(prompt)
        except Exception as e:
            await self.logger.log_to_discord(f"Advisor: Plant tip for {plant} failed: {e}", "WARNING")
            return f"Great choice! {plant} is fun to grow."

    async def get_farming_advice(self, query: str, context: GameStateView) -> str:
        prompt = (
            'You are an expert urban farming agronomist AI named "Sprout".\n'
            f"Current Game Context: Day {context.day}, Weather: {context.weather}, Money: ${context.money}, "
            f"Water: {context.water_supply}.\n\n"
            f'User Query: "{query}"\n\n'
            "Provide a helpful, concise, and encouraging response (max 2 sentences) tailored to the simulation "
            "context."
        )

        try:
            return await self._complete(prompt)
        except Exception as e:
            await self.logger.log_to_discord(f"Advisor: Farming advice request failed: {e}", "WARNING")
            return self.ADVICE_FALLBACK
