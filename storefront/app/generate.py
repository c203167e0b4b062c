#!/usr/bin/env python3
"""
Generation module for the storefront's AI chef and chat assistant.

This module wraps the Gemini generateContent REST API. Every public method
returns a static fallback instead of raising, so the UI never blocks on the
model being unavailable.
"""

import json
import re
from typing import Any, Dict, List, Optional

import requests
from pydantic import ValidationError

from .config import Config
from ..schemas.io_models import ChatMessage
from ..schemas.order_models import AIConcept
from ..utils.logger import get_logger

logger = get_logger("generate")

FALLBACK_CONCEPT = AIConcept(
    name="Enchanted Forest Whispers",
    description=(
        "[DEMO MODE] A whimsical three-tier masterpiece covered in moss-green velvet texture, "
        "adorned with edible gold leaf, fondant woodland creatures, and sugar-spun fairy wings."
    ),
    suggested_flavors=["Dark Chocolate & Raspberry", "Pistachio & Rosewater", "Wild Berry & Vanilla Bean"],
    visual_prompt="A professional 3-tier forest themed cake with edible moss, gold leaf, and fondant fairies",
)

FALLBACK_IMAGE_URL = "https://images.unsplash.com/photo-1535254973040-607b474cb50d?auto=format&fit=crop&w=800&q=80"

FALLBACK_CHAT_REPLY = "I'm currently in demo mode! For real responses, please contact us on WhatsApp. 🎂"

CONCEPT_INSTRUCTION = """
You are a world-class pastry chef and cake designer for "Samyra's Yummy Cakes".
Your goal is to suggest creative, delicious, and visually stunning cake concepts based on customer requests.
Keep the tone warm, appetizing, and professional.
Return the result in strict JSON format.
"""

CONCEPT_SCHEMA = {
    "type": "OBJECT",
    "properties": {
        "name": {"type": "STRING", "description": "A creative name for the cake design"},
        "description": {"type": "STRING", "description": "A mouth-watering description of the design and aesthetics"},
        "suggestedFlavors": {
            "type": "ARRAY",
            "items": {"type": "STRING"},
            "description": "List of 2-3 flavor combinations that match the theme",
        },
        "visualPrompt": {"type": "STRING", "description": "A detailed prompt to generate an image of this cake"},
    },
    "required": ["name", "description", "suggestedFlavors", "visualPrompt"],
}

CHAT_INSTRUCTION = """
You are 'Samyra', the friendly virtual assistant for Samyra's Yummy Cakes bakery.
Key Business Info:
- Location: 123 Bakery Lane, Kharar, Punjab 140301.
- Hours: Mon-Sat 9AM-9PM, Sun 10AM-5PM.
- Contact: +91 987 654 3210.
- We specialize in: Custom cakes, Weddings, Birthdays, Anniversaries.
- Ordering: Customers can order via WhatsApp or the Custom Order form on the website.
- Delivery: We deliver within Kharar and Mohali.
- Starting Price: ₹800/kg for basic cream cakes.

Your Personality:
- Sweet, helpful, and enthusiastic about cakes.
- Keep answers concise (under 40 words mostly).
- If a user wants to order, guide them to the 'Custom Order' page.
"""

IMAGE_STYLE_SUFFIX = " high quality professional food photography, cake on a stand"


class GenerationUnavailable(Exception):
    """The model could not produce a usable answer."""


class GenerationClient:
    """Client for the cake concept, cake image and chat calls."""

    def __init__(self, api_key: str = None, session: requests.Session = None):
        self.api_key = api_key if api_key is not None else Config.GEMINI_API_KEY
        self.text_model = Config.GEMINI_TEXT_MODEL
        self.image_model = Config.GEMINI_IMAGE_MODEL
        self.api_base_url = Config.GEMINI_API_BASE.rstrip("/")
        self.timeout = Config.REQUEST_TIMEOUT
        self.http = session or requests.Session()

        if not self.api_key:
            logger.warning("Gemini API key missing; AI features will use demo content")

    def _generate(self, model: str, payload: Dict[str, Any]) -> Dict[str, Any]:
        if not self.api_key:
            raise GenerationUnavailable("Gemini API key is not configured")
        url = f"{self.api_base_url}/models/{model}:generateContent"
        try:
            response = self.http.post(url, params={"key": self.api_key}, json=payload, timeout=self.timeout)
            if response.status_code != 200:
                logger.debug("Gemini error body: %s", response.text)
                response.raise_for_status()
            return response.json()
        except (requests.exceptions.RequestException, ValueError) as e:
            raise GenerationUnavailable(f"Gemini call to {model} failed: {e}") from e

    @staticmethod
    def _parts(data: Dict[str, Any]) -> List[Dict[str, Any]]:
        candidates = data.get("candidates") or []
        if not candidates:
            raise GenerationUnavailable("No candidates found in response")
        return (candidates[0].get("content") or {}).get("parts") or []

    def _text(self, data: Dict[str, Any]) -> str:
        text = "".join(part.get("text", "") for part in self._parts(data)).strip()
        if not text:
            raise GenerationUnavailable("Empty text response")
        return text

    @staticmethod
    def parse_concept(text: str) -> AIConcept:
        """Validate the model's JSON into an AIConcept (tolerates code fences)."""
        match = re.search(r"\{.*\}", text, re.DOTALL)
        if not match:
            raise GenerationUnavailable("No JSON object in concept response")
        try:
            return AIConcept.model_validate(json.loads(match.group()))
        except (ValueError, ValidationError) as e:
            raise GenerationUnavailable(f"Invalid concept payload: {e}") from e

    def generate_concept(self, prompt: str) -> AIConcept:
        """
        Ask the model for a cake concept.

        Args:
            prompt: The customer's free-text idea

        Returns:
            The validated concept, or FALLBACK_CONCEPT on any failure
        """
        payload = {
            "systemInstruction": {"parts": [{"text": CONCEPT_INSTRUCTION}]},
            "contents": [{"role": "user", "parts": [{"text": f'Design a cake for this request: "{prompt}"'}]}],
            "generationConfig": {
                "responseMimeType": "application/json",
                "responseSchema": CONCEPT_SCHEMA,
            },
        }
        try:
            return self.parse_concept(self._text(self._generate(self.text_model, payload)))
        except GenerationUnavailable as e:
            logger.warning("AI concept unavailable, using demo concept: %s", e)
            return FALLBACK_CONCEPT.model_copy()

    def generate_image(self, visual_prompt: str, style_suffix: str = IMAGE_STYLE_SUFFIX) -> str:
        """Return a ``data:image/...;base64`` URL, or FALLBACK_IMAGE_URL."""
        payload = {
            "contents": [{"role": "user", "parts": [{"text": visual_prompt + (style_suffix or "")}]}],
            "generationConfig": {"imageConfig": {"aspectRatio": "1:1"}},
        }
        try:
            for part in self._parts(self._generate(self.image_model, payload)):
                inline = part.get("inlineData") or part.get("inline_data")
                if inline and inline.get("data"):
                    mime = inline.get("mimeType") or inline.get("mime_type") or "image/png"
                    return f"data:{mime};base64,{inline['data']}"
            raise GenerationUnavailable("No image data generated")
        except GenerationUnavailable as e:
            logger.warning("AI image unavailable, using placeholder: %s", e)
            return FALLBACK_IMAGE_URL

    def chat(self, history: List[ChatMessage], message: str) -> str:
        contents = [
            {"role": "user" if m.sender == "user" else "model", "parts": [{"text": m.text}]}
            for m in history
        ]
        contents.append({"role": "user", "parts": [{"text": message}]})
        payload = {
            "systemInstruction": {"parts": [{"text": CHAT_INSTRUCTION}]},
            "contents": contents,
        }
        try:
            return self._text(self._generate(self.text_model, payload))
        except GenerationUnavailable as e:
            logger.warning("Chat unavailable: %s", e)
            return FALLBACK_CHAT_REPLY


def main():
    """Main function for trying the generation client by hand."""
    client = GenerationClient()
    concept = client.generate_concept("A unicorn birthday cake for a 6 year old who loves purple")
    print("\nConcept:")
    print("-" * 40)
    print(json.dumps(concept.model_dump(by_alias=True), indent=2, ensure_ascii=False))
    print("-" * 40)
    image = client.generate_image(concept.visual_prompt)
    print(f"Image: {image[:80]}...")

if __name__ == "__main__":
    main()
