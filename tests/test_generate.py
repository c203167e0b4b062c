#!/usr/bin/env python3
"""
Test Suite for GenerationClient

PURPOSE:
    The AI chef and chat assistant must always answer: a missing key,
    transport errors and malformed model output all fall back to demo content.
"""

import json
import unittest
from unittest.mock import MagicMock

import helpers  # noqa: F401

import requests

from storefront.app.generate import (
    FALLBACK_CHAT_REPLY,
    FALLBACK_CONCEPT,
    FALLBACK_IMAGE_URL,
    GenerationClient,
    GenerationUnavailable,
)
from storefront.schemas.io_models import ChatMessage


def gemini_response(parts, status=200):
    resp = MagicMock()
    resp.status_code = status
    resp.json.return_value = {"candidates": [{"content": {"parts": parts}}]}
    resp.text = ""
    return resp


class TestGenerationClient(unittest.TestCase):

    def setUp(self):
        self.session = MagicMock()
        self.client = GenerationClient(api_key="test-key", session=self.session)

    def test_without_key_everything_falls_back(self):
        client = GenerationClient(api_key="", session=self.session)

        self.assertEqual(client.generate_concept("unicorn cake"), FALLBACK_CONCEPT)
        self.assertEqual(client.generate_image("unicorn cake"), FALLBACK_IMAGE_URL)
        self.assertEqual(client.chat([], "hi"), FALLBACK_CHAT_REPLY)
        self.session.post.assert_not_called()

    def test_concept_success(self):
        concept = {
            "name": "Lavender Dream",
            "description": "Soft lilac buttercream ruffles",
            "suggestedFlavors": ["Lemon & Lavender", "Vanilla Bean"],
            "visualPrompt": "lilac ruffle cake",
        }
        self.session.post.return_value = gemini_response([{"text": json.dumps(concept)}])

        result = self.client.generate_concept("something purple")

        self.assertEqual(result.name, "Lavender Dream")
        self.assertEqual(result.suggested_flavors, ["Lemon & Lavender", "Vanilla Bean"])
        self.assertEqual(result.visual_prompt, "lilac ruffle cake")
        url = self.session.post.call_args[0][0]
        self.assertTrue(url.endswith(f"/models/{self.client.text_model}:generateContent"))
        self.assertEqual(self.session.post.call_args[1]["params"], {"key": "test-key"})

    def test_concept_in_code_fence_is_parsed(self):
        text = '```json\n{"name": "A", "description": "B", "suggestedFlavors": "Mango", "visualPrompt": "C"}\n```'
        concept = GenerationClient.parse_concept(text)
        self.assertEqual(concept.suggested_flavors, ["Mango"])

    def test_malformed_concept_falls_back(self):
        self.session.post.return_value = gemini_response([{"text": '{"name": "Only a name"}'}])
        self.assertEqual(self.client.generate_concept("x"), FALLBACK_CONCEPT)

        with self.assertRaises(GenerationUnavailable):
            GenerationClient.parse_concept("no json here")

    def test_http_error_falls_back(self):
        error_response = gemini_response([], status=429)
        error_response.raise_for_status.side_effect = requests.exceptions.HTTPError("quota")
        self.session.post.return_value = error_response

        self.assertEqual(self.client.generate_concept("x"), FALLBACK_CONCEPT)
        self.assertEqual(self.client.chat([], "hello"), FALLBACK_CHAT_REPLY)

    def test_image_inline_data_becomes_data_url(self):
        self.session.post.return_value = gemini_response([
            {"text": "Here is your cake"},
            {"inlineData": {"mimeType": "image/png", "data": "iVBORw0KGgo="}},
        ])
        self.assertEqual(self.client.generate_image("tall cake"), "data:image/png;base64,iVBORw0KGgo=")

        prompt = self.session.post.call_args[1]["json"]["contents"][0]["parts"][0]["text"]
        self.assertTrue(prompt.startswith("tall cake"))
        self.assertIn("food photography", prompt)

    def test_image_without_data_falls_back(self):
        self.session.post.return_value = gemini_response([{"text": "I cannot draw that"}])
        self.assertEqual(self.client.generate_image("tall cake"), FALLBACK_IMAGE_URL)

    def test_chat_maps_history_roles(self):
        self.session.post.return_value = gemini_response([{"text": "We open at 9AM!"}])
        history = [ChatMessage(sender="user", text="hi"), ChatMessage(sender="bot", text="Hello!")]

        self.assertEqual(self.client.chat(history, "when do you open?"), "We open at 9AM!")

        contents = self.session.post.call_args[1]["json"]["contents"]
        self.assertEqual([c["role"] for c in contents], ["user", "model", "user"])
        self.assertEqual(contents[-1]["parts"][0]["text"], "when do you open?")


if __name__ == '__main__':
    unittest.main()
