"""
Completion provider adapter for the in-room assistant.

Talks to the Google Generative Language REST API. Every provider failure is
turned into a subject-specific canned answer, except a timeout, which is
raised as ``GatewayTimeout`` so the caller can report a connectivity problem.
"""
from __future__ import annotations

import logging
from typing import Any, Mapping

import requests

from ..exceptions import GatewayTimeout, ProviderError

# Questions containing any of these words are routed to the higher-capability backend
COMPLEX_KEYWORDS = ("explain", "why", "how", "analyze", "compare")

AI_PREFIX = "🤖 AI Assistant: "

FALLBACK_RESPONSES = {
    "Math": "I'm having trouble accessing math resources right now. For math help, try breaking the problem into smaller steps or check out Khan Academy for similar examples.",
    "Science": "Science resources are temporarily unavailable. You might find helpful information on NASA's website or ScienceDaily for current research.",
    "English": "Literature resources are experiencing issues. For writing help, try using the Hemingway Editor app or Purdue OWL for grammar guidelines.",
    "History": "History archives are temporarily unavailable. The Digital Public Library of America has excellent primary sources you could explore.",
    "Programming": "Coding resources are having connection issues. For programming help, Stack Overflow usually has answers to common coding problems.",
}
DEFAULT_FALLBACK = "I'm having technical difficulties. In the meantime, you could try rephrasing your question or breaking it down into smaller parts."

PRIMARY_GENERATION_CONFIG = {
    "temperature": 0.7,
    "topK": 40,
    "topP": 0.9,
    "maxOutputTokens": 500,
}
SECONDARY_GENERATION_CONFIG = {
    "temperature": 0.7,
    "maxOutputTokens": 300,
}


def is_complex_question(question: str) -> bool:
    lowered = question.lower()
    return any(keyword in lowered for keyword in COMPLEX_KEYWORDS)


def fallback_answer(subject: str) -> str:
    return AI_PREFIX + FALLBACK_RESPONSES.get(subject, DEFAULT_FALLBACK)


def format_answer(text: str, subject: str, question: str) -> str:
    return f'{AI_PREFIX}{text}\n\n*Generated for {subject} question: "{question}"*'


def build_prompt(question: str, subject: str) -> str:
    return (
        f"As a study hub AI assistant specializing in {subject}, provide a helpful response.\n\n"
        f"Question: {question}\n\n"
        "Please:\n"
        "1. Give an educational response that promotes learning\n"
        "2. Break down complex ideas\n"
        "3. Provide examples if relevant\n"
        "4. Suggest related concepts to explore\n"
        "5. If question is unclear, ask for clarification politely\n\n"
        "Response:"
    )


def _error_detail(response: requests.Response) -> str:
    try:
        return str(response.json()["error"]["message"])
    except Exception:
        return (response.text or "")[:200]


class AIGateway:
    def __init__(
        self,
        api_key: str,
        *,
        base_url: str,
        primary_model: str,
        complex_model: str,
        fallback_model: str,
        timeout: float = 15.0,
    ) -> None:
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.primary_model = primary_model
        self.complex_model = complex_model
        self.fallback_model = fallback_model
        self.timeout = timeout

    @classmethod
    def from_config(cls, config: Mapping[str, Any]) -> "AIGateway":
        return cls(
            config.get("GOOGLE_AI_API_KEY", ""),
            base_url=config["AI_API_BASE_URL"],
            primary_model=config["AI_PRIMARY_MODEL"],
            complex_model=config["AI_COMPLEX_MODEL"],
            fallback_model=config["AI_FALLBACK_MODEL"],
            timeout=float(config.get("AI_TIMEOUT_SECONDS", 15)),
        )

    def select_model(self, question: str) -> str:
        return self.complex_model if is_complex_question(question) else self.primary_model

    def complete(self, question: str, subject: str) -> str:
        """Answer ``question`` for the given subject room.

        Returns the formatted answer or a canned fallback. Raises
        ``GatewayTimeout`` when the provider stalls.
        """
        model = self.select_model(question)
        try:
            text = self.generate(model, build_prompt(question, subject), PRIMARY_GENERATION_CONFIG)
            return format_answer(text, subject, question)
        except ProviderError as e:
            logging.warning("ai_gateway: %s failed (subject=%s): %s", model, subject, e)
            if not e.not_found:
                return fallback_answer(subject)

        try:
            text = self.generate(
                self.fallback_model,
                f"Answer this {subject} question: {question}",
                SECONDARY_GENERATION_CONFIG,
            )
            return format_answer(text, subject, question)
        except ProviderError as e:
            logging.warning(
                "ai_gateway: fallback model %s also failed (subject=%s): %s",
                self.fallback_model,
                subject,
                e,
            )
        return fallback_answer(subject)

    def generate(self, model: str, prompt: str, generation_config: Mapping[str, Any]) -> str:
        """Single provider call; returns the raw completion text."""
        if not self.api_key:
            raise ProviderError("GOOGLE_AI_API_KEY is not configured")
        try:
            r = requests.post(
                f"{self.base_url}/models/{model}:generateContent",
                params={"key": self.api_key},
                json={
                    "contents": [{"parts": [{"text": prompt}]}],
                    "generationConfig": dict(generation_config),
                },
                timeout=self.timeout,
            )
        except requests.Timeout as e:
            raise GatewayTimeout(f"{model} did not answer within {self.timeout}s") from e
        except requests.RequestException as e:
            raise ProviderError(f"{model}: {e}") from e

        if r.status_code != 200:
            detail = _error_detail(r)
            raise ProviderError(
                f"{model}: HTTP {r.status_code} {detail}",
                not_found=r.status_code == 404 or "not found" in detail.lower(),
            )
        try:
            text = r.json()["candidates"][0]["content"]["parts"][0]["text"]
        except (ValueError, KeyError, IndexError, TypeError) as e:
            raise ProviderError(f"{model}: malformed response") from e
        if not isinstance(text, str) or not text.strip():
            raise ProviderError(f"{model}: empty completion")
        return text
