"""
AI collaborators: Gemini for recommendations, check-in feedback and chat; hosted
classifiers for sentiment and activity suggestions. Every public coroutine
returns a usable value; upstream failures are logged and replaced by fallbacks.
"""
from __future__ import annotations

import asyncio
import logging
from typing import Any

from app.config import settings
from app.core.errors import UpstreamServiceError
from app.schemas.recommendation import Recommendation, normalize_recommendations
from app.services.gemini_common import generate_text
from app.services.http_client import post_json

logger = logging.getLogger(__name__)

RECOMMENDATION_CONFIG = {
    "temperature": 0.7,
    "top_p": 0.95,
    "max_output_tokens": 1024,
    "response_mime_type": "application/json",
}

CONVERSATION_CONFIG = {
    "temperature": 0.9,
    "top_p": 0.95,
    "max_output_tokens": 1024,
}

FALLBACK_ONBOARDING_RECOMMENDATION = Recommendation(
    title="Start with Mindfulness",
    description="Begin with 5 minutes of daily mindful breathing exercises.",
)

FALLBACK_ACTIVITIES = [
    "Take a 10-minute walk outside",
    "Try 5 minutes of deep breathing",
    "Write down three things you're grateful for",
]

FALLBACK_PERSONALIZED_RESPONSE = (
    "Thank you for checking in today. Whatever you're feeling is valid. "
    "Take a slow breath, be gentle with yourself, and consider one small thing that could help you feel a little better."
)

FALLBACK_CHAT_REPLY = (
    "I'm sorry, I'm having trouble responding right now. If you're struggling, consider reaching out "
    "to someone you trust or a local support line. Please try again in a moment."
)

EMOTION_BY_SENTIMENT = {
    "positive": "happy",
    "negative": "sad",
    "neutral": "neutral",
}

ONBOARDING_PROMPT = """Based on the following user profile, provide 3-4 personalized recommendations for improving mental health:
- Current mental health: {current_mental_health}
- Goals: {goals}
- Sleep pattern: {sleep_pattern}
- Stress level: {stress_level}
- Social connection: {social_connection}
- Mental health concerns: {concerns}
- Exercise frequency: {exercise_frequency}
- Diet quality: {diet_quality}
- Substance use: {substance_use}
- Coping mechanisms: {coping_mechanisms}

Format the response as a JSON array of objects with 'title' and 'description' fields.
Focus on practical, actionable advice related to the user's specific situation and goals.
Output ONLY the JSON array."""

CHECKIN_SYSTEM = """You are "Aura", an AI companion providing empathetic mental health check-ins.
Reply in 3-5 warm, concise sentences. Acknowledge how the user feels, reflect any change since their previous check-in,
and offer one small, practical next step. Never diagnose; if the user mentions self-harm, encourage contacting a crisis line."""

CHAT_PROMPT = """You are a supportive AI assistant for a mental health application. Respond in {language}.
Respond to the following message with empathy and care:
User's message: "{message}"

Provide a supportive and helpful response, offering guidance or resources if appropriate.
Keep the response concise, around 2-3 sentences."""


def _join(values: list[str] | None) -> str:
    return ", ".join(values) if values else "none"


def map_sentiment_to_emotion(sentiment: Any) -> str:
    if isinstance(sentiment, list):
        sentiment = sentiment[0] if sentiment else "neutral"
    if isinstance(sentiment, dict):
        sentiment = sentiment.get("label")
    if isinstance(sentiment, str):
        return EMOTION_BY_SENTIMENT.get(sentiment.strip().lower(), "neutral")
    return "neutral"


def _sentiment_label(data: Any) -> str:
    """First label in a Gradio/Inference payload: "pos", ["pos"], [{"label": "pos"}], {"label": "pos"}."""
    while isinstance(data, list):
        if not data:
            raise UpstreamServiceError("Empty sentiment payload")
        data = data[0]
    if isinstance(data, dict):
        data = data.get("label")
    if not isinstance(data, str) or not data.strip():
        raise UpstreamServiceError("Sentiment payload has no label")
    return data.strip().lower()


def _inference_headers() -> dict | None:
    if settings.hf_api_token:
        return {"Authorization": f"Bearer {settings.hf_api_token}"}
    return None


async def generate_onboarding_recommendations(intake: dict[str, Any]) -> list[Recommendation]:
    prompt = ONBOARDING_PROMPT.format(
        current_mental_health=intake.get("current_mental_health"),
        goals=_join(intake.get("goals")),
        sleep_pattern=intake.get("sleep_pattern"),
        stress_level=intake.get("stress_level"),
        social_connection=intake.get("social_connection"),
        concerns=_join(intake.get("mental_health_concerns")),
        exercise_frequency=intake.get("exercise_frequency"),
        diet_quality=intake.get("diet_quality"),
        substance_use=intake.get("substance_use"),
        coping_mechanisms=intake.get("coping_mechanisms"),
    )
    try:
        text = await generate_text(prompt, RECOMMENDATION_CONFIG)
        return normalize_recommendations(text, expect_json=True)
    except UpstreamServiceError as e:
        logger.warning("Onboarding recommendations unavailable, using fallback: %s", e.message)
        return [FALLBACK_ONBOARDING_RECOMMENDATION]


async def detect_sentiment(text: str) -> dict[str, str]:
    """Return {"sentiment", "emotion"} for a journal text; neutral on failure."""
    try:
        body = await post_json(
            settings.sentiment_api_url,
            {"data": [text]},
            timeout=settings.inference_timeout_seconds,
            headers=_inference_headers(),
        )
        data = body.get("data") if isinstance(body, dict) and "data" in body else body
        label = _sentiment_label(data)
    except UpstreamServiceError as e:
        logger.warning("Sentiment analysis unavailable, using neutral: %s", e.message)
        label = "neutral"
    return {"sentiment": label, "emotion": map_sentiment_to_emotion(label)}


async def get_activity_recommendations(mood: str, description: str) -> list[Recommendation]:
    try:
        body = await post_json(
            settings.activity_recommendation_api_url,
            {"data": [description, mood]},
            timeout=settings.inference_timeout_seconds,
            headers=_inference_headers(),
        )
        data = body.get("data") if isinstance(body, dict) and "data" in body else body
        return normalize_recommendations(data)
    except UpstreamServiceError as e:
        logger.warning("Activity recommendations unavailable, using fallback: %s", e.message)
        return normalize_recommendations(FALLBACK_ACTIVITIES)


async def personalized_response(user_context: dict[str, Any], current: dict[str, Any], previous: dict[str, Any]) -> str:
    context = (
        f"User: name={user_context.get('name')}, age={user_context.get('age')}, "
        f"gender={user_context.get('gender')}, main goal={user_context.get('goal')}\n"
        f"Current check-in: sentiment={current.get('sentiment')}, emotion={current.get('emotion')}, "
        f"stress={current.get('stress_level')}/10\n"
        f"Previous check-in: mood={previous.get('mood')}, stress={previous.get('stress_level')}\n"
    )
    contents = [CHECKIN_SYSTEM, context, f"Journal entry:\n{current.get('journal_entry', '')}"]
    try:
        return await generate_text(contents, CONVERSATION_CONFIG)
    except UpstreamServiceError as e:
        logger.warning("Personalized response unavailable, using fallback: %s", e.message)
        return FALLBACK_PERSONALIZED_RESPONSE


async def chat_reply(message: str, language: str = "English") -> str:
    prompt = CHAT_PROMPT.format(language=language or "English", message=message)
    try:
        return await generate_text(prompt, CONVERSATION_CONFIG)
    except UpstreamServiceError as e:
        logger.warning("Chat reply unavailable, using fallback: %s", e.message)
        return FALLBACK_CHAT_REPLY


async def analyze_entry(
    text: str,
    mood: str | None,
    user_context: dict[str, Any],
    stress_level: int | None,
    previous: dict[str, Any],
) -> dict[str, Any]:
    """Sentiment, activity suggestions and an empathetic reply for one journal entry."""
    sentiment = await detect_sentiment(text)
    current = {
        "sentiment": sentiment["sentiment"],
        "emotion": sentiment["emotion"],
        "stress_level": stress_level or 5,
        "journal_entry": text,
    }
    recommendations, reply = await asyncio.gather(
        get_activity_recommendations(mood or sentiment["sentiment"], text),
        personalized_response(user_context, current, previous),
    )
    return {
        "sentiment": sentiment["sentiment"],
        "emotion": sentiment["emotion"],
        "recommendations": [r.model_dump(exclude_none=True) for r in recommendations],
        "personalizedResponse": reply,
    }
