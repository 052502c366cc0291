"""AI service layer: sentiment mapping, upstream failures and timeouts become fallbacks."""

import time
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from app.config import settings
from app.core.errors import UpstreamServiceError
from app.services import ai_service, gemini_common


@pytest.mark.parametrize("sentiment,emotion", [
    ("positive", "happy"),
    ("NEGATIVE", "sad"),
    ("neutral", "neutral"),
    ("mixed", "neutral"),
    ([{"label": "positive", "score": 0.9}], "happy"),
    (None, "neutral"),
])
def test_map_sentiment_to_emotion(sentiment, emotion):
    assert ai_service.map_sentiment_to_emotion(sentiment) == emotion


@pytest.mark.asyncio
async def test_detect_sentiment_parses_gradio_payload():
    with patch.object(settings, "sentiment_api_url", "http://inference.test/api/predict"), patch(
        "app.services.ai_service.post_json",
        new_callable=AsyncMock,
        return_value={"data": [{"label": "Negative", "confidences": []}]},
    ) as mock_post:
        result = await ai_service.detect_sentiment("Rough week")
    assert result == {"sentiment": "negative", "emotion": "sad"}
    assert mock_post.await_args.args[1] == {"data": ["Rough week"]}


@pytest.mark.asyncio
async def test_detect_sentiment_malformed_payload_is_neutral():
    with patch("app.services.ai_service.post_json", new_callable=AsyncMock, return_value={"data": []}):
        result = await ai_service.detect_sentiment("???")
    assert result == {"sentiment": "neutral", "emotion": "neutral"}


@pytest.mark.asyncio
async def test_activity_recommendations_fallback_on_upstream_error():
    with patch(
        "app.services.ai_service.post_json",
        new_callable=AsyncMock,
        side_effect=UpstreamServiceError("answered 503"),
    ):
        recs = await ai_service.get_activity_recommendations("sad", "tired")
    assert [r.description for r in recs] == ai_service.FALLBACK_ACTIVITIES


@pytest.mark.asyncio
async def test_activity_recommendations_accepts_text_list():
    with patch(
        "app.services.ai_service.post_json",
        new_callable=AsyncMock,
        return_value={"data": [["Call a friend", "Stretch"]]},
    ):
        recs = await ai_service.get_activity_recommendations("sad", "lonely")
    assert [r.title for r in recs] == ["Call a friend", "Stretch"]


@pytest.mark.asyncio
async def test_onboarding_recommendations_fallback_on_non_json():
    with patch("app.services.ai_service.generate_text", new_callable=AsyncMock, return_value="Sure! Here you go."):
        recs = await ai_service.generate_onboarding_recommendations({"goals": ["sleep"]})
    assert recs == [ai_service.FALLBACK_ONBOARDING_RECOMMENDATION]


@pytest.mark.asyncio
async def test_gemini_timeout_raises_upstream_error():
    model = MagicMock()
    model.generate_content.side_effect = lambda contents: time.sleep(0.3)
    with patch.object(settings, "gemini_request_timeout_seconds", 0.05), patch.object(
        settings, "gemini_max_attempts", 1
    ):
        with pytest.raises(UpstreamServiceError):
            await gemini_common.run_generate_content(model, "hello")


@pytest.mark.asyncio
async def test_gemini_non_retryable_error_fails_fast():
    model = MagicMock()
    model.generate_content.side_effect = RuntimeError("400 invalid argument")
    with patch.object(settings, "gemini_max_attempts", 3):
        with pytest.raises(UpstreamServiceError):
            await gemini_common.run_generate_content(model, "hello")
    assert model.generate_content.call_count == 1


@pytest.mark.asyncio
async def test_chat_reply_falls_back_on_timeout():
    with patch(
        "app.services.ai_service.generate_text",
        new_callable=AsyncMock,
        side_effect=UpstreamServiceError("Gemini request timed out"),
    ):
        reply = await ai_service.chat_reply("hello")
    assert reply == ai_service.FALLBACK_CHAT_REPLY


class _BlockedResponse:
    @property
    def text(self):
        raise ValueError("candidate was blocked")


def test_response_text_rejects_blocked_response():
    with pytest.raises(UpstreamServiceError):
        gemini_common.response_text(_BlockedResponse())
