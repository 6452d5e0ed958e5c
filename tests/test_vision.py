"""VisionClient backends used by the reference endpoint."""
import pytest
from unittest.mock import AsyncMock, MagicMock, patch

from vision_glasses.constants import ANALYSIS_PROMPT
from vision_glasses.vision.client import VisionClient


def test_backends_implement_abc():
    from vision_glasses.vision.claude import ClaudeVisionClient
    from vision_glasses.vision.openai import OpenAIVisionClient

    assert issubclass(ClaudeVisionClient, VisionClient)
    assert issubclass(OpenAIVisionClient, VisionClient)


# ── ClaudeVisionClient ────────────────────────────────────────────────────────


def _claude_response(text: str) -> MagicMock:
    response = MagicMock()
    response.content = [MagicMock(text=text)]
    return response


async def test_claude_vision_sends_base64_image_unchanged():
    from vision_glasses.vision.claude import ClaudeVisionClient

    client = ClaudeVisionClient(api_key="test-key")

    with patch("vision_glasses.vision.claude.AsyncAnthropic") as mock_cls:
        mock_anthropic = AsyncMock()
        mock_anthropic.messages.create = AsyncMock(return_value=_claude_response("a cat"))
        mock_cls.return_value = mock_anthropic

        await client.analyze("aGVsbG8=")

    mock_anthropic.messages.create.assert_called_once()
    content = mock_anthropic.messages.create.call_args.kwargs["messages"][0]["content"]
    image_blocks = [b for b in content if b["type"] == "image"]
    assert image_blocks[0]["source"]["data"] == "aGVsbG8="


async def test_claude_vision_defaults_to_assistive_prompt():
    from vision_glasses.vision.claude import ClaudeVisionClient

    client = ClaudeVisionClient(api_key="test-key")

    with patch("vision_glasses.vision.claude.AsyncAnthropic") as mock_cls:
        mock_anthropic = AsyncMock()
        mock_anthropic.messages.create = AsyncMock(return_value=_claude_response("x"))
        mock_cls.return_value = mock_anthropic

        await client.analyze("aGVsbG8=")

    content = mock_anthropic.messages.create.call_args.kwargs["messages"][0]["content"]
    text_blocks = [b for b in content if b["type"] == "text"]
    assert text_blocks[0]["text"] == ANALYSIS_PROMPT


async def test_claude_vision_uses_prompt_and_strips_reply():
    from vision_glasses.vision.claude import ClaudeVisionClient

    client = ClaudeVisionClient(api_key="test-key")

    with patch("vision_glasses.vision.claude.AsyncAnthropic") as mock_cls:
        mock_anthropic = AsyncMock()
        mock_anthropic.messages.create = AsyncMock(return_value=_claude_response("  stairs ahead \n"))
        mock_cls.return_value = mock_anthropic

        result = await client.analyze("aGVsbG8=", prompt="Read the sign.")

    content = mock_anthropic.messages.create.call_args.kwargs["messages"][0]["content"]
    text_blocks = [b for b in content if b["type"] == "text"]
    assert text_blocks[0]["text"] == "Read the sign."
    assert result == "stairs ahead"


async def test_claude_vision_raises_on_api_error():
    from vision_glasses.vision.claude import ClaudeVisionClient

    client = ClaudeVisionClient(api_key="test-key")

    with patch("vision_glasses.vision.claude.AsyncAnthropic") as mock_cls:
        mock_anthropic = AsyncMock()
        mock_anthropic.messages.create = AsyncMock(side_effect=RuntimeError("API down"))
        mock_cls.return_value = mock_anthropic

        with pytest.raises(RuntimeError):
            await client.analyze("aGVsbG8=")


# ── OpenAIVisionClient ────────────────────────────────────────────────────────


def _openai_response(content: str | None) -> MagicMock:
    choice = MagicMock()
    choice.message.content = content
    response = MagicMock()
    response.choices = [choice]
    return response


async def test_openai_vision_sends_data_url():
    from vision_glasses.vision.openai import OpenAIVisionClient

    client = OpenAIVisionClient(api_key="test-key")

    with patch("vision_glasses.vision.openai.AsyncOpenAI") as mock_cls:
        mock_openai = AsyncMock()
        mock_openai.chat.completions.create = AsyncMock(return_value=_openai_response("a cat"))
        mock_cls.return_value = mock_openai

        await client.analyze("aGVsbG8=")

    content = mock_openai.chat.completions.create.call_args.kwargs["messages"][0]["content"]
    image_blocks = [b for b in content if b["type"] == "image_url"]
    assert image_blocks[0]["image_url"]["url"] == "data:image/jpeg;base64,aGVsbG8="


async def test_openai_vision_returns_stripped_text():
    from vision_glasses.vision.openai import OpenAIVisionClient

    client = OpenAIVisionClient(api_key="test-key")

    with patch("vision_glasses.vision.openai.AsyncOpenAI") as mock_cls:
        mock_openai = AsyncMock()
        mock_openai.chat.completions.create = AsyncMock(return_value=_openai_response("  a dog \n"))
        mock_cls.return_value = mock_openai

        result = await client.analyze("aGVsbG8=", prompt="What is in front of me?")

    content = mock_openai.chat.completions.create.call_args.kwargs["messages"][0]["content"]
    text_blocks = [b for b in content if b["type"] == "text"]
    assert text_blocks[0]["text"] == "What is in front of me?"
    assert result == "a dog"


async def test_openai_vision_empty_content_returns_empty_string():
    from vision_glasses.vision.openai import OpenAIVisionClient

    client = OpenAIVisionClient(api_key="test-key")

    with patch("vision_glasses.vision.openai.AsyncOpenAI") as mock_cls:
        mock_openai = AsyncMock()
        mock_openai.chat.completions.create = AsyncMock(return_value=_openai_response(None))
        mock_cls.return_value = mock_openai

        assert await client.analyze("aGVsbG8=") == ""


async def test_openai_vision_raises_on_api_error():
    from vision_glasses.vision.openai import OpenAIVisionClient

    client = OpenAIVisionClient(api_key="test-key")

    with patch("vision_glasses.vision.openai.AsyncOpenAI") as mock_cls:
        mock_openai = AsyncMock()
        mock_openai.chat.completions.create = AsyncMock(side_effect=RuntimeError("API down"))
        mock_cls.return_value = mock_openai

        with pytest.raises(RuntimeError):
            await client.analyze("aGVsbG8=")
