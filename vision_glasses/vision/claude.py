"""ClaudeVisionClient — Anthropic Claude vision backend."""
from anthropic import AsyncAnthropic

from vision_glasses.constants import (
    ANALYSIS_PROMPT,
    CLAUDE_VISION_MODEL,
    IMAGE_MEDIA_TYPE,
    VISION_MAX_TOKENS,
)
from vision_glasses.vision.client import VisionClient


class ClaudeVisionClient(VisionClient):
    name = "claude"

    def __init__(self, api_key: str) -> None:
        self._api_key = api_key

    async def analyze(self, image_base64: str, prompt: str | None = None) -> str:
        client = AsyncAnthropic(api_key=self._api_key)
        message = await client.messages.create(
            model=CLAUDE_VISION_MODEL,
            max_tokens=VISION_MAX_TOKENS,
            messages=[
                {
                    "role": "user",
                    "content": [
                        {
                            "type": "image",
                            "source": {
                                "type": "base64",
                                "media_type": IMAGE_MEDIA_TYPE,
                                "data": image_base64,
                            },
                        },
                        {"type": "text", "text": prompt or ANALYSIS_PROMPT},
                    ],
                }
            ],
        )
        return message.content[0].text.strip()
