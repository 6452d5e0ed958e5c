"""OpenAIVisionClient — OpenAI GPT-4o vision backend."""
from openai import AsyncOpenAI

from vision_glasses.constants import (
    ANALYSIS_PROMPT,
    IMAGE_MEDIA_TYPE,
    OPENAI_VISION_MODEL,
    VISION_MAX_TOKENS,
)
from vision_glasses.vision.client import VisionClient


class OpenAIVisionClient(VisionClient):
    name = "openai"

    def __init__(self, api_key: str) -> None:
        self._api_key = api_key

    async def analyze(self, image_base64: str, prompt: str | None = None) -> str:
        client = AsyncOpenAI(api_key=self._api_key)
        response = await client.chat.completions.create(
            model=OPENAI_VISION_MODEL,
            max_tokens=VISION_MAX_TOKENS,
            messages=[
                {
                    "role": "user",
                    "content": [
                        {
                            "type": "image_url",
                            "image_url": {"url": f"data:{IMAGE_MEDIA_TYPE};base64,{image_base64}"},
                        },
                        {"type": "text", "text": prompt or ANALYSIS_PROMPT},
                    ],
                }
            ],
        )
        content = response.choices[0].message.content
        return content.strip() if content else ""
