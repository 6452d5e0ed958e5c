"""Reference vision endpoint — POST {image_base64, prompt} → {spoken_text}.

A small aiohttp app that speaks the same contract the live mode expects and
delegates the description to a hosted vision model.
"""
import logging
from typing import Any

from aiohttp import web

from vision_glasses.config import Config
from vision_glasses.constants import (
    FIELD_IMAGE,
    FIELD_PROMPT,
    MSG_ERR_NO_IMAGE,
    MSG_ERR_NO_VISION_KEY,
    MSG_ERR_VISION_FAILED,
    MSG_SERVER_STARTING,
    ROUTE_HEALTH,
    ROUTE_VISION,
)
from vision_glasses.main import setup_logging
from vision_glasses.vision.claude import ClaudeVisionClient
from vision_glasses.vision.client import VisionClient
from vision_glasses.vision.openai import OpenAIVisionClient

logger = logging.getLogger(__name__)

VISION_CLIENT = web.AppKey("vision_client", VisionClient)


def select_vision_client(config: Config) -> VisionClient:
    match (config.anthropic_api_key, config.openai_api_key):
        case (str() as k, _) if k:
            return ClaudeVisionClient(k)
        case (_, str() as k) if k:
            return OpenAIVisionClient(k)
        case _:
            raise ValueError(MSG_ERR_NO_VISION_KEY)


async def _read_fields(request: web.Request) -> dict[str, Any]:
    match request.content_type:
        case "application/json":
            payload = await request.json()
            return payload if isinstance(payload, dict) else {}
        case _:
            form = await request.post()
            return dict(form.items())


async def handle_vision(request: web.Request) -> web.Response:
    try:
        fields = await _read_fields(request)
    except ValueError:
        return web.json_response({"error": MSG_ERR_NO_IMAGE}, status=400)

    match (fields.get(FIELD_IMAGE), fields.get(FIELD_PROMPT)):
        case (str() as image, prompt) if image.strip():
            pass
        case _:
            return web.json_response({"error": MSG_ERR_NO_IMAGE}, status=400)

    vision = request.app[VISION_CLIENT]
    try:
        text = await vision.analyze(image, prompt if isinstance(prompt, str) and prompt else None)
    except Exception:
        logger.exception("%s vision backend failed", vision.name)
        return web.json_response({"error": MSG_ERR_VISION_FAILED}, status=502)
    return web.json_response({"spoken_text": text})


async def handle_health(request: web.Request) -> web.Response:
    return web.json_response({"status": "ok"})


def create_app(vision: VisionClient) -> web.Application:
    app = web.Application()
    app[VISION_CLIENT] = vision
    app.router.add_post(ROUTE_VISION, handle_vision)
    app.router.add_get(ROUTE_HEALTH, handle_health)
    return app


def main() -> None:
    config = Config.from_env()
    setup_logging(config.log_level)
    vision = select_vision_client(config)
    logger.info(MSG_SERVER_STARTING, config.server_host, config.server_port, vision.name)
    web.run_app(
        create_app(vision),
        host=config.server_host,
        port=config.server_port,
        print=None,
    )


if __name__ == "__main__":
    main()
