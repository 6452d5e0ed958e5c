from dataclasses import dataclass
from enum import Enum
from typing import Optional
import os
from dotenv import load_dotenv

from vision_glasses.constants import (
    MOCK_DELAY_SECONDS,
    SERVER_HOST,
    SERVER_PORT,
    SPEECH_BACKEND_LOG,
    SPEECH_BACKEND_PYTTSX3,
)

_TRUE = ("1", "true", "yes", "on")
_FALSE = ("0", "false", "no", "off")


class AnalysisMode(str, Enum):
    MOCK = "mock"
    LIVE = "live"


class TransportMode(str, Enum):
    JSON = "json"
    FORM_DATA = "form-data"


def parse_bool(name: str, raw: str) -> bool:
    match raw.strip().lower():
        case value if value in _TRUE:
            return True
        case value if value in _FALSE:
            return False
        case _:
            raise ValueError(f"{name} must be a boolean (got {raw!r})")


@dataclass
class EndpointConfig:
    """User-editable endpoint settings. Lives for the process only."""

    url: Optional[str] = None
    transport_mode: TransportMode = TransportMode.JSON
    use_mock: bool = True

    @property
    def mode(self) -> AnalysisMode:
        return AnalysisMode.MOCK if self.use_mock else AnalysisMode.LIVE

    def set_url(self, url: Optional[str]) -> None:
        self.url = (url or "").strip() or None

    def set_mock(self, use_mock: bool) -> None:
        self.use_mock = use_mock

    def set_form_data(self, enabled: bool) -> None:
        self.transport_mode = TransportMode.FORM_DATA if enabled else TransportMode.JSON


@dataclass(frozen=True)
class Config:
    use_mock: bool
    send_as_form_data: bool
    endpoint_url: Optional[str]
    endpoint_token: Optional[str]
    mock_delay: float
    speech_backend: str
    log_level: str
    server_host: str
    server_port: int
    anthropic_api_key: Optional[str]
    openai_api_key: Optional[str]

    @classmethod
    def from_env(cls) -> "Config":
        load_dotenv()

        use_mock = os.getenv("USE_MOCK_BACKEND", "true")
        send_as_form_data = os.getenv("SEND_AS_FORMDATA", "false")
        endpoint_url = os.getenv("ENDPOINT_URL") or None
        endpoint_token = os.getenv("ENDPOINT_TOKEN") or None
        mock_delay = os.getenv("MOCK_DELAY_SECONDS", str(MOCK_DELAY_SECONDS))
        speech_backend = os.getenv("SPEECH_BACKEND", SPEECH_BACKEND_PYTTSX3)
        log_level = os.getenv("LOG_LEVEL", "INFO")
        server_host = os.getenv("SERVER_HOST", SERVER_HOST)
        server_port = os.getenv("SERVER_PORT", str(SERVER_PORT))
        anthropic_api_key = os.getenv("ANTHROPIC_API_KEY") or None
        openai_api_key = os.getenv("OPENAI_API_KEY") or None

        try:
            delay = float(mock_delay)
        except ValueError:
            raise ValueError(f"MOCK_DELAY_SECONDS must be a number (got {mock_delay!r})")
        try:
            port = int(server_port)
        except ValueError:
            raise ValueError(f"SERVER_PORT must be an integer (got {server_port!r})")

        return cls._validate(
            use_mock=parse_bool("USE_MOCK_BACKEND", use_mock),
            send_as_form_data=parse_bool("SEND_AS_FORMDATA", send_as_form_data),
            endpoint_url=endpoint_url.strip() if endpoint_url else None,
            endpoint_token=endpoint_token,
            mock_delay=delay,
            speech_backend=speech_backend.strip().lower(),
            log_level=log_level,
            server_host=server_host,
            server_port=port,
            anthropic_api_key=anthropic_api_key,
            openai_api_key=openai_api_key,
        )

    @staticmethod
    def _validate(
        use_mock: bool,
        send_as_form_data: bool,
        endpoint_url: Optional[str],
        endpoint_token: Optional[str],
        mock_delay: float,
        speech_backend: str,
        log_level: str,
        server_host: str,
        server_port: int,
        anthropic_api_key: Optional[str],
        openai_api_key: Optional[str],
    ) -> "Config":
        match mock_delay:
            case d if d < 0:
                raise ValueError("MOCK_DELAY_SECONDS must not be negative")
            case _:
                pass

        match speech_backend:
            case b if b in (SPEECH_BACKEND_PYTTSX3, SPEECH_BACKEND_LOG):
                pass
            case _:
                raise ValueError(
                    f"SPEECH_BACKEND must be {SPEECH_BACKEND_PYTTSX3!r} or {SPEECH_BACKEND_LOG!r}"
                )

        return Config(
            use_mock=use_mock,
            send_as_form_data=send_as_form_data,
            endpoint_url=endpoint_url or None,
            endpoint_token=endpoint_token,
            mock_delay=mock_delay,
            speech_backend=speech_backend,
            log_level=log_level,
            server_host=server_host,
            server_port=server_port,
            anthropic_api_key=anthropic_api_key,
            openai_api_key=openai_api_key,
        )

    def endpoint_config(self) -> EndpointConfig:
        """Fresh, user-editable endpoint settings seeded from the environment."""
        endpoint = EndpointConfig(use_mock=self.use_mock)
        endpoint.set_url(self.endpoint_url)
        endpoint.set_form_data(self.send_as_form_data)
        return endpoint
