"""All magic values live here — no inline literals anywhere else."""

# Analysis paths
MOCK_DELAY_SECONDS: float = 0.5
MOCK_PREFIX = "Mock:"
MSG_MOCK_DESCRIPTION = "Mock: person 2m ahead, chair to your right, sign reads 'Exit'."
MSG_NO_ENDPOINT = (
    "No endpoint configured. Set endpoint URL and disable mock mode to call your server."
)
MSG_NO_DESCRIPTION = "No description available."
MSG_ANALYSIS_FAILED = "Analysis failed."
MSG_SERVER_ERROR = "Server error %d: %s"

# Live request
FIELD_IMAGE = "image_base64"
FIELD_PROMPT = "prompt"
# Response fields tried in order; first non-empty string wins.
SPOKEN_TEXT_FIELDS: tuple[str, ...] = ("spoken_text", "text")
ANALYSIS_PROMPT = (
    "You are an assistant for visually impaired users. "
    "Provide a short, prioritized spoken description of the scene. "
    "Include detected objects, text (if any) and useful navigation cues. "
    "Keep it concise (max 40 words). "
    "Prioritize immediate obstacles and person presence."
)
BEARER_PREFIX = "Bearer "

# Log messages
MSG_APP_STARTING = "Starting vision glasses console…"
MSG_CALLING_ENDPOINT = "→ POST %s (%s)"
MSG_ENDPOINT_OK = "✓ Endpoint replied (%.1fs)"
MSG_STALE_RESULT = "Discarding stale result for request #%d (latest is #%d)"
MSG_TTS_MOCK = "TTS (mock): %s"
MSG_TTS_UNAVAILABLE = "Speech engine unavailable (%s), falling back to log output"

# Speech
SPEECH_BACKEND_PYTTSX3 = "pyttsx3"
SPEECH_BACKEND_LOG = "log"
PYTTSX3_RATE = 175

# Self tests
TEST_PAYLOAD = "dummy-base64"
TEST_NAME_MOCK = "Mock backend returns expected string"
TEST_NAME_NO_ENDPOINT = "No-endpoint yields helpful message"
NO_ENDPOINT_PHRASE = "No endpoint configured"

# Console commands
CMD_HELP = "help"
CMD_STATUS = "status"
CMD_MOCK = "mock"
CMD_LIVE = "live"
CMD_ENDPOINT = "endpoint"
CMD_FORMDATA = "formdata"
CMD_RUN = "run"
CMD_CALL = "call"
CMD_IMAGE = "image"
CMD_TEST = "test"
CMD_QUIT = "quit"

CONSOLE_PROMPT = "glasses> "
MSG_UNKNOWN_COMMAND = "Unknown command: %s (try /help)"
MSG_MODE_SET = "Mode set to: %s"
MSG_ENDPOINT_SET = "Endpoint set to: %s"
MSG_ENDPOINT_CLEARED = "Endpoint cleared."
MSG_FORMDATA_USAGE = "Usage: /formdata on|off"
MSG_FORMDATA_SET = "Send as form data: %s"
MSG_IMAGE_USAGE = "Usage: /image <path>"
MSG_IMAGE_READ_FAILED = "Could not read image: %s"
MSG_COMMAND_FAILED = "Command failed: %s"
MSG_RESULT = "Result: %s"
MSG_RESULT_ERROR = "Debug: %s"
MSG_TEST_LINE = "%s — %s\n    %s"
MSG_BYE = "Bye."

MSG_STATUS = (
    "Status\n"
    "  Mode        : %s\n"
    "  Endpoint    : %s\n"
    "  Form data   : %s\n"
    "  Processing  : %s\n"
    "  Last result : %s\n"
    "  Last error  : %s\n"
)

MSG_HELP = (
    "AI Assistive Glasses — demo console\n"
    "\n"
    "Commands:\n"
    "  /help                  — show this message\n"
    "  /status                — current mode, endpoint and last result\n"
    "  /mock                  — use the mock backend\n"
    "  /live                  — call the configured endpoint\n"
    "  /endpoint <url>        — set the endpoint (no url clears it)\n"
    "  /formdata on|off       — send multipart form data instead of JSON\n"
    "  /run                   — run the mock description\n"
    "  /call                  — call the endpoint with a dummy payload\n"
    "  /image <path>          — describe an image file in the current mode\n"
    "  /test                  — run the built-in self tests\n"
    "  /quit                  — exit\n"
)

# Reference endpoint
SERVER_HOST = "0.0.0.0"
SERVER_PORT = 8080
ROUTE_VISION = "/vision"
ROUTE_HEALTH = "/health"
MSG_SERVER_STARTING = "Starting reference vision endpoint on %s:%d (%s)"
MSG_ERR_NO_IMAGE = "image_base64 is required"
MSG_ERR_VISION_FAILED = "Vision backend failed"
MSG_ERR_NO_VISION_KEY = "ANTHROPIC_API_KEY or OPENAI_API_KEY must be set in .env"

# Vision backends
CLAUDE_VISION_MODEL = "claude-opus-4-6"
OPENAI_VISION_MODEL = "gpt-4o"
VISION_MAX_TOKENS = 256
IMAGE_MEDIA_TYPE = "image/jpeg"
