APP_NAME = "NoDepression Companion"
APP_VERSION = "1.0.0"
DEFAULT_CORS_ALLOW_ORIGINS = [
	"http://localhost",
	"http://127.0.0.1",
	"http://localhost:3000",
	"http://localhost:5173",
]
DEFAULT_TRUSTED_HOSTS = [
	"127.0.0.1",
	"localhost",
	"testserver",
]
DEFAULT_USER_ID = "local"

API_KEY_NAMES = (
	"COMPANION_API_KEY",
	"OPENAI_API_KEY",
	"API_KEY",
)
API_KEY_PLACEHOLDERS = {
	"undefined",
	"null",
	"none",
	"changeme",
	"your-api-key",
}
DEFAULT_FAST_MODEL = "gpt-4.1-mini"
DEFAULT_DEEP_MODEL = "gpt-4.1"
DEFAULT_CHAT_TEMPERATURE = 0.7
DEFAULT_ENV_FILE = ".env"
DEFAULT_LOG_LEVEL = "INFO"

# Seconds per capability.
DEADLINES = {
	"security": 4.0,
	"emotion": 5.0,
	"chat": 10.0,
	"risk": 8.0,
	"wellness": 6.0,
	"gift_visibility": 3.0,
	"gift_content": 6.0,
}

RISK_HISTORY_WINDOW = 10
WELLNESS_ACTION_COUNT = 3

COMMON_STRESSORS = [
	"Academic Pressure",
	"Social Anxiety",
	"Sleep Issues",
	"Loneliness",
	"Future Career",
	"Burnout",
	"Financial Stress",
]
