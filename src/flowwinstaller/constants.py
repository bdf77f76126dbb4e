"""Shared constants for flowwinstaller."""

DEFAULT_TEMPLATES_URL = "https://raw.githubusercontent.com/usefloww/floww/main/install/templates"
DEFAULT_INSTALL_DIRNAME = "floww"

LOCAL_DOMAINS = ("localhost", "127.0.0.1")
AUTH_TYPE = "password"

# remote resource name -> intermediate file name inside the install dir
COMPOSE_TEMPLATE = ("docker-compose.yml", "docker-compose.yml.template")
PROXY_TEMPLATE = ("Caddyfile.template", "Caddyfile.template")

COMPOSE_FILE = "docker-compose.yml"
PROXY_FILE = "Caddyfile"
ENV_FILE = ".env"
LOGS_DIR = "logs"

PUBLIC_IP_ENDPOINTS = ("https://ifconfig.me", "https://icanhazip.com")
UNKNOWN_IP = "unknown"

REQUIRED_TOOLS = ()

HEALTH_SERVICE = "backend"
HEALTH_CHECK_SCRIPT = (
    "import requests; "
    "requests.get('http://localhost:8000/api/health', timeout=2).raise_for_status()"
)
READINESS_ATTEMPTS = 60
READINESS_INTERVAL_SECONDS = 2.0
READINESS_COMMAND_TIMEOUT_SECONDS = 10.0
