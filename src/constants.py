"""Application constants - centralized configuration values."""

# =============================================================================
# API Timeouts (in seconds)
# =============================================================================
API_TIMEOUT_DEFAULT = 10.0
HTTPX_TIMEOUT = 10.0

# =============================================================================
# GitHub
# =============================================================================
GITHUB_API_VERSION = "2022-11-28"
GITHUB_USER_AGENT = "SampleApplication/0.1.0"
GITHUB_RETRY_BASE_DELAY = 0.5  # seconds
GITHUB_RETRY_MAX_DELAY = 4.0  # seconds
USERNAME_MAX_LENGTH = 39  # GitHub's own limit
# Alphanumerics separated by single hyphens, no leading or trailing hyphen
USERNAME_PATTERN = r"^[A-Za-z0-9](?:-?[A-Za-z0-9])*$"

# =============================================================================
# Session & Security
# =============================================================================
SESSION_TIMEOUT_DAYS = 7
SESSION_COOKIE_NAME = "sampleapp_session"
CSRF_FORM_FIELD = "__RequestVerificationToken"
CSRF_SESSION_KEY = "csrf_token"

# =============================================================================
# Identity
# =============================================================================
LOGIN_PATH = "/Identity/Account/Login"
RETURN_URL_PARAM = "ReturnUrl"
DEFAULT_LOCALE = "en"
SUPPORTED_LOCALES = ("en", "fr")
