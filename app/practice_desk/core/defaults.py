from __future__ import annotations

# Environment and config defaults
DEFAULT_ENV_NAME = "dev"
DEFAULT_DEV_ENV_NAMES = ("dev", "development", "local")
DEFAULT_BACKEND_URL = "http://localhost:5000"
DEFAULT_BACKEND_TIMEOUT_SEC = 30.0
DEFAULT_LAYOUT_DIR = ".local/dashboard_layouts"

# List manager defaults
DEFAULT_PAGE_SIZE = 10
PAGE_SIZE_OPTIONS = (10, 25, 50, 100)
FILTER_OPTION_ALL = "All"
DATE_PRESET_TODAY = "Today"
DATE_PRESET_THIS_WEEK = "This Week"
DATE_PRESET_THIS_MONTH = "This Month"
DATE_PRESET_ALL_TIME = "All Time"
DATE_PRESETS = (
    DATE_PRESET_TODAY,
    DATE_PRESET_THIS_WEEK,
    DATE_PRESET_THIS_MONTH,
    DATE_PRESET_ALL_TIME,
)
NO_DATE_MARKERS = ("no deadline", "n/a", "none", "-")
PAGE_LINKS_MAX_VISIBLE = 10

# Bulk upload defaults
BULK_UPLOAD_EXTENSIONS = (".xlsx", ".xls")
BULK_UPLOAD_MAX_BYTES = 25 * 1024 * 1024
BULK_PREVIEW_TTL_SEC = 1800.0
BULK_PREVIEW_MAX_SESSIONS = 64
BULK_CORRECTED_FILE_PREFIX = "bulk_upload_corrected"
TSP_CONTACT_DELIMITER = "/"

# Field length limits mirrored from backend column constraints
MAX_NAME_LENGTH = 255
MAX_EMAIL_LENGTH = 255
MAX_WEBSITE_LENGTH = 500
MIN_PHONE_LENGTH = 7
MAX_PHONE_LENGTH = 20

# Billing defaults
BASE_CURRENCY = "INR"
EXPENSE_CURRENCY = "INR"
MAX_EXCHANGE_RATE = 10000.0
CONVERSION_PRECISION = 4

# Search defaults (milliseconds)
DEFAULT_SEARCH_DEBOUNCE_MS = 300

# Dashboard grid
DASHBOARD_GRID_COLUMNS = 12
