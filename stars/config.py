"""
Configuration module for the Nimble S.T.A.R.S backend.
Centralizes environment variables, logging setup, and constants.
"""
import os
import logging
from dotenv import load_dotenv

# Load .env file for local development
load_dotenv()

# ============================================================================
# Environment Configuration
# ============================================================================

# Environment identifier (production, staging, development, etc.)
ENVIRONMENT = os.environ.get("ENVIRONMENT", "production")

# Public URL of the web app, used for links in notification emails
APP_URL = os.environ.get("APP_URL", "https://stars.nimble.la").rstrip("/")

# Comma-separated list of allowed CORS origins
CORS_ORIGINS = [
    origin.strip()
    for origin in os.environ.get("CORS_ORIGINS", "http://localhost:3000").split(",")
    if origin.strip()
]

# ============================================================================
# Database Configuration
# ============================================================================

# Checked when the pool is first created (see stars.database)
DATABASE_URL = os.environ.get("DATABASE_URL")

# ============================================================================
# External Service Configuration
# ============================================================================

# Resend (email delivery)
RESEND_API_KEY = os.environ.get("RESEND_API_KEY", "")
RESEND_FROM_EMAIL = os.environ.get("RESEND_FROM_EMAIL", "notifications@stars.nimble.la")
RESEND_API_URL = os.environ.get("RESEND_API_URL", "https://api.resend.com")
EMAIL_SENDER_NAME = "Nimble S.T.A.R.S"

# Manatal (external ATS)
MANATAL_API_KEY = os.environ.get("MANATAL_API_KEY", "")
MANATAL_BASE_URL = os.environ.get("MANATAL_BASE_URL", "https://api.manatal.com/open/v3")
MANATAL_TIMEOUT_SECONDS = float(os.environ.get("MANATAL_TIMEOUT_SECONDS", "10"))
# Web UI base, used to build the candidate link stored on imported candidates
MANATAL_APP_URL = os.environ.get("MANATAL_APP_URL", "https://app.manatal.com").rstrip("/")

# Supabase project (Storage uses the service role key; auth settings live in stars.auth.config)
SUPABASE_URL = os.environ.get("SUPABASE_URL", "").rstrip("/")
SUPABASE_SERVICE_ROLE_KEY = os.environ.get("SUPABASE_SERVICE_ROLE_KEY", "")

# Supabase Storage bucket for candidate files (resumes)
STORAGE_BUCKET = os.environ.get("STORAGE_BUCKET", "candidate-files")

# ============================================================================
# Logging Configuration
# ============================================================================

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)

# ============================================================================
# Application Constants
# ============================================================================

# A client login notifies admins only if the previous login is older than this
LOGIN_NOTIFY_DEBOUNCE_SECONDS = int(os.environ.get("LOGIN_NOTIFY_DEBOUNCE_SECONDS", "3600"))

# Upper bound for resumes mirrored from the ATS (50 MB)
RESUME_MAX_BYTES = int(os.environ.get("RESUME_MAX_BYTES", str(50 * 1024 * 1024)))

# Comment previews in emails are cut at this many characters
COMMENT_PREVIEW_LENGTH = 200

# Human-readable stage labels used in notification messages and emails
STAGE_LABELS = {
    "submitted": "Submitted",
    "to_interview": "Interview",
    "approved": "Approved",
    "rejected": "Rejected",
}
