"""
Authentication configuration.

Supabase Auth issues the access tokens the frontend sends; the backend only
verifies them and maps the subject to a S.T.A.R.S user. The project URL and
service role key are shared with Storage and live in stars.config.
"""
import os
from dotenv import load_dotenv

from stars.config import SUPABASE_URL, SUPABASE_SERVICE_ROLE_KEY

load_dotenv()

# =============================================================================
# Supabase Configuration
# =============================================================================

# Supabase anonymous/public key (safe to expose in frontend)
SUPABASE_ANON_KEY = os.environ.get("SUPABASE_ANON_KEY", "")

# JWT secret for verifying HS256 Supabase tokens
SUPABASE_JWT_SECRET = os.environ.get("SUPABASE_JWT_SECRET", "")

# Audience claim Supabase puts on user access tokens
JWT_AUDIENCE = "authenticated"
