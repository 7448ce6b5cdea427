"""
HTML email templates for notification emails.

Templates live in ``templates/emails`` and extend one shared layout
(``base.html``); badges, buttons and quotes are macros in ``macros.html``.
Autoescaping is on for every ``.html`` template.
"""
import os
from datetime import datetime
from typing import Optional, Sequence

from jinja2 import Environment, FileSystemLoader, select_autoescape

from stars.config import STAGE_LABELS, COMMENT_PREVIEW_LENGTH

TEMPLATE_DIR = os.path.join(os.path.dirname(__file__), "templates", "emails")

STAGE_COLORS = {
    "submitted": ("#DBEAFE", "#1D4ED8"),
    "to_interview": ("#FEF3C7", "#B45309"),
    "approved": ("#D1FAE5", "#047857"),
    "rejected": ("#FEE2E2", "#B91C1C"),
}

STYLES = {
    "body": "font-size:14px;color:#374151;line-height:24px",
    "muted": "font-size:13px;color:#6b7280",
}


def stage_label(stage: str) -> str:
    """Human-readable label for a stage value (falls back to the raw value)."""
    return STAGE_LABELS.get(stage, stage)


def truncate_preview(text: str, limit: int = COMMENT_PREVIEW_LENGTH) -> str:
    if len(text) > limit:
        return text[:limit] + "..."
    return text


def format_login_time(at: datetime) -> str:
    return at.strftime("%b %d, %Y %H:%M UTC")


env = Environment(
    loader=FileSystemLoader(TEMPLATE_DIR),
    autoescape=select_autoescape(["html"]),
    trim_blocks=True,
    lstrip_blocks=True,
)
env.filters["stage_label"] = stage_label
env.filters["preview"] = truncate_preview
env.filters["login_time"] = format_login_time
env.globals["stage_colors"] = STAGE_COLORS
env.globals["styles"] = STYLES


def render(template_name: str, **context) -> str:
    return env.get_template(f"{template_name}.html").render(**context)


# ============================================================================
# Pipeline templates
# ============================================================================

def stage_change_html(
    actor_name: str,
    candidate_name: str,
    from_stage: str,
    to_stage: str,
    position_title: str,
    org_name: str,
    profile_url: str,
) -> str:
    """Generic from -> to stage change."""
    return render(
        "stage_change",
        actor_name=actor_name,
        candidate_name=candidate_name,
        from_stage=from_stage,
        to_stage=to_stage,
        position_title=position_title,
        org_name=org_name,
        profile_url=profile_url,
    )


def workflow_to_interview_html(
    candidate_name: str,
    position_title: str,
    org_name: str,
    profile_url: str,
) -> str:
    return render(
        "workflow_to_interview",
        candidate_name=candidate_name,
        position_title=position_title,
        org_name=org_name,
        profile_url=profile_url,
    )


def workflow_approved_html(
    candidate_name: str,
    position_title: str,
    org_name: str,
    profile_url: str,
) -> str:
    return render(
        "workflow_approved",
        candidate_name=candidate_name,
        position_title=position_title,
        org_name=org_name,
        profile_url=profile_url,
    )


def workflow_rejected_html(
    candidate_name: str,
    position_title: str,
    actor_name: str,
    org_name: str,
    profile_url: str,
) -> str:
    return render(
        "workflow_rejected",
        candidate_name=candidate_name,
        position_title=position_title,
        actor_name=actor_name,
        org_name=org_name,
        profile_url=profile_url,
    )


def candidate_assigned_html(
    candidate_name: str,
    position_title: str,
    org_name: str,
    profile_url: str,
    current_role: Optional[str] = None,
) -> str:
    return render(
        "candidate_assigned",
        candidate_name=candidate_name,
        position_title=position_title,
        org_name=org_name,
        profile_url=profile_url,
        current_role=current_role,
    )


def new_comment_html(
    actor_name: str,
    candidate_name: str,
    position_title: str,
    comment: str,
    profile_url: str,
) -> str:
    """Client comment, sent to admins."""
    return render(
        "new_comment",
        actor_name=actor_name,
        candidate_name=candidate_name,
        position_title=position_title,
        comment=comment,
        profile_url=profile_url,
    )


def admin_comment_html(
    candidate_name: str,
    position_title: str,
    comment: str,
    profile_url: str,
) -> str:
    """Admin note, sent to the client organization."""
    return render(
        "admin_comment",
        candidate_name=candidate_name,
        position_title=position_title,
        comment=comment,
        profile_url=profile_url,
    )


# ============================================================================
# Login templates
# ============================================================================

def client_login_html(
    user_name: str,
    org_name: str,
    login_time: datetime,
    client_detail_url: str,
) -> str:
    return render(
        "client_login",
        user_name=user_name,
        org_name=org_name,
        login_time=login_time,
        client_detail_url=client_detail_url,
    )


def login_digest_html(logins: Sequence[dict], since: datetime, dashboard_url: str) -> str:
    """
    Summary of client logins since a point in time.

    Each login is a mapping with ``name``, ``org_name`` and ``last_login_at``.
    """
    return render("login_digest", logins=list(logins), since=since, dashboard_url=dashboard_url)
