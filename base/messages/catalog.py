"""Canned banner texts: role welcomes and page-specific hints."""

from __future__ import annotations

from typing import Any, Optional

BANNER_MESSAGES = {
    "WELCOME": (
        "🎓 Welcome to Smart Dormitory Management System! "
        "Complete your profile and apply for accommodation today."
    ),
    "WELCOME_STUDENT": (
        "🎓 Welcome Student! Apply for dormitory accommodation and track your application status."
    ),
    "WELCOME_SUPERVISOR": (
        "👨‍💼 Welcome Supervisor! Review pending applications and manage room assignments."
    ),
    "WELCOME_ADMIN": "⚙️ Welcome Administrator! Oversee the entire dormitory management system.",
    "APPLICATION_SUBMITTED": (
        "✅ Application submitted successfully! Check your status in the Applications section."
    ),
    "PROFILE_INCOMPLETE": (
        "⚠️ Please complete your profile information for better service and faster processing."
    ),
    "MAINTENANCE_MODE": (
        "🔧 System maintenance scheduled for tonight 11 PM - 2 AM. Plan accordingly."
    ),
    "NEW_FEATURES": "🆕 New features available! Check out the updated room allocation system.",
}

# path -> (message, severity)
PAGE_BANNERS: dict[str, tuple[str, str]] = {
    "/dashboard": (
        "🏠 Dashboard: Your central hub for all dormitory activities and updates.",
        "info",
    ),
    "/applications/new": (
        "📝 Application Form: Please fill out all required fields carefully. "
        "Your application will be reviewed by supervisors.",
        "info",
    ),
    "/applications": (
        "📋 Application Status: Track your dormitory application progress and history.",
        "info",
    ),
    "/applications/pending": (
        "⏳ Pending Applications: Review and approve/reject student applications.",
        "warning",
    ),
    "/rooms": ("🏢 Room Management: Manage dormitory rooms, capacity, and assignments.", "info"),
    "/rooms/my-room": (
        "🛏️ My Room: View your current room assignment and roommate information.",
        "info",
    ),
    "/rooms/available": (
        "🔍 Available Rooms: Browse available dormitory rooms and their facilities.",
        "info",
    ),
    "/change-requests": ("🔄 Change Requests: Manage room and block change requests.", "info"),
    "/change-requests/new": (
        "📝 Room Change Request: Submit a request to change your current room assignment.",
        "info",
    ),
    "/clearance": (
        "✅ Clearance Status: Monitor your dormitory clearance requirements and progress.",
        "info",
    ),
    "/reports": (
        "📊 Reports & Analytics: View comprehensive dormitory statistics and reports.",
        "info",
    ),
    "/users/students": ("👨‍🎓 Student Management: Manage student accounts and information.", "info"),
    "/users/supervisors": (
        "👨‍💼 Supervisor Management: Manage supervisor accounts and assignments.",
        "info",
    ),
    "/admin/administrators": (
        "⚙️ Administrator Management: Manage system administrator accounts.",
        "info",
    ),
    "/user-profile": (
        "👤 Profile Settings: Update your personal information and preferences.",
        "info",
    ),
}

ROLE_WELCOME = {
    "student": "WELCOME_STUDENT",
    "supervisor": "WELCOME_SUPERVISOR",
    "admin": "WELCOME_ADMIN",
}


def welcome_message(role: Any) -> str:
    """Role welcome text; the generic welcome for an unknown role."""
    key = ROLE_WELCOME.get(getattr(role, "value", role), "WELCOME")
    return BANNER_MESSAGES[key]


def banner_for_page(path: str, role: Any) -> Optional[tuple[str, str]]:
    """Banner to show when ``path`` opens: the page's own hint, else the role welcome."""
    if path in PAGE_BANNERS:
        return PAGE_BANNERS[path]
    if getattr(role, "value", role) not in ROLE_WELCOME:
        return None
    return welcome_message(role), "info"
