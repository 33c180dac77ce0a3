from .catalog import BANNER_MESSAGES, PAGE_BANNERS, ROLE_WELCOME, banner_for_page, welcome_message
from .center import BannerState, MessageCenter, Notification, Severity

__all__ = [
    "BANNER_MESSAGES",
    "PAGE_BANNERS",
    "ROLE_WELCOME",
    "banner_for_page",
    "welcome_message",
    "BannerState",
    "MessageCenter",
    "Notification",
    "Severity",
]
