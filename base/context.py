from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

import requests

from base import get_logger
from base.api import ApiClient, DormitoryAPI
from base.auth.session_manager import SessionManager
from base.auth.storage import FileSessionStorage, SessionStorage
from base.config import AppConfig
from base.messages import MessageCenter
from base.messages.center import Scheduler, thread_scheduler
from base.nav.router import Router

logger = get_logger(__name__)


@dataclass
class AppContext:
    config: AppConfig
    session: SessionManager
    client: ApiClient
    api: DormitoryAPI
    messages: MessageCenter
    router: Router


def create_context(
    config: AppConfig,
    *,
    storage: Optional[SessionStorage] = None,
    http: Optional[requests.Session] = None,
    scheduler: Scheduler = thread_scheduler,
) -> AppContext:
    """Wire the session store, API client, message center and router together.

    A 401 on an authenticated request purges the session (when the rejected
    token is still the stored one) and sends the router to the login page.
    """

    session = SessionManager(storage or FileSessionStorage(config.session_file))
    router = Router(session)

    def on_unauthorized(rejected_token: str) -> None:
        if session.handle_unauthorized(rejected_token):
            router.redirect_to_login()

    client = ApiClient(
        config.api_url,
        session.get_token,
        timeout=config.request_timeout,
        session=http,
        on_unauthorized=on_unauthorized,
    )
    api = DormitoryAPI(client)
    session.attach_api(api.auth)

    messages = MessageCenter(default_duration=config.toast_seconds, scheduler=scheduler)

    logger.info(f"API base URL: {config.api_url}")
    return AppContext(
        config=config,
        session=session,
        client=client,
        api=api,
        messages=messages,
        router=router,
    )
