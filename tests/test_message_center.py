import pytest

from base.messages import (
    BANNER_MESSAGES,
    ROLE_WELCOME,
    MessageCenter,
    Severity,
    banner_for_page,
    welcome_message,
)
from base.auth.models import Role


@pytest.fixture
def center(scheduler):
    return MessageCenter(default_duration=5, scheduler=scheduler)


def test_notifications_are_fifo_and_capped(center):
    ids = [center.show_info(f"message {n}") for n in range(6)]

    messages = [n.message for n in center.notifications]

    assert messages == [f"message {n}" for n in range(1, 6)]
    assert ids[0] not in {n.id for n in center.notifications}


def test_notification_ids_are_unique(center):
    ids = {center.show_info("same") for _ in range(5)}

    assert len(ids) == 5


def test_severity_helpers(center):
    center.show_success("ok")
    center.show_error("bad")
    center.show_warning("careful")
    center.show_info("fyi")

    assert [n.severity for n in center.notifications] == [
        Severity.SUCCESS,
        Severity.ERROR,
        Severity.WARNING,
        Severity.INFO,
    ]


def test_notifications_dismiss_themselves(center, scheduler):
    center.show_info("short", duration=2)

    assert scheduler.pending[0][0] == 2
    scheduler.run_all()

    assert center.notifications == ()


def test_sticky_notification_is_not_scheduled(center, scheduler):
    center.show_error("stays", duration=0)

    assert scheduler.pending == []
    assert center.notifications[0].sticky


def test_default_duration_applies(center, scheduler):
    center.show_success("saved")

    assert scheduler.pending[0][0] == 5


def test_dismiss_after_eviction_is_harmless(center, scheduler):
    for n in range(6):
        center.show_info(str(n))

    scheduler.run_all()

    assert center.notifications == ()


def test_manual_dismiss(center):
    keep = center.show_info("keep")
    drop = center.show_info("drop")

    assert center.dismiss(drop) is True
    assert center.dismiss(drop) is False
    assert [n.id for n in center.notifications] == [keep]


def test_clear_notifications(center):
    center.show_info("a")
    center.show_info("b")

    center.clear_notifications()

    assert center.notifications == ()


def test_banner_starts_with_welcome(center):
    assert center.banner.visible
    assert center.banner.message == BANNER_MESSAGES["WELCOME"]


def test_last_banner_wins(center):
    center.show_banner("X", "info")
    center.show_banner("Y", "warning")

    assert center.banner.message == "Y"
    assert center.banner.severity is Severity.WARNING
    assert center.banner.visible


def test_hidden_banner_does_not_keep_text(center):
    center.show_banner("secret", "error")
    center.hide_banner()

    assert not center.banner.visible
    assert center.banner.message == ""

    center.update_banner(visible=True)
    assert center.banner.message == ""


def test_update_banner_changes_fields(center):
    center.show_banner("first")
    center.update_banner(severity="success", dismissible=False)

    assert center.banner.message == "first"
    assert center.banner.severity is Severity.SUCCESS
    assert not center.banner.dismissible


def test_subscribers_are_notified_until_unsubscribed(center):
    seen = []
    unsubscribe = center.subscribe(lambda c: seen.append(len(c.notifications)))

    center.show_info("one")
    unsubscribe()
    center.show_info("two")

    assert seen == [1]


def test_failing_listener_does_not_block_others(center):
    seen = []

    def broken(_):
        raise RuntimeError("boom")

    center.subscribe(broken)
    center.subscribe(lambda c: seen.append(c.banner.message))

    center.show_banner("still delivered")

    assert seen == ["still delivered"]


def test_unknown_severity_is_rejected(center):
    with pytest.raises(ValueError):
        center.notify("x", "catastrophic")


def test_capacity_must_be_positive():
    with pytest.raises(ValueError):
        MessageCenter(max_notifications=0)


def test_page_banner_and_role_welcome():
    assert banner_for_page("/applications/pending", Role.SUPERVISOR)[1] == "warning"
    assert banner_for_page("/admin/blocks-unknown", Role.ADMIN) == (
        BANNER_MESSAGES["WELCOME_ADMIN"],
        "info",
    )
    assert banner_for_page("/nowhere", None) is None


@pytest.mark.parametrize("role", list(Role))
def test_welcome_message_per_role(role):
    assert welcome_message(role) == BANNER_MESSAGES[ROLE_WELCOME[role.value]]


def test_welcome_message_for_unknown_role():
    assert welcome_message(None) == BANNER_MESSAGES["WELCOME"]
    assert welcome_message("janitor") == BANNER_MESSAGES["WELCOME"]
