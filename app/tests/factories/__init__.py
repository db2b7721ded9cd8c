"""Test data factories for deterministic test data generation."""

from tests.factories.notifications import (
    make_commit,
    make_event,
    make_issue,
    make_label,
    make_merge_request,
    make_notification,
    make_notification_result,
    make_project,
    make_recipient,
    make_snippet,
    make_user,
)

__all__ = [
    "make_commit",
    "make_event",
    "make_issue",
    "make_label",
    "make_merge_request",
    "make_notification",
    "make_notification_result",
    "make_project",
    "make_recipient",
    "make_snippet",
    "make_user",
]
