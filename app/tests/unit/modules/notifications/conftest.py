"""Fixtures for notification recipient resolution tests."""

from types import SimpleNamespace

import pytest

from modules.notifications.adapters.memory import (
    InMemoryDirectory,
    InMemoryNotificationSettingStore,
    InMemorySubscriptionStore,
)
from modules.notifications.domain.models import (
    AccessLevel,
    NotificationLevel,
    Scope,
)
from modules.notifications.engine import RecipientResolutionEngine
from modules.notifications.mentions import RegexMentionExtractor
from modules.notifications.preferences import PreferenceResolver
from tests.factories.notifications import make_project, make_user


@pytest.fixture
def directory():
    return InMemoryDirectory()


@pytest.fixture
def subscriptions():
    return InMemorySubscriptionStore()


@pytest.fixture
def settings_store():
    return InMemoryNotificationSettingStore()


@pytest.fixture
def engine_factory(directory, subscriptions, settings_store):
    """Factory for engines wired to the in-memory collaborators.

    Example:
        engine = engine_factory(default_level=NotificationLevel.WATCH)
    """

    def _factory(
        default_level: NotificationLevel = NotificationLevel.PARTICIPATING,
        confidential_min_access: AccessLevel = AccessLevel.DEVELOPER,
        broadcast_handles=("all",),
    ) -> RecipientResolutionEngine:
        return RecipientResolutionEngine(
            team_directory=directory,
            user_directory=directory,
            access_provider=directory,
            mention_extractor=RegexMentionExtractor(broadcast_handles),
            subscription_store=subscriptions,
            preferences=PreferenceResolver(settings_store, default_level),
            confidential_min_access=confidential_min_access,
        )

    return _factory


@pytest.fixture
def engine(engine_factory):
    return engine_factory()


@pytest.fixture
def project():
    """Private project (the default visibility)."""
    return make_project(path="gitlab-org/gitlab")


@pytest.fixture
def team(directory, settings_store, project):
    """A project team covering every notification level.

    Members (Developer unless noted): watcher (Watch), participating
    (Participating), participant (Participating, mentioned in item text),
    disabled (Disabled), mention (Mention), committer (no setting),
    lazy (Participating, only ever mentioned without '@'). Non-members:
    guest_watcher (project-scoped Watch) and outsider.
    """
    users = SimpleNamespace(
        watcher=make_user("watcher", NotificationLevel.WATCH),
        participating=make_user("participating", NotificationLevel.PARTICIPATING),
        participant=make_user("participant", NotificationLevel.PARTICIPATING),
        disabled=make_user("disabled", NotificationLevel.DISABLED),
        mention=make_user("mention", NotificationLevel.MENTION),
        committer=make_user("committer"),
        lazy=make_user("lazy", NotificationLevel.PARTICIPATING),
        guest_watcher=make_user("guest_watcher"),
        outsider=make_user("outsider"),
    )

    for name in (
        "watcher",
        "participating",
        "participant",
        "disabled",
        "mention",
        "committer",
        "lazy",
    ):
        directory.add_member(project, getattr(users, name), AccessLevel.DEVELOPER)

    directory.add_user(users.guest_watcher)
    directory.add_user(users.outsider)
    settings_store.set_level(
        users.guest_watcher, Scope.project(project.id), NotificationLevel.WATCH
    )
    return users


@pytest.fixture
def member_factory(directory, project):
    """Create a user and make them a member of the project."""

    def _factory(
        username=None,
        level=None,
        access_level=AccessLevel.DEVELOPER,
        **kwargs,
    ):
        user = make_user(username, level, **kwargs)
        directory.add_member(project, user, access_level)
        return user

    return _factory
