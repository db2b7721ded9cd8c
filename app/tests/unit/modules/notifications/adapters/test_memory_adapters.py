"""Unit tests for the in-memory collaborator adapters."""

import pytest

from modules.notifications.domain.models import (
    AccessLevel,
    NotificationLevel,
    Scope,
    SubscribableKind,
)
from tests.factories.notifications import (
    make_issue,
    make_merge_request,
    make_project,
    make_user,
)


@pytest.mark.unit
class TestInMemoryDirectory:
    def test_members_of_project(self, directory):
        project, other = make_project(), make_project()
        alice, bob = make_user("alice"), make_user("bob")
        directory.add_member(project, alice)
        directory.add_member(other, bob)

        assert directory.members_of(project) == {alice}

    def test_membership_tier_and_removal(self, directory):
        project, user = make_project(), make_user()
        directory.add_member(project, user, AccessLevel.GUEST)
        directory.add_member(project, user, AccessLevel.MASTER)

        assert directory.team_access_level(project, user) is AccessLevel.MASTER

        directory.remove_member(project, user)

        assert directory.team_access_level(project, user) is AccessLevel.NO_ACCESS
        assert directory.members_of(project) == set()

    def test_find_by_usernames_is_case_insensitive(self, directory):
        alice = directory.add_user(make_user("Alice"))
        directory.add_user(make_user("bob"))

        assert directory.find_by_usernames(["alice", "ghost"]) == {alice}

    def test_get_users_skips_unknown_ids(self, directory):
        alice = directory.add_user(make_user("alice"))

        assert directory.get_users([alice.id, "ghost"]) == [alice]

    def test_only_issues_are_confidential(self, directory):
        merge_request = make_merge_request()
        merge_request.confidential = True

        assert directory.is_confidential(make_issue(confidential=True)) is True
        assert directory.is_confidential(make_issue()) is False
        assert directory.is_confidential(merge_request) is False


@pytest.mark.unit
class TestInMemorySubscriptionStore:
    def test_unknown_flag_is_none(self, subscriptions):
        assert subscriptions.get("issue-1", SubscribableKind.ITEM, make_user()) is None

    def test_last_write_wins(self, subscriptions):
        user = make_user()
        subscriptions.subscribe("issue-1", SubscribableKind.ITEM, user)
        subscriptions.unsubscribe("issue-1", SubscribableKind.ITEM, user)

        assert subscriptions.get("issue-1", SubscribableKind.ITEM, user) is False
        assert subscriptions.subscriptions_for("issue-1", SubscribableKind.ITEM) == {
            user: False
        }

    def test_subject_kinds_are_separate(self, subscriptions):
        user = make_user()
        subscriptions.subscribe("1", SubscribableKind.LABEL, user)

        assert subscriptions.subscriptions_for("1", SubscribableKind.ITEM) == {}
        assert subscriptions.get("1", SubscribableKind.LABEL, user) is True


@pytest.mark.unit
class TestInMemoryNotificationSettingStore:
    def test_get_per_scope(self, settings_store):
        user = make_user()
        settings_store.set_level(user, Scope.project("p1"), NotificationLevel.WATCH)
        settings_store.set_level(user, Scope.group("p1"), NotificationLevel.MENTION)

        assert settings_store.get(user, Scope.project("p1")) is NotificationLevel.WATCH
        assert settings_store.get(user, Scope.group("p1")) is NotificationLevel.MENTION
        assert settings_store.get(user, Scope.project("p2")) is None

    def test_set_level_replaces(self, settings_store):
        user = make_user()
        settings_store.set_level(user, Scope.project("p1"), NotificationLevel.WATCH)
        settings_store.set_level(user, Scope.project("p1"), NotificationLevel.GLOBAL)

        assert settings_store.get(user, Scope.project("p1")) is NotificationLevel.GLOBAL
        assert settings_store.users_with_level(
            Scope.project("p1"), NotificationLevel.WATCH
        ) == set()

    def test_users_with_level(self, settings_store):
        watcher, other = make_user(), make_user()
        settings_store.set_level(watcher, Scope.project("p1"), NotificationLevel.WATCH)
        settings_store.set_level(other, Scope.project("p1"), NotificationLevel.MENTION)

        assert settings_store.users_with_level(
            Scope.project("p1"), NotificationLevel.WATCH
        ) == {watcher}
