from __future__ import annotations

import pytest

from todo.core.errors import NotFoundError, UnauthorizedError
from todo.core.security import verify_password


def test_view_returns_registered_user(services, alice, ctx):
    user = services.profile.view(ctx, alice.id)

    assert user.username == "alice"
    assert user.registered_at is not None
    assert "password_hash" not in user.to_public_dict()


def test_view_unknown_user_is_not_found(services, ctx):
    with pytest.raises(NotFoundError):
        services.profile.view(ctx, 12345)


def test_edit_avatar_and_status_overwrites_both(services, alice, ctx):
    services.profile.edit_avatar_and_status(ctx, alice.id, "https://img.example/a.png", "busy")

    user = services.profile.view(ctx, alice.id)
    assert user.avatar_url == "https://img.example/a.png"
    assert user.status_text == "busy"

    services.profile.edit_avatar_and_status(ctx, alice.id, None, "")

    user = services.profile.view(ctx, alice.id)
    assert user.avatar_url is None
    assert user.status_text == ""


def test_empty_avatar_clears_it(services, alice, ctx):
    services.profile.edit_avatar_and_status(ctx, alice.id, "https://img.example/a.png", "hi")
    services.profile.edit_avatar_and_status(ctx, alice.id, "", "hi")

    assert services.profile.view(ctx, alice.id).avatar_url is None


def test_long_status_text_is_accepted(services, alice, ctx):
    services.profile.edit_avatar_and_status(ctx, alice.id, None, "x" * 200)
    assert services.profile.view(ctx, alice.id).status_text == "x" * 200


def test_change_password_with_wrong_old_password(services, store, alice, ctx):
    before = store.users.get_by_id(ctx, alice.id).password_hash

    with pytest.raises(UnauthorizedError):
        services.profile.change_password(ctx, alice.id, "not-the-password", "brand-new")

    assert store.users.get_by_id(ctx, alice.id).password_hash == before


def test_change_password_replaces_hash(services, store, alice, ctx, fast_hasher):
    before = store.users.get_by_id(ctx, alice.id).password_hash

    services.profile.change_password(ctx, alice.id, "secret1", "brand-new")

    after = store.users.get_by_id(ctx, alice.id).password_hash
    assert after != before
    assert verify_password("brand-new", after, fast_hasher)
    assert not verify_password("secret1", after, fast_hasher)

    with pytest.raises(UnauthorizedError):
        services.auth.login(ctx, "alice", "secret1")
    assert services.auth.login(ctx, "alice", "brand-new").id == alice.id


def test_change_password_does_not_enforce_minimum_length(services, alice, ctx):
    services.profile.change_password(ctx, alice.id, "secret1", "abc")

    assert services.auth.login(ctx, "alice", "abc").id == alice.id


def test_change_password_unknown_user_is_not_found(services, ctx):
    with pytest.raises(NotFoundError):
        services.profile.change_password(ctx, 4242, "secret1", "brand-new")
