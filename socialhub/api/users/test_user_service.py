# socialhub/api/users/test_user_service.py
import pytest
from werkzeug.security import check_password_hash

from socialhub.core.errors import InvalidInputError, NotFoundError, UnauthorizedError
from socialhub.core.security import Identity


# --- 팔로우 ---

def test_follow_updates_both_users(user_service, store, alice, bob):
    result = user_service.follow(alice, bob.user_id)

    assert result["user"]["followers"] == [alice.user_id]
    assert result["current_user"]["following"] == [bob.user_id]
    assert store.get("users", bob.user_id)["followers"] == [alice.user_id]
    assert store.get("users", alice.user_id)["following"] == [bob.user_id]

def test_follow_twice_keeps_single_entry(user_service, store, alice, bob):
    user_service.follow(alice, bob.user_id)
    user_service.follow(alice, bob.user_id)
    assert store.get("users", bob.user_id)["followers"] == [alice.user_id]
    assert store.get("users", alice.user_id)["following"] == [bob.user_id]

def test_self_follow_is_rejected(user_service, store, alice):
    with pytest.raises(InvalidInputError):
        user_service.follow(alice, alice.user_id)
    user = store.get("users", alice.user_id)
    assert user["followers"] == [] and user["following"] == []

def test_follow_missing_target(user_service, store, alice):
    with pytest.raises(NotFoundError):
        user_service.follow(alice, "nobody")
    assert store.get("users", alice.user_id)["following"] == []

def test_follow_requires_target_id(user_service, alice):
    with pytest.raises(InvalidInputError):
        user_service.follow(alice, "")

def test_unfollow_removes_both_entries(user_service, store, alice, bob):
    user_service.follow(alice, bob.user_id)
    result = user_service.unfollow(alice, bob.user_id)

    assert result["user"]["followers"] == []
    assert result["current_user"]["following"] == []
    assert store.get("users", bob.user_id)["followers"] == []

def test_unfollow_not_following_is_noop(user_service, alice, bob):
    result = user_service.unfollow(alice, bob.user_id)
    assert result["current_user"]["following"] == []

def test_self_unfollow_is_noop(user_service, store, alice, bob):
    user_service.follow(alice, bob.user_id)
    result = user_service.unfollow(alice, alice.user_id)

    assert result["user"]["user_id"] == alice.user_id
    assert result["current_user"]["following"] == [bob.user_id]
    assert store.get("users", alice.user_id)["followers"] == []
    assert store.get("users", bob.user_id)["followers"] == [alice.user_id]

def test_follow_failure_rolls_back(user_service, store, alice, bob):
    store.fail_on_update = "users"
    with pytest.raises(RuntimeError):
        user_service.follow(alice, bob.user_id)
    store.fail_on_update = None
    assert store.get("users", bob.user_id)["followers"] == []
    assert store.get("users", alice.user_id)["following"] == []


# --- 저장한 게시물 ---

def test_save_twice_keeps_single_entry(user_service, store, text_post, bob):
    user_service.save_post(bob, text_post["post_id"])
    profile = user_service.save_post(bob, text_post["post_id"])

    assert store.get("users", bob.user_id)["saved_posts"] == [text_post["post_id"]]
    assert [p["post_id"] for p in profile["saved_posts"]] == [text_post["post_id"]]

def test_unsave_not_saved_is_noop(user_service, store, text_post, bob):
    profile = user_service.unsave_post(bob, text_post["post_id"])
    assert profile["saved_posts"] == []
    assert store.get("users", bob.user_id)["saved_posts"] == []

def test_save_then_unsave(user_service, text_post, bob):
    user_service.save_post(bob, text_post["post_id"])
    user_service.unsave_post(bob, text_post["post_id"])
    assert user_service.get_saved_posts(bob) == []

def test_save_unknown_post_id(user_service, store, bob):
    """존재하지 않는 게시물도 저장은 성공하고, 조회 결과에서만 제외됩니다."""
    profile = user_service.save_post(bob, "not-a-post")

    assert profile["saved_posts"] == []
    assert store.get("users", bob.user_id)["saved_posts"] == ["not-a-post"]
    assert user_service.get_saved_posts(bob) == []

def test_save_without_identity(user_service, text_post):
    with pytest.raises(UnauthorizedError):
        user_service.save_post(None, text_post["post_id"])
    with pytest.raises(UnauthorizedError):
        user_service.unsave_post(Identity(""), text_post["post_id"])


# --- 프로필 ---

def test_profile_hides_password_hash(user_service, alice):
    profile = user_service.get_profile(alice)
    assert profile["username"] == "alice"
    assert profile["email"] == "alice@example.com"
    assert "password_hash" not in profile

def test_public_profile_hides_email(user_service, alice, bob):
    user_service.follow(bob, alice.user_id)
    profile = user_service.get_user(alice.user_id)
    assert "email" not in profile
    assert profile["follower_count"] == 1

def test_update_profile_changes_only_given_fields(user_service, store, alice):
    profile = user_service.update_profile(alice, {"bio": "hello", "password": "new-password"})

    assert profile["bio"] == "hello"
    assert profile["username"] == "alice"
    stored = store.get("users", alice.user_id)
    assert check_password_hash(stored["password_hash"], "new-password")

def test_update_missing_user(user_service):
    with pytest.raises(NotFoundError):
        user_service.update_profile(Identity("ghost"), {"bio": "x"})

def test_duplicate_email_is_rejected(user_service, alice):
    with pytest.raises(InvalidInputError):
        user_service.create_user("alice2", "alice@example.com")

def test_update_email_already_taken(user_service, store, alice, bob):
    with pytest.raises(InvalidInputError):
        user_service.update_profile(bob, {"email": "alice@example.com"})
    assert store.get("users", bob.user_id)["email"] == "bob@example.com"

def test_update_email_to_own_address(user_service, alice):
    profile = user_service.update_profile(alice, {"email": "alice@example.com", "bio": "same"})
    assert profile["email"] == "alice@example.com"
    assert profile["bio"] == "same"
