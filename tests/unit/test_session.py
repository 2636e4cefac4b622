"""Unit tests for session.py"""

import json
import stat

import pytest

from cmspub.core.errors import AuthError
from cmspub.session import Profile, clear_profile, load_profile, profile_path, require_profile, save_profile


def test_profile_path_under_home(home):
    assert profile_path() == home / ".config" / "cmspub" / "config.json"


def test_load_profile_missing_returns_none():
    assert load_profile() is None


def test_save_and_load_roundtrip():
    path = save_profile(Profile(base_url="http://cms.test", access_token="tok", user_email="a@b.c"))
    loaded = load_profile()
    assert loaded.access_token == "tok"
    assert loaded.last_login_at.endswith("Z")
    assert stat.S_IMODE(path.stat().st_mode) == 0o600
    assert json.loads(path.read_text())["base_url"] == "http://cms.test"


def test_save_keeps_given_login_time():
    save_profile(Profile(base_url="u", access_token="t", last_login_at="2026-01-01T00:00:00Z"))
    assert load_profile().last_login_at == "2026-01-01T00:00:00Z"


def test_clear_profile_is_idempotent():
    save_profile(Profile(base_url="u", access_token="t"))
    clear_profile()
    clear_profile()
    assert load_profile() is None


def test_corrupt_profile_is_auth_error(home):
    path = profile_path()
    path.parent.mkdir(parents=True)
    path.write_text("{broken")
    with pytest.raises(AuthError) as exc:
        load_profile()
    assert exc.value.code == "load_profile_failed"


def test_unreadable_profile_is_auth_error(home):
    profile_path().mkdir(parents=True)
    with pytest.raises(AuthError) as exc:
        load_profile()
    assert exc.value.code == "load_profile_failed"


@pytest.mark.parametrize("profile", [None, Profile(base_url="u"), Profile(access_token="t")])
def test_require_profile(profile):
    if profile:
        save_profile(profile)
    with pytest.raises(AuthError, match="auth login"):
        require_profile()
