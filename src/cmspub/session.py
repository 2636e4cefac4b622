"""Persisted login profile: base URL and bearer token between invocations"""

import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from cmspub.core.errors import AuthError


class Profile(BaseModel):
    base_url:      str = ""
    access_token:  str = ""
    user_email:    str = ""
    last_login_at: str = ""


def profile_path(home: Optional[Path] = None) -> Path:
    """Return ~/.config/cmspub/config.json (resolved against home when given)."""
    return (home or Path.home()) / ".config" / "cmspub" / "config.json"


def load_profile(path: Optional[Path] = None) -> Optional[Profile]:
    """Return the saved Profile, or None when no profile has been saved."""
    path = path or profile_path()
    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        return None
    except OSError as e:
        raise AuthError(f"failed to load CLI profile: {e}", code="load_profile_failed") from e
    try:
        return Profile.model_validate(json.loads(text))
    except (ValueError, PydanticValidationError) as e:
        raise AuthError(f"failed to load CLI profile: {e}", code="load_profile_failed") from e


def save_profile(profile: Profile, path: Optional[Path] = None) -> Path:
    """Write profile as JSON (directory 0700, file 0600); stamps last_login_at when blank."""
    path = path or profile_path()
    if not profile.last_login_at:
        stamp = datetime.now(timezone.utc).replace(microsecond=0).isoformat().replace("+00:00", "Z")
        profile = profile.model_copy(update={"last_login_at": stamp})
    path.parent.mkdir(mode=0o700, parents=True, exist_ok=True)
    path.write_text(profile.model_dump_json(indent=2), encoding="utf-8")
    path.chmod(0o600)
    return path


def clear_profile(path: Optional[Path] = None) -> None:
    """Delete the saved profile; a missing file is not an error."""
    (path or profile_path()).unlink(missing_ok=True)


def require_profile(path: Optional[Path] = None) -> Profile:
    """Return a profile with both base URL and token, or raise AuthError."""
    profile = load_profile(path)
    if profile is None or not profile.base_url or not profile.access_token:
        raise AuthError("missing CLI profile, run `cmspub auth login`")
    return profile
