"""CLI command implementations"""

from contextlib import contextmanager
from pathlib import Path
from typing import Annotated, Callable, Iterator, Optional

import typer

from cmspub.config import Settings, load_config
from cmspub.core.errors import AuthError, CmsError, TransportError, ValidationError
from cmspub.core.logging import get_logger, setup_logging
from cmspub.core.models import API_PREFIX, endpoint_for
from cmspub.core.pipeline import list_endpoint, parse_setting_value, run_import, run_upsert, upload_image
from cmspub.core.transport import Transport
from cmspub.output import print_error, print_result
from cmspub.session import Profile, clear_profile, load_profile, require_profile, save_profile

logger = get_logger(__name__)

SETTINGS_ENDPOINT = f"{API_PREFIX}/settings"


def _fail(msg: str, cause: Exception = None) -> None:
    """Print a user-friendly error to stderr and exit 1."""
    typer.echo(f"Error: {msg}", err=True)
    if cause:
        typer.echo(f"  {cause}", err=True)
    raise typer.Exit(1)


def _settings(overrides: dict = None) -> Settings:
    """Load config with standard CLI error handling."""
    try:
        return load_config(overrides=overrides)
    except ValueError as e:
        _fail(str(e))


@contextmanager
def _reporting(settings: Settings) -> Iterator[None]:
    """Render any CmsError raised in the block and exit with its exit class."""
    try:
        yield
    except CmsError as e:
        print_error(e.message, e.code, e.details, settings.human)
        raise typer.Exit(e.exit_code)


def _require(**values: Optional[str]) -> None:
    """Raise ValidationError naming every blank required option."""
    missing = [name.replace("_", "-") for name, value in values.items() if not (value or "").strip()]
    if missing:
        raise ValidationError(f"{', '.join(missing)} required", code="missing_required_flags")


def _authenticated(settings: Settings) -> Transport:
    """Open a Transport from the saved profile, or raise AuthError."""
    profile = require_profile()
    return Transport(profile.base_url, profile.access_token, settings.timeout)


def main_callback(
    ctx: typer.Context,
    human: Annotated[bool, typer.Option("--human", help="Pretty-print output for humans")] = False,
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Log requests to stderr")] = False,
    ):
    """Load settings and logging once for every subcommand."""
    settings = _settings(overrides={
        "human": True if human else None,
        "log_level": "DEBUG" if verbose else None,
    })
    setup_logging(settings.log_level)
    ctx.obj = settings


# --- auth ---

def login_cmd(
    ctx: typer.Context,
    base_url: Annotated[str, typer.Option("--base-url", help="API base URL, e.g. http://localhost:8000")] = "",
    email: Annotated[str, typer.Option("--email", help="User email")] = "",
    password: Annotated[str, typer.Option("--password", help="User password")] = "",
    device: Annotated[str, typer.Option("--device", help="Device name")] = "cmspub",
    otp: Annotated[str, typer.Option("--otp", help="Two-factor OTP code")] = "",
    recovery_code: Annotated[str, typer.Option("--recovery-code", help="Two-factor recovery code")] = "",
    ):
    """Log in and save the access token to the local profile."""
    settings: Settings = ctx.obj
    with _reporting(settings):
        _require(base_url=base_url, email=email, password=password)
        with Transport(base_url, timeout=settings.timeout) as transport:
            response = transport.post(f"{API_PREFIX}/auth/login", {
                "email": email,
                "password": password,
                "device_name": device,
                "otp": otp.strip() or None,
                "recovery_code": recovery_code.strip() or None,
            })

        token = response.get("access_token")
        if not isinstance(token, str) or not token:
            raise TransportError(
                "login response did not include access_token",
                code="invalid_login_response",
                details=response,
            )
        user = response.get("user")
        email_saved = user.get("email") if isinstance(user, dict) else None
        try:
            save_profile(Profile(
                base_url=base_url.strip().rstrip("/"),
                access_token=token,
                user_email=email_saved if isinstance(email_saved, str) else "",
            ))
        except OSError as e:
            raise CmsError("failed to save CLI profile", code="save_profile_failed", details=str(e)) from e
    print_result(response, settings.human)


def logout_cmd(ctx: typer.Context):
    """Revoke the current token and delete the local profile."""
    settings: Settings = ctx.obj
    with _reporting(settings):
        with _authenticated(settings) as transport:
            response = transport.post(f"{API_PREFIX}/auth/logout", {})
        try:
            clear_profile()
        except OSError as e:
            raise CmsError("failed to clear CLI profile", code="clear_profile_failed", details=str(e)) from e
    print_result(response, settings.human)


def whoami_cmd(ctx: typer.Context):
    """Show the user the saved token belongs to."""
    settings: Settings = ctx.obj
    with _reporting(settings):
        with _authenticated(settings) as transport:
            response = transport.get(f"{API_PREFIX}/auth/me")
    print_result(response, settings.human)


# --- health ---

def _saved_base_url() -> str:
    """Base URL of the saved profile, or '' when there is no readable profile."""
    try:
        profile = load_profile()
    except AuthError as e:
        logger.warning("profile_unreadable", error=e.message)
        return ""
    return profile.base_url if profile else ""


def health_cmd(
    ctx: typer.Context,
    base_url: Annotated[str, typer.Option("--base-url", help="API base URL (defaults to the logged-in profile)")] = "",
    ):
    """Check that the API is reachable (no login required)."""
    settings: Settings = ctx.obj
    with _reporting(settings):
        resolved = base_url.strip() or _saved_base_url() or (settings.base_url or "")
        if not resolved:
            raise ValidationError("base-url is required when not logged in", code="missing_base_url")
        with Transport(resolved, timeout=settings.timeout) as transport:
            response = transport.get(f"{API_PREFIX}/health")
    print_result(response, settings.human)


# --- content resources ---

def make_list_cmd(resource: str) -> Callable:
    def list_cmd(
        ctx: typer.Context,
        search: Annotated[str, typer.Option("--search", help="Search value")] = "",
        status: Annotated[str, typer.Option("--status", help="Status filter")] = "",
        type_: Annotated[str, typer.Option("--type", help="Type filter")] = "",
        per_page: Annotated[Optional[int], typer.Option("--per-page", help="Items per page")] = None,
        ):
        settings: Settings = ctx.obj
        with _reporting(settings):
            with _authenticated(settings) as transport:
                response = transport.get(list_endpoint(
                    resource, per_page or settings.per_page, search, status, type_,
                ))
        print_result(response, settings.human)

    list_cmd.__doc__ = f"List {resource} records (first page only)."
    return list_cmd


def make_get_cmd(resource: str) -> Callable:
    def get_cmd(
        ctx: typer.Context,
        slug: Annotated[str, typer.Option("--slug", help="Resource slug")] = "",
        ):
        settings: Settings = ctx.obj
        with _reporting(settings):
            with _authenticated(settings) as transport:
                _require(slug=slug)
                response = transport.get(endpoint_for(resource, slug))
        print_result(response, settings.human)

    get_cmd.__doc__ = f"Show one {resource} by slug."
    return get_cmd


def make_delete_cmd(resource: str) -> Callable:
    def delete_cmd(
        ctx: typer.Context,
        slug: Annotated[str, typer.Option("--slug", help="Resource slug")] = "",
        ):
        settings: Settings = ctx.obj
        with _reporting(settings):
            with _authenticated(settings) as transport:
                _require(slug=slug)
                response = transport.delete(endpoint_for(resource, slug))
        print_result(response, settings.human)

    delete_cmd.__doc__ = f"Delete one {resource} by slug."
    return delete_cmd


def make_upsert_cmd(resource: str) -> Callable:
    def upsert_cmd(
        ctx: typer.Context,
        file: Annotated[str, typer.Option("--file", help="Path to JSON payload file")] = "",
        slug: Annotated[str, typer.Option("--slug", help="Resource slug override")] = "",
        ):
        settings: Settings = ctx.obj
        with _reporting(settings):
            with _authenticated(settings) as transport:
                _require(file=file)
                response = run_upsert(transport, resource, Path(file), slug)
        print_result(response, settings.human)

    upsert_cmd.__doc__ = f"Create or update a {resource} from a JSON file, matched by slug."
    return upsert_cmd


def import_cmd(
    ctx: typer.Context,
    primary: Annotated[str, typer.Option("--primary", "--vi", help="Primary-locale Markdown file")] = "",
    secondary: Annotated[str, typer.Option("--secondary", "--en", help="Secondary-locale Markdown file")] = "",
    upsert: Annotated[bool, typer.Option("--upsert/--no-upsert", help="Update the post when its slug exists")] = True,
    ):
    """Import a bilingual post from two Markdown files sharing one slug."""
    settings: Settings = ctx.obj
    with _reporting(settings):
        with _authenticated(settings) as transport:
            _require(primary=primary, secondary=secondary)
            response = run_import(
                transport, Path(primary), Path(secondary),
                locales=settings.locales,
                preset=settings.markdown_preset,
                upsert_existing=upsert,
            )
    print_result(response, settings.human)


def upload_image_cmd(
    ctx: typer.Context,
    file: Annotated[str, typer.Option("--file", help="Image file to upload")] = "",
    alt_primary: Annotated[str, typer.Option("--alt-primary", "--alt-vi", help="Primary-locale alt text")] = "",
    alt_secondary: Annotated[str, typer.Option("--alt-secondary", "--alt-en", help="Secondary-locale alt text")] = "",
    ):
    """Upload an image to the media library."""
    settings: Settings = ctx.obj
    with _reporting(settings):
        with _authenticated(settings) as transport:
            _require(file=file)
            response = upload_image(transport, Path(file), {
                settings.primary_locale: alt_primary,
                settings.secondary_locale: alt_secondary,
            })
    print_result(response, settings.human)


# --- settings ---

def settings_list_cmd(ctx: typer.Context):
    """List all site settings."""
    settings: Settings = ctx.obj
    with _reporting(settings):
        with _authenticated(settings) as transport:
            response = transport.get(SETTINGS_ENDPOINT)
    print_result(response, settings.human)


def settings_get_cmd(
    ctx: typer.Context,
    key: Annotated[str, typer.Option("--key", help="Setting key")] = "",
    ):
    """Show one site setting."""
    settings: Settings = ctx.obj
    with _reporting(settings):
        with _authenticated(settings) as transport:
            _require(key=key)
            response = transport.get(f"{SETTINGS_ENDPOINT}/{key}")
    print_result(response, settings.human)


def settings_set_cmd(
    ctx: typer.Context,
    key: Annotated[str, typer.Option("--key", help="Setting key")] = "",
    value: Annotated[str, typer.Option("--value", help="Setting value (JSON literal allowed)")] = "",
    ):
    """Set one site setting; the value is sent as JSON when it parses as JSON."""
    settings: Settings = ctx.obj
    with _reporting(settings):
        with _authenticated(settings) as transport:
            _require(key=key)
            response = transport.put(f"{SETTINGS_ENDPOINT}/{key}", {"value": parse_setting_value(value)})
    print_result(response, settings.human)
