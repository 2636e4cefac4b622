"""CLI entrypoint: Typer app definition and command registration"""

import typer

from cmspub.cli.commands import (
    health_cmd, import_cmd, login_cmd, logout_cmd, main_callback,
    make_delete_cmd, make_get_cmd, make_list_cmd, make_upsert_cmd,
    settings_get_cmd, settings_list_cmd, settings_set_cmd,
    upload_image_cmd, whoami_cmd,
)


CONTENT_RESOURCES = ("post", "category", "tag", "page", "product")

app = typer.Typer(name="cmspub", no_args_is_help=True, help="Content API client with bilingual Markdown import")
app.callback()(main_callback)

auth_app = typer.Typer(no_args_is_help=True, help="Log in, log out, and inspect the session")
auth_app.command(name="login")(login_cmd)
auth_app.command(name="logout")(logout_cmd)
auth_app.command(name="whoami")(whoami_cmd)
app.add_typer(auth_app, name="auth")

health_app = typer.Typer(no_args_is_help=True, help="API health checks")
health_app.command(name="check")(health_cmd)
app.add_typer(health_app, name="health")

for resource in CONTENT_RESOURCES:
    resource_app = typer.Typer(no_args_is_help=True, help=f"Manage {resource} records")
    resource_app.command(name="list")(make_list_cmd(resource))
    resource_app.command(name="get")(make_get_cmd(resource))
    resource_app.command(name="upsert")(make_upsert_cmd(resource))
    resource_app.command(name="delete")(make_delete_cmd(resource))
    if resource == "post":
        resource_app.command(name="import")(import_cmd)
        resource_app.command(name="upload-image")(upload_image_cmd)
    app.add_typer(resource_app, name=resource)

settings_app = typer.Typer(no_args_is_help=True, help="Read and write site settings")
settings_app.command(name="list")(settings_list_cmd)
settings_app.command(name="get")(settings_get_cmd)
settings_app.command(name="set")(settings_set_cmd)
app.add_typer(settings_app, name="settings")
