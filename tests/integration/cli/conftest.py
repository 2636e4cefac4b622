"""Fixtures for driving the Typer app against the fake API"""

from functools import partial

import pytest
from typer.testing import CliRunner

from cmspub.cli import commands
from cmspub.cli.cli import app
from cmspub.core.transport import Transport
from cmspub.session import Profile, save_profile


@pytest.fixture(name="invoke")
def invoke_fixture(api, monkeypatch):
    """Run the CLI with every Transport wired to the fake API."""
    monkeypatch.setattr(commands, "Transport", partial(Transport, transport=api.mock()))
    runner = CliRunner()

    def _invoke(*args: str):
        return runner.invoke(app, list(args))
    return _invoke


@pytest.fixture(name="logged_in")
def logged_in_fixture():
    return save_profile(Profile(
        base_url="http://cms.test",
        access_token="valid-token",
        user_email="admin@example.com",
    ))
