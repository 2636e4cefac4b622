from typer.testing import CliRunner
from cmspub.cli.cli import app

def test_cli_smoke():
    runner = CliRunner()
    result = runner.invoke(app, ["--help"])
    assert result.exit_code == 0
    for command in ("auth", "health", "post", "category", "tag", "page", "product", "settings"):
        assert command in result.output
