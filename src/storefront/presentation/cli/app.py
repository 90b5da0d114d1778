"""Storefront CLI application using Typer.

Command-line utilities for the storefront backend: secret generation
for deployment configuration and running the API server.
"""

import secrets

import typer
from rich.console import Console

app = typer.Typer(
    name="storefront",
    help="Storefront sessions backend CLI",
    no_args_is_help=True,
)
console = Console()


secrets_app = typer.Typer(
    name="secrets",
    help="Secret generation utilities",
    no_args_is_help=True,
)
app.add_typer(secrets_app)


@secrets_app.command("generate")
def generate_secrets() -> None:
    """Generate the secrets required by the storefront configuration.

    - JWT_SECRET_KEY: signs identity and password reset tokens
    - COOKIE_SECRET: signs the session cookie

    Copy the output to your .env file.
    """
    console.print("\n[bold green]Storefront Secret Generation[/bold green]")
    console.print("=" * 60)

    console.print(
        f"[cyan]JWT_SECRET_KEY[/cyan]={secrets.token_urlsafe(64)}",
        soft_wrap=True,
    )
    console.print(
        f"[cyan]COOKIE_SECRET[/cyan]={secrets.token_urlsafe(32)}",
        soft_wrap=True,
    )

    console.print("=" * 60)
    console.print(
        "[yellow]Keep these secrets secure and never commit them "
        "to version control![/yellow]\n"
    )


@app.command("serve")
def serve(
    host: str = typer.Option(None, help="Bind address (defaults to API_HOST)"),
    port: int = typer.Option(None, help="Port (defaults to API_PORT)"),
    reload: bool = typer.Option(False, help="Reload on code changes"),
) -> None:
    """Run the sessions API with uvicorn."""
    import uvicorn

    from storefront_config.settings import get_settings

    settings = get_settings()
    uvicorn.run(
        "storefront.presentation.api.app:create_app",
        factory=True,
        host=host or settings.api_host,
        port=port or settings.api_port,
        reload=reload,
    )


def cli() -> None:
    """Entry point for the CLI application."""
    app()


if __name__ == "__main__":
    cli()
