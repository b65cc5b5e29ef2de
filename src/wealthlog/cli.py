"""Flask CLI commands for WealthLog."""

from __future__ import annotations

import click

from .errors import ApiError


def init_app(app) -> None:
    """Register CLI commands on the Flask app."""

    @app.cli.command("wealthlog-seed-defaults")
    def wealthlog_seed_defaults() -> None:
        """Insert the built-in income and expense categories if missing."""

        from .extensions import get_services
        from .services.categories import ensure_default_categories

        count = ensure_default_categories(get_services().category_repo)
        click.echo(f"Default categories created: {count}")

    @app.cli.command("wealthlog-create-user")
    @click.option("--email", required=True, help="Login e-mail address")
    @click.option("--first-name", required=True)
    @click.option("--last-name", required=True)
    @click.option("--currency", default=None, help="ETB, USD, EUR or GBP")
    @click.password_option()
    def wealthlog_create_user(
        email: str, first_name: str, last_name: str, currency: str | None, password: str
    ) -> None:
        """Create an account from the command line."""

        from .blueprints.auth.forms import RegisterForm
        from .extensions import get_services
        from .services import auth as auth_service

        payload = {
            "firstName": first_name,
            "lastName": last_name,
            "email": email,
            "password": password,
        }
        if currency:
            payload["currency"] = currency
        form = RegisterForm.from_mapping(payload)
        if not form.validate():
            for field_name, messages in form.errors.items():
                for message in messages:
                    click.echo(f"{field_name}: {message}", err=True)
            raise click.exceptions.Exit(1)

        services = get_services()
        try:
            result = auth_service.register(
                user_repo=services.user_repo,
                config=services.config,
                first_name=form.first_name,
                last_name=form.last_name,
                email=form.email,
                password=form.password,
                currency=form.currency,
            )
        except ApiError as exc:
            raise click.ClickException(exc.message) from exc
        click.echo(f"Created user {result.user.email} (id={result.user.id})")
