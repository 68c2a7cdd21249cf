import asyncio
import json
import logging

import typer
from tortoise import Tortoise

from ..core.config import DEFAULT_DATE_RANGE
from ..core.exceptions import AnalyticsError
from ..features.analytics import service as analytics_service
from ..features.analytics.schemas import AnalyticsQuery
from ..features.auth import service as auth_service
from ..features.auth.security import get_password_hash
from ..main import TORTOISE_ORM_CONFIG

logger = logging.getLogger(__name__)

app = typer.Typer(name="order-analytics", help="CLI for administering the Order Analytics service.")


class CLIError(Exception):
    """A command could not complete; the message is shown to the operator."""


# Shared async context manager for database connection
class DBConnection:
    def __init__(self, config: dict = TORTOISE_ORM_CONFIG):
        self.config = config

    async def __aenter__(self):
        await Tortoise.init(config=self.config)
        await Tortoise.generate_schemas(safe=True)  # Generate schema if it doesn't exist
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await Tortoise.close_connections()


def _run(make_coro) -> str:
    """Awaits ``make_coro()`` inside a DB connection; command failures exit with code 1."""
    async def _with_db():
        async with DBConnection():
            return await make_coro()

    try:
        return asyncio.run(_with_db())
    except (CLIError, AnalyticsError) as e:
        typer.secho(f"Error: {e}", fg=typer.colors.RED)
        raise typer.Exit(code=1)


# User management commands
user_app = typer.Typer(name="users", help="Manage admin accounts.")
app.add_typer(user_app)


async def create_admin(username: str, name: str, email: str, password: str) -> str:
    if await auth_service.get_user_by_username(username):
        raise CLIError(f"User with username '{username}' already exists.")
    if await auth_service.get_user_by_email(email):
        raise CLIError(f"User with email '{email}' already exists.")
    admin_user = await auth_service.create_admin_user(
        username=username, name=name, email=email, hashed_password=get_password_hash(password)
    )
    logger.info(f"Admin user {admin_user.username} created")
    return f"Admin user '{admin_user.username}' created successfully with ID: {admin_user.public_id}"


async def promote_to_admin(username: str) -> str:
    user = await auth_service.get_user_by_username(username)
    if not user:
        raise CLIError(f"User with username '{username}' not found.")
    if user.role == "admin":
        return f"User '{username}' is already an admin."
    if not user.is_active:
        raise CLIError(f"User '{username}' is currently inactive. Activate the user before promoting to admin.")
    user.role = "admin"
    await user.save(update_fields=["role"])
    logger.info(f"User {username} promoted to admin")
    return f"User '{username}' has been successfully promoted to admin."


@user_app.command("create-admin")
def create_admin_command(
    username: str = typer.Option(..., prompt=True, help="Username for the new admin."),
    name: str = typer.Option(..., prompt=True, help="Display name for the new admin."),
    email: str = typer.Option(..., prompt=True, help="Email for the new admin."),
    password: str = typer.Option(..., prompt=True, hide_input=True, confirmation_prompt=True, help="Password for the new admin.")
):
    """Creates a new admin user."""
    typer.secho(_run(lambda: create_admin(username, name, email, password)), fg=typer.colors.GREEN)


@user_app.command("promote-to-admin")
def promote_to_admin_command(
    username: str = typer.Argument(..., help="The username of the user to promote to admin.")
):
    """Promotes an existing user to the admin role."""
    typer.secho(_run(lambda: promote_to_admin(username)), fg=typer.colors.GREEN)


# Reports, printed as the JSON the API would return
reports_app = typer.Typer(name="reports", help="Print analytics reports.")
app.add_typer(reports_app)


async def render_summary(date_range: str) -> str:
    report = await analytics_service.generate_summary_report(AnalyticsQuery(date_range=date_range))
    return json.dumps(report.model_dump(by_alias=True, mode="json"), indent=2)


async def render_chart(date_range: str) -> str:
    report = await analytics_service.generate_orders_chart(AnalyticsQuery(date_range=date_range))
    return json.dumps(report.model_dump(by_alias=True, mode="json"), indent=2)


@reports_app.command("summary")
def summary_command(
    date_range: str = typer.Option(DEFAULT_DATE_RANGE, "--date-range", help="today, 7days or all")
):
    """Prints the order summary for a date range."""
    typer.echo(_run(lambda: render_summary(date_range)))


@reports_app.command("chart")
def chart_command(
    date_range: str = typer.Option(DEFAULT_DATE_RANGE, "--date-range", help="today, 7days or all")
):
    """Prints the per-day orders chart for a date range."""
    typer.echo(_run(lambda: render_chart(date_range)))


if __name__ == "__main__":
    app()
