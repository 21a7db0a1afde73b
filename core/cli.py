"""
Command-line interface for Mailgate
"""
import asyncio
import json
import sys

import click
from pydantic import ValidationError as PydanticValidationError

from core.config import Settings, get_settings
from core.exceptions import MailgateError
from core.logging import get_logger, get_subscriber, init_subscriber

logger = get_logger(__name__)


@click.group()
@click.version_option(version=Settings.model_fields["app_version"].default)
def cli():
    """Mailgate CLI - transactional email delivery"""
    pass


def load_settings() -> Settings:
    """Load settings, exiting with a readable message when they fail validation"""
    try:
        return get_settings()
    except PydanticValidationError as e:
        problems = "; ".join(
            f"{'.'.join(map(str, err['loc'])) or 'settings'}: {err['msg']}" for err in e.errors()
        )
        click.echo(f"✗ Invalid configuration: {problems}", err=True)
        sys.exit(1)


@cli.command()
@click.option("--to", "to_email", required=True, help="Recipient email address")
@click.option("--subject", required=True, help="Email subject")
@click.option("--html", "html_content", default="", help="HTML body")
@click.option("--text", "text_content", default="", help="Plain text body")
def send_email(to_email: str, subject: str, html_content: str, text_content: str):
    """Send a single email through the delivery API"""
    from delivery import SubscriberEmail, build_email_client

    settings = load_settings()
    init_subscriber(get_subscriber(settings.app_name, settings.log_level, sys.stderr, settings.log_format))

    async def run_send():
        recipient = SubscriberEmail.parse(to_email)
        async with build_email_client(settings) as client:
            await client.send_email(recipient, subject, html_content, text_content)

    try:
        asyncio.run(run_send())
    except MailgateError as e:
        logger.error(f"Email not sent: {e.message}")
        click.echo(f"✗ {e.message}", err=True)
        sys.exit(1)

    click.echo(f"✓ Email sent to {to_email}")


@cli.command()
def show_config():
    """Display configuration with secrets masked"""
    click.echo(json.dumps(load_settings().model_dump(), indent=2))


def main():
    """Main entry point"""
    cli()


if __name__ == "__main__":
    main()
