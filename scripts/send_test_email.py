"""Send a single test email through Mailtrap.

Usage: python -m scripts.send_test_email --to someone@example.com
"""
import argparse
import asyncio
import sys

from app.config import settings
from app.core.exceptions import IntegrationError
from app.integrations.email import EmailService

SUBJECT = "Hello from Mailtrap!"
TEXT = "Welcome to Mailtrap Sending!"


async def send_test_email(service: EmailService, to: str) -> dict:
    return await service.send_email(to=to, subject=SUBJECT, text=TEXT, category="Integration Test")


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument("--to", default=settings.mailtrap_test_recipient, help="recipient address")
    args = parser.parse_args(argv)

    if not args.to:
        print("No recipient given; pass --to or set MAILTRAP_TEST_RECIPIENT.", file=sys.stderr)
        return 2

    try:
        result = asyncio.run(send_test_email(EmailService(), args.to))
    except IntegrationError as exc:
        print(f"Send failed: {exc.message} {exc.details or ''}".strip(), file=sys.stderr)
        return 1
    print(result)
    return 0


if __name__ == "__main__":
    sys.exit(main())
