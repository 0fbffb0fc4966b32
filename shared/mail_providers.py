"""Webmail shortcuts shown next to the code input."""

from __future__ import annotations

from dataclasses import dataclass
from urllib.parse import quote_plus


@dataclass(frozen=True)
class MailProvider:
    name: str
    url: str


def inbox_links(sender: str) -> list[MailProvider]:
    """Return inbox links; the Gmail one is pre-filtered on *sender*."""
    gmail_query = quote_plus(f"from:{sender} in:anywhere", safe="")
    return [
        MailProvider(
            name="Gmail",
            url=f"https://mail.google.com/mail/u/0/#search/{gmail_query}",
        ),
        MailProvider(name="Outlook", url="https://outlook.live.com/mail/0/inbox"),
        MailProvider(name="Yahoo Mail", url="https://mail.yahoo.com"),
        MailProvider(name="iCloud Mail", url="https://www.icloud.com/mail"),
    ]
