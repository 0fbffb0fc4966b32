"""Navigator protocol — hands the post-verification URL to the host application."""

from typing import Protocol


class Navigator(Protocol):
    def navigate(self, url: str) -> None: ...
