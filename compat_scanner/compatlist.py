"""Microsoft's IE Compatibility View list, which says whether a site is forced
into a legacy document mode or has Flash/ActiveX restrictions.

The list is shared by every scan. One background task replaces the whole map
on each refresh; readers never lock and may see the previous map meanwhile.
"""

from __future__ import annotations

import asyncio
import time
from contextlib import suppress
from dataclasses import dataclass
from typing import Optional

import requests
from bs4 import BeautifulSoup

from compat_scanner.config import (
    COMPAT_LIST_REFRESH_SECONDS,
    COMPAT_LIST_URLS,
    SECONDARY_TIMEOUT,
    USER_AGENT,
)
from compat_scanner.logger import get_logger

logger = get_logger(__name__)

LIST_ROOTS = ("iecompatlistdescription", "ie9compatlistdescription")


@dataclass
class CompatEntry:
    listed: bool = False
    doc_mode: Optional[str] = None
    ua_string: Optional[str] = None
    feature_switch: Optional[str] = None
    flash: bool = False
    no_flash: bool = False

    @property
    def requires_legacy_mode(self) -> bool:
        # A bare <domain> entry means "render in compat view"
        return self.listed and bool(self.doc_mode or self.ua_string or not self.feature_switch)

    @property
    def requires_activex(self) -> bool:
        return self.feature_switch == "requiresActiveX:true"


def normalize_host(hostname: str) -> str:
    hostname = (hostname or "").strip().lower()
    if hostname.startswith("www."):
        hostname = hostname[4:]
    return hostname


def _domains(node):
    for domain in node.find_all("domain", recursive=False):
        name = normalize_host(domain.get_text())
        if name:
            yield name, domain


def parse_compat_list(xml, entries: Optional[dict] = None) -> dict[str, CompatEntry]:
    entries = {} if entries is None else entries
    soup = BeautifulSoup(xml, "lxml-xml")

    for root_name in LIST_ROOTS:
        root = soup.find(root_name)
        if root is None:
            continue

        for name, domain in _domains(root):
            entry = entries.setdefault(name, CompatEntry())
            entry.listed = True
            entry.doc_mode = domain.get("docMode") or entry.doc_mode
            entry.ua_string = domain.get("uaString") or entry.ua_string
            entry.feature_switch = domain.get("featureSwitch") or entry.feature_switch

        flash = root.find("Flash", recursive=False)
        if flash is not None:
            for name, _ in _domains(flash):
                entries.setdefault(name, CompatEntry()).flash = True

        no_flash = root.find("NoFlash", recursive=False)
        if no_flash is not None:
            for name, _ in _domains(no_flash):
                entries.setdefault(name, CompatEntry()).no_flash = True

    return entries


class CompatListService:
    def __init__(
        self,
        urls=COMPAT_LIST_URLS,
        refresh_interval: float = COMPAT_LIST_REFRESH_SECONDS,
        session: Optional[requests.Session] = None,
    ):
        self.urls = tuple(urls)
        self.refresh_interval = refresh_interval
        self.session = session or requests.Session()
        self.session.headers.update({"User-Agent": USER_AGENT, "Accept-Language": "en-US,en;q=0.5"})
        self._data: dict[str, CompatEntry] = {}
        self._last_refreshed: Optional[float] = None
        self._task: Optional[asyncio.Task] = None
        self._first_load: Optional[asyncio.Future] = None

    @property
    def last_refreshed(self) -> Optional[float]:
        return self._last_refreshed

    def _download(self) -> dict[str, CompatEntry]:
        entries: dict[str, CompatEntry] = {}
        for url in self.urls:
            resp = self.session.get(url, timeout=SECONDARY_TIMEOUT)
            resp.raise_for_status()
            parse_compat_list(resp.content, entries)
        return entries

    async def refresh(self) -> dict[str, CompatEntry]:
        try:
            data = await asyncio.to_thread(self._download)
        except (requests.RequestException, ValueError) as e:
            logger.warning("Could not refresh the compat list, keeping %d entries: %s", len(self._data), e)
        else:
            if data:
                self._data = data
                logger.info("Compat list refreshed: %d entries", len(data))
            else:
                logger.warning("Compat list download was empty, keeping %d entries", len(self._data))
        self._last_refreshed = time.time()
        return self._data

    async def get_list(self) -> dict[str, CompatEntry]:
        if self._last_refreshed is None:
            # Concurrent first callers share one download
            if self._first_load is None:
                self._first_load = asyncio.ensure_future(self.refresh())
            await asyncio.shield(self._first_load)
        return self._data

    async def lookup(self, hostname: str) -> Optional[CompatEntry]:
        data = await self.get_list()
        return data.get(normalize_host(hostname))

    async def _refresh_forever(self) -> None:
        while True:
            await asyncio.sleep(self.refresh_interval)
            await self.refresh()

    def start(self) -> None:
        if self._task is None or self._task.done():
            self._task = asyncio.create_task(self._refresh_forever())

    async def stop(self) -> None:
        if self._task is not None:
            self._task.cancel()
            with suppress(asyncio.CancelledError):
                await self._task
            self._task = None
