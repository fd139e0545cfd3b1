# site_crawler/crawler/fetcher.py
"""
Fetcher module: one GET per URL, no retries, 200 is the only success.
"""
from __future__ import annotations

import asyncio

from aiohttp import ClientError, ClientSession, InvalidURL

from site_crawler.crawler.models import PageData
from site_crawler.errors import FetchFailure, MalformedURLError
from site_crawler.utils import is_http_url


class Fetcher:
    """Issues plain GET requests over a shared aiohttp session.

    Timeout and User-Agent come from the session itself. Redirects are whatever
    aiohttp does by default. The body is always decoded as text, even for
    binary content types, so such payloads come back mangled.
    """

    def __init__(self, session: ClientSession) -> None:
        self.session = session

    async def fetch(self, url: str) -> PageData:
        """
        Fetch *url* and return its PageData.

        Raises MalformedURLError for unusable targets and FetchFailure for
        I/O errors, timeouts and any status other than 200.
        """
        if not is_http_url(url):
            raise MalformedURLError(url, "not an absolute http(s) URL")
        try:
            async with self.session.get(url) as resp:
                if resp.status != 200:
                    raise FetchFailure(url, f"HTTP {resp.status}")
                ctype = resp.headers.get("Content-Type", "")
                text = await resp.text(errors="replace")
                return PageData(url, text, ctype)
        except InvalidURL as exc:
            raise MalformedURLError(url, str(exc) or "invalid URL") from exc
        except asyncio.TimeoutError as exc:
            raise FetchFailure(url, "request timed out") from exc
        except ClientError as exc:
            raise FetchFailure(url, str(exc) or type(exc).__name__) from exc
        except (LookupError, UnicodeError) as exc:
            raise FetchFailure(url, f"cannot decode body: {exc}") from exc
        except ValueError as exc:
            # yarl rejects some targets (bad ports, hosts) with a bare ValueError
            raise MalformedURLError(url, str(exc)) from exc
