"""Page download and CSS-selector text extraction.

Fetches HTML with httpx and selects elements with BeautifulSoup's
soupsieve-backed ``select``. Produces the ``PageContent`` consumed by
``AnalysisClient.analyze_web_content``.
"""

from __future__ import annotations

import logging

import httpx
from bs4 import BeautifulSoup
from soupsieve import SelectorSyntaxError

from .config import DEFAULT_USER_AGENT
from .errors import ContentNotFoundError, PageFetchError, SelectorError
from .models.analysis import PageContent

logger = logging.getLogger(__name__)

PART_SEPARATOR = "\n\n ---- \n\n"
UNKNOWN_TITLE = "Unknown"


def normalize_url(raw: str) -> str:
    """Trim *raw* and default to ``https://`` when no http(s) scheme is given."""
    url = raw.strip()
    if url and not url.startswith(("http://", "https://")):
        url = f"https://{url}"
    return url


def extract_content(html: str, selector: str, url: str) -> PageContent:
    """Collect the text of every element matching *selector*.

    Each element's text nodes are joined by single spaces; elements without
    text are skipped and the rest are joined with a visible separator.

    Raises:
        SelectorError: If *selector* is not valid CSS.
        ContentNotFoundError: If no matching element has text.
    """
    soup = BeautifulSoup(html, "html.parser")

    title_tag = soup.find("title")
    title = title_tag.get_text().strip() if title_tag else ""

    try:
        elements = soup.select(selector)
    except SelectorSyntaxError as exc:
        raise SelectorError(f"Failed to parse content selector '{selector}': {exc}") from exc

    parts = [" ".join(el.stripped_strings) for el in elements]
    parts = [p for p in parts if p]
    if not parts:
        raise ContentNotFoundError(f"No content found matching selector: '{selector}'")

    logger.info("Selector %r matched %d element(s) with text", selector, len(parts))
    return PageContent(url=url, title=title or UNKNOWN_TITLE, content=PART_SEPARATOR.join(parts))


async def fetch_page(
    url: str,
    selector: str,
    *,
    user_agent: str = DEFAULT_USER_AGENT,
    timeout: float = 60.0,
    http_client: httpx.AsyncClient | None = None,
) -> PageContent:
    """Download *url* and extract the text matched by *selector*.

    Raises:
        PageFetchError: On transport failure or a non-2xx status.
        SelectorError: If *selector* is not valid CSS.
        ContentNotFoundError: If no matching element has text.
    """
    headers = {"User-Agent": user_agent}

    client = http_client or httpx.AsyncClient(follow_redirects=True, timeout=timeout)
    try:
        response = await client.get(url, headers=headers)
        response.raise_for_status()
    except httpx.HTTPStatusError as exc:
        raise PageFetchError(f"Fetching {url} returned {exc.response.status_code}") from exc
    except httpx.HTTPError as exc:
        raise PageFetchError(f"Error fetching {url}: {exc!r}") from exc
    finally:
        if http_client is None:
            await client.aclose()

    logger.info("Fetched %s (%d bytes)", url, len(response.content))
    return extract_content(response.text, selector, str(response.url))
