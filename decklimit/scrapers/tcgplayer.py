"""
TCGplayer price scraper.

Walks the legacy magic.tcgplayer.com set index, fetches every set listing
page, and reduces all sale rows to the cheapest price per card.

Page shapes relied on:
- Index page: <a href="/db/search_result.asp?set_name=..."> per set.
- Listing page: sale rows are <td bgcolor="#D1DFFC"> or <td bgcolor="#E6F4FF">
  cells holding an <a href="...cn=<card name>&..."> and "$1,234.56" text.

Note: Web scraping is inherently fragile. Any fetch or parse failure aborts
the whole run so the catalog is never replaced with partial data.
"""

import asyncio
import logging
from collections.abc import Awaitable, Callable, Iterable
from urllib.parse import unquote_plus

import httpx
from bs4 import BeautifulSoup

from decklimit.config import SCRAPE_DELAY_SECONDS, settings
from decklimit.models.catalog import PriceCatalogEntry
from decklimit.models.failure import FetchFailure, InvalidInputError, ParseFailure
from decklimit.models.money import Money
from decklimit.services.normalizer import card_id

logger = logging.getLogger(__name__)

INDEX_PATH = "/all_magic_sets.asp"
SET_LINK_PREFIX = "/db/search_result.asp?set_name="

# Cell highlight colors that mark sale rows on listing pages
SALE_ROW_COLORS = frozenset({"#D1DFFC", "#E6F4FF"})

# The index links the Magic 2010 core set without its set code, which yields
# an empty listing. The working link carries a literal " (M10)" suffix.
MISLABELED_SET_SUFFIX = "Magic 2010"
MISLABELED_SET_CORRECTION = " (M10)"

Sleep = Callable[[float], Awaitable[None]]


async def fetch_page(url: str, client: httpx.AsyncClient) -> str:
    """
    Fetch a page's HTML.

    Raises:
        FetchFailure: On any HTTP status, transport or URL error
    """
    try:
        response = await client.get(url)
        response.raise_for_status()
    except httpx.HTTPStatusError as e:
        raise FetchFailure(url, f"HTTP {e.response.status_code}") from e
    except (httpx.HTTPError, httpx.InvalidURL) as e:
        raise FetchFailure(url, str(e) or type(e).__name__) from e
    return response.text


def fix_set_link(href: str) -> str:
    """Apply the known Magic 2010 link correction."""
    if href.endswith(MISLABELED_SET_SUFFIX):
        return href + MISLABELED_SET_CORRECTION
    return href


def parse_set_links(html: str, base_url: str) -> list[str]:
    """
    Extract set listing URLs from the index page.

    Args:
        html: Index page HTML
        base_url: Scheme and host the relative links resolve against

    Returns:
        Absolute URLs in page order, spaces encoded as "+"
    """
    soup = BeautifulSoup(html, "html.parser")
    links: list[str] = []

    for anchor in soup.find_all("a", href=True):
        href = anchor["href"]
        if not href.lower().startswith(SET_LINK_PREFIX):
            continue
        href = fix_set_link(href)
        # Some links arrive with raw spaces
        links.append(f"{base_url}{href}".replace(" ", "+"))

    return links


def extract_card_name(href: str) -> str | None:
    """
    Pull the card name out of a listing link's ``cn=`` parameter.

    Returns None when the parameter is missing or not terminated by "&".
    """
    start = href.find("cn=")
    if start < 0:
        return None
    rest = href[start + 3 :]
    end = rest.find("&")
    if end < 0:
        return None
    return unquote_plus(rest[:end])


def parse_listing_page(html: str, url: str) -> list[PriceCatalogEntry]:
    """
    Extract (card, price) observations from one set listing page.

    Args:
        html: Listing page HTML
        url: Page URL, used in error reports

    Returns:
        One PriceCatalogEntry per sale row, duplicates included

    Raises:
        ParseFailure: If a sale row's price text is not a number
    """
    soup = BeautifulSoup(html, "html.parser")
    entries: list[PriceCatalogEntry] = []

    for cell in soup.find_all("td", bgcolor=True):
        if cell["bgcolor"].upper() not in SALE_ROW_COLORS:
            continue

        anchor = cell.find("a", href=True)
        if anchor is None:
            continue

        name = extract_card_name(anchor["href"])
        if not name:
            continue

        raw_price = cell.get_text().strip()
        try:
            price = Money.parse(raw_price)
        except InvalidInputError:
            raise ParseFailure(url, raw_price) from None

        entries.append(PriceCatalogEntry(id=card_id(name), name=name, price=price))

    return entries


def merge_lowest_prices(
    lowest: dict[str, PriceCatalogEntry], entries: Iterable[PriceCatalogEntry]
) -> None:
    """
    Fold observations into ``lowest`` keeping the minimum price per id.

    Only a strictly lower price replaces an entry, so ties keep the name of
    the first observation.
    """
    for entry in entries:
        current = lowest.get(entry.id)
        if current is None or entry.price < current.price:
            lowest[entry.id] = entry


def reconcile_lowest_prices(entries: Iterable[PriceCatalogEntry]) -> list[PriceCatalogEntry]:
    """Reduce observations to one minimum-price entry per card id."""
    lowest: dict[str, PriceCatalogEntry] = {}
    merge_lowest_prices(lowest, entries)
    return list(lowest.values())


async def scrape_prices(
    client: httpx.AsyncClient,
    base_url: str | None = None,
    delay: float = SCRAPE_DELAY_SECONDS,
    sleep: Sleep = asyncio.sleep,
) -> list[PriceCatalogEntry]:
    """
    Scrape every set and reconcile to the cheapest price per card.

    Workflow:
    1. Fetch the set index and collect set listing links
    2. For each set, pause ``delay`` seconds, then fetch and parse its listing
    3. Keep the minimum price per card id across all sets

    Args:
        client: HTTP client for requests
        base_url: Source scheme and host; defaults to settings.price_source_url
        delay: Pause before each listing fetch, in seconds
        sleep: Awaitable sleep, injectable for tests

    Returns:
        Reconciled catalog entries

    Raises:
        FetchFailure: If any page cannot be fetched
        ParseFailure: If any sale row has malformed price text
    """
    base_url = (base_url or settings.price_source_url).rstrip("/")

    index_html = await fetch_page(f"{base_url}{INDEX_PATH}", client)
    set_links = parse_set_links(index_html, base_url)
    logger.info("Price scraper: found %d sets", len(set_links))

    lowest: dict[str, PriceCatalogEntry] = {}
    for link in set_links:
        await sleep(delay)
        html = await fetch_page(link, client)
        merge_lowest_prices(lowest, parse_listing_page(html, link))
        logger.info("Price scraper: finished %s", link)

    return list(lowest.values())
