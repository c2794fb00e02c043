"""
Page metadata scraper used by ``POST /api/scrape-url/`` and the thumbnail
backfill task.

Fetches the page with ``requests`` and reads Open Graph / Twitter card /
plain meta tags with BeautifulSoup.  Relative thumbnail URLs are resolved
against the page origin.  Hosts that resolve to private, loopback or
link-local addresses are refused, and only the first
``SCRAPER_MAX_BYTES`` of a page are read.
"""
import ipaddress
import logging
import re
import socket
from dataclasses import asdict, dataclass
from typing import Optional
from urllib.parse import urljoin, urlsplit

import requests
from bs4 import BeautifulSoup
from django.conf import settings
from rest_framework import status
from rest_framework.exceptions import APIException

logger = logging.getLogger(__name__)


class ScrapeError(APIException):
    status_code = status.HTTP_502_BAD_GATEWAY
    default_detail = "Failed to scrape URL metadata"
    default_code = "scrape_failed"

    def __init__(self, detail=None, status_code=None):
        super().__init__(detail)
        if status_code is not None:
            self.status_code = status_code


@dataclass
class PageMetadata:
    title: Optional[str] = None
    description: Optional[str] = None
    thumbnail: Optional[str] = None

    def as_dict(self) -> dict:
        return asdict(self)


def validate_url(url: str) -> str:
    url = (url or "").strip()
    parts = urlsplit(url)
    if parts.scheme not in ("http", "https") or not parts.netloc:
        raise ScrapeError("Invalid URL format", status_code=status.HTTP_400_BAD_REQUEST)
    return url


def _meta_content(soup, key: str) -> Optional[str]:
    pattern = re.compile(rf"^{re.escape(key)}$", re.IGNORECASE)
    for attr in ("property", "name"):
        tag = soup.find("meta", attrs={attr: pattern})
        if tag is not None:
            content = (tag.get("content") or "").strip()
            if content:
                return content
    return None


def _first_meta(soup, *keys: str) -> Optional[str]:
    for key in keys:
        value = _meta_content(soup, key)
        if value:
            return value
    return None


def absolutize_thumbnail(thumbnail: Optional[str], page_url: str) -> Optional[str]:
    """
    ``//cdn/x.png`` keeps the page scheme, ``/x.png`` and ``x.png`` are
    rooted at the page origin.  Absolute http(s) URLs pass through.
    """
    if not thumbnail or thumbnail.startswith(("http://", "https://")):
        return thumbnail
    parts = urlsplit(page_url)
    if thumbnail.startswith("//"):
        return f"{parts.scheme}:{thumbnail}"
    origin = f"{parts.scheme}://{parts.netloc}"
    if thumbnail.startswith("/"):
        return origin + thumbnail
    return f"{origin}/{thumbnail}"


def extract_metadata(html: str, page_url: str) -> PageMetadata:
    soup = BeautifulSoup(html or "", "html.parser")

    title = _first_meta(soup, "og:title", "twitter:title")
    if not title and soup.title and soup.title.string:
        title = soup.title.string.strip() or None

    description = _first_meta(soup, "og:description", "twitter:description", "description")
    thumbnail = _first_meta(soup, "og:image", "twitter:image", "image")

    return PageMetadata(
        title=title,
        description=description,
        thumbnail=absolutize_thumbnail(thumbnail, page_url),
    )


def resolve_addresses(host: str) -> list:
    """Every IP address ``host`` resolves to."""
    try:
        infos = socket.getaddrinfo(host, None, proto=socket.IPPROTO_TCP)
    except socket.gaierror as exc:
        logger.info("Could not resolve %s: %s", host, exc)
        raise ScrapeError("Failed to fetch URL", status_code=status.HTTP_400_BAD_REQUEST)
    return [info[4][0] for info in infos]


def _is_public_address(address: str) -> bool:
    ip = ipaddress.ip_address(address.split("%", 1)[0])
    return not (
        ip.is_private
        or ip.is_loopback
        or ip.is_link_local
        or ip.is_reserved
        or ip.is_multicast
        or ip.is_unspecified
    )


def ensure_public_host(url: str) -> None:
    """Refuse URLs whose host is, or resolves to, an internal address."""
    host = urlsplit(url).hostname
    if not host:
        raise ScrapeError("Invalid URL format", status_code=status.HTTP_400_BAD_REQUEST)
    try:
        addresses = [str(ipaddress.ip_address(host))]
    except ValueError:
        addresses = resolve_addresses(host)
    if not addresses or not all(_is_public_address(a) for a in addresses):
        logger.warning("Refusing to scrape %s: host %s is not public", url, host)
        raise ScrapeError("URL host is not allowed", status_code=status.HTTP_400_BAD_REQUEST)


def read_capped(response, max_bytes: int) -> str:
    """Decode at most ``max_bytes`` of the body; the rest is never downloaded."""
    chunks = []
    size = 0
    for chunk in response.iter_content(chunk_size=16 * 1024):
        if not chunk:
            continue
        chunks.append(chunk[: max_bytes - size])
        size += len(chunks[-1])
        if size >= max_bytes:
            logger.info("Truncated page body at %s bytes", max_bytes)
            break
    return b"".join(chunks).decode(response.encoding or "utf-8", errors="replace")


def _get(url: str, timeout: float):
    try:
        return requests.get(
            url,
            headers={"User-Agent": settings.SCRAPER_USER_AGENT},
            timeout=timeout,
            stream=True,
            allow_redirects=False,
        )
    except requests.RequestException as exc:
        logger.warning("Scrape of %s failed: %s", url, exc)
        raise ScrapeError()


def fetch_metadata(url: str, timeout: Optional[float] = None) -> PageMetadata:
    url = validate_url(url)
    timeout = timeout or settings.SCRAPER_TIMEOUT_SECONDS

    # redirects are followed by hand so every hop gets the host check
    for _ in range(settings.SCRAPER_MAX_REDIRECTS + 1):
        ensure_public_host(url)
        response = _get(url, timeout)
        if not response.is_redirect:
            break
        location = response.headers.get("Location", "")
        response.close()
        url = validate_url(urljoin(url, location))
    else:
        raise ScrapeError("Too many redirects", status_code=status.HTTP_400_BAD_REQUEST)

    try:
        if not response.ok:
            logger.info("Scrape of %s returned HTTP %s", url, response.status_code)
            raise ScrapeError("Failed to fetch URL", status_code=status.HTTP_400_BAD_REQUEST)
        try:
            html = read_capped(response, settings.SCRAPER_MAX_BYTES)
        except requests.RequestException as exc:
            logger.warning("Reading %s failed: %s", url, exc)
            raise ScrapeError()
    finally:
        response.close()

    return extract_metadata(html, url)
