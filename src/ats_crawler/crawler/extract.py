"""Heuristic extraction of job links and job fields from static HTML.

None of this is a guaranteed-exact parse: titles come from the first heading,
locations from the first `City, ST` in the page text, unless the page carries
a schema.org JobPosting JSON-LD block, which is preferred.
"""
import json
import re
from typing import Any
from urllib.parse import urljoin, urlsplit

from bs4 import BeautifulSoup, Tag
from loguru import logger

from ats_crawler.schema import ExtractedJob
from ats_crawler.utils import text
from ats_crawler.vendors import US_REGION_CODES, VendorProfile, classify_job_family

MAX_TITLE_LENGTH = 140
MAX_LOCATION_LENGTH = 255

JOB_LINK_PATTERN = re.compile(r"/jobs?/|/jobs/\d|/positions?/|jobid=", re.IGNORECASE)
LOCATION_PATTERN = re.compile(r"\b[A-Z][a-zA-Z]+,\s?(?:" + "|".join(US_REGION_CODES) + r")\b")
HEADING_SELECTORS = ("h1", "h2", "h3", '[role="heading"]')


def _collapse(value: str) -> str:
    return " ".join(value.split())


def looks_like_job_link(href: str, extra_patterns: list[str] | None = None) -> bool:
    if JOB_LINK_PATTERN.search(href):
        return True
    for pattern in extra_patterns or ():
        try:
            if re.search(pattern, href, re.IGNORECASE):
                return True
        except re.error:
            logger.warning(f"Ignoring invalid job link pattern: {pattern}")
    return False


def extract_job_links(html: str, listing_url: str, profile: VendorProfile) -> list[str]:
    """Absolute, de-duplicated job-detail candidates from a listing page, in page order."""
    soup = BeautifulSoup(html, "html.parser")
    selectors = profile.listing_selectors or ["a[href]"]
    links: dict[str, None] = {}
    for selector in selectors:
        for anchor in soup.select(selector):
            href = str(anchor.get("href") or "").strip()
            if not href or not looks_like_job_link(href, profile.link_patterns):
                continue
            try:
                absolute = urljoin(listing_url, href)
                scheme = urlsplit(absolute).scheme
            except ValueError:
                logger.debug(f"Skipping malformed href {href!r} on {listing_url}")
                continue
            if scheme in ("http", "https"):
                links[absolute.split("#")[0]] = None
    return list(links)


def job_posting_json_ld(soup: BeautifulSoup) -> dict[str, Any] | None:
    for tag in soup.find_all("script", type="application/ld+json"):
        try:
            data = json.loads(tag.string or "")
        except json.JSONDecodeError:
            continue
        if isinstance(data, dict):
            data = data.get("@graph", [data])
        items = data if isinstance(data, list) else []
        for item in items:
            if isinstance(item, dict) and item.get("@type") == "JobPosting":
                return item
    return None


def _json_ld_location(ld: dict[str, Any]) -> str | None:
    job_location = ld.get("jobLocation")
    if isinstance(job_location, list):
        job_location = job_location[0] if job_location else None
    if isinstance(job_location, dict):
        address = job_location.get("address")
        if isinstance(address, str) and address.strip():
            return address.strip()
        if isinstance(address, dict):
            parts = [str(address[k]).strip() for k in ("addressLocality", "addressRegion") if address.get(k)]
            if parts:
                return ", ".join(parts)
    requirements = ld.get("applicantLocationRequirements")
    if isinstance(requirements, str) and requirements.strip():
        return requirements.strip()
    if isinstance(requirements, dict) and requirements.get("name"):
        return str(requirements["name"]).strip()
    return None


def extract_title(soup: BeautifulSoup) -> str | None:
    for selector in HEADING_SELECTORS:
        heading = soup.select_one(selector)
        if heading is None:
            continue
        title = _collapse(heading.get_text(" ", strip=True))
        if title:
            return title[:MAX_TITLE_LENGTH]
    return None


def extract_location(soup: BeautifulSoup, selectors: list[str] | None = None) -> str | None:
    for selector in selectors or ():
        location = _collapse(text(selector, soup))
        if location:
            return location[:MAX_LOCATION_LENGTH]
    body: Tag = soup.body or soup
    match = LOCATION_PATTERN.search(_collapse(body.get_text(" ", strip=True)))
    return match.group(0) if match else None


def extract_job(url: str, html: str, profile: VendorProfile) -> ExtractedJob:
    soup = BeautifulSoup(html, "html.parser")
    title: str | None = None
    location: str | None = None
    posting_date: str | None = None

    if ld := job_posting_json_ld(soup):
        if ld.get("title"):
            title = _collapse(str(ld["title"]))[:MAX_TITLE_LENGTH] or None
        if ld_location := _json_ld_location(ld):
            location = ld_location[:MAX_LOCATION_LENGTH]
        if ld.get("datePosted"):
            posting_date = str(ld["datePosted"])[:32]

    title = title or extract_title(soup)
    location = location or extract_location(soup, profile.location_selectors)
    return ExtractedJob(
        url=url,
        html=html,
        job_title=title,
        location=location,
        job_family=classify_job_family(title),
        posting_date=posting_date,
    )
