"""Vendor fingerprints for probed pages.

Each vendor has a list of pure `(domain, body) -> bool` predicates. Vendors are
checked in FINGERPRINTS order and the first vendor with any matching predicate
wins, so a page mentioning both Workday and iCIMS is classified as Workday.
"""
import re
from collections.abc import Callable

from ats_crawler.schema import AtsType
from ats_crawler.vendors import ICIMS_BASE_DOMAIN, MYWORKDAYJOBS_BASE_DOMAIN

MIN_BODY_LENGTH = 200

Predicate = Callable[[str, str], bool]


def _domain_endswith(suffix: str) -> Predicate:
    def predicate(domain: str, body: str) -> bool:
        return domain.lower().endswith(suffix)
    return predicate


def _body_contains(*needles: str) -> Predicate:
    def predicate(domain: str, body: str) -> bool:
        lower = body.lower()
        return any(needle in lower for needle in needles)
    return predicate


def _title_mentions(word: str) -> Predicate:
    pattern = re.compile(rf"<title[^>]*>[^<]*{re.escape(word)}[^<]*</title>", re.IGNORECASE)

    def predicate(domain: str, body: str) -> bool:
        return pattern.search(body) is not None
    return predicate


FINGERPRINTS: tuple[tuple[AtsType, tuple[Predicate, ...]], ...] = (
    (AtsType.workday, (
        _domain_endswith(MYWORKDAYJOBS_BASE_DOMAIN),
        _body_contains("myworkdayjobs.com", 'data-automation-id="workdaybrand"'),
        # leading space keeps words like "networkday" out
        _body_contains(" workday"),
        _title_mentions("workday"),
    )),
    (AtsType.icims, (
        _domain_endswith(ICIMS_BASE_DOMAIN),
        _body_contains(
            "icims.com",
            'meta name="generator" content="icims',
            "icims talent platform",
            "data-icims-id",
            'class="icims',
            "icims.applyparams.meta",
        ),
        _title_mentions("icims"),
    )),
    (AtsType.greenhouse, (
        _domain_endswith("greenhouse.io"),
        _body_contains("boards.greenhouse.io", "job-boards.greenhouse.io", "boards-api.greenhouse.io"),
    )),
    (AtsType.lever, (
        _domain_endswith("lever.co"),
        _body_contains("jobs.lever.co"),
    )),
    (AtsType.ashby, (
        _domain_endswith("ashbyhq.com"),
        _body_contains("jobs.ashbyhq.com"),
    )),
    (AtsType.workable, (
        _domain_endswith("workable.com"),
        _body_contains("apply.workable.com", "jobs.workable.com"),
    )),
)


def fingerprint(domain: str, body: str) -> AtsType | None:
    if not body or len(body) < MIN_BODY_LENGTH:
        return None
    for ats_type, predicates in FINGERPRINTS:
        if any(predicate(domain, body) for predicate in predicates):
            return ats_type
    return None
