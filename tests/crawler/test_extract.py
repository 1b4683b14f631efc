import json

from ats_crawler.crawler.extract import (
    MAX_TITLE_LENGTH,
    extract_job,
    extract_job_links,
    looks_like_job_link,
)
from ats_crawler.schema import AtsType
from ats_crawler.vendors import GENERIC_PROFILE, VENDOR_PROFILES

LISTING_URL = "https://boards.greenhouse.io/vercel"


# ── job links ────────────────────────────────────────────────────────────────

def test_job_link_heuristic():
    assert looks_like_job_link("/vercel/jobs/12345-backend-engineer")
    assert looks_like_job_link("/job/abc")
    assert looks_like_job_link("/positions/77")
    assert looks_like_job_link("/apply?jobId=9")
    assert not looks_like_job_link("/about-us")


def test_vendor_pattern_extends_heuristic():
    assert not looks_like_job_link("/embed/job_app?for=vercel&token=1")
    assert looks_like_job_link("/x?gh_jid=1", VENDOR_PROFILES[AtsType.greenhouse].link_patterns)


def test_extract_links_resolves_dedupes_and_filters_schemes():
    html = """
    <a href="/vercel/jobs/1">One</a>
    <a href="/vercel/jobs/1#apply">One again</a>
    <a href="https://boards.greenhouse.io/vercel/jobs/2">Two</a>
    <a href="mailto:jobs/hr@vercel.com">Mail</a>
    <a href="/blog">Blog</a>
    <a>No href</a>
    """
    assert extract_job_links(html, LISTING_URL, GENERIC_PROFILE) == [
        "https://boards.greenhouse.io/vercel/jobs/1",
        "https://boards.greenhouse.io/vercel/jobs/2",
    ]


def test_listing_selectors_limit_the_anchors():
    profile = VENDOR_PROFILES[AtsType.lever]
    html = """
    <div class="posting"><a class="posting-title" href="/netflix/jobs/1">Engineer</a></div>
    <footer><a href="/netflix/jobs/footer">footer</a></footer>
    """
    assert extract_job_links(html, "https://jobs.lever.co/netflix", profile) == [
        "https://jobs.lever.co/netflix/jobs/1",
    ]


# ── job fields ───────────────────────────────────────────────────────────────

def test_title_and_location_from_page_text():
    html = "<html><body><h1>  Backend   Engineer </h1><p>Based in Austin, TX or remote</p></body></html>"
    job = extract_job("https://x.com/jobs/1", html, GENERIC_PROFILE)
    assert job.job_title == "Backend Engineer"
    assert job.location == "Austin, TX"
    assert job.job_family == "Engineering"
    assert job.html == html


def test_heading_fallback_order():
    job = extract_job("u", "<h3>Third</h3><h2>Second</h2>", GENERIC_PROFILE)
    assert job.job_title == "Second"


def test_title_truncated():
    job = extract_job("u", f"<h1>{'x' * 500}</h1>", GENERIC_PROFILE)
    assert len(job.job_title) == MAX_TITLE_LENGTH


def test_missing_fields_are_none():
    job = extract_job("u", "<p>nothing useful, here</p>", GENERIC_PROFILE)
    assert job.job_title is None
    assert job.location is None


def test_unknown_region_is_not_a_location():
    job = extract_job("u", "<p>Paris, FR</p>", GENERIC_PROFILE)
    assert job.location is None


def test_json_ld_preferred():
    ld = {
        "@context": "https://schema.org",
        "@type": "JobPosting",
        "title": "Senior Software Engineer",
        "datePosted": "2025-01-05",
        "jobLocation": {"@type": "Place", "address": {"addressLocality": "Denver", "addressRegion": "CO"}},
    }
    html = f"""
    <script type="application/ld+json">{json.dumps(ld)}</script>
    <h1>Careers at Acme</h1><p>Austin, TX</p>
    """
    job = extract_job("u", html, GENERIC_PROFILE)
    assert job.job_title == "Senior Software Engineer"
    assert job.location == "Denver, CO"
    assert job.posting_date == "2025-01-05"
    assert job.job_family == "Engineering"


def test_broken_json_ld_is_ignored():
    html = '<script type="application/ld+json">{not json</script><h1>Data Analyst</h1>'
    job = extract_job("u", html, GENERIC_PROFILE)
    assert job.job_title == "Data Analyst"
    assert job.job_family == "DataScienceAnalytics"


def test_icims_location_selector_before_regex():
    html = '<meta name="job-location" content="US-TX-Austin"><p>Boston, MA</p>'
    job = extract_job("u", html, VENDOR_PROFILES[AtsType.icims])
    assert job.location == "US-TX-Austin"
