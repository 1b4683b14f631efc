"""Static vendor vocabulary: seed domains, paths and keyword lists.

Everything here is configuration data, not runtime input. The crawl tuning
knobs (concurrency, timeouts) live in config.yaml instead.
"""

import re
from types import MappingProxyType
from urllib.parse import urlsplit

from pydantic import BaseModel, Field

from ats_crawler.schema import AtsType

MYWORKDAYJOBS_BASE_DOMAIN = "myworkdayjobs.com"
ICIMS_BASE_DOMAIN = "icims.com"

PROBE_PATHS = ("/", "/careers", "/jobs", "/job-search")

LISTING_PATHS = (
    "/careers",
    "/careers/",
    "/jobs",
    "/jobs/",
    "/job-search",
    "/jobsearch",
    "/search/jobs",
    "/joblisting",
)

BROWSER_USER_AGENT = (
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) "
    "AppleWebKit/537.36 (KHTML, like Gecko) "
    "Chrome/120.0.0.0 Safari/537.36"
)
PROBE_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) "
    "AppleWebKit/537.36 (KHTML, like Gecko) "
    "Chrome/98.0.4758.102 Safari/537.36"
)
CRAWLER_USER_AGENT = "ApplyPilotBot/0.1 (+https://apply-pilot.ai/bot)"


# ── Discovery seeds ──────────────────────────────────────────────────────────

WORKDAY_PREFIXES = (
    "wd1", "wd2", "wd3", "wd5",
    "accenture", "avanade", "boeing", "centric", "cognizant",
    "deloitte", "ey", "ibm", "kpmg", "pwc", "capgemini",
    "infosys", "tata", "wipro", "target", "walmart",
    "amazon", "google", "microsoft", "apple", "facebook",
)

ICIMS_PREFIXES = (
    "careers", "jobs", "uscareers", "canadacareers", "apaccareers", "emeacareers",
    "hiltongrandvacations", "primehealthcare", "trimas", "childrensnational",
    "spectrum", "northwell", "rwjbarnabas", "allegiantair", "chs",
    "adt", "allieduniversal", "asurion", "banfield", "bloominbrands",
)

# Tried against every vendor base domain.
GENERIC_SUBDOMAINS = (
    "careers", "jobs", "hr", "recruiting", "talent",
    "en", "us", "uk", "ca", "au", "de", "fr", "nl", "sg", "in",
    "abbott", "abbvie", "accenture", "activisionblizzard", "adidas", "adobe",
    "adp", "airbnb", "amd", "apple", "appliedmaterials", "att", "autodesk",
    "bankofamerica", "bestbuy", "boeing", "booking", "bristolmyerssquibb",
    "broadcom", "capitalone", "caterpillar", "charleschwab", "chevron",
    "cigna", "cisco", "citigroup", "cloudflare", "cocacola", "cognizant",
    "comcast", "costco", "cvs", "dell", "delta", "disney", "docusign",
    "ebay", "equinix", "ericsson", "ey", "facebook", "fedex", "fidelity",
    "ford", "gamestop", "ge", "generalmotors", "gilead", "goldmansachs",
    "google", "homedepot", "honeywell", "hp", "ibm", "intel", "intuitive",
    "jnj", "jpmorganchase", "linkedin", "lockheedmartin", "lowes", "lyft",
    "marriott", "mastercard", "mcdonalds", "medtronic", "merck", "meta",
    "microsoft", "moderna", "morganstanley", "netflix", "nike", "nvidia",
    "oracle", "paypal", "pepsico", "pfizer", "philips", "pinterest",
    "qualcomm", "rakuten", "raytheon", "salesforce", "samsung", "sap",
    "servicenow", "shopify", "sony", "spotify", "starbucks", "stripe",
    "target", "tesla", "texasinstruments", "tiktok", "toyota", "twitter",
    "uber", "ups", "verizon", "visa", "vmware", "walmart", "wellsfargo",
    "workday", "zoom",
)

# base domain -> vendor-curated prefixes
BASE_DOMAIN_PREFIXES: MappingProxyType[str, tuple[str, ...]] = MappingProxyType({
    MYWORKDAYJOBS_BASE_DOMAIN: WORKDAY_PREFIXES,
    ICIMS_BASE_DOMAIN: ICIMS_PREFIXES,
})


_WORKDAY_SHARD = re.compile(r"^wd\d+$")


def company_from_domain(domain: str) -> str:
    """Best-effort display name for a host.

    `acme.wd5.myworkdayjobs.com` -> `acme`, `www.acme.icims.com` -> `acme`;
    anything not on a vendor base domain keeps the domain itself.
    """
    lower = domain.lower()
    for base in BASE_DOMAIN_PREFIXES:
        if lower.endswith("." + base):
            labels = [
                label
                for label in lower.removesuffix("." + base).split(".")
                if label != "www" and not _WORKDAY_SHARD.match(label)
            ]
            if labels:
                return labels[0]
    return lower


class CoreHost(BaseModel):
    domain: str
    ats_type: AtsType
    company: str


CORE_HOSTS = (
    CoreHost(domain="boards.greenhouse.io", ats_type=AtsType.greenhouse, company="Greenhouse"),
    CoreHost(domain="jobs.lever.co", ats_type=AtsType.lever, company="Lever"),
    CoreHost(domain="jobs.ashbyhq.com", ats_type=AtsType.ashby, company="Ashby"),
    CoreHost(domain="jobs.workable.com", ats_type=AtsType.workable, company="Workable"),
    CoreHost(domain="zillow.wd5.myworkdayjobs.com", ats_type=AtsType.workday, company="zillow"),
    CoreHost(domain="careers-quest.icims.com", ats_type=AtsType.icims, company="quest"),
)


# ── Crawl profiles ───────────────────────────────────────────────────────────

class VendorProfile(BaseModel):
    """Per-vendor hints for the static crawler. Empty lists mean 'use the generic heuristics'."""

    listing_paths: list[str] = Field(default_factory=list)
    listing_selectors: list[str] = Field(default_factory=list)
    link_patterns: list[str] = Field(default_factory=list)
    location_selectors: list[str] = Field(default_factory=list)


GENERIC_PROFILE = VendorProfile(link_patterns=[r"/career", r"/position"])

VENDOR_PROFILES: MappingProxyType[AtsType, VendorProfile] = MappingProxyType({
    AtsType.workday: VendorProfile(link_patterns=[r"/job/", r"/details/"]),
    AtsType.icims: VendorProfile(
        link_patterns=[r"/jobs/\d+/", r"/jobs/\d+$"],
        location_selectors=[
            'meta[name="job-location"]',
            ".iCIMS_JobHeaderData .iCIMS_JobLocation",
            ".header-location",
        ],
    ),
    AtsType.greenhouse: VendorProfile(
        listing_paths=["/vercel", "/webflow", "/retool", "/notion", "/figma"],
        link_patterns=[r"gh_jid="],
    ),
    AtsType.lever: VendorProfile(
        listing_paths=["/netflix", "/coursera", "/mixpanel"],
        listing_selectors=["a.posting-title", ".posting a[href]"],
        link_patterns=[r"jobs\.lever\.co/[^/]+/[0-9a-f-]{36}"],
    ),
    AtsType.ashby: VendorProfile(listing_paths=["/ramp", "/anthropic"]),
    AtsType.workable: VendorProfile(link_patterns=[r"/view/"]),
})


def profile_for(ats_type: AtsType | None) -> VendorProfile:
    if ats_type is None:
        return GENERIC_PROFILE
    return VENDOR_PROFILES.get(ats_type, GENERIC_PROFILE)


# Vendors that serve every company from one board domain, `https://<board>/<company>/...`.
SHARED_BOARD_VENDORS = frozenset({AtsType.greenhouse, AtsType.lever, AtsType.ashby})


def company_for_posting(host_company: str, ats_type: AtsType | None, url: str) -> str:
    """Company slug from the first path segment on shared boards, else the host's company."""
    if ats_type in SHARED_BOARD_VENDORS:
        segment = urlsplit(url).path.strip("/").split("/")[0]
        if segment:
            return segment
    return host_company


# ── Extraction vocabularies ──────────────────────────────────────────────────

US_REGION_CODES = (
    "AL", "AK", "AZ", "AR", "CA", "CO", "CT", "DE", "DC", "FL", "GA", "HI", "ID",
    "IL", "IN", "IA", "KS", "KY", "LA", "ME", "MD", "MA", "MI", "MN", "MS", "MO",
    "MT", "NE", "NV", "NH", "NJ", "NM", "NY", "NC", "ND", "OH", "OK", "OR", "PA",
    "RI", "SC", "SD", "TN", "TX", "UT", "VT", "VA", "WA", "WV", "WI", "WY",
)

ENGINEERING_KEYWORDS = (
    "software", "engineer", "developer", "programmer", "architect",
    "frontend", "backend", "fullstack", "full-stack", "full stack",
    "devops", "sre", "platform", "infrastructure", "cloud",
    "mobile", "ios", "android", "react", "javascript", "python",
    "java", "golang", "rust", "typescript", "node", "api",
    "machine learning", "ml", "ai", "data engineer", "qa",
    "test", "automation", "security", "cyber", "blockchain",
    "web3", "crypto", "embedded", "firmware", "systems",
    "principal", "senior", "staff", "lead", "tech lead",
)

# job family -> title aliases. Order matters: the first family with a matching alias wins.
JOB_FAMILIES: MappingProxyType[str, tuple[str, ...]] = MappingProxyType({
    "DataScienceAnalytics": (
        "Data Scientist", "Analytics Engineer", "Business Intelligence Analyst",
        "Data Analyst", "Machine Learning Scientist",
    ),
    "Sales": (
        "Account Executive", "Sales Engineer", "Solutions Engineer",
        "Business Development Manager", "Partnerships Manager", "Sales Manager",
    ),
    "CustomerSuccess": (
        "Customer Success Manager", "Implementation Manager", "Support Engineer",
        "Technical Account Manager", "Client Success Manager",
    ),
    "Engineering": (
        "Software Engineer", "Software Developer", "Backend Engineer", "Frontend Engineer",
        "Full Stack Engineer", "ML Engineer", "Data Engineer", "DevOps Engineer", "SRE",
        "Site Reliability Engineer", "Platform Engineer", "Cloud Engineer",
        "Security Engineer", "Embedded Engineer", "Firmware Engineer", "Mobile Engineer",
        "iOS Engineer", "Android Engineer",
    ),
    "Product": (
        "Product Manager", "Technical Product Manager", "Product Owner", "Senior Product Manager",
    ),
    "Design": (
        "Product Designer", "UX Designer", "UI Designer", "UX/UI Designer",
        "Visual Designer", "Brand Designer", "Design Systems Manager",
    ),
    "GrowthMarketing": (
        "Growth Marketing Manager", "Performance Marketing Manager", "Demand Generation Manager",
        "Content Marketing Manager", "SEO Manager", "Digital Marketing Manager",
    ),
    "Operations": (
        "Business Operations", "Strategy Analyst", "Chief of Staff", "Operations Manager",
        "BizOps Manager", "Program Manager", "Project Manager",
    ),
    "FinanceAccounting": (
        "Financial Analyst", "FP&A Manager", "Controller", "Finance Manager",
        "Accountant", "Finance Business Partner",
    ),
    "PeopleHRRecruiting": (
        "Recruiter", "HR Business Partner", "People Operations Manager",
        "Talent Acquisition Manager", "Sourcer", "HR Generalist",
    ),
    "LegalCompliance": (
        "Legal Counsel", "Compliance Manager", "Contracts Manager",
        "Privacy Counsel", "Corporate Counsel",
    ),
})


def is_engineering_role(title: str) -> bool:
    title_lower = title.lower()
    return any(keyword in title_lower for keyword in ENGINEERING_KEYWORDS)


def classify_job_family(title: str | None) -> str | None:
    """Map a job title onto a family by case-insensitive alias containment."""
    if not title:
        return None
    title_lower = title.lower()
    for family, aliases in JOB_FAMILIES.items():
        if any(alias.lower() in title_lower for alias in aliases):
            return family
    return None
