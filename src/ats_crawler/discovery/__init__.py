"""Discovery of ATS-hosting subdomains."""

from ats_crawler.discovery.candidates import generate_candidates
from ats_crawler.discovery.engine import DomainDiscovery
from ats_crawler.discovery.fingerprint import fingerprint

__all__ = ["DomainDiscovery", "fingerprint", "generate_candidates"]
