from collections.abc import Iterable, Mapping

from ats_crawler.vendors import BASE_DOMAIN_PREFIXES, GENERIC_SUBDOMAINS


def generate_candidates(
    base_prefixes: Mapping[str, Iterable[str]] = BASE_DOMAIN_PREFIXES,
    generic_subdomains: Iterable[str] = GENERIC_SUBDOMAINS,
) -> list[str]:
    """Cross every vendor base domain with its own prefixes, then with the generic ones.

    Duplicates are dropped keeping the first occurrence, so the result order is stable.
    """
    candidates: dict[str, None] = {}
    for base, prefixes in base_prefixes.items():
        for prefix in prefixes:
            candidates[f"{prefix}.{base}".lower()] = None
    generic_subdomains = list(generic_subdomains)
    for base in base_prefixes:
        for subdomain in generic_subdomains:
            candidates[f"{subdomain}.{base}".lower()] = None
    return list(candidates)
