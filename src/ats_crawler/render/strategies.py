"""Where to look on each vendor's rendered job board.

Selectors are tried in order; the first container selector that matches at
least one element wins, and inside a container the first field selector with
non-empty text wins.
"""

from types import MappingProxyType

from pydantic import BaseModel

from ats_crawler.schema import AtsType


class SeedPage(BaseModel):
    vendor: AtsType
    url: str

    @property
    def company(self) -> str:
        return self.url.rstrip("/").rsplit("/", 1)[-1]


class RenderStrategy(BaseModel):
    container_selectors: list[str]
    title_selectors: list[str]
    location_selectors: list[str]
    department_selectors: list[str]


SEED_PAGES = (
    SeedPage(vendor=AtsType.greenhouse, url="https://boards.greenhouse.io/vercel"),
    SeedPage(vendor=AtsType.greenhouse, url="https://boards.greenhouse.io/webflow"),
    SeedPage(vendor=AtsType.greenhouse, url="https://boards.greenhouse.io/retool"),
    SeedPage(vendor=AtsType.greenhouse, url="https://boards.greenhouse.io/notion"),
    SeedPage(vendor=AtsType.greenhouse, url="https://boards.greenhouse.io/figma"),
    SeedPage(vendor=AtsType.lever, url="https://jobs.lever.co/netflix"),
    SeedPage(vendor=AtsType.lever, url="https://jobs.lever.co/coursera"),
    SeedPage(vendor=AtsType.lever, url="https://jobs.lever.co/mixpanel"),
    SeedPage(vendor=AtsType.ashby, url="https://jobs.ashbyhq.com/ramp"),
    SeedPage(vendor=AtsType.ashby, url="https://jobs.ashbyhq.com/anthropic"),
)

STRATEGIES: MappingProxyType[AtsType, RenderStrategy] = MappingProxyType({
    AtsType.greenhouse: RenderStrategy(
        container_selectors=['[data-qa="opening"]', ".opening", ".job-post", ".position", 'a[href*="/jobs/"]'],
        title_selectors=['[data-qa="opening-title"]', ".opening-title", "h3", "h4", ".job-title"],
        location_selectors=['[data-qa="opening-location"]', ".opening-location", ".location"],
        department_selectors=['[data-qa="opening-department"]', ".opening-department", ".department"],
    ),
    AtsType.lever: RenderStrategy(
        container_selectors=[".posting", ".job-posting", ".position", 'a[href*="/jobs/"]'],
        title_selectors=[".posting-title h5", ".posting-title", ".job-title", "h3", "h4"],
        location_selectors=[".posting-categories .location", ".location"],
        department_selectors=[".posting-categories .department", ".department"],
    ),
    AtsType.ashby: RenderStrategy(
        container_selectors=['[data-testid="job-posting"]', ".job-posting", ".position", 'a[href*="/jobs/"]'],
        title_selectors=['[data-testid="job-title"]', ".job-title", "h3", "h4"],
        location_selectors=['[data-testid="job-location"]', ".job-location", ".location"],
        department_selectors=['[data-testid="job-department"]', ".job-department", ".department"],
    ),
})

# anchors considered by the fallback scan when no container selector matched
FALLBACK_LINK_MARKERS = ("/jobs/", "/job/")
