from bs4 import Tag


def text(selector: str, soup: Tag) -> str:
    el = soup.select_one(selector)
    if el is None:
        return ""
    if el.name == "meta":
        return str(el.get("content") or "").strip()
    return el.get_text(" ", strip=True)
