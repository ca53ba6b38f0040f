"""URL and domain extraction helpers."""

from html.parser import HTMLParser
from urllib.parse import urlparse

from .patterns import DOMAIN_RE, HREF_SCHEME_PREFIX, NON_DOMAIN_EXTENSIONS, URL_RE, URL_TRAILING_CHARS


class _LinkParser(HTMLParser):
    def __init__(self) -> None:
        super().__init__(convert_charrefs=True)
        self.links: list[str] = []

    def handle_starttag(self, tag: str, attrs: list[tuple[str, str | None]]) -> None:
        if tag.lower() != "a":
            return
        for name, value in attrs:
            if name.lower() == "href" and value:
                self.links.append(value.strip())


def extract_anchor_hrefs(html: str) -> list[str]:
    parser = _LinkParser()
    parser.feed(html)
    parser.close()
    return parser.links


def extract_urls_from_text(text: str) -> set[str]:
    return {match.group(0).rstrip(URL_TRAILING_CHARS) for match in URL_RE.finditer(text)}


def extract_urls(text: str, html: str) -> list[str]:
    urls = extract_urls_from_text(text)
    urls.update(extract_urls_from_text(html))
    if html:
        # Anchors count even when the visible text never shows the scheme.
        urls.update(href for href in extract_anchor_hrefs(html) if href.startswith(HREF_SCHEME_PREFIX))
    urls.discard("")
    return sorted(urls)


def url_host(url: str) -> str | None:
    try:
        parsed = urlparse(url)
    except ValueError:
        return None
    if not parsed.scheme or not parsed.netloc:
        return None
    try:
        host = parsed.hostname
    except ValueError:
        return None
    return host or None


def extract_domains(urls: list[str], text: str) -> list[str]:
    domains: set[str] = set()
    for url in urls:
        host = url_host(url)
        if host:
            domains.add(host.lower())

    for match in DOMAIN_RE.finditer(text):
        domain = match.group(0).lower()
        if domain.endswith(NON_DOMAIN_EXTENSIONS):
            continue
        domains.add(domain)
    return sorted(domains)


def defang_url(url: str) -> str:
    defanged = url.replace("http://", "hxxp://").replace("https://", "hxxps://")
    return defanged.replace(".", "[.]")
