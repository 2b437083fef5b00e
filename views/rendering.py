import html
from pathlib import Path
from urllib.parse import urlencode, urlsplit

from jinja2 import Environment, FileSystemLoader

TEMPLATE_DIR = Path(__file__).resolve().parent / "templates"
SAFE_SCHEMES = ("", "http", "https", "mailto")


def link_href(url) -> str:
    url = str(url or "").strip()
    try:
        scheme = urlsplit(url).scheme.lower()
    except ValueError:
        return "#"
    return url if scheme in SAFE_SCHEMES else "#"


# Text coming back from the API was entity-escaped on the way in; "plain" undoes
# that so autoescaping does not escape it twice.
template_env = Environment(
    loader=FileSystemLoader(str(TEMPLATE_DIR)),
    autoescape=True,
    trim_blocks=True,
    lstrip_blocks=True,
)
template_env.filters["plain"] = lambda value: html.unescape(str(value)) if value is not None else ""
template_env.filters["query"] = urlencode
template_env.filters["link_href"] = link_href


def render(template_name: str, **context) -> str:
    return template_env.get_template(template_name).render(**context)
