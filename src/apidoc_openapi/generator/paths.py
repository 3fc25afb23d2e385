"""Path templating and naming helpers.

apidoc writes path parameters as ``/users/:id``; OpenAPI wants ``/users/{id}``.
"""

import re

LEADING_PATH = re.compile(r"(?:/[\w:]+)+")
PLACEHOLDER = re.compile(r":(\w+)\b")
MARKUP_TAG = re.compile(r"<[^>]+>")
URL_SPLIT = re.compile(r"[/:]")
NAME_UNSAFE = re.compile(r"[^A-Za-z0-9._-]")


class PathTemplateError(ValueError):
    """Raised when a raw url has no usable leading path."""


def template_path(url: str) -> tuple[str, list[str]]:
    """Convert a raw apidoc url into an OpenAPI path template.

    The query suffix and anything after the leading run of ``/segment`` groups
    are dropped. Returns the templated path and the placeholder names in the
    order they appear.
    """
    match = LEADING_PATH.search(url.split("?", 1)[0])
    if not match:
        raise PathTemplateError(f"no path segments in url {url!r}")

    names: list[str] = []
    for name in PLACEHOLDER.findall(match.group(0)):
        if name not in names:
            names.append(name)

    path = PLACEHOLDER.sub(lambda m: "{" + m.group(1) + "}", match.group(0))
    return path, names


def strip_tags(text: str | None) -> str:
    """Remove HTML markup apidoc leaves in titles and descriptions."""
    if not text:
        return ""
    return MARKUP_TAG.sub("", text)


def component_name(verb: str, url: str, *role: str) -> str:
    """Derive a readable component name, e.g. ``QueryParameterLimitAtGetPets``."""
    segments = [s for s in URL_SPLIT.split(url.split("?", 1)[0]) if s]
    parts = [*role, "at", verb, *segments]
    return NAME_UNSAFE.sub("", "".join(p[:1].upper() + p[1:] for p in parts))
