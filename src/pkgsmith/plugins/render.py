"""Jinja2 rendering of bundled file templates."""

from functools import cache

from jinja2 import Environment, PackageLoader, StrictUndefined

_BASIC_ESCAPES = {
    "\\": "\\\\",
    '"': '\\"',
    "\n": "\\n",
    "\r": "\\r",
    "\t": "\\t",
}


def _quote(value: object, escapes: dict[str, str]) -> str:
    return '"' + "".join(escapes.get(c, c) for c in str(value)) + '"'


def toml_string(value: object) -> str:
    """Render `value` as a TOML basic string literal."""
    return _quote(value, _BASIC_ESCAPES)


def julia_string(value: object) -> str:
    """Render `value` as a Julia string literal, with `$` not interpolated."""
    return _quote(value, {**_BASIC_ESCAPES, "$": "\\$"})


@cache
def get_environment() -> Environment:
    """Environment loading templates from pkgsmith/plugins/templates/."""
    env = Environment(
        loader=PackageLoader("pkgsmith", "plugins/templates"),
        undefined=StrictUndefined,
        trim_blocks=True,
        lstrip_blocks=True,
        keep_trailing_newline=True,
    )
    env.filters["toml_string"] = toml_string
    env.filters["julia_string"] = julia_string
    return env


def render(template_name: str, **context: object) -> str:
    """Render a bundled template with the given context."""
    return get_environment().get_template(template_name).render(**context)
