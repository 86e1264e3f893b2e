"""Entity alias derivation."""

import re

from shared.config.constants import ENTITY_NAMESPACE_SEPARATORS

_UPPERCASE = re.compile(r"[A-Z]")


def entity_name(model: type) -> str:
    """Qualified name of a mapped class, e.g. ``blog.models.BlogPost``."""
    return f"{model.__module__}.{model.__qualname__}"


def short_name(name: str) -> str:
    """Strip any namespace qualifier up to the last separator."""
    cut = max(name.rfind(sep) for sep in ENTITY_NAMESPACE_SEPARATORS)
    return name[cut + 1:]


def entity_alias(name: str) -> str:
    """
    Alias for an entity: the uppercase letters of its short name, lowercased.

        entity_alias("App.Model.BlogPost")  # "bp"
        entity_alias("User")                # "u"

    Names without any uppercase letter fall back to their first character.
    """
    simple = short_name(name)
    if not simple:
        raise ValueError(f"Cannot derive an alias from entity name {name!r}")

    letters = _UPPERCASE.findall(simple)
    if not letters:
        return simple[0].lower()
    return "".join(letters).lower()
