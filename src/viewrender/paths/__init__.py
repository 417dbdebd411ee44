"""View path resolution.

Turns logical view references into template files:

    from viewrender.paths import Aliases, Theme, localize

    aliases = Aliases({"@views": "/srv/app/views"})
    theme = Theme({"/srv/app/views": "/srv/app/themes/dark"})

    themed = theme.apply(aliases.get("@views/site/faq.html"))
    localized = localize(themed, "de-DE", "en-US")
"""

from ._aliases import ALIAS_MARKER, Aliases
from ._locale import locale_candidates, localize
from ._resolver import ENTRY_MARKER, ROOT_MARKER, AliasResolver, PathResolver
from ._theme import Theme, ThemeRule

__all__ = [
    "ALIAS_MARKER",
    "ENTRY_MARKER",
    "ROOT_MARKER",
    "AliasResolver",
    "Aliases",
    "PathResolver",
    "Theme",
    "ThemeRule",
    "locale_candidates",
    "localize",
]
