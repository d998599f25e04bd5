"""
Display policy: how loudly an identifier is reported.

Each identifier gets five independent switches:
- decorations: bold header/footer framing (off → plain body + usage text).
- header: show the identifier above the body.
- footer: point the operator at the log and/or stack-trace files.
- stack: the footer mentions the stack-trace file.
- log: the footer mentions the log file.

Values come from the catalog's display_defaults, overridden key by key by the
identifier's own `options`. Overrides naming anything else are rejected as a
whole (InvalidPolicyAttributes) so the catalog author sees every typo at once.
"""
from collections import namedtuple
from collections.abc import Mapping

import yaml

from .faults import InvalidPolicyAttributes

DisplayAttributes = namedtuple("DisplayAttributes", ("decorations", "header", "footer", "stack", "log"))
DisplayAttributes.__doc__ = "resolved, immutable display policy of one identifier."


def _parse(options, /):
    # overrides may be authored as a YAML flow mapping: "{ stack: true }"
    if options is None:
        return {}
    if isinstance(options, str):
        options = yaml.safe_load(options) or {}
    if not isinstance(options, Mapping):
        raise TypeError("display options must be a mapping, not %s" % type(options).__name__)
    return dict(options)


class DisplayPolicy:
    """resolves DisplayAttributes against one catalog."""

    def __init__(self, catalog, /):
        self.catalog = catalog

    def defaults(self):
        defaults = _parse(self.catalog.display_defaults)
        if missing := set(DisplayAttributes._fields) - defaults.keys():
            raise ValueError("display_defaults must define %s" % ", ".join(sorted(missing)))
        if invalid := {name: defaults[name] for name in DisplayAttributes._fields if not isinstance(defaults[name], bool)}:
            raise ValueError("display_defaults must be booleans: %s" % ", ".join(sorted(invalid)))
        return {name: defaults[name] for name in DisplayAttributes._fields}

    def resolve(self, identifier, /):
        overrides = _parse(self.catalog.get(identifier).options)
        # unknown names and non-boolean values ("false" is a string, not False) are both rejected
        if invalid := {
            key: value for key, value in overrides.items()
            if key not in DisplayAttributes._fields or not isinstance(value, bool)
        }:
            raise InvalidPolicyAttributes(invalid)
        return DisplayAttributes(**(self.defaults() | overrides))


def resolve(catalog, identifier, /):
    """shortcut for DisplayPolicy(catalog).resolve(identifier)."""
    return DisplayPolicy(catalog).resolve(identifier)


__all__ = (
    "DisplayAttributes",
    "DisplayPolicy",
    "resolve",
)
