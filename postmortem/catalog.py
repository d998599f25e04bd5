"""
Message catalog: identifier -> message template (+ display overrides).

A catalog is a plain YAML document with two top-level sections:

    display_defaults:        # required, the global display policy
      decorations: true
      header: true
      footer: true
      stack: false
      log: false

    messages:
      PMINT001:
        text: "An unexpected error has occurred:\\n\\n  {0}"
        options: "{ stack: true, log: true }"
      UNKNOWN: "an unknown error occurred"

A message is either a bare string or a mapping with `text` and optional
`options` (a mapping, or a YAML flow mapping kept as a string). Placeholders
are positional `str.format` fields ({0}, {1}, ...).

Lookups are exact; an unknown identifier raises KeyError. The catalog does not
guess, since an unknown identifier is a bug in the caller.
"""
import logging
from collections.abc import Mapping
from importlib import resources
from types import MappingProxyType

import yaml

from .utils import first_line

logger = logging.getLogger(__name__)


class Template:
    __slots__ = ("identifier", "_text", "options")

    def __init__(self, identifier, text, /, options=None):
        if not isinstance(text, str):
            raise TypeError("Template() text for %r must be a string" % identifier)
        self.identifier = identifier
        self._text = text
        self.options = options

    def text(self, *params):
        """substitute the parameters, in order, into the message."""
        return self._text.format(*params)

    def summary(self, *params):
        """the first line only; by convention it is a one-line synopsis."""
        return first_line(self._text).format(*params)

    def __repr__(self):
        return "Template(%r)" % self.identifier


class Catalog:
    """
    keyed access to message templates and the global display defaults.

    build one with Catalog(mapping), Catalog.load(path) or Catalog.default().
    """

    def __init__(self, document, /):
        if not isinstance(document, Mapping):
            raise TypeError("Catalog() argument must be a mapping")
        try:
            defaults = document["display_defaults"]
        except KeyError:
            raise ValueError("catalog must define display_defaults") from None
        if isinstance(defaults, str):
            defaults = yaml.safe_load(defaults)
        if not isinstance(defaults, Mapping):
            raise ValueError("catalog display_defaults must be a mapping")

        self.display_defaults = MappingProxyType(dict(defaults))
        self._templates = {}
        for identifier, entry in (document.get("messages") or {}).items():
            if isinstance(entry, Mapping):
                template = Template(identifier, entry.get("text"), entry.get("options"))
            else:
                template = Template(identifier, entry)
            self._templates[str(identifier)] = template

    @classmethod
    def load(cls, path, /):
        with open(path, encoding="utf-8") as stream:
            document = yaml.safe_load(stream)
        logger.debug("loaded message catalog from %s", path)
        return cls(document or {})

    @classmethod
    def default(cls):
        """the catalog bundled with postmortem (errors.yml)."""
        source = resources.files(__package__).joinpath("errors.yml")
        return cls(yaml.safe_load(source.read_text(encoding="utf-8")))

    def get(self, identifier, /):
        return self._templates[str(identifier)]

    def __contains__(self, identifier):
        return str(identifier) in self._templates

    def __iter__(self):
        return iter(self._templates)

    def __len__(self):
        return len(self._templates)


__all__ = (
    "Template",
    "Catalog",
)
