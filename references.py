"""Cross-reference expressions used in resource arguments.

Three forms are understood:

* ``ref:<name>`` or ``ref:<name>.<attr>`` -- the whole value is an output of
  another declared resource (``id`` when no attribute is given).
* ``${<name>}`` / ``${<name>.<attr>}`` inside a longer string -- the output is
  interpolated into the string. ``$${`` stands for a literal ``${``.
* ``config:<key>`` -- a required value from the stack's Pulumi config.
"""

import re
from dataclasses import dataclass
from typing import Any, Iterator, List, Optional, Union

REF_PREFIX = "ref:"
CONFIG_PREFIX = "config:"
DEFAULT_ATTRIBUTE = "id"

_INTERPOLATION = re.compile(r"(?<!\$)\$\{([A-Za-z_][\w-]*)(?:\.([A-Za-z_]\w*))?\}")
_ESCAPE = "$${"


@dataclass(frozen=True)
class Reference:
    resource: str
    attribute: str = DEFAULT_ATTRIBUTE

    def __str__(self) -> str:
        return f"{self.resource}.{self.attribute}"


def parse_reference(ref_text: str) -> Reference:
    """Parse ``name`` or ``name.attr`` (without the ``ref:`` prefix)."""
    if "." in ref_text:
        ref_res, ref_attr = ref_text.split(".", 1)
    else:
        ref_res, ref_attr = ref_text, DEFAULT_ATTRIBUTE
    return Reference(ref_res.strip(), ref_attr.strip() or DEFAULT_ATTRIBUTE)


def split_template(text: str) -> List[Union[str, Reference]]:
    """Split an interpolated string into literal chunks and references."""
    parts: List[Union[str, Reference]] = []
    pos = 0
    for match in _INTERPOLATION.finditer(text):
        if match.start() > pos:
            parts.append(text[pos:match.start()].replace(_ESCAPE, "${"))
        parts.append(Reference(match.group(1), match.group(2) or DEFAULT_ATTRIBUTE))
        pos = match.end()
    if pos < len(text):
        parts.append(text[pos:].replace(_ESCAPE, "${"))
    return parts


def config_key(value: Any) -> Optional[str]:
    if isinstance(value, str) and value.startswith(CONFIG_PREFIX):
        return value[len(CONFIG_PREFIX):]
    return None


def _strings(value: Any) -> Iterator[str]:
    if isinstance(value, dict):
        for v in value.values():
            yield from _strings(v)
    elif isinstance(value, list):
        for item in value:
            yield from _strings(item)
    elif isinstance(value, str):
        yield value


def find_references(value: Any) -> List[Reference]:
    """Return every cross-reference found in a (nested) argument value."""
    found: List[Reference] = []
    for text in _strings(value):
        if text.startswith(REF_PREFIX):
            found.append(parse_reference(text[len(REF_PREFIX):]))
        else:
            found.extend(p for p in split_template(text) if isinstance(p, Reference))
    return found
