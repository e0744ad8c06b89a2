from __future__ import annotations

import json
import logging
import re
from typing import TYPE_CHECKING

from depsync_core.updaters.base import BaseUpdater

if TYPE_CHECKING:
    from depsync_core.context import ChangeContext

logger = logging.getLogger(__name__)

_PACKAGE_JSON = "package.json"
_SECTIONS = ("dependencies", "devDependencies", "peerDependencies", "optionalDependencies")

# Leading range operator kept when the version is replaced: "^1.2.0" -> "^1.3.0".
_RANGE_PREFIX_RE = re.compile(r"^(\^|~|>=|<=|>|<|=)?")
_INDENT_RE = re.compile(r"^([ \t]+)\S", re.MULTILINE)


def detect_indent(text: str):
    """Return the indent to hand to json.dumps so a rewrite keeps the file's layout.

    The first indented line decides: a run of spaces gives its width, tabs are
    kept as a string. A single-line document stays on a single line.
    """
    match = _INDENT_RE.search(text)
    if match is None:
        return None if "\n" not in text.strip() else 0
    indent = match.group(1)
    return indent if "\t" in indent else len(indent)


class NpmUpdater(BaseUpdater):
    """Rewrites dependency versions in the root package.json."""

    KIND = "npm"

    def is_applicable(self, context: ChangeContext) -> bool:
        return (context.dir / _PACKAGE_JSON).is_file()

    def apply(self, context: ChangeContext) -> int:
        path = context.dir / _PACKAGE_JSON
        text = path.read_text(encoding="utf-8")
        data = json.loads(text)
        change = context.change

        modified = False
        for section in _SECTIONS:
            deps = data.get(section)
            if not isinstance(deps, dict) or change.dependency not in deps:
                continue
            current = str(deps[change.dependency])
            prefix = _RANGE_PREFIX_RE.match(current).group(0)
            updated = prefix + change.version
            if current != updated:
                logger.debug("%s: %s %s -> %s", section, change.dependency, current, updated)
                deps[change.dependency] = updated
                modified = True

        if not modified:
            return 0

        new_text = json.dumps(data, indent=detect_indent(text), ensure_ascii=False)
        if text.endswith("\n"):
            new_text += "\n"
        path.write_text(new_text, encoding="utf-8")
        return 1
