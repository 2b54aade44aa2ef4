"""Structured editing of a project's services registry file.

The registry (``src/services/services.ts`` or ``services.js``) is read into
a small document model:

- the prologue: every line before the ``services`` object, in order, with
  import statements (``import { a } from './a';`` or
  ``const { a } = require('./a');``, single- or multi-line) parsed into
  bindings and everything else kept verbatim,
- the entries of the ``services`` object literal,
- whatever follows the object (type export, ``module.exports``).

Bindings and properties are added by name, so repeated patches are no-ops.
Lines the model does not touch are rendered back unchanged.  A file with no
recognisable ``services`` object raises ``RegistryFormatError`` instead of
being left untouched without notice.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Union

from ..errors import FilesystemError, RegistryFormatError

_TS_IMPORT = re.compile(
    r"^import\s+\{\s*(?P<names>[^}]*?)\s*\}\s+from\s+['\"](?P<module>[^'\"]+)['\"];?\s*$"
)
_JS_IMPORT = re.compile(
    r"^const\s+\{\s*(?P<names>[^}]*?)\s*\}\s*=\s*require\(\s*['\"](?P<module>[^'\"]+)['\"]\s*\);?\s*$"
)
_IMPORT_START = re.compile(r"^(?:import|const)\s*\{")
_ALIAS = re.compile(r"\s+as\s+|\s*:\s*")
_OPENER = re.compile(r"^(?:export\s+)?const\s+services(?:\s*:\s*[^=]+)?\s*=\s*\{\s*$")
_CLOSER = re.compile(r"^\}\s*;?\s*$")
_MEMBER = re.compile(
    r"^\s*(?:(?:async|get|set)\s+)?\*?\s*"
    r"(?P<key>[A-Za-z_$][\w$]*|'[^']*'|\"[^\"]*\")\s*(?:[:,(]|$)"
)
_COMMENT_PREFIXES = ("//", "/*", "*")
_STRING_LITERAL = re.compile(r"'(?:\\.|[^'\\])*'|\"(?:\\.|[^\"\\])*\"|`(?:\\.|[^`\\])*`")

_INDENT = "  "


@dataclass
class ImportBinding:
    """One import statement and the local names it binds.

    ``line`` holds the statement as written, newlines included.
    """

    names: tuple[str, ...]
    module: str
    line: str


PrologueItem = Union[ImportBinding, str]


@dataclass
class RegistryEntry:
    """A top-level entry of the ``services`` object.

    ``key`` is ``None`` for comments, blank lines, spreads and members whose
    key is computed.
    """

    key: str | None
    lines: list[str] = field(default_factory=list)

    @property
    def is_trivia(self) -> bool:
        """True for blank lines and comments, which never take a comma."""
        return self.key is None and all(
            not line.strip() or line.lstrip().startswith(_COMMENT_PREFIXES)
            for line in self.lines
        )


@dataclass
class ServicesRegistry:
    """Parsed services registry."""

    typescript: bool
    prologue: list[PrologueItem] = field(default_factory=list)
    opener: str = "export const services = {"
    entries: list[RegistryEntry] = field(default_factory=list)
    closer: str = "};"
    trailer: list[str] = field(default_factory=list)

    @property
    def imports(self) -> list[ImportBinding]:
        return [item for item in self.prologue if isinstance(item, ImportBinding)]

    # -- Parsing -----------------------------------------------------------

    @classmethod
    def parse(cls, text: str, typescript: bool, path: Path | None = None) -> "ServicesRegistry":
        """Parse registry source text.

        Raises:
            RegistryFormatError: If no ``services`` object literal is found or
                its braces are unbalanced.
        """
        lines = text.split("\n")
        doc = cls(typescript=typescript)

        index = 0
        while index < len(lines):
            line = lines[index]
            if _OPENER.match(line):
                doc.opener = line.rstrip()
                break
            if _IMPORT_START.match(line):
                taken = _take_import(lines, index)
                if taken is not None:
                    binding, index = taken
                    doc.prologue.append(binding)
                    continue
            doc.prologue.append(line.rstrip())
            index += 1
        else:
            raise RegistryFormatError(path, "no `services` object found")

        index += 1
        depth = 0
        closed = False
        while index < len(lines):
            line = lines[index]
            index += 1
            if depth == 0:
                if _CLOSER.match(line):
                    doc.closer = line.rstrip()
                    closed = True
                    break
                doc.entries.append(RegistryEntry(_member_key(line), [line.rstrip()]))
            else:
                doc.entries[-1].lines.append(line.rstrip())
            depth += _brace_delta(line)
            if depth < 0:
                raise RegistryFormatError(path, "unbalanced braces in `services`")

        if not closed:
            raise RegistryFormatError(path, "`services` object is never closed")

        doc.trailer = lines[index:]
        return doc

    # -- Queries -----------------------------------------------------------

    def has_binding(self, name: str) -> bool:
        return any(name in imp.names for imp in self.imports)

    def has_property(self, key: str) -> bool:
        return any(entry.key == key for entry in self.entries)

    # -- Mutation ----------------------------------------------------------

    def add_import(self, name: str, module: str) -> bool:
        """Import *name* from *module* unless it is already bound.

        The statement goes after the last existing import, or after the
        leading comment block when there is none.
        """
        if self.has_binding(name):
            return False
        if self.typescript:
            line = f"import {{ {name} }} from '{module}';"
        else:
            line = f"const {{ {name} }} = require('{module}');"

        position = self._import_position()
        self.prologue.insert(position, ImportBinding((name,), module, line))
        following = self.prologue[position + 1] if position + 1 < len(self.prologue) else None
        if following is None or (isinstance(following, str) and following.strip()):
            self.prologue.insert(position + 1, "")
        return True

    def add_property(self, key: str, value: str) -> bool:
        """Append ``key: value`` to the ``services`` object unless *key* exists."""
        if self.has_property(key):
            return False
        for entry in reversed(self.entries):
            if not entry.is_trivia:
                _ensure_trailing_comma(entry)
                break
        self.entries.append(RegistryEntry(key, [f"{_INDENT}{key}: {value},"]))
        return True

    def _import_position(self) -> int:
        for i in range(len(self.prologue) - 1, -1, -1):
            if isinstance(self.prologue[i], ImportBinding):
                return i + 1
        position = 0
        for item in self.prologue:
            if not item.lstrip().startswith(_COMMENT_PREFIXES):
                break
            position += 1
        return position

    # -- Rendering ---------------------------------------------------------

    def render(self) -> str:
        """Serialise the document back to source text."""
        out: list[str] = [
            item.line if isinstance(item, ImportBinding) else item for item in self.prologue
        ]
        out.append(self.opener)
        for entry in self.entries:
            out.extend(entry.lines)
        out.append(self.closer)
        out.extend(self.trailer)
        return "\n".join(out)


def _take_import(lines: list[str], start: int) -> tuple[ImportBinding, int] | None:
    """Read the import statement starting at ``lines[start]``.

    Returns the binding and the index just past the statement, or ``None``
    if the lines do not form a named import.
    """
    chunk: list[str] = []
    for index in range(start, len(lines)):
        line = lines[index]
        if index > start and _OPENER.match(line):
            return None
        chunk.append(line.rstrip())
        text = "\n".join(chunk)
        match = _TS_IMPORT.match(text) or _JS_IMPORT.match(text)
        if match:
            names = tuple(
                _ALIAS.split(n.strip())[-1]
                for n in match.group("names").split(",")
                if n.strip()
            )
            return ImportBinding(names, match.group("module"), text), index + 1
        if ";" in line:
            return None
    return None


def _member_key(line: str) -> str | None:
    stripped = line.lstrip()
    if not stripped or stripped.startswith(_COMMENT_PREFIXES + ("...",)):
        return None
    match = _MEMBER.match(line)
    if match is None:
        return None
    return match.group("key").strip("'\"")


def _brace_delta(line: str) -> int:
    code = _STRING_LITERAL.sub("''", line).split("//", 1)[0]
    opened = sum(code.count(ch) for ch in "{([")
    closed = sum(code.count(ch) for ch in "})]")
    return opened - closed


def _ensure_trailing_comma(entry: RegistryEntry) -> None:
    for i in range(len(entry.lines) - 1, -1, -1):
        stripped = entry.lines[i].rstrip()
        if not stripped or stripped.lstrip().startswith("//"):
            continue
        if not stripped.endswith(","):
            entry.lines[i] = stripped + ","
        return


# ---------------------------------------------------------------------------
# File-level helper
# ---------------------------------------------------------------------------


def patch_registry(path: Path, camel_name: str, typescript: bool) -> bool:
    """Register ``<camel_name>Service`` in the registry file at *path*.

    Returns:
        ``True`` if the file was rewritten, ``False`` if both the import and
        the property were already present.

    Raises:
        RegistryFormatError: If the file cannot be parsed.
        FilesystemError: If the file cannot be read or written.
    """
    try:
        original = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise FilesystemError.from_os_error(exc, path) from exc

    doc = ServicesRegistry.parse(original, typescript, path)
    binding = f"{camel_name}Service"
    changed = doc.add_import(binding, f"./{camel_name}")
    changed = doc.add_property(camel_name, binding) or changed
    if not changed:
        return False

    try:
        path.write_text(doc.render(), encoding="utf-8")
    except OSError as exc:
        raise FilesystemError.from_os_error(exc, path) from exc
    return True
