# faber/extraction/extractor.py
"""
Extractor - turns an arbitrary AI response into a normalized file set.

STRATEGIES (ordered, first match wins):
1. Direct structured   - response already exposes `files` (or `code`, or `response.files`)
2. Embedded JSON       - outermost {...} span, with one bounded repair pass
3. Fenced code blocks  - every ```tsx/jsx/ts/js``` block gets a sequential path
4. Single component    - a top-level component declaration found in free text

Each strategy is a pure function `(raw) -> ExtractionResult | None`.
`extract()` never raises: a strategy that blows up on hostile input is
logged and skipped.
"""
import json
import re
from typing import Any, Callable, Iterable, List, Optional

from faber.core.logging import log
from faber.core.types import ExtractionResult, GeneratedFile
from faber.utils.source import balanced_end


Strategy = Callable[[Any], Optional[ExtractionResult]]

DEFAULT_ENTRY_PATH = "src/App.tsx"
UI_EXTENSIONS = (".jsx", ".tsx")


# ═══════════════════════════════════════════════════════════════════════════════
# STRUCTURAL PREDICATE
# ═══════════════════════════════════════════════════════════════════════════════

PLACEHOLDER_PATTERNS = [
    re.compile(r"\bTODO\b"),
    re.compile(r"implement this", re.IGNORECASE),
    re.compile(r"add your code here", re.IGNORECASE),
    re.compile(r"implementation needed", re.IGNORECASE),
]

ENTRY_PATTERN = re.compile(
    r"\bfunction\s*[A-Za-z_$]?[\w$]*\s*\("
    r"|\b(?:const|let|var)\s+[A-Za-z_$][\w$]*\s*(?::[^=]+)?="
    r"|\bclass\s+[A-Za-z_$][\w$]*"
)
EXPORT_PATTERN = re.compile(
    r"\bexport\s+(?:default\b|const\b|let\b|function\b|class\b|\{)|\bmodule\.exports\b"
)
MARKUP_PATTERN = re.compile(r"</[A-Za-z][\w.]*\s*>|</>|<[A-Za-z][\w.]*(?:\s[^<>]*)?/>")


def has_placeholder(content: str) -> bool:
    return any(p.search(content) for p in PLACEHOLDER_PATTERNS)


def is_ui_bearing(path: str) -> bool:
    """UI files are .jsx/.tsx, or extensionless paths like `src/App`."""
    name = path.rsplit("/", 1)[-1]
    if "." not in name:
        return True
    return name.lower().endswith(UI_EXTENSIONS)


def is_structurally_valid(file: GeneratedFile) -> bool:
    """The per-candidate predicate applied to every strategy's output."""
    if not file.path.strip() or not file.content.strip():
        return False
    if has_placeholder(file.content):
        return False
    if is_ui_bearing(file.path):
        return bool(
            ENTRY_PATTERN.search(file.content)
            and EXPORT_PATTERN.search(file.content)
            and MARKUP_PATTERN.search(file.content)
        )
    return True


# ═══════════════════════════════════════════════════════════════════════════════
# HELPERS
# ═══════════════════════════════════════════════════════════════════════════════

_INNER_FENCE = re.compile(r"^```[\w-]*[ \t]*\r?\n|\r?\n?```\s*$")


def clean_code(content: str) -> str:
    """Drop a markdown fence wrapped around a single file's content."""
    return _INNER_FENCE.sub("", content.strip()).strip()


def _make_files(items: Iterable[Any]) -> List[GeneratedFile]:
    files = []
    for item in items:
        if not isinstance(item, dict):
            continue
        path = item.get("path") or item.get("name") or item.get("filename")
        content = item.get("content") if item.get("content") is not None else item.get("code")
        if not isinstance(path, str) or not isinstance(content, str):
            continue
        files.append(GeneratedFile(path=path.strip(), content=clean_code(content)))
    return files


def _result(files: List[GeneratedFile], method: str, explanation: Any = None) -> Optional[ExtractionResult]:
    valid = [f for f in files if is_structurally_valid(f)]
    if not valid:
        return None
    return ExtractionResult(
        files=tuple(valid),
        has_valid_code=True,
        method=method,
        explanation=explanation if isinstance(explanation, str) else None,
    )


def response_text(raw: Any) -> Optional[str]:
    """Best-effort textual payload of a provider response."""
    if isinstance(raw, str):
        return raw
    if isinstance(raw, (bytes, bytearray)):
        return bytes(raw).decode("utf-8", errors="replace")
    if not isinstance(raw, dict):
        return None

    choices = raw.get("choices")
    if isinstance(choices, list) and choices and isinstance(choices[0], dict):
        message = choices[0].get("message")
        if isinstance(message, dict) and isinstance(message.get("content"), str):
            return message["content"]

    for key in ("content", "text", "output", "response"):
        value = raw.get(key)
        if isinstance(value, str):
            return value
    return None


# ═══════════════════════════════════════════════════════════════════════════════
# STRATEGY 1: DIRECT STRUCTURED
# ═══════════════════════════════════════════════════════════════════════════════

def direct_structured(raw: Any) -> Optional[ExtractionResult]:
    if not isinstance(raw, dict) or not isinstance(raw.get("files"), list):
        return None
    return _result(_make_files(raw["files"]), "direct_structured", raw.get("explanation"))


def direct_code(raw: Any) -> Optional[ExtractionResult]:
    if not isinstance(raw, dict) or not isinstance(raw.get("code"), str):
        return None
    files = [GeneratedFile(path=DEFAULT_ENTRY_PATH, content=clean_code(raw["code"]))]
    return _result(files, "direct_code", raw.get("explanation"))


def nested_response(raw: Any) -> Optional[ExtractionResult]:
    if not isinstance(raw, dict):
        return None
    inner = raw.get("response") or raw.get("data")
    if not isinstance(inner, dict) or not isinstance(inner.get("files"), list):
        return None
    return _result(_make_files(inner["files"]), "nested_response", inner.get("explanation"))


# ═══════════════════════════════════════════════════════════════════════════════
# STRATEGY 2: EMBEDDED JSON
# ═══════════════════════════════════════════════════════════════════════════════

_LEADING_FENCE = re.compile(r"^\s*```(?:json)?[ \t]*\r?\n?", re.IGNORECASE)
_TRAILING_FENCE = re.compile(r"\r?\n?```\s*$")


def _strip_fences(text: str) -> str:
    return _TRAILING_FENCE.sub("", _LEADING_FENCE.sub("", text))


def repair_json(text: str) -> str:
    """
    One bounded repair pass over almost-JSON produced by a model.

    - single-quoted keys and bare keys become double-quoted
    - single-quoted string values become double-quoted
    - trailing commas before } or ] are dropped
    """
    repaired = re.sub(r"([{,]\s*)'([^'\\\n]+)'\s*:", r'\1"\2":', text)
    repaired = re.sub(r"([{,]\s*)([A-Za-z_$][\w$]*)\s*:", r'\1"\2":', repaired)
    repaired = re.sub(
        r":\s*'((?:[^'\\]|\\.)*)'",
        lambda m: ": " + json.dumps(m.group(1).replace("\\'", "'")),
        repaired,
    )
    return re.sub(r",\s*([}\]])", r"\1", repaired)


def embedded_json(raw: Any) -> Optional[ExtractionResult]:
    text = response_text(raw)
    if not text:
        return None

    cleaned = _strip_fences(text)
    start, end = cleaned.find("{"), cleaned.rfind("}")
    if start == -1 or end <= start:
        return None
    span = cleaned[start:end + 1]

    method = "json_extraction"
    try:
        parsed = json.loads(span)
    except ValueError:
        try:
            parsed = json.loads(repair_json(span))
        except ValueError:
            return None
        method = "json_repaired"

    if not isinstance(parsed, dict):
        return None

    if isinstance(parsed.get("files"), list):
        return _result(_make_files(parsed["files"]), method, parsed.get("explanation"))

    single = parsed.get("code") if isinstance(parsed.get("code"), str) else parsed.get("content")
    if isinstance(single, str):
        files = [GeneratedFile(path=DEFAULT_ENTRY_PATH, content=clean_code(single))]
        return _result(files, "json_single_file", parsed.get("explanation"))
    return None


# ═══════════════════════════════════════════════════════════════════════════════
# STRATEGY 3: FENCED CODE BLOCKS
# ═══════════════════════════════════════════════════════════════════════════════

# Pairs every fence regardless of language so a ```json block can't swallow the next opener
FENCE_PATTERN = re.compile(r"```[ \t]*([\w+-]*)[ \t]*\r?\n(.*?)```", re.DOTALL)

SOURCE_TAGS = {"", "tsx", "jsx", "typescript", "javascript", "ts", "js", "react"}
_TS_TAGS = {"tsx", "ts", "typescript"}


def fenced_blocks(raw: Any) -> Optional[ExtractionResult]:
    text = response_text(raw)
    if not text or "```" not in text:
        return None

    blocks = [m for m in FENCE_PATTERN.finditer(text) if m.group(1).lower() in SOURCE_TAGS]
    files = []
    for index, match in enumerate(blocks):
        tag = match.group(1).lower()
        ext = ".tsx" if tag in _TS_TAGS else ".jsx"
        path = f"src/App{ext}" if index == 0 else f"src/components/Component{index}{ext}"
        files.append(GeneratedFile(path=path, content=match.group(2).strip()))
    return _result(files, "codeblock_extraction")


# ═══════════════════════════════════════════════════════════════════════════════
# STRATEGY 4: HEURISTIC SINGLE COMPONENT
# ═══════════════════════════════════════════════════════════════════════════════

DECLARATION_PATTERNS = [
    re.compile(r"export\s+default\s+function\s*([A-Z][\w$]*)?\s*\("),
    re.compile(r"(?:export\s+)?function\s+([A-Z][\w$]*)\s*\("),
    re.compile(r"(?:export\s+)?const\s+([A-Z][\w$]*)\s*(?::[^=\n]+)?=\s*(?:\([^)]*\)|[\w$]+)\s*(?::\s*[^=\n]+)?=>"),
]
IMPORT_LINE = re.compile(r"^\s*import\s.+?from\s+['\"][^'\"]+['\"];?\s*$", re.MULTILINE)


CLOSING_LINE = re.compile(r"^([ \t]*)[})]\)?;?[ \t]*$", re.MULTILINE)


def _closing_line_end(text: str, match: "re.Match") -> int:
    """End of the first bare `}` / `};` / `);` line at the declaration's indentation."""
    line_start = text.rfind("\n", 0, match.start()) + 1
    indent = re.match(r"[ \t]*", text[line_start:]).group()
    for closing in CLOSING_LINE.finditer(text, match.end()):
        if closing.group(1) == indent:
            return closing.end()
    return len(text)


def _declaration_end(text: str, match: "re.Match") -> int:
    """
    End of a component declaration: its balanced body, or the closing line
    when apostrophes in JSX text throw the bracket scan off.
    """
    pos = match.end()
    if text[match.end() - 1] == "(":
        params_end = balanced_end(text, match.end() - 1)
        if params_end is None:
            return _closing_line_end(text, match)
        pos = params_end

    rest = text[pos:]
    body = re.search(r"[{(]", rest)
    if not body:
        return len(text)
    end = balanced_end(text, pos + body.start())
    return end if end is not None else _closing_line_end(text, match)


def single_component(raw: Any) -> Optional[ExtractionResult]:
    text = response_text(raw)
    if not text:
        return None

    for pattern in DECLARATION_PATTERNS:
        match = pattern.search(text)
        if not match:
            continue
        code = text[match.start():_declaration_end(text, match)].strip()
        name = match.group(1)

        imports = [line.strip() for line in IMPORT_LINE.findall(text[:match.start()])]
        if imports:
            code = "\n".join(imports) + "\n\n" + code
        if not EXPORT_PATTERN.search(code) and name:
            code += f"\n\nexport default {name};"

        return _result([GeneratedFile(path=DEFAULT_ENTRY_PATH, content=code)], "single_component")
    return None


# ═══════════════════════════════════════════════════════════════════════════════
# ENTRY POINT
# ═══════════════════════════════════════════════════════════════════════════════

STRATEGIES: List[Strategy] = [
    direct_structured,
    direct_code,
    nested_response,
    embedded_json,
    fenced_blocks,
    single_component,
]

FAILED = ExtractionResult(files=(), has_valid_code=False, method="failed")


def extract(raw_response: Any, strategies: Optional[List[Strategy]] = None) -> ExtractionResult:
    """
    Parse an arbitrary AI response into an ExtractionResult.

    Never raises. Returns `has_valid_code=False` with no files when every
    strategy comes up empty.
    """
    for strategy in strategies or STRATEGIES:
        try:
            result = strategy(raw_response)
        except Exception as e:
            log("EXTRACT", f"⚠️ {strategy.__name__} failed on input: {type(e).__name__}: {e}")
            continue

        if result is not None and result.has_valid_code:
            log("EXTRACT", f"✅ {len(result.files)} file(s) via {result.method}")
            return result

    log("EXTRACT", "❌ No strategy produced a valid file")
    return FAILED
