# faber/validation/rules.py
"""
Pattern tables used by the code validator.

Kept apart from the validator so the tables read as data: adding a rule
is a one-line change here.
"""
import re
from typing import Dict, List, Tuple

from faber.core.types import Severity


# ═══════════════════════════════════════════════════════════════════════════════
# IMPORTS
# ═══════════════════════════════════════════════════════════════════════════════

IMPORT_PATTERNS: List["re.Pattern"] = [
    # import X from 'a' / import {a,\n b} from 'a' / import 'a'
    re.compile(r"\bimport\s+(?:type\s+)?(?:[\w$*{}\s,]+?\s+from\s+)?['\"]([^'\"\n]+)['\"]"),
    # export { a } from 'a' / export * from 'a'
    re.compile(r"\bexport\s+(?:type\s+)?(?:\*|\{[^}]*\})\s*(?:as\s+[\w$]+\s+)?from\s+['\"]([^'\"\n]+)['\"]"),
    re.compile(r"\brequire\s*\(\s*['\"]([^'\"\n]+)['\"]\s*\)"),
    re.compile(r"\bimport\s*\(\s*['\"]([^'\"\n]+)['\"]\s*\)"),
]

# Hints attached by auto_fix above a disallowed import
IMPORT_REPLACEMENTS: Dict[str, str] = {
    "axios": "Use the built-in fetch API instead.",
    "lodash": "Use built-in array and object methods instead.",
    "underscore": "Use built-in array and object methods instead.",
    "moment": "Use date-fns instead.",
    "jquery": "Use React state and refs instead.",
    "classnames": "Use clsx or tailwind-merge instead.",
    "styled-components": "Use Tailwind utility classes instead.",
}
DEFAULT_REPLACEMENT = "Remove it or switch to an allowlisted package."

ANNOTATION_PREFIX = "// faber:"


def package_name(specifier: str) -> str:
    """`lodash/debounce` -> `lodash`, `@scope/pkg/x` -> `@scope/pkg`."""
    parts = specifier.split("/")
    if specifier.startswith("@") and len(parts) > 1:
        return "/".join(parts[:2])
    return parts[0]


def import_annotation(specifier: str) -> str:
    hint = IMPORT_REPLACEMENTS.get(package_name(specifier), DEFAULT_REPLACEMENT)
    return f'{ANNOTATION_PREFIX} "{specifier}" is not on the import allowlist. {hint}'


# ═══════════════════════════════════════════════════════════════════════════════
# DANGEROUS APIS
# ═══════════════════════════════════════════════════════════════════════════════

# (pattern, code, severity, message)
DANGEROUS_PATTERNS: List[Tuple["re.Pattern", str, Severity, str]] = [
    (re.compile(r"(?<![\w$.])eval\s*\("), "DANGEROUS_CODE", Severity.ERROR,
     "eval() executes arbitrary code"),
    (re.compile(r"\bnew\s+Function\s*\("), "DANGEROUS_CODE", Severity.ERROR,
     "The Function constructor executes arbitrary code"),
    (re.compile(r"(?<![\w$.])Function\s*\(\s*['\"`]"), "DANGEROUS_CODE", Severity.ERROR,
     "The Function constructor executes arbitrary code"),
    (re.compile(r"\bset(?:Timeout|Interval)\s*\(\s*['\"`]"), "DANGEROUS_CODE", Severity.ERROR,
     "A string argument to setTimeout/setInterval is evaluated as code"),
    (re.compile(r"(?:(?<![\w$.])|(?<=window\.)|(?<=globalThis\.))fetch\s*\("), "NETWORK_ACCESS", Severity.WARNING,
     "Outbound network call via fetch()"),
    (re.compile(r"\bnew\s+XMLHttpRequest\b"), "NETWORK_ACCESS", Severity.WARNING,
     "Outbound network call via XMLHttpRequest"),
    (re.compile(r"\bnew\s+WebSocket\s*\("), "NETWORK_ACCESS", Severity.WARNING,
     "Outbound network connection via WebSocket"),
    (re.compile(r"\bnavigator\.sendBeacon\s*\("), "NETWORK_ACCESS", Severity.WARNING,
     "Outbound network call via navigator.sendBeacon"),
    (re.compile(r"\bnew\s+EventSource\s*\("), "NETWORK_ACCESS", Severity.WARNING,
     "Outbound network connection via EventSource"),
]


# ═══════════════════════════════════════════════════════════════════════════════
# STRUCTURE
# ═══════════════════════════════════════════════════════════════════════════════

COMPONENT_FUNCTION = re.compile(r"\bfunction\s+([A-Z][\w$]*)\s*\(")
COMPONENT_ARROW = re.compile(
    r"\b(?:const|let)\s+([A-Z][\w$]*)\s*(?::[^=\n]+)?=\s*(?:\([^)]*\)|[\w$]+)\s*(?::\s*[^=\n]+)?=>\s*"
)


# ═══════════════════════════════════════════════════════════════════════════════
# STYLE / ACCESSIBILITY / TYPES
# ═══════════════════════════════════════════════════════════════════════════════

_PALETTE = (
    "slate|gray|zinc|neutral|stone|red|orange|amber|yellow|lime|green|emerald|"
    "teal|cyan|sky|blue|indigo|violet|purple|fuchsia|pink|rose"
)
HARDCODED_COLOR = re.compile(
    rf"(?<![\w-])(?:text|bg|border|ring|from|via|to)-(?:white|black|(?:{_PALETTE})-\d{{2,3}})(?![\w-])"
)
INLINE_STYLE = re.compile(r"\bstyle\s*=\s*\{\{")

# Tag attributes may hold one level of nested braces, e.g. onChange={(e) => set({a: 1})}
_TAG_BODY = r"(?:[^<>{}]|\{(?:[^{}]|\{[^{}]*\})*\})*"
IMG_TAG = re.compile(rf"<img\b({_TAG_BODY})>", re.DOTALL)
INPUT_TAG = re.compile(rf"<input\b({_TAG_BODY})>", re.DOTALL)
BUTTON_TAG = re.compile(rf"<button\b({_TAG_BODY}?)(?:/>|>(.*?)</button>)", re.DOTALL)
DIV_TAG = re.compile(rf"<div\b({_TAG_BODY})>", re.DOTALL)

ALT_ATTR = re.compile(r"\balt\s*=")
LABEL_ATTRS = re.compile(r"\b(?:aria-label|aria-labelledby|title)\s*=")
INPUT_LABEL_ATTRS = re.compile(r"\b(?:aria-label|aria-labelledby|placeholder|title|id)\s*=")
INPUT_EXEMPT_TYPES = re.compile(r"\btype\s*=\s*['\"](?:hidden|submit|button|reset)['\"]")
ONCLICK_ATTR = re.compile(r"\bonClick\s*=")
ROLE_ATTR = re.compile(r"\brole\s*=")

ANY_TYPE = re.compile(r":\s*any\b|<any>|\bas\s+any\b")
HOOK_CALL = re.compile(r"(?<![\w$.])(use(?:State|Effect|Memo|Callback|Ref|Reducer|Context|LayoutEffect))\s*\(")
REACT_NAMED_IMPORT = re.compile(r"\bimport\s+(?:[\w$]+\s*,\s*)?\{([^}]*)\}\s*from\s+['\"]react['\"]")

RESPONSIVE_PREFIX = re.compile(r"\b(?:sm|md|lg|xl|2xl):")
CLASS_NAME = re.compile(r"\bclassName\s*=")
PROPS_PARAM = re.compile(r"\bfunction\s+[A-Z][\w$]*\s*\(\s*(?:\{|props\b)")
TYPE_DECLARATION = re.compile(r"\b(?:interface|type)\s+[A-Z][\w$]*")
