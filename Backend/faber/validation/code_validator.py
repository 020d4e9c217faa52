# faber/validation/code_validator.py
"""
Code Validator / Sanitizer for generated UI source.

CHECKS (per file):
- Import allowlist      -> DISALLOWED_IMPORT (error)
- Dangerous APIs        -> DANGEROUS_CODE (error), NETWORK_ACCESS (warning)
- Structure             -> MISSING_ENTRY / MISSING_EXPORT / MISSING_RETURN /
                           UNBALANCED_BRACES / UNBALANCED_PARENS / PLACEHOLDER_CODE (error)
- Style                 -> HARDCODED_COLOR / INLINE_STYLE (warning)
- Accessibility         -> MISSING_ALT / MISSING_LABEL / NON_SEMANTIC_INTERACTIVE (warning)
- Types (.ts/.tsx)      -> ANY_TYPE / MISSING_HOOK_IMPORT (warning)

SCORING:
    100 minus a fixed weight per issue, clamped to [0, 100].

AUTO-FIX:
    Only touches formatting and annotates disallowed imports; executable
    semantics never change. Applying it twice gives the same output.
"""
import re
from typing import Iterable, List, Optional, Sequence, Tuple

from faber.core.config import ValidationSettings
from faber.core.logging import log, log_result
from faber.core.types import (
    GeneratedFile,
    Severity,
    ValidationFix,
    ValidationIssue,
    ValidationResult,
)
from faber.extraction.extractor import (
    ENTRY_PATTERN,
    EXPORT_PATTERN,
    PLACEHOLDER_PATTERNS,
    is_ui_bearing,
)
from faber.utils.source import (
    balanced_end,
    is_script,
    is_typescript,
    mask_comments,
    mask_strings,
    position,
)
from faber.validation import rules


class CodeValidator:
    """
    Validates and sanitizes generated file sets.

    Holds only its settings; safe to share between concurrent requests.
    """

    def __init__(self, config: Optional[ValidationSettings] = None):
        self.config = config or ValidationSettings()

    # ─────────────────────────────────────────────────────────
    # Public API
    # ─────────────────────────────────────────────────────────

    def validate(self, files: Sequence[GeneratedFile], skip_type_check: bool = False) -> ValidationResult:
        if not files:
            issue = ValidationIssue("", 0, 0, "No files to validate", Severity.ERROR, "NO_FILES")
            return ValidationResult(errors=[issue], score=0)

        issues: List[ValidationIssue] = []
        suggestions: List[str] = []
        for file in files:
            if not is_script(file.path):
                continue
            issues.extend(self._check_file(file, skip_type_check))
            suggestions.extend(self._suggest(file, issues))

        errors = [i for i in issues if i.severity == Severity.ERROR]
        warnings = [i for i in issues if i.severity == Severity.WARNING]
        result = ValidationResult(
            errors=errors,
            warnings=warnings,
            score=self.score(issues),
            suggestions=list(dict.fromkeys(suggestions)),
        )

        log_result(
            "VALIDATE",
            result.is_valid,
            result.score,
            [f"{i.code} {i.file}:{i.line} {i.message}" for i in errors],
        )
        return result

    def score(self, issues: Iterable[ValidationIssue]) -> int:
        weights = self.config.weights
        penalty = sum(weights.get(i.code, self.config.default_weight) for i in issues)
        return max(0, min(100, 100 - penalty))

    def is_allowed_import(self, specifier: str) -> bool:
        if specifier.startswith(("./", "../")):
            return True
        for entry in self.config.allowed_imports:
            if entry.endswith("/"):
                if specifier.startswith(entry):
                    return True
            elif specifier == entry or specifier.startswith(entry + "/"):
                return True
        return False

    def auto_fix(self, files: Sequence[GeneratedFile]) -> List[GeneratedFile]:
        fixed, _ = self.auto_fix_with_report(files)
        return fixed

    def auto_fix_with_report(
        self, files: Sequence[GeneratedFile]
    ) -> Tuple[List[GeneratedFile], List[ValidationFix]]:
        """Apply safe fixes and describe each one that changed something."""
        fixed_files: List[GeneratedFile] = []
        fixes: List[ValidationFix] = []

        for file in files:
            content = file.content
            if is_script(file.path):
                formatted = format_source(content)
                if formatted != content:
                    fixes.append(ValidationFix(
                        file.path, "format",
                        "Normalized line endings, trailing whitespace and blank lines",
                    ))
                content, annotated = self._annotate_imports(formatted)
                for specifier in annotated:
                    fixes.append(ValidationFix(
                        file.path, "auto-import",
                        rules.import_annotation(specifier)[len(rules.ANNOTATION_PREFIX):].strip(),
                    ))
            fixed_files.append(GeneratedFile(path=file.path, content=content))

        if fixes:
            log("AUTOFIX", f"🔧 Applied {len(fixes)} fix(es) across {len(files)} file(s)")
        return fixed_files, fixes

    # ─────────────────────────────────────────────────────────
    # Per-file checks
    # ─────────────────────────────────────────────────────────

    def _check_file(self, file: GeneratedFile, skip_type_check: bool) -> List[ValidationIssue]:
        content = file.content
        code = mask_comments(content)
        issues: List[ValidationIssue] = []

        def add(offset: int, message: str, severity: Severity, code_tag: str) -> None:
            line, column = position(content, offset)
            issues.append(ValidationIssue(file.path, line, column, message, severity, code_tag))

        # Imports
        for offset, specifier in self._imports(code):
            if not self.is_allowed_import(specifier):
                add(offset, f'Import "{specifier}" is not on the allowlist', Severity.ERROR, "DISALLOWED_IMPORT")

        # Dangerous APIs
        for pattern, code_tag, severity, message in rules.DANGEROUS_PATTERNS:
            for match in pattern.finditer(code):
                add(match.start(), message, severity, code_tag)

        # Structure
        for pattern in PLACEHOLDER_PATTERNS:
            match = pattern.search(content)
            if match:
                add(match.start(), "Placeholder text left in generated code", Severity.ERROR, "PLACEHOLDER_CODE")
                break

        if not ENTRY_PATTERN.search(code):
            add(0, "No entry declaration (function, const or class) found", Severity.ERROR, "MISSING_ENTRY")
        if not EXPORT_PATTERN.search(code):
            add(len(content), "No export statement found", Severity.ERROR, "MISSING_EXPORT")

        for offset, name in self._components_without_return(code):
            add(offset, f"Component {name} never returns markup", Severity.ERROR, "MISSING_RETURN")

        balanced = mask_strings(code)
        for opener, closer, code_tag, label in (("{", "}", "UNBALANCED_BRACES", "braces"),
                                                ("(", ")", "UNBALANCED_PARENS", "parentheses")):
            offset = _imbalance(balanced, opener, closer)
            if offset is not None:
                add(offset, f"Unbalanced {label}", Severity.ERROR, code_tag)

        # Style
        seen_colors = set()
        for match in rules.HARDCODED_COLOR.finditer(code):
            if match.group(0) not in seen_colors:
                seen_colors.add(match.group(0))
                add(match.start(), f'Hardcoded colour class "{match.group(0)}"; prefer a theme token',
                    Severity.WARNING, "HARDCODED_COLOR")
        for match in rules.INLINE_STYLE.finditer(code):
            add(match.start(), "Inline style object; prefer utility classes", Severity.WARNING, "INLINE_STYLE")

        # Accessibility
        if is_ui_bearing(file.path) or "<" in code:
            issues.extend(self._check_accessibility(file.path, content, code))

        # Types
        if is_typescript(file.path) and not skip_type_check:
            for match in rules.ANY_TYPE.finditer(code):
                add(match.start(), "Explicit any type", Severity.WARNING, "ANY_TYPE")

            imported_hooks = set()
            for match in rules.REACT_NAMED_IMPORT.finditer(code):
                imported_hooks.update(name.strip().split(" as ")[-1] for name in match.group(1).split(","))
            reported = set()
            for match in rules.HOOK_CALL.finditer(code):
                hook = match.group(1)
                if hook not in imported_hooks and hook not in reported:
                    reported.add(hook)
                    add(match.start(), f"{hook} is used but not imported from react", Severity.WARNING, "MISSING_HOOK_IMPORT")

        return issues

    def _check_accessibility(self, path: str, content: str, code: str) -> List[ValidationIssue]:
        issues = []

        def add(offset: int, message: str, code_tag: str) -> None:
            line, column = position(content, offset)
            issues.append(ValidationIssue(path, line, column, message, Severity.WARNING, code_tag))

        for match in rules.IMG_TAG.finditer(code):
            if not rules.ALT_ATTR.search(match.group(1)):
                add(match.start(), "Image without alt text", "MISSING_ALT")

        for match in rules.BUTTON_TAG.finditer(code):
            attrs, inner = match.group(1), match.group(2) or ""
            visible = re.sub(r"<[^>]*>", "", inner)
            if not rules.LABEL_ATTRS.search(attrs) and not re.search(r"[A-Za-z0-9]", visible):
                add(match.start(), "Button without an accessible label", "MISSING_LABEL")

        for match in rules.INPUT_TAG.finditer(code):
            attrs = match.group(1)
            if not rules.INPUT_LABEL_ATTRS.search(attrs) and not rules.INPUT_EXEMPT_TYPES.search(attrs):
                add(match.start(), "Input without a label, placeholder or aria-label", "MISSING_LABEL")

        for match in rules.DIV_TAG.finditer(code):
            attrs = match.group(1)
            if rules.ONCLICK_ATTR.search(attrs) and not rules.ROLE_ATTR.search(attrs):
                add(match.start(), "Clickable div without a role; use a button", "NON_SEMANTIC_INTERACTIVE")

        return issues

    def _suggest(self, file: GeneratedFile, issues: List[ValidationIssue]) -> List[str]:
        content = file.content
        codes = {i.code for i in issues if i.file == file.path}
        suggestions = []
        if rules.CLASS_NAME.search(content) and not rules.RESPONSIVE_PREFIX.search(content):
            suggestions.append("Add responsive breakpoints (sm:, md:, lg:) for smaller screens")
        if is_typescript(file.path) and rules.PROPS_PARAM.search(content) and not rules.TYPE_DECLARATION.search(content):
            suggestions.append("Declare a props interface for typed components")
        if "HARDCODED_COLOR" in codes:
            suggestions.append("Prefer theme tokens such as bg-background or text-foreground over palette colours")
        if "NETWORK_ACCESS" in codes:
            suggestions.append("Network calls are blocked in the preview sandbox; use local state or mock data")
        return suggestions

    # ─────────────────────────────────────────────────────────
    # Helpers
    # ─────────────────────────────────────────────────────────

    @staticmethod
    def _imports(code: str) -> List[Tuple[int, str]]:
        found = []
        for pattern in rules.IMPORT_PATTERNS:
            for match in pattern.finditer(code):
                found.append((match.start(), match.group(1).strip()))
        return sorted(set(found))

    @staticmethod
    def _components_without_return(code: str) -> List[Tuple[int, str]]:
        missing = []
        for match in rules.COMPONENT_FUNCTION.finditer(code):
            params_end = balanced_end(code, match.end() - 1)
            if params_end is None:
                continue
            brace = code.find("{", params_end)
            if brace == -1:
                continue
            body_end = balanced_end(code, brace) or len(code)
            if not re.search(r"\breturn\b", code[brace:body_end]):
                missing.append((match.start(), match.group(1)))

        for match in rules.COMPONENT_ARROW.finditer(code):
            if code[match.end():match.end() + 1] != "{":
                continue  # expression body returns implicitly
            body_end = balanced_end(code, match.end()) or len(code)
            if not re.search(r"\breturn\b", code[match.end():body_end]):
                missing.append((match.start(), match.group(1)))
        return missing

    def _annotate_imports(self, content: str) -> Tuple[str, List[str]]:
        lines = content.split("\n")
        code = mask_comments(content)

        by_line = {}
        for offset, specifier in self._imports(code):
            if self.is_allowed_import(specifier):
                continue
            line_no, _ = position(content, offset)
            by_line.setdefault(line_no - 1, [])
            if specifier not in by_line[line_no - 1]:
                by_line[line_no - 1].append(specifier)

        annotated = []
        for index in sorted(by_line, reverse=True):
            indent = re.match(r"\s*", lines[index]).group(0)
            existing = set()
            above = index - 1
            while above >= 0 and lines[above].strip().startswith(rules.ANNOTATION_PREFIX):
                existing.add(lines[above].strip())
                above -= 1
            new = [
                indent + rules.import_annotation(s)
                for s in by_line[index]
                if rules.import_annotation(s) not in existing
            ]
            if new:
                lines[index:index] = new
                annotated.extend(s for s in by_line[index] if rules.import_annotation(s) not in existing)

        return "\n".join(lines), annotated


# ═══════════════════════════════════════════════════════════════════════════════
# FORMATTING
# ═══════════════════════════════════════════════════════════════════════════════

def format_source(content: str) -> str:
    """LF line endings, no trailing whitespace, at most one blank line, one final newline."""
    text = content.replace("\r\n", "\n").replace("\r", "\n")
    text = "\n".join(line.rstrip() for line in text.split("\n"))
    text = re.sub(r"\n{3,}", "\n\n", text)
    return text.strip("\n") + "\n"


def _imbalance(code: str, opener: str, closer: str) -> Optional[int]:
    """Offset where the bracket count first goes wrong, or None when balanced."""
    depth = 0
    for offset, ch in enumerate(code):
        if ch == opener:
            depth += 1
        elif ch == closer:
            depth -= 1
            if depth < 0:
                return offset
    return len(code) if depth else None
