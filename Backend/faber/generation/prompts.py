# faber/generation/prompts.py
"""
Prompts for the generation ladder.
"""
from typing import Any, Dict, Optional, Sequence


CODE_GENERATION_SYSTEM_PROMPT = """You are an expert senior frontend engineer.

You WRITE complete, working React UI code.

════════════════════════════════════════════════════════════
CODE RULES
════════════════════════════════════════════════════════════
1. Always generate complete, working code. No placeholders or unfinished sections.
2. Functional components and hooks only. TypeScript preferred.
3. Responsive, mobile-first layout with Tailwind CSS.
4. Realistic sample data, never lorem ipsum.
5. Accessible markup: alt text, labels, semantic interactive elements.
6. Only import from: react, lucide-react, clsx, tailwind-merge and relative paths.
7. Export the main component as default, named App when possible.

════════════════════════════════════════════════════════════
DESIGN TOKENS
════════════════════════════════════════════════════════════
- Colors: bg-background, text-foreground, bg-primary, text-primary-foreground
- Surfaces: bg-card, border-border, shadow-sm
- Interaction: hover:bg-accent, focus:ring-2, focus:ring-ring
- Never hardcode hex colors or inline styles

════════════════════════════════════════════════════════════
OUTPUT CONTRACT
════════════════════════════════════════════════════════════
Respond with valid JSON in exactly this shape:
{
  "files": [{"path": "src/App.tsx", "content": "<complete component source>"}],
  "explanation": "One sentence describing what was built",
  "dependencies": ["react"]
}
"""

RETRY_SYSTEM_PROMPT = "Generate only working React code. No explanations."

REPAIR_SYSTEM_PROMPT = CODE_GENERATION_SYSTEM_PROMPT


COMPLEXITY_GUIDES = {
    "simple": "Create a clean, minimal implementation with basic functionality",
    "medium": "Include interactive features, state management, and responsive design",
    "complex": "Implement advanced features, animations, local persistence, and thorough error handling",
}

STYLE_GUIDES = {
    "modern": "Use gradients, shadows, rounded corners, and smooth transitions",
    "minimal": "Clean lines, generous whitespace, subtle colors, simple typography",
    "corporate": "Professional appearance, structured layouts, conservative colors",
    "creative": "Bold colors, unusual layouts, experimental design elements",
}

CONTEXT_PREVIEW_CHARS = 200


def _context_section(context: Dict[str, Any]) -> str:
    files: Sequence[Dict[str, str]] = context.get("files") or []
    existing = "\n".join(
        f"{f.get('path')}: {(f.get('content') or '')[:CONTEXT_PREVIEW_CHARS]}..." for f in files
    ) or "No existing files"
    return (
        "## Project Context\n"
        f"Existing files:\n{existing}\n\n"
        "## Requirements\n"
        "- Keep consistency with existing code patterns\n"
        "- Reuse the same design tokens and styling approach\n"
        "- Build on existing components where possible"
    )


def build_enhanced_prompt(
    prompt: str,
    context: Optional[Dict[str, Any]] = None,
    complexity: Optional[str] = None,
    style: Optional[str] = None,
) -> str:
    """
    Layer project context, complexity and style guidance onto a user prompt.

    Unknown complexity or style values are ignored.
    """
    sections = [prompt]
    if context:
        sections.append(_context_section(context))
    if complexity in COMPLEXITY_GUIDES:
        sections.append(f"## Complexity Level: {complexity}\n{COMPLEXITY_GUIDES[complexity]}")
    if style in STYLE_GUIDES:
        sections.append(f"## Design Style: {style}\n{STYLE_GUIDES[style]}")
    return "\n\n".join(sections)


def build_retry_prompt(prompt: str, failure: Optional[str] = None) -> str:
    simplified = f"Create a React component for: {prompt}. Use TypeScript and Tailwind CSS. Return only working code."
    if failure:
        simplified += f"\n\nThe previous attempt failed: {failure}. Avoid repeating that problem."
    return simplified


def build_repair_prompt(prompt: str, error: str, kind: Optional[str] = None) -> str:
    """Prompt used when a generated component failed inside the preview sandbox."""
    label = f"{kind} error" if kind else "error"
    return (
        f"{prompt}\n\n"
        "## Previous Preview Failure\n"
        f"The last version of this component failed to render with a {label}:\n"
        f"{error}\n\n"
        "Regenerate the complete component so it renders without this failure."
    )
