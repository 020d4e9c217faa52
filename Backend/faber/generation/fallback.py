# faber/generation/fallback.py
"""
Deterministic template fallback - the last rung of the ladder.

Pure and offline: the same prompt always produces the same component.
The output uses theme tokens only, labels every control, and imports
its hooks from react, so it passes the validator without errors.
"""
import json
import re
from typing import Dict, List

from faber.core.types import ExtractionResult, GeneratedFile
from faber.extraction.extractor import PLACEHOLDER_PATTERNS


FALLBACK_PATH = "src/App.tsx"
FALLBACK_METHOD = "intelligent_fallback"
FALLBACK_EXPLANATION = "Generated using intelligent template fallback"
DEFAULT_COMPONENT_NAME = "GeneratedApp"
# Globals the preview document relies on
RESERVED_NAMES = {"React", "Reactdom", "Babel", "Item", "Window", "Document"}

TEMPLATE_KEYWORDS = [
    ("dashboard", ("dashboard", "admin")),
    ("ecommerce", ("shop", "ecommerce", "store")),
    ("blog", ("blog", "article")),
    ("portfolio", ("portfolio", "showcase")),
]

FEATURE_KEYWORDS = ("form", "table", "search", "modal", "navigation", "chart")

TEMPLATES: Dict[str, Dict] = {
    "dashboard": {
        "heading": "Key metrics",
        "action": "View details",
        "items": [
            {"id": 1, "title": "Active users", "description": "Unique users signed in during the last 7 days.", "meta": "2,418 users"},
            {"id": 2, "title": "Revenue", "description": "Gross revenue across all plans this month.", "meta": "$48,920"},
            {"id": 3, "title": "Open tickets", "description": "Support requests waiting for a first reply.", "meta": "37 tickets"},
        ],
    },
    "ecommerce": {
        "heading": "Featured products",
        "action": "Add to cart",
        "items": [
            {"id": 1, "title": "Everyday Backpack", "description": "Water resistant, 20L, padded laptop sleeve.", "meta": "$79.00"},
            {"id": 2, "title": "Ceramic Pour-Over Set", "description": "Hand glazed dripper with two matching cups.", "meta": "$42.00"},
            {"id": 3, "title": "Merino Crew Sweater", "description": "Lightweight knit for all-season layering.", "meta": "$95.00"},
        ],
    },
    "blog": {
        "heading": "Latest articles",
        "action": "Read article",
        "items": [
            {"id": 1, "title": "Designing for small screens first", "description": "Why mobile-first layouts age better than desktop ports.", "meta": "6 min read"},
            {"id": 2, "title": "A practical guide to color tokens", "description": "Naming colors by purpose keeps themes consistent.", "meta": "4 min read"},
            {"id": 3, "title": "Shipping accessible forms", "description": "Labels, errors and focus order that work for everyone.", "meta": "8 min read"},
        ],
    },
    "portfolio": {
        "heading": "Selected work",
        "action": "View project",
        "items": [
            {"id": 1, "title": "Harbor Banking App", "description": "Mobile banking redesign focused on quick transfers.", "meta": "Product design"},
            {"id": 2, "title": "Lumen Brand System", "description": "Identity and component library for a lighting startup.", "meta": "Branding"},
            {"id": 3, "title": "Trailhead Field Guide", "description": "Offline-first hiking companion with route notes.", "meta": "Web app"},
        ],
    },
    "default": {
        "heading": "Highlights",
        "action": "Learn more",
        "items": [
            {"id": 1, "title": "Getting started", "description": "A quick tour of the main features.", "meta": "Guide"},
            {"id": 2, "title": "Working together", "description": "Share progress and keep everyone in sync.", "meta": "Collaboration"},
            {"id": 3, "title": "Staying organized", "description": "Group related work and find it again fast.", "meta": "Productivity"},
        ],
    },
}

NAV_SECTIONS = ["Overview", "Details", "Contact"]
CHART_BARS = [
    {"label": "Mon", "heightClass": "h-12"},
    {"label": "Tue", "heightClass": "h-20"},
    {"label": "Wed", "heightClass": "h-16"},
    {"label": "Thu", "heightClass": "h-28"},
    {"label": "Fri", "heightClass": "h-24"},
    {"label": "Sat", "heightClass": "h-32"},
    {"label": "Sun", "heightClass": "h-20"},
]

SUMMARY_LIMIT = 100


# ═══════════════════════════════════════════════════════════════════════════════
# PROMPT ANALYSIS
# ═══════════════════════════════════════════════════════════════════════════════

def select_template(prompt: str) -> str:
    lowered = prompt.lower()
    for name, keywords in TEMPLATE_KEYWORDS:
        if any(keyword in lowered for keyword in keywords):
            return name
    return "default"


def component_name(prompt: str) -> str:
    """First three words in TitleCase, reduced to a valid identifier."""
    words = prompt.split()[:3]
    name = re.sub(r"[^A-Za-z0-9]", "", "".join(w[:1].upper() + w[1:].lower() for w in words))
    name = name.lstrip("0123456789")
    name = name[:1].upper() + name[1:]
    if name in RESERVED_NAMES:
        name += "App"
    return name or DEFAULT_COMPONENT_NAME


def detect_features(prompt: str) -> List[str]:
    lowered = prompt.lower()
    return [feature for feature in FEATURE_KEYWORDS if feature in lowered]


def summarize_prompt(prompt: str) -> str:
    """Prompt text that is safe to embed as a display string."""
    text = re.sub(r"[^A-Za-z0-9 ,.!?'-]", " ", prompt)
    for pattern in PLACEHOLDER_PATTERNS:
        text = pattern.sub(" ", text)
    text = re.sub(r"\s+", " ", text).strip()
    if len(text) > SUMMARY_LIMIT:
        text = text[:SUMMARY_LIMIT].rstrip() + "..."
    return text or "Your generated application"


# ═══════════════════════════════════════════════════════════════════════════════
# SECTIONS
# ═══════════════════════════════════════════════════════════════════════════════

_NAV = """
      <nav aria-label="Main navigation" className="bg-card border-b border-border">
        <div className="max-w-6xl mx-auto px-6 flex gap-2 overflow-x-auto">
          {NAV_SECTIONS.map((section) => (
            <button
              key={section}
              type="button"
              aria-current={activeSection === section ? 'page' : undefined}
              onClick={() => setActiveSection(section)}
              className={activeSection === section ? 'px-4 py-3 font-medium text-primary border-b-2 border-primary' : 'px-4 py-3 text-muted-foreground hover:text-foreground'}
            >
              {section}
            </button>
          ))}
        </div>
      </nav>"""

_SEARCH = """
        <div className="max-w-md">
          <input
            type="search"
            aria-label="Search items"
            placeholder="Search..."
            value={query}
            onChange={(event) => setQuery(event.target.value)}
            className="w-full p-3 border border-input rounded-md bg-background text-foreground focus:ring-2 focus:ring-ring"
          />
        </div>"""

_TABLE = """
        <section aria-label="Details table">
          <h2 className="text-2xl font-semibold mb-4">Details</h2>
          <div className="overflow-x-auto border border-border rounded-lg">
            <table className="w-full text-left text-sm">
              <thead className="bg-muted">
                <tr>
                  <th scope="col" className="p-3 font-medium">Name</th>
                  <th scope="col" className="p-3 font-medium">Summary</th>
                  <th scope="col" className="p-3 font-medium">Info</th>
                </tr>
              </thead>
              <tbody>
                {visibleItems.map((item) => (
                  <tr key={item.id} className="border-t border-border">
                    <td className="p-3 font-medium">{item.title}</td>
                    <td className="p-3 text-muted-foreground">{item.description}</td>
                    <td className="p-3">{item.meta}</td>
                  </tr>
                ))}
              </tbody>
            </table>
          </div>
        </section>"""

_CHART = """
        <section aria-label="Weekly activity">
          <h2 className="text-2xl font-semibold mb-4">Weekly activity</h2>
          <div className="flex items-end gap-3 h-48 bg-card border border-border rounded-lg p-6">
            {CHART_BARS.map((bar) => (
              <div key={bar.label} className="flex-1 flex flex-col items-center gap-2">
                <div className={'w-full bg-primary rounded-t-md ' + bar.heightClass} />
                <span className="text-xs text-muted-foreground">{bar.label}</span>
              </div>
            ))}
          </div>
        </section>"""

_FORM = """
        <section aria-label="Contact form" className="bg-card border border-border rounded-lg p-6">
          <h2 className="text-2xl font-semibold mb-4">Get in touch</h2>
          {submitted ? (
            <p role="status" className="text-primary font-medium">Thanks {name || 'there'}, we will reply soon.</p>
          ) : (
            <form
              className="space-y-4"
              onSubmit={(event) => {
                event.preventDefault();
                setSubmitted(true);
              }}
            >
              <input
                type="text"
                aria-label="Your name"
                placeholder="Your name"
                value={name}
                onChange={(event) => setName(event.target.value)}
                className="w-full p-3 border border-input rounded-md bg-background text-foreground"
              />
              <input
                type="email"
                aria-label="Your email"
                placeholder="Your email"
                className="w-full p-3 border border-input rounded-md bg-background text-foreground"
              />
              <textarea
                aria-label="Your message"
                placeholder="Your message"
                rows={4}
                className="w-full p-3 border border-input rounded-md bg-background text-foreground"
              />
              <button
                type="submit"
                className="bg-primary text-primary-foreground px-6 py-3 rounded-md hover:bg-primary/90 transition-colors"
              >
                Send message
              </button>
            </form>
          )}
        </section>"""

_MODAL = """
      {selectedItem && (
        <div
          role="dialog"
          aria-modal="true"
          aria-label={selectedItem.title}
          className="fixed inset-0 bg-background/80 flex items-center justify-center p-6"
        >
          <div className="bg-card border border-border rounded-lg p-6 max-w-md w-full space-y-4 shadow-lg">
            <h2 className="text-xl font-semibold">{selectedItem.title}</h2>
            <p className="text-muted-foreground">{selectedItem.description}</p>
            <p className="text-sm">{selectedItem.meta}</p>
            <button
              type="button"
              onClick={() => setSelectedId(null)}
              className="bg-primary text-primary-foreground px-4 py-2 rounded-md hover:bg-primary/90 transition-colors"
            >
              Close
            </button>
          </div>
        </div>
      )}"""

_SELECTION_STATUS = """
        {selectedItem && (
          <p role="status" className="text-sm text-muted-foreground">
            Selected: <span className="font-medium text-foreground">{selectedItem.title}</span>
          </p>
        )}"""

_COMPONENT = """import React, { __HOOKS__ } from 'react';

interface Item {
  id: number;
  title: string;
  description: string;
  meta: string;
}

const ITEMS: Item[] = __ITEMS__;
__CONSTANTS__
const SUMMARY = __SUMMARY__;

export default function __NAME__() {
__STATE__
  const selectedItem = ITEMS.find((item) => item.id === selectedId);

  return (
    <div className="min-h-screen bg-background text-foreground">
      <header className="bg-card border-b border-border p-6">
        <div className="max-w-6xl mx-auto">
          <h1 className="text-3xl font-bold mb-2">__TITLE__</h1>
          <p className="text-muted-foreground">{SUMMARY}</p>
        </div>
      </header>
__NAV__
      <main className="max-w-6xl mx-auto p-6 space-y-12">
__SEARCH__
        <section aria-label="__HEADING__">
          <h2 className="text-2xl font-semibold mb-4">__HEADING__</h2>
          <div className="grid grid-cols-1 md:grid-cols-2 lg:grid-cols-3 gap-6">
            {visibleItems.map((item) => (
              <article
                key={item.id}
                className="bg-card border border-border rounded-lg p-6 hover:shadow-lg transition-all duration-200"
              >
                <p className="text-sm text-muted-foreground mb-1">{item.meta}</p>
                <h3 className="text-lg font-semibold mb-2">{item.title}</h3>
                <p className="text-muted-foreground mb-4">{item.description}</p>
                <button
                  type="button"
                  onClick={() => setSelectedId(item.id)}
                  className="bg-primary text-primary-foreground px-4 py-2 rounded-md hover:bg-primary/90 transition-colors"
                >
                  __ACTION__
                </button>
              </article>
            ))}
            {visibleItems.length === 0 && (
              <p className="text-muted-foreground">Nothing matches your search.</p>
            )}
          </div>
        </section>
__SECTIONS__
      </main>
__MODAL__
    </div>
  );
}
"""


def _state_lines(features: List[str]) -> List[str]:
    lines = ["  const [selectedId, setSelectedId] = useState<number | null>(null);"]
    if "navigation" in features:
        lines.append("  const [activeSection, setActiveSection] = useState(NAV_SECTIONS[0]);")
    if "search" in features:
        lines.append("  const [query, setQuery] = useState('');")
    if "form" in features:
        lines.append("  const [name, setName] = useState('');")
        lines.append("  const [submitted, setSubmitted] = useState(false);")
    if "search" in features:
        lines.append(
            "  const visibleItems = useMemo(\n"
            "    () => ITEMS.filter((item) => item.title.toLowerCase().includes(query.trim().toLowerCase())),\n"
            "    [query]\n"
            "  );"
        )
    else:
        lines.append("  const visibleItems = ITEMS;")
    return lines


def _constants(features: List[str]) -> str:
    constants = []
    if "navigation" in features:
        constants.append(f"const NAV_SECTIONS = {json.dumps(NAV_SECTIONS)};")
    if "chart" in features:
        constants.append(f"const CHART_BARS = {json.dumps(CHART_BARS, indent=2)};")
    return ("\n" + "\n".join(constants) + "\n") if constants else ""


def render_component(prompt: str) -> str:
    template = TEMPLATES[select_template(prompt)]
    features = detect_features(prompt)
    name = component_name(prompt)

    hooks = ["useState"] + (["useMemo"] if "search" in features else [])
    sections = [
        block for feature, block in (("table", _TABLE), ("chart", _CHART), ("form", _FORM))
        if feature in features
    ]
    if "modal" not in features:
        sections.insert(0, _SELECTION_STATUS)

    replacements = {
        "__HOOKS__": ", ".join(hooks),
        "__ITEMS__": json.dumps(template["items"], indent=2),
        "__CONSTANTS__": _constants(features),
        "__SUMMARY__": json.dumps(summarize_prompt(prompt)),
        "__NAME__": name,
        "__STATE__": "\n".join(_state_lines(features)),
        "__TITLE__": name,
        "__NAV__": _NAV if "navigation" in features else "",
        "__SEARCH__": _SEARCH if "search" in features else "",
        "__HEADING__": template["heading"],
        "__ACTION__": template["action"],
        "__SECTIONS__": "".join(sections),
        "__MODAL__": _MODAL if "modal" in features else "",
    }
    source = _COMPONENT
    for marker, value in replacements.items():
        source = source.replace(marker, value)
    # Drop blank lines left by empty markers
    return re.sub(r"\n{3,}", "\n\n", source)


def synthesize_fallback(prompt: str) -> ExtractionResult:
    """Always returns a renderable single-file result."""
    return ExtractionResult(
        files=(GeneratedFile(path=FALLBACK_PATH, content=render_component(prompt)),),
        has_valid_code=True,
        method=FALLBACK_METHOD,
        explanation=FALLBACK_EXPLANATION,
    )
