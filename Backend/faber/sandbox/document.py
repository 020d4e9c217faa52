# faber/sandbox/document.py
"""
Preview document builder.

Assembles one self-contained HTML page that:
1. Installs interceptors that turn uncaught errors, unhandled rejections and
   failed resource loads into ERROR messages
2. Loads React, ReactDOM, Babel standalone and Tailwind from the CDN
3. Installs the compatibility shim
4. Transpiles the normalized source in-page (compile failures -> kind=compile)
5. Resolves the entry component or throws a descriptive error
6. Renders inside an error boundary and posts READY with the load time

The page talks to the host only through `window.__faberHost(message)`.
"""
import json
import re
from string import Template
from typing import List, Optional, Sequence, Tuple

from faber.core.config import PreviewSettings
from faber.core.types import GeneratedFile
from faber.sandbox.shim import scope_prelude, shim_script
from faber.utils.source import is_script


HOST_BINDING = "__faberHost"
NO_ENTRY_MESSAGE = "No entry component found: expected a default export or a component named App"
DEFAULT_EXPORT_NAME = "__FaberDefault"


# ═══════════════════════════════════════════════════════════════════════════════
# SOURCE NORMALIZATION
# ═══════════════════════════════════════════════════════════════════════════════

IMPORT_STATEMENT = re.compile(
    r"^[ \t]*import\s+(?:type\s+)?(?:[\w$*{}\s,]+?\s+from\s+)?['\"][^'\"\n]+['\"][ \t]*;?[ \t]*$",
    re.MULTILINE,
)
REEXPORT_STATEMENT = re.compile(
    r"^[ \t]*export\s+(?:type\s+)?(?:\*|\{[^}]*\})(?:\s*(?:as\s+[\w$]+\s+)?from\s+['\"][^'\"\n]+['\"])?[ \t]*;?[ \t]*$",
    re.MULTILINE,
)
DEFAULT_NAMED_DECL = re.compile(r"\bexport\s+default\s+((?:async\s+)?function\*?|class)\s+([A-Za-z_$][\w$]*)")
DEFAULT_ANON_DECL = re.compile(r"\bexport\s+default\s+((?:async\s+)?function\*?|class)(\s*[({])")
DEFAULT_IDENTIFIER = re.compile(r"^[ \t]*export\s+default\s+([A-Za-z_$][\w$]*)[ \t]*;?[ \t]*$", re.MULTILINE)
DEFAULT_EXPRESSION = re.compile(r"\bexport\s+default\s+")
NAMED_EXPORT = re.compile(
    r"\bexport\s+(?=(?:async\s+)?function\b|const\b|let\b|var\b|class\b|interface\b|type\b|enum\b|abstract\b)"
)


def normalize_source(content: str) -> Tuple[str, Optional[str]]:
    """
    Strip module syntax the page cannot load.

    Returns the normalized code and the name the default export is bound
    to, if the file has one.
    """
    code = IMPORT_STATEMENT.sub("", content)
    code = REEXPORT_STATEMENT.sub("", code)
    default_name: Optional[str] = None

    match = DEFAULT_NAMED_DECL.search(code)
    if match:
        default_name = match.group(2)
        code = code[:match.start()] + f"{match.group(1)} {match.group(2)}" + code[match.end():]
    else:
        match = DEFAULT_ANON_DECL.search(code)
        if match:
            default_name = DEFAULT_EXPORT_NAME
            code = (
                code[:match.start()]
                + f"{match.group(1)} {DEFAULT_EXPORT_NAME}{match.group(2)}"
                + code[match.end():]
            )
        else:
            match = DEFAULT_IDENTIFIER.search(code)
            if match:
                default_name = match.group(1)
                code = code[:match.start()] + code[match.end():]
            else:
                match = DEFAULT_EXPRESSION.search(code)
                if match:
                    default_name = DEFAULT_EXPORT_NAME
                    code = code[:match.start()] + f"const {DEFAULT_EXPORT_NAME} = " + code[match.end():]

    code = NAMED_EXPORT.sub("", code)
    return code.strip() + "\n", default_name


def select_entry(files: Sequence[GeneratedFile]) -> Optional[GeneratedFile]:
    """Prefer an App file, then the first UI file, then the first script."""
    scripts = [f for f in files if is_script(f.path)]
    for f in scripts:
        stem = f.path.rsplit("/", 1)[-1].split(".", 1)[0]
        if stem == "App":
            return f
    for f in scripts:
        if f.path.lower().endswith((".tsx", ".jsx")):
            return f
    return scripts[0] if scripts else None


def assemble_source(files: Sequence[GeneratedFile]) -> Tuple[str, List[str]]:
    """
    Concatenate scripts with the entry last.

    Returns the combined source and the entry candidates to try in order.
    """
    entry = select_entry(files)
    parts = []
    for f in files:
        if f is entry or not is_script(f.path):
            continue
        code, _ = normalize_source(f.content)
        parts.append(f"// {f.path}\n{code}")

    candidates = []
    if entry is not None:
        code, default_name = normalize_source(entry.content)
        parts.append(f"// {entry.path}\n{code}")
        if default_name:
            candidates.append(default_name)
    if "App" not in candidates:
        candidates.append("App")
    return "\n".join(parts), candidates


def entry_guard(candidates: Sequence[str]) -> str:
    checks = " || ".join(f"(typeof {name} !== 'undefined' && {name})" for name in candidates)
    return f"return {checks} || null;"


def _script_literal(value: str) -> str:
    """JSON string literal that cannot close the surrounding <script>."""
    return json.dumps(value).replace("</", "<\\/").replace("<!--", "<\\!--")


# ═══════════════════════════════════════════════════════════════════════════════
# DOCUMENT TEMPLATE
# ═══════════════════════════════════════════════════════════════════════════════

_DOCUMENT = Template("""<!DOCTYPE html>
<html lang="en">
<head>
<meta charset="UTF-8" />
<meta name="viewport" content="width=device-width, initial-scale=1.0" />
<title>Preview</title>
<script>
(function () {
  var failed = false;
  function post(message) {
    if (failed && message.type !== 'DEBUG') return;
    if (message.type === 'ERROR') failed = true;
    try { window.${binding}(message); } catch (e) {}
  }
  window.__faberPost = post;
  window.__faberStart = performance.now();
  post({ type: 'LOAD_START' });

  window.addEventListener('error', function (event) {
    var target = event.target;
    if (target && target !== window && (target.src || target.href)) {
      post({ type: 'ERROR', kind: 'resource', error: 'Failed to load resource: ' + (target.src || target.href) });
      return;
    }
    var error = event.error;
    post({
      type: 'ERROR',
      kind: 'runtime',
      error: event.message || String(error),
      details: { line: event.lineno, column: event.colno, stack: error && error.stack }
    });
  }, true);

  window.addEventListener('unhandledrejection', function (event) {
    var reason = event.reason;
    post({
      type: 'ERROR',
      kind: 'rejection',
      error: 'Promise Rejection: ' + (reason && reason.message ? reason.message : String(reason)),
      details: { stack: reason && reason.stack }
    });
  });

  ['log', 'info', 'warn', 'error'].forEach(function (level) {
    var original = console[level];
    console[level] = function () {
      var args = Array.prototype.slice.call(arguments);
      post({ type: 'DEBUG', debugType: 'console.' + level, message: args.map(String).join(' ') });
      original.apply(console, args);
    };
  });
})();
</script>
<script src="${tailwind_url}"></script>
<script>
if (window.tailwind) {
  tailwind.config = {
    theme: {
      extend: {
        colors: {
          border: 'hsl(var(--border))',
          input: 'hsl(var(--input))',
          ring: 'hsl(var(--ring))',
          background: 'hsl(var(--background))',
          foreground: 'hsl(var(--foreground))',
          primary: { DEFAULT: 'hsl(var(--primary))', foreground: 'hsl(var(--primary-foreground))' },
          secondary: { DEFAULT: 'hsl(var(--secondary))', foreground: 'hsl(var(--secondary-foreground))' },
          destructive: { DEFAULT: 'hsl(var(--destructive))', foreground: 'hsl(var(--destructive-foreground))' },
          muted: { DEFAULT: 'hsl(var(--muted))', foreground: 'hsl(var(--muted-foreground))' },
          accent: { DEFAULT: 'hsl(var(--accent))', foreground: 'hsl(var(--accent-foreground))' },
          card: { DEFAULT: 'hsl(var(--card))', foreground: 'hsl(var(--card-foreground))' }
        }
      }
    }
  };
}
</script>
<style>
:root {
  --background: 0 0% 100%; --foreground: 222 47% 11%;
  --card: 0 0% 100%; --card-foreground: 222 47% 11%;
  --primary: 222 47% 11%; --primary-foreground: 210 40% 98%;
  --secondary: 210 40% 96%; --secondary-foreground: 222 47% 11%;
  --muted: 210 40% 96%; --muted-foreground: 215 16% 47%;
  --accent: 210 40% 96%; --accent-foreground: 222 47% 11%;
  --destructive: 0 84% 60%; --destructive-foreground: 210 40% 98%;
  --border: 214 32% 91%; --input: 214 32% 91%; --ring: 222 84% 5%;
}
</style>
<style type="text/tailwindcss">
${css}
</style>
<script src="${react_url}" crossorigin></script>
<script src="${react_dom_url}" crossorigin></script>
<script src="${babel_url}"></script>
</head>
<body>
<div id="root"></div>
<script>
if (window.React) {
${shim}
}
</script>
<script>
(function () {
  var post = window.__faberPost;
  if (typeof React === 'undefined' || typeof ReactDOM === 'undefined' || typeof Babel === 'undefined') {
    post({ type: 'ERROR', kind: 'resource', error: 'Preview runtime (React, ReactDOM or Babel) failed to load' });
    return;
  }

  var compiled;
  try {
    compiled = Babel.transform(${source}, {
      filename: 'App.tsx',
      sourceType: 'script',
      presets: [['typescript', { isTSX: true, allExtensions: true }], ['react', { runtime: 'classic' }]]
    }).code;
  } catch (err) {
    post({
      type: 'ERROR',
      kind: 'compile',
      error: err.message || String(err),
      details: { line: err.loc && err.loc.line, column: err.loc && err.loc.column, stack: err.stack }
    });
    return;
  }

  var Entry;
  try {
    var body = ${prelude} + '\\nreturn (function () {\\n' + compiled + '\\n' + ${guard} + '\\n})();';
    Entry = new Function('React', 'ReactDOM', '__shim', body)(React, ReactDOM, window.__faberShim);
    if (!Entry) throw new Error(${no_entry});
  } catch (err) {
    post({ type: 'ERROR', kind: 'runtime', error: err.message || String(err), details: { stack: err.stack } });
    return;
  }

  class Boundary extends React.Component {
    constructor(props) {
      super(props);
      this.state = { failed: false };
    }
    static getDerivedStateFromError() {
      return { failed: true };
    }
    componentDidCatch(error, info) {
      post({
        type: 'ERROR',
        kind: 'runtime',
        error: (error && error.message) || String(error),
        details: { stack: error && error.stack, componentStack: info && info.componentStack }
      });
    }
    render() {
      return this.state.failed ? null : this.props.children;
    }
  }

  try {
    var root = ReactDOM.createRoot(document.getElementById('root'));
    ReactDOM.flushSync(function () {
      root.render(React.createElement(Boundary, null, React.createElement(Entry)));
    });
  } catch (err) {
    post({ type: 'ERROR', kind: 'runtime', error: err.message || String(err), details: { stack: err.stack } });
    return;
  }

  requestAnimationFrame(function () {
    setTimeout(function () {
      post({ type: 'READY', loadTimeMs: Math.max(1, Math.round(performance.now() - window.__faberStart)) });
    }, 0);
  });
})();
</script>
</body>
</html>
""")


def build_preview_document(files: Sequence[GeneratedFile], config: Optional[PreviewSettings] = None) -> str:
    """Render the self-contained preview page for a file set."""
    config = config or PreviewSettings()
    source, candidates = assemble_source(files)
    css = "\n".join(f.content for f in files if f.path.lower().endswith(".css"))

    return _DOCUMENT.substitute(
        binding=HOST_BINDING,
        tailwind_url=config.tailwind_url,
        react_url=config.react_url,
        react_dom_url=config.react_dom_url,
        babel_url=config.babel_url,
        css=re.sub(r"</style", r"<\\/style", css, flags=re.IGNORECASE),
        shim=shim_script(),
        source=_script_literal(source),
        prelude=_script_literal(scope_prelude()),
        guard=_script_literal(entry_guard(candidates)),
        no_entry=_script_literal(NO_ENTRY_MESSAGE),
    )
