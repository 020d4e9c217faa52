# faber/sandbox/shim.py
"""
Compatibility shim - stand-ins for the UI primitives and icons that
generated code usually imports from a component library.

The palette is fixed and documented here; the preview document installs
it as `window.__faberShim` and binds every name in scope before the
generated source runs.
"""
import json
from typing import Dict, List, Tuple


SHIM_PRIMITIVES: Tuple[str, ...] = (
    "Button",
    "Card",
    "CardHeader",
    "CardTitle",
    "CardDescription",
    "CardContent",
    "CardFooter",
    "Input",
    "Textarea",
    "Label",
    "Badge",
    "Progress",
    "Separator",
    "cn",
)

# Icon name -> SVG path data on a 24x24 stroke grid
ICON_PATHS: Dict[str, List[str]] = {
    "Heart": ["M19 14c1.5-1.5 3-3.2 3-5.5A5.5 5.5 0 0 0 16.5 3c-1.8 0-3 .5-4.5 2-1.5-1.5-2.7-2-4.5-2A5.5 5.5 0 0 0 2 8.5c0 2.3 1.5 4 3 5.5l7 7z"],
    "Star": ["M12 2l3.1 6.3 6.9 1-5 4.9 1.2 6.8-6.2-3.2-6.2 3.2 1.2-6.8-5-4.9 6.9-1z"],
    "User": ["M19 21v-2a4 4 0 0 0-4-4H9a4 4 0 0 0-4 4v2", "M12 11a4 4 0 1 0 0-8 4 4 0 0 0 0 8z"],
    "Settings": ["M12 15a3 3 0 1 0 0-6 3 3 0 0 0 0 6z", "M12 2v3M12 19v3M4.2 4.2l2.1 2.1M17.7 17.7l2.1 2.1M2 12h3M19 12h3M4.2 19.8l2.1-2.1M17.7 6.3l2.1-2.1"],
    "Check": ["M20 6 9 17l-5-5"],
    "Plus": ["M12 5v14M5 12h14"],
    "Minus": ["M5 12h14"],
    "Trash2": ["M3 6h18", "M19 6v14a2 2 0 0 1-2 2H7a2 2 0 0 1-2-2V6", "M8 6V4a2 2 0 0 1 2-2h4a2 2 0 0 1 2 2v2", "M10 11v6M14 11v6"],
    "ShoppingCart": ["M6 6h15l-1.5 9h-12z", "M6 6 5 3H2", "M9 20h.01M18 20h.01"],
    "Calendar": ["M3 5h18v16H3z", "M16 3v4M8 3v4M3 10h18"],
    "Search": ["M11 19a8 8 0 1 0 0-16 8 8 0 0 0 0 16z", "m21 21-4.3-4.3"],
    "Menu": ["M4 6h16M4 12h16M4 18h16"],
    "X": ["M18 6 6 18M6 6l12 12"],
    "ChevronRight": ["m9 18 6-6-6-6"],
    "ArrowRight": ["M5 12h14M12 5l7 7-7 7"],
    "Mail": ["M3 5h18v14H3z", "m3 7 9 6 9-6"],
    "Home": ["M3 10l9-7 9 7v11H3z", "M9 21v-6h6v6"],
    "Bell": ["M6 8a6 6 0 0 1 12 0c0 7 3 9 3 9H3s3-2 3-9", "M10.3 21a1.9 1.9 0 0 0 3.4 0"],
}

SHIM_ICONS: Tuple[str, ...] = tuple(ICON_PATHS)

REACT_HOOKS: Tuple[str, ...] = (
    "useState",
    "useEffect",
    "useMemo",
    "useCallback",
    "useRef",
    "useReducer",
    "useContext",
    "useLayoutEffect",
    "useId",
    "Fragment",
    "createContext",
    "forwardRef",
    "memo",
)


_PRIMITIVES_JS = """
(function () {
  var h = React.createElement;

  function cn() {
    return Array.prototype.filter.call(arguments, Boolean).join(' ');
  }

  function omit(props, keys) {
    var rest = Object.assign({}, props);
    keys.forEach(function (k) { delete rest[k]; });
    return rest;
  }

  function styled(tag, base, name) {
    var C = React.forwardRef(function (props, ref) {
      var rest = omit(props, []);
      rest.ref = ref;
      rest.className = cn(base, props.className);
      return h(tag, rest);
    });
    C.displayName = name;
    return C;
  }

  var buttonVariants = {
    default: 'bg-primary text-primary-foreground hover:bg-primary/90',
    secondary: 'bg-secondary text-secondary-foreground hover:bg-secondary/80',
    outline: 'border border-input bg-background hover:bg-accent hover:text-accent-foreground',
    ghost: 'hover:bg-accent hover:text-accent-foreground',
    destructive: 'bg-destructive text-destructive-foreground hover:bg-destructive/90',
    link: 'text-primary underline-offset-4 hover:underline'
  };
  var buttonSizes = { default: 'h-10 px-4 py-2', sm: 'h-9 px-3', lg: 'h-11 px-8', icon: 'h-10 w-10' };

  var Button = React.forwardRef(function (props, ref) {
    var rest = omit(props, ['variant', 'size', 'asChild']);
    rest.ref = ref;
    rest.className = cn(
      'inline-flex items-center justify-center gap-2 rounded-md text-sm font-medium transition-colors disabled:opacity-50',
      buttonVariants[props.variant] || buttonVariants.default,
      buttonSizes[props.size] || buttonSizes.default,
      props.className
    );
    return h('button', rest);
  });
  Button.displayName = 'Button';

  var badgeVariants = {
    default: 'bg-primary text-primary-foreground',
    secondary: 'bg-secondary text-secondary-foreground',
    outline: 'border border-border text-foreground',
    destructive: 'bg-destructive text-destructive-foreground'
  };

  function Badge(props) {
    var rest = omit(props, ['variant']);
    rest.className = cn(
      'inline-flex items-center rounded-full px-2.5 py-0.5 text-xs font-semibold',
      badgeVariants[props.variant] || badgeVariants.default,
      props.className
    );
    return h('span', rest);
  }

  function Progress(props) {
    var value = Math.max(0, Math.min(100, Number(props.value) || 0));
    return h('div', {
      role: 'progressbar',
      'aria-valuenow': value,
      'aria-valuemin': 0,
      'aria-valuemax': 100,
      className: cn('relative h-4 w-full overflow-hidden rounded-full bg-secondary', props.className)
    }, h('div', { className: 'h-full bg-primary transition-all', style: { width: value + '%' } }));
  }

  function Separator(props) {
    var vertical = props.orientation === 'vertical';
    return h('div', {
      role: 'separator',
      className: cn('shrink-0 bg-border', vertical ? 'h-full w-px' : 'h-px w-full', props.className)
    });
  }

  function icon(name, paths) {
    var C = function (props) {
      var size = props.size || 24;
      return h('svg', {
        xmlns: 'http://www.w3.org/2000/svg',
        width: size,
        height: size,
        viewBox: '0 0 24 24',
        fill: 'none',
        stroke: props.color || 'currentColor',
        strokeWidth: props.strokeWidth || 2,
        strokeLinecap: 'round',
        strokeLinejoin: 'round',
        className: props.className,
        'aria-hidden': 'true'
      }, paths.map(function (d, i) { return h('path', { key: i, d: d }); }));
    };
    C.displayName = name;
    return C;
  }

  var shim = {
    cn: cn,
    Button: Button,
    Card: styled('div', 'rounded-lg border border-border bg-card text-card-foreground shadow-sm', 'Card'),
    CardHeader: styled('div', 'flex flex-col space-y-1.5 p-6', 'CardHeader'),
    CardTitle: styled('h3', 'text-2xl font-semibold leading-none tracking-tight', 'CardTitle'),
    CardDescription: styled('p', 'text-sm text-muted-foreground', 'CardDescription'),
    CardContent: styled('div', 'p-6 pt-0', 'CardContent'),
    CardFooter: styled('div', 'flex items-center p-6 pt-0', 'CardFooter'),
    Input: styled('input', 'flex h-10 w-full rounded-md border border-input bg-background px-3 py-2 text-sm', 'Input'),
    Textarea: styled('textarea', 'flex min-h-[80px] w-full rounded-md border border-input bg-background px-3 py-2 text-sm', 'Textarea'),
    Label: styled('label', 'text-sm font-medium leading-none', 'Label'),
    Badge: Badge,
    Progress: Progress,
    Separator: Separator
  };

  var icons = __ICONS__;
  Object.keys(icons).forEach(function (name) { shim[name] = icon(name, icons[name]); });

  window.__faberShim = shim;
})();
"""


def shim_script() -> str:
    """JavaScript that installs the palette on `window.__faberShim`."""
    return _PRIMITIVES_JS.replace("__ICONS__", json.dumps(ICON_PATHS))


def scope_prelude() -> str:
    """
    `var` bindings for hooks and shim names, evaluated in the scope that
    encloses the generated source so its own declarations can shadow them.
    """
    hooks = ", ".join(f"{name} = React.{name}" for name in REACT_HOOKS)
    palette = ", ".join(f"{name} = __shim.{name}" for name in SHIM_PRIMITIVES + SHIM_ICONS)
    return f"var {hooks};\nvar {palette};"
