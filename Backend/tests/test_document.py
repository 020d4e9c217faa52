# tests/test_document.py
"""
Preview document assembly.
"""
import json
import re

from faber.core.config import PreviewSettings
from faber.core.types import GeneratedFile
from faber.sandbox.document import (
    DEFAULT_EXPORT_NAME,
    HOST_BINDING,
    NO_ENTRY_MESSAGE,
    assemble_source,
    build_preview_document,
    normalize_source,
    select_entry,
)
from faber.sandbox.shim import SHIM_ICONS, SHIM_PRIMITIVES, scope_prelude, shim_script


def test_named_default_export():
    code, name = normalize_source(
        "import React, { useState } from 'react';\n"
        "import { Button } from '@/components/ui/button';\n"
        "export default function Dashboard() { return <div/>; }\n"
    )
    assert name == "Dashboard"
    assert "import" not in code
    assert "export" not in code
    assert code.startswith("function Dashboard()")


def test_anonymous_default_export():
    code, name = normalize_source("export default function () { return <p/>; }")
    assert name == DEFAULT_EXPORT_NAME
    assert f"function {DEFAULT_EXPORT_NAME} ()" in code


def test_default_identifier_export():
    code, name = normalize_source("const Page = () => <main/>;\nexport default Page;\n")
    assert name == "Page"
    assert "export default" not in code


def test_default_expression_export():
    code, name = normalize_source("export default () => <main/>;")
    assert name == DEFAULT_EXPORT_NAME
    assert code.startswith(f"const {DEFAULT_EXPORT_NAME} = () =>")


def test_named_exports_and_reexports_removed():
    code, name = normalize_source(
        "export { Card } from './Card';\n"
        "export interface Props { title: string }\n"
        "export const Title = ({ title }: Props) => <h1>{title}</h1>;\n"
    )
    assert name is None
    assert "export" not in code
    assert "interface Props" in code


def test_select_entry_prefers_app():
    files = [
        GeneratedFile("src/components/Card.tsx", "export function Card() { return <div/>; }"),
        GeneratedFile("src/index.css", "body {}"),
        GeneratedFile("src/App.tsx", "export default function App() { return <Card/>; }"),
    ]
    assert select_entry(files).path == "src/App.tsx"


def test_assemble_puts_entry_last():
    files = [
        GeneratedFile("src/App.tsx", "export default function Home() { return <Card/>; }"),
        GeneratedFile("src/components/Card.tsx", "export function Card() { return <div/>; }"),
    ]
    source, candidates = assemble_source(files)
    assert source.index("function Card") < source.index("function Home")
    assert candidates == ["Home", "App"]


def test_document_contents():
    files = [
        GeneratedFile("src/App.tsx", "export default function App() { return <div>Hi</div>; }"),
        GeneratedFile("src/index.css", ".title { @apply text-xl; }"),
    ]
    settings = PreviewSettings(timeout_ms=1000, tailwind_url="https://cdn.tailwindcss.com")
    html = build_preview_document(files, settings)

    assert html.startswith("<!DOCTYPE html>")
    assert f"window.{HOST_BINDING}(message)" in html
    assert "LOAD_START" in html and "READY" in html
    assert "unhandledrejection" in html
    assert "kind: 'compile'" in html
    assert "componentDidCatch" in html
    assert json.dumps(NO_ENTRY_MESSAGE) in html
    assert ".title { @apply text-xl; }" in html
    assert "https://cdn.tailwindcss.com" in html
    assert "__faberShim" in html


def test_source_cannot_break_out_of_script():
    files = [GeneratedFile("src/App.jsx", "export default function App() { return <div>{'</script><script>alert(1)'}</div>; }")]
    html = build_preview_document(files)
    assert "</script><script>alert(1)" not in html


def test_shim_palette():
    assert {"Button", "Card", "CardContent", "Input", "Label", "Badge", "Progress", "Separator"} <= set(SHIM_PRIMITIVES)
    assert {"Heart", "Star", "ShoppingCart", "Search", "X", "Bell"} <= set(SHIM_ICONS)
    prelude = scope_prelude()
    assert "var useState = React.useState" in prelude
    assert re.search(r"\bButton = __shim\.Button\b", prelude)
    assert "window.__faberShim" in shim_script()
