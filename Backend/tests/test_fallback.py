# tests/test_fallback.py
"""
Deterministic fallback: pure, offline, always renderable.
"""
import pytest

from faber.generation.fallback import (
    DEFAULT_COMPONENT_NAME,
    FALLBACK_METHOD,
    FALLBACK_PATH,
    component_name,
    detect_features,
    render_component,
    select_template,
    summarize_prompt,
    synthesize_fallback,
)
from faber.extraction import is_structurally_valid


@pytest.mark.parametrize("prompt,template", [
    ("Admin dashboard for sales", "dashboard"),
    ("an online STORE for shoes", "ecommerce"),
    ("Personal blog with articles", "blog"),
    ("photography portfolio", "portfolio"),
    ("a tip calculator", "default"),
])
def test_select_template(prompt, template):
    assert select_template(prompt) == template


def test_detect_features_in_declared_order():
    assert detect_features("chart, search and a signup form") == ["form", "search", "chart"]
    assert detect_features("a clock") == []


@pytest.mark.parametrize("prompt,name", [
    ("todo list app with filters", "TodoListApp"),
    ("  weather   widget ", "WeatherWidget"),
    ("3d model-viewer!", "DModelviewer"),
    ("react", "ReactApp"),
    ("123 !!!", DEFAULT_COMPONENT_NAME),
    ("", DEFAULT_COMPONENT_NAME),
])
def test_component_name(prompt, name):
    assert component_name(prompt) == name


def test_summary_is_safe_to_embed():
    summary = summarize_prompt("TODO: build <script>eval(x)</script> {now} `fast`")
    assert "TODO" not in summary
    for char in "<>{}()`":
        assert char not in summary
    assert summarize_prompt("   ") == "Your generated application"
    assert summarize_prompt("word " * 50).endswith("...")


def test_same_prompt_same_component():
    assert render_component("shop with search") == render_component("shop with search")


def test_synthesize_fallback_shape():
    result = synthesize_fallback("a recipe finder")
    assert result.has_valid_code
    assert result.method == FALLBACK_METHOD
    assert [f.path for f in result.files] == [FALLBACK_PATH]
    assert is_structurally_valid(result.files[0])
    assert "export default function ARecipeFinder()" in result.files[0].content


@pytest.mark.parametrize("prompt", [
    "a counter",
    "admin dashboard with table, chart and search",
    "shop with navigation, modal and a checkout form",
    "blog with search and navigation",
    "portfolio with every feature: form table search modal navigation chart",
    "TODO implement this eval(document.cookie) fetch('/x')",
    "<img src=x onerror=alert(1)> {{}}",
])
def test_fallback_passes_validation(validator, prompt):
    result = synthesize_fallback(prompt)
    validation = validator.validate(result.files)
    assert validation.is_valid, [e.to_dict() for e in validation.errors]
    assert validation.warnings == [], [w.to_dict() for w in validation.warnings]


def test_search_feature_imports_use_memo():
    source = render_component("catalog with search")
    assert source.startswith("import React, { useState, useMemo } from 'react';")
    plain = render_component("catalog")
    assert plain.startswith("import React, { useState } from 'react';")
    assert "useMemo" not in plain
