# tests/test_validation_service.py
"""
Validation request/response boundary.
"""
from faber.validation.service import run_validation


def test_clean_request_has_no_fixes(validator, counter_component):
    response = run_validation(validator, [{"path": "src/App.tsx", "content": counter_component}])
    assert response["success"] is True
    assert response["score"] == 100
    assert response["errors"] == []
    assert response["fixes"] == []
    assert "fixedFiles" not in response


def test_response_shape_with_fixes(validator):
    files = [{"path": "src/App.jsx", "content": (
        "import _ from 'lodash';  \n"
        "export default function App() { return <div>Hi</div>; }"
    )}]
    response = run_validation(validator, files)

    assert response["success"] is False
    error = response["errors"][0]
    assert set(error) == {"file", "line", "column", "message", "severity", "code"}
    assert error["code"] == "DISALLOWED_IMPORT"
    assert error["severity"] == "error"
    # Reported against the fixed file, where the import moved below its annotation
    assert error["line"] == 2

    assert {fix["type"] for fix in response["fixes"]} == {"format", "auto-import"}
    assert response["fixedFiles"][0]["content"].startswith('// faber: "lodash"')


def test_warnings_are_listed_but_do_not_fail(validator):
    files = [{"path": "src/App.jsx", "content": "export default function App() { return <img src=\"/a.png\" />; }\n"}]
    response = run_validation(validator, files)
    assert response["success"] is True
    assert [e["code"] for e in response["errors"]] == ["MISSING_ALT"]
    assert [e["severity"] for e in response["errors"]] == ["warning"]


def test_skip_type_check_flag(validator):
    files = [{"path": "src/App.tsx", "content": "export default function App(p: any) { return <div>Hi</div>; }\n"}]
    assert run_validation(validator, files)["score"] < 100
    assert run_validation(validator, files, skip_type_check=True)["score"] == 100
