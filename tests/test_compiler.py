import json

import pytest

from asc.compiler import CompilationPipeline, compile_arrowscript
from asc.exceptions import ErrorCode, InternalCompilerError
from asc.parser.core.classes import Program


@pytest.fixture
def source_file(tmp_path):
    def _write(code, name="script.as"):
        path = tmp_path / name
        path.write_text(code, encoding="utf-8")
        return path

    return _write


def test_full_pipeline_returns_typed_program():
    # --- ACT ---
    program, diagnostics = compile_arrowscript("const a = [1, 2];")

    # --- ASSERT ---
    assert diagnostics == []
    assert isinstance(program, Program)
    assert str(program.body[0].inferred_type) == "Array<Number>"


def test_stop_after_tokens_returns_no_program():
    program, diagnostics = compile_arrowscript("const a = 1;", stop_after_stage="tokens")
    assert program is None
    assert diagnostics == []


def test_stop_after_ast_skips_semantic_analysis():
    # --- ACT ---
    program, diagnostics = compile_arrowscript("const y = x;", stop_after_stage="ast")

    # --- ASSERT ---
    assert isinstance(program, Program)
    assert diagnostics == []
    assert program.body[0].init.declaration is None


def test_stop_after_validation_skips_name_resolution():
    program, diagnostics = compile_arrowscript("const f = () => { return 1; return 2; }; const y = x;", stop_after_stage="validation")
    assert [d.code for d in diagnostics] == [ErrorCode.RETURN_NOT_LAST]


def test_stop_after_resolution_skips_type_inference():
    # --- ACT ---
    program, diagnostics = compile_arrowscript("const y = x; const z: string = 1;", stop_after_stage="resolution")

    # --- ASSERT ---
    assert [d.code for d in diagnostics] == [ErrorCode.UNDECLARED_REFERENCE]
    assert program.body[1].inferred_type is None


def test_lexer_error_becomes_a_diagnostic():
    # --- ACT ---
    program, diagnostics = compile_arrowscript("const a = @;")

    # --- ASSERT ---
    assert [d.code for d in diagnostics] == [ErrorCode.UNEXPECTED_CHARACTER]
    assert diagnostics[0].offset == 10
    assert program.body == []


def test_artifacts_are_kept_for_every_stage():
    # --- ARRANGE ---
    pipeline = CompilationPipeline("const a = 1;")

    # --- ACT ---
    pipeline.run()

    # --- ASSERT ---
    assert list(pipeline.artifacts) == ["tokens", "ast", "validation", "resolution", "typed_ast"]
    assert pipeline.artifacts["tokens"][0].type == "CONST"
    assert pipeline.artifacts["resolution"]["scope"].declarations["a"].name == "a"


def test_token_artifact_is_written_next_to_the_source(source_file):
    # --- ARRANGE ---
    path = source_file("const a = 1;")

    # --- ACT ---
    compile_arrowscript(path.read_text(), file_path=str(path), dump_stages=["tokens"], stop_after_stage="tokens")

    # --- ASSERT ---
    output = path.with_name("script.tokens.json")
    assert output.exists()
    tokens = json.loads(output.read_text())
    assert tokens[0]["type"] == "CONST"
    assert tokens[-1]["type"] == "EOF"


def test_typed_ast_artifact_contains_inferred_types(source_file):
    # --- ARRANGE ---
    path = source_file("const id = (x) => { return x; }; const n = id(1);")

    # --- ACT ---
    compile_arrowscript(path.read_text(), file_path=str(path), dump_stages=["typed_ast"])

    # --- ASSERT ---
    artifact = json.loads(path.with_name("script.typed_ast.json").read_text())
    statements = artifact["program"]["body"]
    assert [s["inferred_type"] for s in statements] == ["(t0) -> t0", "Number"]
    assert artifact["diagnostics"] == []


def test_resolution_artifact_contains_the_scope_tree(source_file):
    # --- ARRANGE ---
    path = source_file("const f = (p) => { return p; }; const g = f(1);")

    # --- ACT ---
    compile_arrowscript(path.read_text(), file_path=str(path), dump_stages=["resolution"], stop_after_stage="resolution")

    # --- ASSERT ---
    artifact = json.loads(path.with_name("script.resolution.json").read_text())
    scope = artifact["scope"]
    assert scope["node"] == "Program"
    assert scope["declarations"]["f"] == {"kind": "ConstDeclaration", "references": 1}
    assert scope["children"][0]["declarations"]["p"] == {"kind": "Parameter", "references": 1}


def test_diagnostics_are_serialized_by_code_name(source_file):
    path = source_file("const y = x;")

    compile_arrowscript(path.read_text(), file_path=str(path), dump_stages=["resolution"], stop_after_stage="resolution")

    artifact = json.loads(path.with_name("script.resolution.json").read_text())
    assert artifact["diagnostics"] == [{"code": "UNDECLARED_REFERENCE", "message": "Reference to undeclared variable 'x'.", "offset": 10}]


def test_unexpected_failures_are_wrapped(monkeypatch):
    # --- ARRANGE ---
    def broken(program):
        raise ValueError("boom")

    monkeypatch.setattr("asc.semantic_analyser.core.analyser.validate", broken)

    # --- ACT & ASSERT ---
    with pytest.raises(InternalCompilerError, match="boom"):
        compile_arrowscript("const a = 1;")


@pytest.mark.parametrize(
    "file_path, expected",
    [
        pytest.param(None, "stdin_output.ast.json", id="stdin"),
        pytest.param("/work/demo.as", "/work/demo.ast.json", id="file"),
    ],
)
def test_artifact_path(file_path, expected):
    assert CompilationPipeline("", file_path).artifact_path("ast") == expected
