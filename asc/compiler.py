import json
import os
from typing import Any, Callable, Dict, List, Optional, Tuple

from asc.parser.core.classes import Program, Token
from asc.parser.core.lexer import tokenize
from asc.parser.core.parser import parse_program
from asc.semantic_analyser.core.analyser import SemanticAnalyser

from .exceptions import ArrowScriptError, Diagnostic, InternalCompilerError
from .utils import CompilerArtifactEncoder


class CompilationPipeline:
    """
    Drives an ArrowScript source through every front-end stage:

        tokens -> ast -> validation -> resolution -> typed_ast

    The last three stages belong to the SemanticAnalyser sub-pipeline. Each
    stage's output is kept in `artifacts`; stages listed in `dump_stages` are
    also written next to the source file as `<name>.<stage>.json`. No stage
    aborts the run: diagnostics from all of them are collected in order.
    """

    def __init__(
        self,
        source_content: str,
        file_path: Optional[str] = None,
        dump_stages: Optional[List[str]] = None,
        stop_after_stage: Optional[str] = None,
    ):
        self.source_content = source_content
        self.file_path = os.path.abspath(file_path) if file_path else None
        self.dump_stages = set(dump_stages or [])
        self.stop_after_stage = stop_after_stage
        self.artifacts: Dict[str, Any] = {}
        self.diagnostics: List[Diagnostic] = []

    def run(self) -> Tuple[Optional[Program], List[Diagnostic]]:
        try:
            tokens = self._stage("tokens", self._tokenize)
            if self.stop_after_stage == "tokens":
                return None, self.diagnostics

            program = self._stage("ast", self._parse, tokens)
            if self.stop_after_stage == "ast":
                return program, self.diagnostics

            analyser = SemanticAnalyser(program, stop_after_stage=self.stop_after_stage)
            program, semantic_diagnostics = analyser.run()
            self.diagnostics.extend(semantic_diagnostics)
            for stage_name, artifact in analyser.artifacts.items():
                self._keep(stage_name, artifact)
            return program, self.diagnostics

        except (ArrowScriptError, InternalCompilerError):
            raise
        except Exception as e:
            raise InternalCompilerError(f"An unexpected internal error occurred: {e}") from e

    # --- Stages ---

    def _tokenize(self) -> List[Token]:
        try:
            return tokenize(self.source_content)
        except ArrowScriptError as e:
            # Lexing stops at the first bad character; parsing then sees an empty stream.
            self.diagnostics.append(e.to_diagnostic())
            return []

    def _parse(self, tokens: List[Token]) -> Program:
        program, parse_diagnostics = parse_program(tokens)
        self.diagnostics.extend(parse_diagnostics)
        return program

    def _stage(self, name: str, func: Callable, *args) -> Any:
        result = func(*args)
        self._keep(name, result)
        return result

    def _keep(self, name: str, artifact: Any):
        self.artifacts[name] = artifact
        if name in self.dump_stages:
            self.save_artifact(name, artifact)

    # --- Artifacts ---

    def artifact_path(self, name: str) -> str:
        if self.file_path is None:
            return f"stdin_output.{name}.json"
        return f"{os.path.splitext(self.file_path)[0]}.{name}.json"

    def save_artifact(self, name: str, data: Any):
        """Writes one stage artifact as indented JSON."""
        output_path = self.artifact_path(name)
        print(f"--- Saving artifact '{name}' to {output_path} ---")
        try:
            with open(output_path, "w", encoding="utf-8") as f:
                json.dump(data, f, indent=2, cls=CompilerArtifactEncoder)
        except OSError as e:
            print(f"Error: Could not save artifact '{name}': {e}")


def compile_arrowscript(
    source: str,
    file_path: Optional[str] = None,
    dump_stages: Optional[List[str]] = None,
    stop_after_stage: Optional[str] = None,
) -> Tuple[Optional[Program], List[Diagnostic]]:
    """Runs the pipeline on `source` and returns the (typed) program with every diagnostic."""
    return CompilationPipeline(source, file_path, dump_stages, stop_after_stage).run()


def typecheck_source(source: str) -> Tuple[Program, List[Diagnostic]]:
    """Runs every stage on `source` without writing artifacts. Returns the typed AST and all diagnostics."""
    return compile_arrowscript(source)
