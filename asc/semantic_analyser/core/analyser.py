from typing import Any, Dict, List, Optional, Tuple

from asc.exceptions import Diagnostic
from asc.parser.core.classes import Program

from .resolver import analyze
from .type_inferrer import infer_types
from .validator import validate


class SemanticAnalyser:
    """
    The semantic half of the pipeline: structural validation, name resolution
    and type inference, always in that order. Diagnostics accumulate across the
    three stages; an error in one stage never prevents the next from running.

    Artifacts kept per stage:
        validation  -> the validator's diagnostics
        resolution  -> {"diagnostics": ..., "scope": root Scope}
        typed_ast   -> {"program": typed Program, "diagnostics": all so far}
    """

    def __init__(self, program: Program, stop_after_stage: Optional[str] = None):
        self.program = program
        self.stop_after_stage = stop_after_stage
        self.artifacts: Dict[str, Any] = {}
        self.diagnostics: List[Diagnostic] = []

    def run(self) -> Tuple[Program, List[Diagnostic]]:
        # --- Stage 3a: Structural Validation ---
        validation_diagnostics = validate(self.program)
        self._record("validation", validation_diagnostics, validation_diagnostics)
        if self.stop_after_stage == "validation":
            return self.program, self.diagnostics

        # --- Stage 3b: Name Resolution ---
        _, resolution_diagnostics, root_scope = analyze(self.program)
        self._record("resolution", {"diagnostics": resolution_diagnostics, "scope": root_scope}, resolution_diagnostics)
        if self.stop_after_stage == "resolution":
            return self.program, self.diagnostics

        # --- Stage 3c: Type Inference ---
        _, type_diagnostics = infer_types(self.program)
        self.diagnostics.extend(type_diagnostics)
        self.artifacts["typed_ast"] = {"program": self.program, "diagnostics": list(self.diagnostics)}

        return self.program, self.diagnostics

    def _record(self, stage_name: str, artifact: Any, stage_diagnostics: List[Diagnostic]):
        self.artifacts[stage_name] = artifact
        self.diagnostics.extend(stage_diagnostics)
