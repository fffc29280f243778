"""
Diagnostics and exception types for the multi-value attribute runtime.

Diagnostics describe recoverable problems found while rendering. They are
handed to an ErrorManager and never raised. The exception classes at the
bottom of the module signal caller mistakes instead.
"""
from dataclasses import dataclass
from typing import Any, Dict, List, Optional


# =================================================================
# Diagnostics
# =================================================================

@dataclass(frozen=True)
class Diagnostic:
    """Base class for structured, non-fatal runtime diagnostics."""

    @property
    def message(self) -> str:
        return type(self).__name__


@dataclass(frozen=True)
class ArgumentCountMismatch(Diagnostic):
    expected: int
    actual: int
    instance_name: str

    @property
    def message(self) -> str:
        return (f"ArgumentCountMismatch: passed {self.actual} arg(s) to template "
                f"{self.instance_name} declared with {self.expected} arg(s)")


@dataclass(frozen=True)
class WriterConstructionIssue(Diagnostic):
    writer_kind: str

    @property
    def message(self) -> str:
        return (f"WriterConstructionIssue: cannot build a writer of kind "
                f"'{self.writer_kind}'; using the auto-indent writer")


@dataclass(frozen=True)
class TemplateRenderIssue(Diagnostic):
    instance_name: str
    error: str

    @property
    def message(self) -> str:
        return f"TemplateRenderIssue: template {self.instance_name}: {self.error}"


class ErrorManager:
    """Collects diagnostics without interrupting the render.

    Every diagnostic is kept as-is in `errors` and mirrored into
    `side_effects` as a `{'topics': ['stderr'], 'message': ...}` event so hosts
    can print them alongside other emitted effects.
    """

    def __init__(self):
        self.errors: List[Diagnostic] = []
        self.side_effects: List[Dict[str, Any]] = []

    def run_time_error(self, interpreter: Any, scope: Any, diagnostic: Diagnostic):
        self.errors.append(diagnostic)
        event: Dict[str, Any] = {"topics": ["stderr"], "message": diagnostic.message}
        st = getattr(scope, "st", None)
        if st is not None:
            event["template"] = st.name
        self.side_effects.append(event)
        if interpreter is not None:
            interpreter._dbg("diagnostic", diagnostic.message)

    def clear(self):
        self.errors.clear()
        self.side_effects.clear()

    def __len__(self) -> int:
        return len(self.errors)


# =================================================================
# Exceptions
# =================================================================

class HandleConsumedError(RuntimeError):
    """Raised when a single-pass sequence handle is iterated a second time."""
    def __init__(self, source: Any = None):
        kind = type(source).__name__ if source is not None else "sequence"
        super().__init__(f"{kind} handle was already consumed; materialize() it first")
        self.source = source


class WriterConstructionError(Exception):
    def __init__(self, kind: str, cause: Optional[BaseException] = None):
        super().__init__(f"no writer builder for kind '{kind}'" if cause is None
                         else f"writer builder for kind '{kind}' failed: {cause}")
        self.kind = kind
        self.cause = cause


class UnknownFunctionError(KeyError):
    def __init__(self, name: str):
        super().__init__(name)
        self.name = name

    def __str__(self):
        return f"no such multi-value function: {self.name}"
