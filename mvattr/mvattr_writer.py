"""
Indentation-aware output writers and the factory that builds fresh ones.
"""
from abc import ABC, abstractmethod
from typing import Any, Callable, Dict, List, Optional

from mvattr.mvattr_errors import WriterConstructionError


class Writer(ABC):
    """Abstract base class for all render sinks.

    `kind` identifies the writer family so a WriterFactory can build another
    writer of the same family over a different sink.
    """
    kind: str = "writer"
    newline: str = "\n"

    @abstractmethod
    def write(self, text: str) -> int: raise NotImplementedError
    @abstractmethod
    def push_indentation(self, indent: str): raise NotImplementedError
    @abstractmethod
    def pop_indentation(self) -> Optional[str]: raise NotImplementedError
    @abstractmethod
    def index(self) -> int: raise NotImplementedError


class AutoIndentWriter(Writer):
    """Writes text to `sink`, prefixing every new line with the current indentation.

    Indents stack: the prefix is the concatenation of every pushed indent.
    Carriage returns are dropped and each newline is written as `newline`.
    """
    kind = "auto-indent"

    def __init__(self, sink: Any, newline: str = "\n"):
        self.sink = sink
        self.newline = newline
        self.indents: List[str] = []
        self.at_start_of_line = True
        self.char_index = 0

    def push_indentation(self, indent: str):
        self.indents.append(indent)

    def pop_indentation(self) -> Optional[str]:
        return self.indents.pop() if self.indents else None

    def index(self) -> int:
        return self.char_index

    def _indent(self) -> int:
        prefix = "".join(self.indents)
        if prefix:
            self.sink.write(prefix)
        return len(prefix)

    def write(self, text: str) -> int:
        n = 0
        for c in text:
            if c == "\r":
                continue
            if c == "\n":
                self.sink.write(self.newline)
                n += len(self.newline)
                self.at_start_of_line = True
                continue
            if self.at_start_of_line:
                n += self._indent()
                self.at_start_of_line = False
            self.sink.write(c)
            n += 1
        self.char_index += n
        return n


class NoIndentWriter(AutoIndentWriter):
    """Like AutoIndentWriter but ignores pushed indentation."""
    kind = "no-indent"

    def _indent(self) -> int:
        return 0


WriterBuilder = Callable[[Any], Writer]


class WriterFactory:
    """Registry of writer kinds to builders of fresh writers over a given sink."""

    def __init__(self, builders: Optional[Dict[str, WriterBuilder]] = None):
        self._builders: Dict[str, WriterBuilder] = dict(builders or {})

    def register(self, kind: str, builder: WriterBuilder):
        self._builders[kind] = builder

    def unregister(self, kind: str):
        self._builders.pop(kind, None)

    def __contains__(self, kind: str) -> bool:
        return kind in self._builders

    def build(self, reference: Any, sink: Any) -> Writer:
        """Build a writer of the same kind as `reference` that writes into `sink`.

        Raises WriterConstructionError when the kind is not registered or
        its builder fails.
        """
        kind = getattr(reference, "kind", None) or type(reference).__name__
        builder = self._builders.get(kind)
        if builder is None:
            raise WriterConstructionError(kind)
        try:
            return builder(sink)
        except Exception as e:
            raise WriterConstructionError(kind, e) from e


def default_writer_factory() -> WriterFactory:
    return WriterFactory({
        AutoIndentWriter.kind: AutoIndentWriter,
        NoIndentWriter.kind: NoIndentWriter,
    })
