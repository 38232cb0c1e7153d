"""Soft diagnostics collected while parsing, kept apart from hard errors."""

from __future__ import annotations


class WarningsError(Exception):
    """Aggregated warnings, optionally followed by a terminal hard error."""

    def __init__(self, message: str, warnings: list[BaseException], error: BaseException | None = None):
        super().__init__(message)
        self.warnings = list(warnings)
        self.error = error


class Warnings(list):
    """Ordered list of non-fatal diagnostics."""

    def build(self) -> WarningsError | None:
        """Merge into one error, or None if there is nothing to report."""
        if len(self) == 0:
            return None
        if len(self) == 1:
            return WarningsError(f"warn: {self[0]}", self)
        body = "\n".join(str(w) for w in self)
        return WarningsError(f"{len(self)} warnings:\n{body}", self)

    def join(self, err: BaseException | None) -> BaseException | None:
        """Attach the built warnings in front of a terminal error."""
        warning = self.build()
        if warning is None:
            return err
        if err is not None:
            return WarningsError(f"{warning}\n{err}", self, err)
        return warning
