from __future__ import annotations

from typing import List, Optional

from pkgcheck.core.diff import compare_packages
from pkgcheck.core.registry import CheckRegistry
from pkgcheck.core.reporting import write_delta_report
from pkgcheck.models import (
    ERROR,
    INFO,
    WARNING,
    CheckContext,
    CheckDescriptor,
    CheckMessage,
    Skip,
    ValidationContext,
)


class CheckLog:
    """Message buffer a single check writes into while it runs."""

    def __init__(self) -> None:
        self._messages: List[CheckMessage] = []

    def emit(self, level: str, code: str, message: str, relpath: Optional[str] = None) -> None:
        self._messages.append(CheckMessage(level=level, code=code, message=message, relpath=relpath))

    def info(self, code: str, message: str, relpath: Optional[str] = None) -> None:
        self.emit(INFO, code, message, relpath)

    def warning(self, code: str, message: str, relpath: Optional[str] = None) -> None:
        self.emit(WARNING, code, message, relpath)

    def error(self, code: str, message: str, relpath: Optional[str] = None) -> None:
        self.emit(ERROR, code, message, relpath)

    @property
    def messages(self) -> List[CheckMessage]:
        return list(self._messages)

    @property
    def has_errors(self) -> bool:
        return any(m.level == ERROR for m in self._messages)


# -------------------------
# Package Diff Evaluation
# -------------------------
def run_diff_evaluation(ctx: CheckContext, log: CheckLog) -> Optional[Skip]:
    previous = ctx.previous
    if previous is None:
        return Skip("No previous package version. Skipping diff evaluation.")

    result = compare_packages(previous.path, ctx.package.path, root_name=ctx.package.name)
    path = write_delta_report(ctx.results_dir, ctx.package, previous, result)

    log.info("DELTA_WRITTEN", f"Delta report written: {path}")
    log.info(
        "DELTA_SUMMARY",
        f"Compared to {previous.version}: {len(result.added)} added, "
        f"{len(result.removed)} removed, {len(result.modified)} modified.",
    )
    return None


DIFF_EVALUATION = CheckDescriptor(
    name="Package Diff Evaluation",
    category="DataValidation",
    description="Produces a report of what's been changed in this version of the package.",
    contexts=frozenset(
        {
            ValidationContext.ASSET_STORE,
            ValidationContext.LOCAL_DEVELOPMENT,
            ValidationContext.LOCAL_DEVELOPMENT_INTERNAL,
            ValidationContext.PROMOTION,
        }
    ),
    run=run_diff_evaluation,
)


def default_registry() -> CheckRegistry:
    return CheckRegistry([DIFF_EVALUATION])
