from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, FrozenSet, List, Optional, Tuple

from pkgcheck.core.manifest import ManifestData
from pkgcheck.core.scanner import ScanFile, ScanSummary

INFO = "INFO"
WARNING = "WARNING"
ERROR = "ERROR"


class ValidationContext(str, Enum):
    STRUCTURE = "structure"
    ASSET_STORE = "asset_store"
    CI = "ci"
    LOCAL_DEVELOPMENT = "local_development"
    LOCAL_DEVELOPMENT_INTERNAL = "local_development_internal"
    PROMOTION = "promotion"
    VERIFIED_SET = "verified_set"


class CheckState(str, Enum):
    SUCCEEDED = "succeeded"
    FAILED = "failed"
    NOT_RUN = "not_run"


@dataclass(frozen=True)
class CheckMessage:
    level: str  # INFO | WARNING | ERROR
    code: str   # stable short identifier (e.g. DELTA_WRITTEN)
    message: str
    relpath: Optional[str] = None  # relative to package root when applicable


@dataclass(frozen=True)
class Skip:
    """Returned by a check whose preconditions are not met for this package."""
    reason: str


@dataclass(frozen=True)
class CheckContext:
    package: ManifestData
    validation_type: ValidationContext
    results_dir: str
    files: Tuple[ScanFile, ...] = ()
    summary: Optional[ScanSummary] = None  # totals and extension counts of `files`

    @property
    def previous(self) -> Optional[ManifestData]:
        return self.package.previous


# run(context, log) -> None when the check ran, Skip(...) when it did not
CheckFunc = Callable[..., Optional[Skip]]


@dataclass(frozen=True)
class CheckDescriptor:
    name: str
    category: str
    description: str
    contexts: FrozenSet[ValidationContext]
    run: CheckFunc = field(compare=False)

    def supports(self, context: ValidationContext) -> bool:
        return context in self.contexts


@dataclass(frozen=True)
class CheckOutcome:
    name: str
    category: str
    state: CheckState
    messages: Tuple[CheckMessage, ...] = ()

    def _at(self, level: str) -> List[CheckMessage]:
        return [m for m in self.messages if m.level == level]

    @property
    def errors(self) -> List[CheckMessage]:
        return self._at(ERROR)

    @property
    def warnings(self) -> List[CheckMessage]:
        return self._at(WARNING)

    @property
    def infos(self) -> List[CheckMessage]:
        return self._at(INFO)


@dataclass(frozen=True)
class ValidationReport:
    package_id: str
    name: str
    version: str
    validation_type: ValidationContext
    outcomes: Tuple[CheckOutcome, ...] = ()

    @property
    def passed(self) -> bool:
        return not any(o.state == CheckState.FAILED for o in self.outcomes)

    @property
    def failures(self) -> List[CheckOutcome]:
        return [o for o in self.outcomes if o.state == CheckState.FAILED]

    @property
    def warnings(self) -> List[Tuple[str, CheckMessage]]:
        # Warnings of failed checks are reported through the failure
        return [(o.name, m) for o in self.outcomes if o.state != CheckState.FAILED for m in o.warnings]

    def outcome(self, name: str) -> Optional[CheckOutcome]:
        for o in self.outcomes:
            if o.name == name:
                return o
        return None
