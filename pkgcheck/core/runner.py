from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Iterable, List, Optional

from pkgcheck.core.checks import CheckLog
from pkgcheck.core.manifest import ManifestData
from pkgcheck.core.registry import CheckRegistry
from pkgcheck.core.scanner import scan_package
from pkgcheck.core.settings import SuiteSettings
from pkgcheck.core.store import ReportStore
from pkgcheck.models import (
    INFO,
    CheckContext,
    CheckDescriptor,
    CheckOutcome,
    CheckState,
    Skip,
    ValidationContext,
    ValidationReport,
)

LOG = logging.getLogger(__name__)


def run_check(check: CheckDescriptor, ctx: CheckContext) -> CheckOutcome:
    """
    Execute one check and turn whatever happens into an outcome.

    Anything the check raises is recorded as a FAILED outcome here and never
    reaches the caller, so sibling checks keep running.
    """
    log = CheckLog()
    try:
        ret = check.run(ctx, log)
    except Exception as e:
        LOG.exception("Check '%s' raised", check.name)
        log.error("CHECK_EXCEPTION", f"{type(e).__name__}: {e}")
        return CheckOutcome(check.name, check.category, CheckState.FAILED, tuple(log.messages))

    if isinstance(ret, Skip):
        LOG.info("Check '%s' not run: %s", check.name, ret.reason)
        log.emit(INFO, "CHECK_SKIPPED", ret.reason)
        state = CheckState.NOT_RUN
    elif log.has_errors:
        state = CheckState.FAILED
    else:
        state = CheckState.SUCCEEDED

    return CheckOutcome(check.name, check.category, state, tuple(log.messages))


class ValidationRunner:
    """
    Runs every registered check that supports the requested validation type
    against one package and aggregates the outcomes into a report.
    """

    def __init__(
        self,
        registry: CheckRegistry,
        results_dir: str,
        store: Optional[ReportStore] = None,
        max_workers: int = 1,
        disabled_checks: Iterable[str] = (),
    ):
        self.registry = registry
        self.results_dir = results_dir
        self.store = store if store is not None else ReportStore()
        self.max_workers = max(1, int(max_workers))
        self.disabled_checks = frozenset(disabled_checks)

    @classmethod
    def from_settings(
        cls,
        registry: CheckRegistry,
        settings: SuiteSettings,
        store: Optional[ReportStore] = None,
    ) -> "ValidationRunner":
        if store is None:
            store = ReportStore(settings.results_dir if settings.persist_reports else None)
        return cls(
            registry,
            results_dir=settings.results_dir,
            store=store,
            max_workers=settings.max_workers,
            disabled_checks=settings.disabled_checks,
        )

    def selected_checks(self, validation_type: ValidationContext) -> List[CheckDescriptor]:
        return [c for c in self.registry.select(validation_type) if c.name not in self.disabled_checks]

    def validate(self, package: ManifestData, validation_type: ValidationContext) -> ValidationReport:
        checks = self.selected_checks(validation_type)
        LOG.info(
            "Validating %s (%s): %d check(s)",
            package.package_id,
            validation_type.value,
            len(checks),
        )

        # Unreadable package roots are an infrastructure fault, not a check failure
        files, summary = scan_package(package.path)
        ctx = CheckContext(
            package=package,
            validation_type=validation_type,
            results_dir=self.results_dir,
            files=tuple(files),
            summary=summary,
        )
        LOG.debug("%s: %d file(s), %d byte(s)", package.package_id, summary.total_files, summary.total_bytes)

        if self.max_workers > 1 and len(checks) > 1:
            with ThreadPoolExecutor(max_workers=self.max_workers) as ex:
                outcomes = list(ex.map(lambda c: run_check(c, ctx), checks))
        else:
            outcomes = [run_check(c, ctx) for c in checks]

        report = ValidationReport(
            package_id=package.package_id,
            name=package.name,
            version=package.version,
            validation_type=validation_type,
            outcomes=tuple(outcomes),
        )
        self.store.put(report)

        failed = sum(1 for o in outcomes if o.state == CheckState.FAILED)
        LOG.info(
            "Validation of %s done: %s (%d failed, %d warning(s))",
            package.package_id,
            "passed" if report.passed else "failed",
            failed,
            len(report.warnings),
        )
        return report
