from __future__ import annotations

from typing import Dict, Iterable, List

from pkgcheck.models import ValidationContext

STRUCTURE_LABEL = "Structure"
ASSET_STORE_LABEL = "Asset Store Publishing"
CANDIDATES_LABEL = "Unity Candidates Standards"
PRODUCTION_LABEL = "Unity Production Standards"

# Package names that may be validated against the Unity standards
STANDARDS_NAME_PREFIXES = ("com.unity.",)

_LABELS: Dict[str, ValidationContext] = {
    STRUCTURE_LABEL: ValidationContext.STRUCTURE,
    ASSET_STORE_LABEL: ValidationContext.ASSET_STORE,
    CANDIDATES_LABEL: ValidationContext.LOCAL_DEVELOPMENT,
    PRODUCTION_LABEL: ValidationContext.PROMOTION,
}


def eligible_for_standards(package_name: str, prefixes: Iterable[str] = STANDARDS_NAME_PREFIXES) -> bool:
    return any(package_name.startswith(p) for p in prefixes)


def context_choices(show_production_standards: bool) -> List[str]:
    choices = [STRUCTURE_LABEL, ASSET_STORE_LABEL]
    if show_production_standards:
        choices += [CANDIDATES_LABEL, PRODUCTION_LABEL]
    return choices


def default_label(show_production_standards: bool) -> str:
    return PRODUCTION_LABEL if show_production_standards else STRUCTURE_LABEL


def context_from_label(label: str, local_source: bool = False) -> ValidationContext:
    """
    Map a validation-type label to its context.

    Production standards requested on a package that only exists locally
    (embedded / local folder) cannot be promoted yet, so they run with the
    internal local-development context instead.
    """
    if label not in _LABELS:
        raise ValueError(f"Unknown validation type: '{label}'")
    if label == PRODUCTION_LABEL and local_source:
        return ValidationContext.LOCAL_DEVELOPMENT_INTERNAL
    return _LABELS[label]
