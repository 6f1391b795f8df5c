from __future__ import annotations

from typing import Dict, Iterable, Iterator, List, Optional

from pkgcheck.models import CheckDescriptor, CheckFunc, ValidationContext


class CheckRegistry:
    """
    Ordered name -> check mapping.

    Checks are registered explicitly at startup; registration order is the
    order checks run and are reported in.
    """

    def __init__(self, checks: Iterable[CheckDescriptor] = ()):
        self._checks: Dict[str, CheckDescriptor] = {}
        for c in checks:
            self.register(c)

    def register(self, check: CheckDescriptor) -> CheckDescriptor:
        if not check.name.strip():
            raise ValueError("Check name is required.")
        if check.name in self._checks:
            raise ValueError(f"Check already registered: '{check.name}'")
        if not check.contexts:
            raise ValueError(f"Check '{check.name}' supports no validation context.")
        self._checks[check.name] = check
        return check

    def add(
        self,
        name: str,
        run: CheckFunc,
        contexts: Iterable[ValidationContext],
        category: str = "",
        description: str = "",
    ) -> CheckDescriptor:
        return self.register(
            CheckDescriptor(
                name=name,
                category=category,
                description=description,
                contexts=frozenset(contexts),
                run=run,
            )
        )

    def get(self, name: str) -> Optional[CheckDescriptor]:
        return self._checks.get(name)

    def select(self, context: ValidationContext) -> List[CheckDescriptor]:
        return [c for c in self._checks.values() if c.supports(context)]

    def __iter__(self) -> Iterator[CheckDescriptor]:
        return iter(list(self._checks.values()))

    def __len__(self) -> int:
        return len(self._checks)

    def __contains__(self, name: object) -> bool:
        return name in self._checks
