"""
The property-verification harness.

The harness does not know any numeric type.  It asks the registry for a
type's Traits, builds the laws that apply to the declared operations,
and checks each law against drawn operands.

Flow:
  1. Caller asks for a type (or hands over Traits directly).
  2. Harness builds the laws for those traits.
  3. Every law runs against edge-value combinations, then random draws
     from a generator owned by this run.
  4. A guard that declines a draw marks it skipped - the operation is
     known to be at risk of overflow there, so nothing is asserted.
  5. The first violating draw of a law is recorded as its
     counterexample; ``check`` raises if any law has one.

Run directly to verify every registered type::

    python harness.py
"""

from __future__ import annotations

import itertools
import logging
import random
import sys
from dataclasses import dataclass, field
from typing import Iterator, Mapping

from config import HarnessConfig
from laws import SKIPPED, Law, build_laws
from traits import REGISTRY, Traits, traits_for

logger = logging.getLogger(__name__)


@dataclass
class VerificationResult:
    """Outcome of verifying one law."""

    law_name: str
    passed: bool
    counterexample: tuple | None = None
    tests_run: int = 0
    skipped: int = 0

    def __repr__(self) -> str:
        status = "PASS" if self.passed else "FAIL"
        ce = (
            f"  counterexample={self.counterexample}"
            if self.counterexample is not None else ""
        )
        return (
            f"[{status}] {self.law_name} "
            f"({self.tests_run} tests, {self.skipped} skipped){ce}"
        )


@dataclass
class VerificationReport:
    """Aggregate result of verifying every law of one type."""

    type_name: str
    results: list[VerificationResult] = field(default_factory=list)

    @property
    def passed(self) -> bool:
        return all(r.passed for r in self.results)

    @property
    def failures(self) -> list[VerificationResult]:
        return [r for r in self.results if not r.passed]

    def result(self, law_name: str) -> VerificationResult:
        for r in self.results:
            if r.law_name == law_name:
                return r
        raise KeyError(law_name)

    def summary(self) -> str:
        lines = [f"--- {self.type_name} ---"]
        for r in self.results:
            lines.append(f"  {r}")
        status = "ALL PASSED" if self.passed else "FAILED"
        lines.append(f"  => {status}")
        return "\n".join(lines)


class VerificationError(Exception):
    """Raised when a type violates one of its laws."""

    def __init__(self, report: VerificationReport):
        self.report = report
        super().__init__(f"Verification failed:\n{report.summary()}")


# ---------------------------------------------------------------------------
# The harness
# ---------------------------------------------------------------------------

class Harness:
    """Checks the laws of one registered type against drawn operands."""

    def __init__(self, traits: Traits, config: HarnessConfig | None = None):
        self.traits = traits
        self.config = config or HarnessConfig()

    def verify(self) -> VerificationReport:
        """Check every law and return the report without raising."""
        rng = random.Random(self.config.seed)
        report = VerificationReport(type_name=self.traits.name)
        for law in build_laws(self.traits):
            result = self._verify_law(law, rng)
            logger.debug(
                "%s %s: %d tests, %d skipped",
                self.traits.name, law.name, result.tests_run, result.skipped,
            )
            report.results.append(result)

        logger.info(
            "verified %s: %d laws, %s",
            self.traits.name, len(report.results),
            "passed" if report.passed else f"{len(report.failures)} failed",
        )
        return report

    def check(self) -> VerificationReport:
        """Like verify, but raise VerificationError on any failure."""
        report = self.verify()
        if not report.passed:
            raise VerificationError(report)
        return report

    # -- internal ---------------------------------------------------------

    def _verify_law(self, law: Law, rng: random.Random) -> VerificationResult:
        tests_run = 0
        skipped = 0

        for values in self._samples(law.arity, rng):
            tests_run += 1
            try:
                outcome = law.check(*values)
            except (ZeroDivisionError, OverflowError):
                # Raised only where a guard should have declined
                outcome = SKIPPED

            if outcome is SKIPPED:
                skipped += 1
            elif not outcome:
                logger.warning(
                    "%s violates %s for %r", self.traits.name, law.name, values
                )
                return VerificationResult(
                    law_name=law.name,
                    passed=False,
                    counterexample=values,
                    tests_run=tests_run,
                    skipped=skipped,
                )

        return VerificationResult(
            law_name=law.name,
            passed=True,
            tests_run=tests_run,
            skipped=skipped,
        )

    def _samples(self, arity: int, rng: random.Random) -> Iterator[tuple]:
        """Edge-value combinations first, then random draws."""
        edges = self.traits.edge_values
        if self.config.include_edge_cases and edges:
            total = len(edges) ** arity
            cap = self.config.max_edge_combinations
            if total <= cap:
                yield from itertools.product(edges, repeat=arity)
            else:
                # Uniform subset, so every edge value reaches every position
                for index in sorted(rng.sample(range(total), cap)):
                    yield self._edge_combination(index, arity)

        for _ in range(self.config.iterations):
            yield tuple(self.traits.random(rng) for _ in range(arity))

    def _edge_combination(self, index: int, arity: int) -> tuple:
        """The ``index``-th tuple of the edge-value product, in product order."""
        edges = self.traits.edge_values
        values = []
        for _ in range(arity):
            index, position = divmod(index, len(edges))
            values.append(edges[position])
        return tuple(reversed(values))


def verify_type(
    cls: type,
    config: HarnessConfig | None = None,
    registry: Mapping[type, Traits] = REGISTRY,
) -> VerificationReport:
    """Verify the laws of a registered type."""
    return Harness(traits_for(cls, registry), config).verify()


def main() -> None:
    """Verify every registered type and exit non-zero on any failure."""
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

    all_passed = True
    for cls in REGISTRY:
        report = verify_type(cls)
        print(report.summary())
        if not report.passed:
            all_passed = False

    print("\n" + "=" * 40)
    if all_passed:
        print("ALL TYPES PASSED")
    else:
        print("SOME TYPES HAD COUNTEREXAMPLES")
        sys.exit(1)


if __name__ == "__main__":
    main()
