# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-02-09
# Description: DocHealthService.py
# -----------------------------------------------------------------------------
from dataclasses import dataclass

from api.schemas.health import DeepHealthResponse, SmokeTestSummary
from health.TestRunner import TestRunner


@dataclass
class DocHealthService:
    """
    Wraps TestRunner class which operates smoke tests
    on the embedding provider, vector index and text store.
    """

    test_runner: TestRunner

    def health_check(self) -> bool:
        """Liveness probe: embed + index stats."""
        return self.test_runner.run_liveness()

    def deep_health(self, run_chat: bool = False) -> DeepHealthResponse:

        results = self.test_runner.run_all(run_chat=run_chat)

        total = len(results)
        passed = sum(1 for ok in results.values() if ok)
        failed = total - passed

        overall_status = "ok" if failed == 0 else "error"

        summary = SmokeTestSummary(
            total=total,
            passed=passed,
            failed=failed,
        )

        return DeepHealthResponse(
            status=overall_status,
            results=results,
            summary=summary,
        )
