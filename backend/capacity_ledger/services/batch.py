"""Sequential (or bounded-concurrency) execution of independent write operations.

A failure never undoes earlier successes; the result lists what failed and why.
"""
from collections.abc import Callable, Sequence
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Any

from capacity_ledger.core.errors import AppError
from capacity_ledger.core.logging import logger


@dataclass
class BatchOperation:
    key: Any
    run: Callable[[], Any]
    payload: Any = None


@dataclass
class BatchItemError:
    key: Any
    code: str
    message: str
    payload: Any = None
    details: Any = None


@dataclass
class BatchResult:
    succeeded: int = 0
    failed: int = 0
    errors: list[BatchItemError] = field(default_factory=list)
    results: list[Any] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.failed == 0


class BatchExecutor:
    def __init__(self, max_workers: int = 1):
        self.max_workers = max(1, max_workers)

    def _run_one(self, op: BatchOperation) -> tuple[Any, BatchItemError | None]:
        try:
            return op.run(), None
        except AppError as e:
            return None, BatchItemError(op.key, e.code, e.message, op.payload, e.details)
        except Exception as e:
            logger.exception("batch_operation_failed", key=str(op.key), error=str(e))
            return None, BatchItemError(op.key, "INTERNAL_ERROR", str(e), op.payload)

    def run(self, operations: Sequence[BatchOperation]) -> BatchResult:
        if self.max_workers == 1:
            outcomes = [self._run_one(op) for op in operations]
        else:
            with ThreadPoolExecutor(max_workers=self.max_workers) as pool:
                outcomes = list(pool.map(self._run_one, operations))

        result = BatchResult()
        for value, error in outcomes:
            if error is None:
                result.succeeded += 1
                result.results.append(value)
            else:
                result.failed += 1
                result.errors.append(error)
        return result
