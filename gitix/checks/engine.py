"""
Check execution engine

Walks a check tree on background threads and reports every leaf's
outcome on a queue:

- Leaf: run the command, put one StepOutcome
- Serial: run children in order, stop at the first failure
- Parallel: run every child on its own thread, wait for all of them

``None`` on the queue means the whole tree has finished. There is no
cancellation: a consumer that stops reading after the first failure
leaves running branches to finish unobserved. Branch threads are
daemons so they do not hold up interpreter exit.
"""

import logging
import queue
import threading
from dataclasses import dataclass
from typing import Iterator, Optional, Union

from gitix.checks.tree import Check, Leaf, Parallel, Serial
from gitix.errors import CheckFailure
from gitix.executor import CommandExecutor, ExecutionResult

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StepOutcome:
    """Outcome of one leaf."""
    step: Leaf
    result: ExecutionResult
    failure: Optional[CheckFailure] = None

    @property
    def ok(self) -> bool:
        return self.failure is None


# Items put on the results queue; None closes it
QueueItem = Union[StepOutcome, Exception, None]
ResultQueue = queue.Queue  # of QueueItem


class _Branch(threading.Thread):
    """One child of a parallel group."""

    def __init__(self, check: Check, executor: CommandExecutor, results: ResultQueue):
        super().__init__(daemon=True, name=f"gitix-branch-{_label(check)}")
        self.check = check
        self.executor = executor
        self.results = results
        self.failure: Optional[CheckFailure] = None
        self.error: Optional[Exception] = None

    def run(self) -> None:
        try:
            self.failure = evaluate(self.check, self.executor, self.results)
        except Exception as e:
            self.error = e


def _label(check: Check) -> str:
    if isinstance(check, Leaf):
        return check.name
    return type(check).__name__.lower()


def evaluate(check: Check, executor: CommandExecutor, results: ResultQueue) -> Optional[CheckFailure]:
    """
    Evaluate a check and its descendants, blocking until done.

    Returns:
        the failure that stopped this subtree, or None if it succeeded
    """
    if isinstance(check, Leaf):
        result = executor.execute(check.command)
        failure = None if result.ok else CheckFailure(check, result)
        results.put(StepOutcome(step=check, result=result, failure=failure))
        return failure

    if isinstance(check, Serial):
        for child in check.children:
            failure = evaluate(child, executor, results)
            if failure is not None:
                return failure
        return None

    if isinstance(check, Parallel):
        branches = [_Branch(child, executor, results) for child in check.children]
        for branch in branches:
            branch.start()
        for branch in branches:
            branch.join()
        for branch in branches:
            if branch.error is not None:
                raise branch.error
        return next((b.failure for b in branches if b.failure is not None), None)

    raise TypeError(f"Not a check: {check!r}")


def run_check(check: Check, executor: CommandExecutor, results: ResultQueue) -> None:
    """
    Evaluate the whole tree, then close ``results``.

    An unexpected exception is put on the queue before closing so the
    consumer sees it instead of a clean finish.
    """
    try:
        evaluate(check, executor, results)
    except Exception as e:
        logger.debug("Check engine stopped by %r", e)
        results.put(e)
    finally:
        results.put(None)


def start_check(check: Check, executor: CommandExecutor) -> ResultQueue:
    """Run ``check`` on a background thread and return its results queue."""
    results: ResultQueue = queue.Queue()
    threading.Thread(
        target=run_check,
        args=(check, executor, results),
        daemon=True,
        name="gitix-checks",
    ).start()
    return results


def drain(results: ResultQueue) -> Iterator[StepOutcome]:
    """
    Yield outcomes until the engine closes the queue.

    Raises:
        Exception: whatever the engine failed with unexpectedly
    """
    while True:
        item = results.get()
        if item is None:
            return
        if isinstance(item, Exception):
            raise item
        yield item
