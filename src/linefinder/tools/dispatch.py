"""
Task dispatch for linefinder.

The engine launches one match task per record through a TaskSpawner and
waits on a CompletionBarrier before returning. Two spawn policies exist:

- ThreadPerRecordSpawner starts a thread for every task (unbounded fan-out,
  the default; large inputs may exhaust threads or memory)
- BoundedPoolSpawner runs tasks on a ThreadPoolExecutor with a fixed
  number of workers

Matching logic is unaware of which policy is in use.
"""

from abc import ABC, abstractmethod
from concurrent.futures import ThreadPoolExecutor
import logging
import threading
from typing import Any, Callable, Optional

from ..exceptions import TaskError


logger = logging.getLogger(__name__)


class CompletionBarrier:
    """
    Counting barrier that lets a dispatcher wait for all launched tasks.

    Every ``add`` must be paired with exactly one ``done``. The first
    exception reported through ``fail`` is re-raised by ``wait`` once the
    count has dropped back to zero.
    """

    def __init__(self):
        self._condition = threading.Condition()
        self._pending = 0
        self._error: Optional[BaseException] = None

    @property
    def pending(self) -> int:
        with self._condition:
            return self._pending

    def add(self, count: int = 1) -> None:
        with self._condition:
            if self._pending + count < 0:
                raise ValueError("Completion barrier counter cannot go negative")
            self._pending += count
            if self._pending == 0:
                self._condition.notify_all()

    def done(self) -> None:
        self.add(-1)

    def fail(self, error: BaseException) -> None:
        """Record a task failure; only the first one is kept."""
        with self._condition:
            if self._error is None:
                self._error = error

    def wait(self) -> None:
        """
        Block until every added task has called ``done``.

        Raises:
            TaskError: If any task reported a failure
        """
        with self._condition:
            self._condition.wait_for(lambda: self._pending == 0)
            error = self._error

        if error is not None:
            raise TaskError(f"Match task failed: {error}", original_error=error) from error


class TaskSpawner(ABC):
    """
    Policy for running match tasks concurrently.

    ``spawn`` registers the task with the barrier before it starts and the
    task signals completion exactly once, whether it succeeded or raised.
    """

    def __init__(self):
        self.barrier = CompletionBarrier()
        self.tasks_launched = 0

    def spawn(self, func: Callable[..., Any], *args: Any) -> None:
        """
        Launch ``func(*args)`` as an independent task.

        Args:
            func: Task callable
            *args: Positional arguments for the task
        """
        self.barrier.add()
        try:
            self._start(self._wrap(func, args))
        except RuntimeError as e:
            # Thread creation fails once the process runs out of threads.
            self.barrier.done()
            raise TaskError(f"Cannot start match task: {e}", original_error=e) from e
        except BaseException:
            self.barrier.done()
            raise
        self.tasks_launched += 1

    def _wrap(self, func: Callable[..., Any], args: tuple) -> Callable[[], None]:
        def run_task() -> None:
            try:
                func(*args)
            except BaseException as e:
                logger.debug(f"Match task raised {type(e).__name__}: {e}")
                self.barrier.fail(e)
            finally:
                self.barrier.done()
        return run_task

    @abstractmethod
    def _start(self, task: Callable[[], None]) -> None:
        """Start a wrapped task."""

    def join(self) -> None:
        """
        Wait for every spawned task and release spawner resources.

        Raises:
            TaskError: If any task failed
        """
        try:
            self.barrier.wait()
        finally:
            self.shutdown()

    def drain(self) -> None:
        """
        Wait for every spawned task without raising task failures.

        Used when the run is already failing for another reason; tasks that
        were launched must still finish before shared resources are closed.
        """
        try:
            self.barrier.wait()
        except TaskError as e:
            logger.debug(f"Discarding task failure while unwinding: {e}")
        finally:
            self.shutdown()

    def shutdown(self) -> None:
        pass


class ThreadPerRecordSpawner(TaskSpawner):
    """Starts one thread per task with no cap on concurrency."""

    def _start(self, task: Callable[[], None]) -> None:
        threading.Thread(target=task, daemon=True).start()


class BoundedPoolSpawner(TaskSpawner):
    """Runs tasks on a thread pool with at most ``max_workers`` threads."""

    def __init__(self, max_workers: int):
        if max_workers < 1:
            raise ValueError("max_workers must be positive")
        super().__init__()
        self.max_workers = max_workers
        self._executor = ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="linefinder")

    def _start(self, task: Callable[[], None]) -> None:
        self._executor.submit(task)

    def shutdown(self) -> None:
        self._executor.shutdown(wait=True)


def create_spawner(max_workers: Optional[int] = None) -> TaskSpawner:
    """
    Create the spawner for a worker cap.

    Args:
        max_workers: Maximum worker threads, or None for one thread per task

    Returns:
        A fresh TaskSpawner
    """
    if max_workers is None:
        return ThreadPerRecordSpawner()
    return BoundedPoolSpawner(max_workers)
