"""Deferred callbacks driven by the engine's tick clock."""

import logging
from typing import Callable, List, Optional
from pydantic import BaseModel, ConfigDict, Field

log = logging.getLogger(__name__)


class DeferredTask(BaseModel):
    """A callback due at a point on the scheduler clock. Cancellable until it runs."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    due: float
    callback: Callable[[], None]
    label: str = ""
    cancelled: bool = False
    done: bool = False

    @property
    def pending(self) -> bool:
        return not self.cancelled and not self.done

    def cancel(self) -> None:
        self.cancelled = True


class Scheduler(BaseModel):
    """
    Runs deferred tasks as the clock is advanced.

    There are no threads: tasks run inside `advance`, on the same logical
    thread as input handling.

    Attributes:
        clock: Seconds elapsed since the scheduler was created
        tasks: Tasks not yet run or discarded
    """

    clock: float = 0.0
    tasks: List[DeferredTask] = Field(default_factory=list)

    def schedule(self, delay: float, callback: Callable[[], None], label: str = "") -> DeferredTask:
        """
        Run `callback` once `delay` seconds of clock time have passed.

        Returns:
            The task handle, which can be cancelled
        """
        if delay < 0:
            raise ValueError(f"Delay must be non-negative, got {delay}")
        task = DeferredTask(due=self.clock + delay, callback=callback, label=label)
        self.tasks.append(task)
        return task

    def advance(self, delta: float) -> int:
        """
        Move the clock forward and run every task that has come due.

        A task cancelled by an earlier callback in the same advance is skipped.
        If a callback raises, the remaining due tasks still run and the first
        error is re-raised afterwards.

        Returns:
            Number of tasks run
        """
        if delta < 0:
            raise ValueError(f"Time delta must be non-negative, got {delta}")
        self.clock += delta

        due = sorted(
            (t for t in self.tasks if t.pending and t.due <= self.clock),
            key=lambda t: t.due,
        )
        due_ids = {id(t) for t in due}
        self.tasks = [t for t in self.tasks if t.pending and id(t) not in due_ids]

        ran = 0
        error: Optional[Exception] = None
        for task in due:
            if task.cancelled:
                continue
            task.done = True
            ran += 1
            try:
                task.callback()
            except Exception as e:
                log.exception("Deferred task '%s' failed", task.label)
                if error is None:
                    error = e
        if error is not None:
            raise error
        return ran

    def cancel_all(self) -> None:
        for task in self.tasks:
            task.cancel()
        self.tasks = []

    @property
    def pending(self) -> List[DeferredTask]:
        return [t for t in self.tasks if t.pending]
