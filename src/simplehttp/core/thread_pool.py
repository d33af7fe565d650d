"""
=============================================================================
FIXED-SIZE THREAD POOL
=============================================================================

A fixed number of worker threads pulling tasks from one shared queue.

    ┌─────────────────────────────────────────────────────────────────────┐
    │                        Thread Pool                                   │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │   accept loop ──submit()──►  [conn 1] [conn 2] [conn 3] ...         │
    │                              TASK QUEUE (queue.Queue, FIFO)          │
    │                                    │                                 │
    │                                    │ get()                           │
    │                                    ▼                                 │
    │   ┌──────────┐ ┌──────────┐ ┌──────────┐       ┌───────────┐        │
    │   │ Worker 0 │ │ Worker 1 │ │ Worker 2 │  ...  │ Worker 9  │        │
    │   │ (busy)   │ │ (idle)   │ │ (busy)   │       │ (idle)    │        │
    │   └──────────┘ └──────────┘ └──────────┘       └───────────┘        │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

The worker count never changes after start(). When every worker is busy,
new tasks wait in the queue. With queue_size=0 the queue is unbounded and
submit() never blocks; with a positive queue_size, submit() blocks until a
slot frees up. Nothing is ever rejected.

=============================================================================
WORKER LIFECYCLE
=============================================================================

    def run(self):
        while True:
            task = queue.get()      ← BLOCKS until task available
            if task is None:        ← "Poison pill" signals shutdown
                break
            execute(task)           ← exceptions are logged, never raised
            queue.task_done()

shutdown() enqueues one pill per worker. Pills queue up behind any tasks
already submitted, so accepted work still runs; shutdown() only waits for
it when asked to.

=============================================================================
"""

import threading
import queue
import time
import logging
from typing import Callable, Optional, Any
from dataclasses import dataclass, field
from enum import Enum


logger = logging.getLogger(__name__)


class WorkerState(Enum):
    """Worker thread states, used for monitoring."""
    IDLE = "idle"        # Waiting for task
    BUSY = "busy"        # Executing task
    STOPPED = "stopped"  # Thread exited


@dataclass
class Task:
    """
    A deferred function call.

    Attributes:
        func: The function to execute.
        args: Positional arguments.
        kwargs: Keyword arguments.
        submitted_at: time.time() at submission, for queue-wait logging.
    """
    func: Callable[..., Any]
    args: tuple = ()
    kwargs: dict = field(default_factory=dict)
    submitted_at: float = field(default_factory=time.time)


class Worker(threading.Thread):
    """
    Worker thread that processes tasks from the queue until it receives
    a poison pill.
    """

    def __init__(self, task_queue: queue.Queue, worker_id: int):
        # daemon=True: a stuck client never keeps the process alive
        super().__init__(name=f"Worker-{worker_id}", daemon=True)

        self.task_queue = task_queue
        self.worker_id = worker_id
        self.state = WorkerState.IDLE

        self.tasks_completed = 0
        self.tasks_failed = 0

    def run(self):
        logger.debug(f"Worker {self.worker_id} started")

        while True:
            task = self.task_queue.get()
            try:
                if task is None:
                    break
                self._execute_task(task)
            finally:
                self.task_queue.task_done()

        self.state = WorkerState.STOPPED
        logger.debug(f"Worker {self.worker_id} stopped")

    def _execute_task(self, task: Task):
        """
        Run one task, tracking state and timing.

        Exceptions are logged and counted; the worker keeps going.
        """
        self.state = WorkerState.BUSY
        start_time = time.time()
        waited = start_time - task.submitted_at
        if waited > 1.0:
            logger.debug(f"Worker {self.worker_id} picked up task after {waited:.2f}s in queue")

        try:
            task.func(*task.args, **task.kwargs)

            elapsed = time.time() - start_time
            logger.debug(f"Worker {self.worker_id} completed task in {elapsed:.3f}s")
            self.tasks_completed += 1

        except Exception as e:
            elapsed = time.time() - start_time
            logger.exception(
                f"Worker {self.worker_id} task failed after {elapsed:.3f}s: {e}"
            )
            self.tasks_failed += 1

        finally:
            self.state = WorkerState.IDLE


class ThreadPool:
    """
    Fixed-size thread pool.

    ┌─────────────────────────────────────────────────────────────────────┐
    │                      ThreadPool Usage                                │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │   pool = ThreadPool(workers=10)          # queue_size=0: unbounded  │
    │   pool.start()                                                       │
    │                                                                      │
    │   pool.submit(handle_connection, args=(conn,))                      │
    │                                                                      │
    │   print(pool.stats)  # {"workers": {"busy": 3, ...}, ...}          │
    │                                                                      │
    │   pool.shutdown()             # stop taking work, don't wait        │
    │   pool.shutdown(wait=True)    # ...and join the workers             │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘
    """

    def __init__(self, workers: int = 10, queue_size: int = 0):
        """
        Args:
            workers: Number of worker threads, created by start().
            queue_size: Task queue capacity. 0 = unbounded.
        """
        if workers < 1:
            raise ValueError("workers must be >= 1")

        self.workers = workers
        self.max_queue_size = queue_size

        self._task_queue: "queue.Queue[Optional[Task]]" = queue.Queue(maxsize=queue_size)
        self._workers: list[Worker] = []
        self._lock = threading.Lock()
        self._started = False
        self._shutdown = False

    @property
    def is_running(self) -> bool:
        return self._started and not self._shutdown

    def start(self):
        """Create and start all worker threads. No-op if already started."""
        with self._lock:
            if self._started:
                return
            if self._shutdown:
                raise RuntimeError("Thread pool has been shut down")

            logger.info(f"Starting thread pool with {self.workers} workers")
            for worker_id in range(self.workers):
                worker = Worker(self._task_queue, worker_id)
                self._workers.append(worker)
                worker.start()

            self._started = True

    def submit(
        self,
        func: Callable[..., Any],
        args: tuple = (),
        kwargs: Optional[dict] = None,
        timeout: Optional[float] = None,
    ):
        """
        Queue ``func(*args, **kwargs)`` for a worker.

        Blocks only when queue_size is positive and the queue is full.

        Args:
            timeout: Longest wait for a free slot. None waits forever.

        Raises:
            RuntimeError: If the pool is not started or is shutting down.
            queue.Full: If no slot freed up within ``timeout``.
        """
        if not self._started:
            raise RuntimeError("Thread pool not started")
        if self._shutdown:
            raise RuntimeError("Thread pool is shutting down")

        self._task_queue.put(Task(func=func, args=args, kwargs=kwargs or {}), timeout=timeout)

    def shutdown(self, wait: bool = False, timeout: Optional[float] = None):
        """
        Stop accepting tasks and tell every worker to exit.

        Tasks already queued are still executed before the workers see
        their poison pill.

        Args:
            wait: Join the worker threads before returning.
            timeout: Per-worker join timeout when wait is True.
        """
        with self._lock:
            if not self._started or self._shutdown:
                return
            self._shutdown = True

        logger.info("Shutting down thread pool...")

        for _ in self._workers:
            try:
                self._task_queue.put(None, block=wait)
            except queue.Full:
                # Daemon workers die with the process
                logger.warning("Task queue full, could not signal every worker")

        if wait:
            for worker in self._workers:
                worker.join(timeout=timeout)

        logger.info("Thread pool shutdown complete")

    # =========================================================================
    # MONITORING
    # =========================================================================

    @property
    def active_workers(self) -> int:
        """Workers that have not exited."""
        return sum(1 for w in self._workers if w.is_alive())

    @property
    def busy_workers(self) -> int:
        return sum(1 for w in self._workers if w.state == WorkerState.BUSY)

    @property
    def idle_workers(self) -> int:
        return sum(1 for w in self._workers if w.state == WorkerState.IDLE)

    @property
    def queued_tasks(self) -> int:
        return self._task_queue.qsize()

    @property
    def stats(self) -> dict:
        """Worker and task counts for monitoring."""
        return {
            "workers": {
                "total": len(self._workers),
                "active": self.active_workers,
                "busy": self.busy_workers,
                "idle": self.idle_workers,
            },
            "tasks": {
                "queued": self.queued_tasks,
                "completed": sum(w.tasks_completed for w in self._workers),
                "failed": sum(w.tasks_failed for w in self._workers),
            },
        }
