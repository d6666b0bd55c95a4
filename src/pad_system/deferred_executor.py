"""
Deferred work executor - single worker thread for blocking sampling passes
"""

import threading
from typing import Callable, Optional


class DeferredWorkExecutor:
    """
    Single-worker queue holding at most one job.
    
    submit() is called from the timer thread and never blocks: it either
    queues the job or, when one is already queued or running, drops the
    request. The worker runs the job (sample + report) and goes idle.
    
    Example:
        executor = DeferredWorkExecutor(device.run_pass, "P1", logger)
        executor.submit()           # from the timer thread
        executor.drain()            # wait for the queue to go idle
        executor.drain_and_stop()   # teardown, idempotent
    """
    
    def __init__(self, job: Callable[[], None], name: str, logger):
        """
        Args:
            job: The sampling+report pass to run on the worker
            name: Suffix for the worker thread name
            logger: ClassLogger instance for logging
        """
        self._job = job
        self._name = name
        self._logger = logger
        
        self._cond = threading.Condition()
        self._pending = False
        self._running = False
        self._stopping = False
        self._stopped = False
        self._jobs_run = 0
        self._worker: Optional[threading.Thread] = None
    
    @property
    def jobs_run(self) -> int:
        return self._jobs_run
    
    @property
    def outstanding(self) -> bool:
        """True while a job is queued or executing"""
        with self._cond:
            return self._pending or self._running
    
    @property
    def stopped(self) -> bool:
        return self._stopped
    
    def submit(self) -> bool:
        """
        Queue one pass unless one is already outstanding.
        
        Returns:
            True if the job was queued, False if it was coalesced or the
            executor is stopped
        """
        with self._cond:
            if self._stopping or self._stopped:
                return False
            if self._pending or self._running:
                return False
            self._pending = True
            if self._worker is None:
                self._start_worker()
            self._cond.notify_all()
            return True
    
    def drain(self) -> None:
        """
        Block until no job is queued or running.
        
        A queued job still runs before drain() returns. Called from the
        worker itself (a job closing its own pad) the queued job is
        cancelled instead, since the worker cannot wait on itself.
        """
        with self._cond:
            if threading.current_thread() is self._worker:
                self._pending = False
                return
            while self._pending or self._running:
                self._cond.wait()
    
    def drain_and_stop(self) -> None:
        """
        Wait for outstanding work, then stop the worker for good.
        
        After this returns no job will start again; submit() becomes a
        no-op. A second call returns immediately.
        """
        with self._cond:
            if self._stopped:
                return
            self._stopping = True
            self._cond.notify_all()
        
        self.drain()
        
        with self._cond:
            self._stopped = True
            self._cond.notify_all()
            worker = self._worker
        
        if worker is not None and worker is not threading.current_thread():
            worker.join()
        self._logger.debug(f"Deferred worker {self._name} stopped after {self._jobs_run} jobs")
    
    def _start_worker(self) -> None:
        self._worker = threading.Thread(
            target=self._worker_loop,
            name=f"pad-worker-{self._name}",
            daemon=True,
        )
        self._worker.start()
    
    def _worker_loop(self) -> None:
        while True:
            with self._cond:
                while not self._pending and not self._stopped:
                    self._cond.wait()
                if not self._pending:
                    # stopped and nothing left to do
                    return
                self._pending = False
                self._running = True
            
            try:
                self._job()
            except Exception as e:
                self._logger.error(f"Deferred job on {self._name} failed", exception=e)
            finally:
                with self._cond:
                    self._running = False
                    self._jobs_run += 1
                    self._cond.notify_all()
