"""A filtering algorithm run step by step on a worker thread."""

from __future__ import annotations

import threading
from abc import abstractmethod

from .logger import Logger
from .state_model import Skipper


class FilteringAlgorithm(Skipper, Logger):
    """Runs ``initialization_step`` then ``filtering_step`` while ``run_condition`` holds.

    :meth:`boot` starts the worker thread, which waits for :meth:`run` (or
    :meth:`teardown`). :meth:`reset` makes the worker start again from the
    initialization step; :meth:`wait` joins the worker.
    """

    def __init__(self) -> None:
        self._filtering_step = 0
        self._thread: threading.Thread | None = None
        self._cv = threading.Condition()
        self._run = False
        self._reset = False
        self._teardown = False

    def boot(self) -> bool:
        """Start the worker thread; False if it is already alive."""
        if self._thread is not None and self._thread.is_alive():
            return False
        with self._cv:
            self._run = False
            self._reset = False
            self._teardown = False
        self._thread = threading.Thread(target=self._filtering_recursion, daemon=True)
        self._thread.start()
        return True

    def run(self) -> None:
        """Let the worker start filtering."""
        with self._cv:
            self._run = True
            self._cv.notify_all()

    def wait(self) -> bool:
        """Wait for the worker to finish; False if it was never booted."""
        thread = self._thread
        if thread is None:
            return False
        thread.join()
        self._thread = None
        return True

    def reset(self) -> None:
        """Restart filtering from the initialization step."""
        with self._cv:
            self._reset = True
            self._cv.notify_all()

    def reboot(self) -> None:
        """Restart filtering from the initialization step and let it run."""
        with self._cv:
            self._reset = True
            self._run = True
            self._cv.notify_all()

    def teardown(self) -> bool:
        """Stop the worker and wait for it; False if it was never booted."""
        with self._cv:
            self._teardown = True
            self._run = False
            self._cv.notify_all()
        return self.wait()

    def step_number(self) -> int:
        """Number of filtering steps since the last initialization."""
        return self._filtering_step

    def is_running(self) -> bool:
        return self._run

    @abstractmethod
    def initialization_step(self) -> bool:
        """Prepare the filter; return whether filtering may start."""

    @abstractmethod
    def filtering_step(self) -> None:
        """Perform one filtering step."""

    @abstractmethod
    def run_condition(self) -> bool:
        """Whether another filtering step should be performed."""

    def _keep_going(self) -> bool:
        with self._cv:
            return not self._reset and not self._teardown

    def _filtering_recursion(self) -> None:
        try:
            with self._cv:
                self._cv.wait_for(lambda: self._run or self._teardown)

            while True:
                with self._cv:
                    if self._teardown:
                        break
                    self._reset = False

                if not self.initialization_step():
                    break

                self._filtering_step = 0
                while self._keep_going() and self.run_condition():
                    self.filtering_step()
                    self._filtering_step += 1

                with self._cv:
                    if not self._reset:
                        break
        finally:
            with self._cv:
                self._run = False