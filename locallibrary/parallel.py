"""Fan-out / fan-in join for independent reads.

``parallel`` runs a fixed set of named zero-argument callables, waits for all
of them and hands back their results as one named bag. The first failure
wins: pending siblings are cancelled, finished ones are discarded and the
exception is re-raised to the caller.
"""

import atexit
import contextvars
import logging
from concurrent.futures import FIRST_EXCEPTION, ThreadPoolExecutor, wait
from typing import Any, Callable, Mapping, Optional

log = logging.getLogger(__name__)


class Results(dict):
    """Named results of a join; items are also readable as attributes."""

    def __getattr__(self, name):
        try:
            return self[name]
        except KeyError:
            raise AttributeError(name) from None


def parallel(tasks: Mapping[str, Callable[[], Any]], executor=None) -> Results:
    if executor is None:
        results = Results()
        for name, task in tasks.items():
            results[name] = task()
        return results

    futures = {
        name: executor.submit(contextvars.copy_context().run, task)
        for name, task in tasks.items()
    }
    done, pending = wait(futures.values(), return_when=FIRST_EXCEPTION)
    for future in pending:
        future.cancel()

    for name, future in futures.items():
        if future in done and not future.cancelled() and future.exception() is not None:
            log.debug("parallel task %r failed, discarding siblings", name)
            raise future.exception()

    return Results((name, future.result()) for name, future in futures.items())


class Fetcher:
    """Application-wide join used by the request handlers.

    With ``workers`` > 0 each task runs on a pool thread inside its own
    application context, so it gets a database session of its own. With
    ``workers`` == 0 tasks run inline on the request thread.
    """

    def __init__(self, app, workers: int = 0):
        self.app = app
        self.workers = workers
        self.executor: Optional[ThreadPoolExecutor] = None
        if workers > 0:
            self.executor = ThreadPoolExecutor(max_workers=workers, thread_name_prefix="catalog-fetch")
            atexit.register(self.shutdown)

    def _in_app_context(self, task):
        def run():
            with self.app.app_context():
                return task()
        return run

    def __call__(self, **tasks) -> Results:
        if self.executor is None:
            return parallel(tasks)
        return parallel({name: self._in_app_context(task) for name, task in tasks.items()}, self.executor)

    def shutdown(self):
        if self.executor is not None:
            self.executor.shutdown(wait=True)
            self.executor = None
            atexit.unregister(self.shutdown)
