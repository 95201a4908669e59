# -*- coding: utf-8 -*-
import logging
import multiprocessing
import signal
import time
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from multiprocessing.connection import wait
from typing import Callable, List, Optional

import click

from ethvanity.config import SearchSetting
from ethvanity.errors import FatalSearchError, QueueClosedViolation
from ethvanity.utils.crypto import derive_candidates, next_seed
from ethvanity.utils.reporter import MatchRecord, Reporter
from ethvanity.utils.status import StatusEmitter

SUPERVISE_INTERVAL = 0.5


class SearchState:
    """Counters and stop signal shared by every worker of one search.

    Both counters are incremented under their own lock and the new value is
    returned, so each accepted match draws a unique ``found`` ticket.
    """

    def __init__(self, limit: int, ctx=multiprocessing):
        self.limit = limit
        self._generated = ctx.Value("q", 0)
        self._found = ctx.Value("q", 0)
        self._stop = ctx.Event()

    def add_generated(self, n: int = 1) -> int:
        with self._generated.get_lock():
            self._generated.value += n
            return self._generated.value

    def add_found(self) -> int:
        with self._found.get_lock():
            self._found.value += 1
            return self._found.value

    @property
    def generated(self) -> int:
        with self._generated.get_lock():
            return self._generated.value

    @property
    def found(self) -> int:
        with self._found.get_lock():
            return self._found.value

    def stop(self) -> None:
        self._stop.set()

    @property
    def stopped(self) -> bool:
        return self._stop.is_set()


class ResultChannel:
    """Bounded queue of MatchRecords from the workers to the reporter.

    ``put`` blocks while ``capacity`` records are waiting. ``close`` marks the
    channel closed and enqueues the ``None`` sentinel that ends the reporter;
    any later ``put`` raises QueueClosedViolation.
    """

    def __init__(self, capacity: int, ctx=multiprocessing):
        self.capacity = capacity
        self._queue = ctx.Queue(maxsize=capacity)
        self._closed = ctx.Event()

    def put(self, record: MatchRecord) -> None:
        if self._closed.is_set():
            raise QueueClosedViolation("Result channel is closed, dropping {}".format(record.line()))
        self._queue.put(record)

    def get(self) -> Optional[MatchRecord]:
        return self._queue.get()

    def close(self) -> None:
        if self._closed.is_set():
            return
        self._closed.set()
        self._queue.put(None)

    @property
    def closed(self) -> bool:
        return self._closed.is_set()


def search_worker(worker_id: int, spec, state: SearchState, channel: ResultChannel, failures) -> None:
    """Generate, derive and test keys until the stop signal is seen."""
    pool = None
    if spec.fan_out > 1:
        pool = ThreadPoolExecutor(max_workers=spec.fan_out, thread_name_prefix="derive-{}".format(worker_id))
    try:
        while not state.stopped:
            seed = next_seed()
            state.add_generated(spec.fan_out)
            for candidate in derive_candidates(spec, seed, pool):
                if not spec.matches(candidate.address):
                    continue
                if state.add_found() > state.limit:
                    state.stop()
                    continue
                channel.put(MatchRecord(candidate.seed_hex, candidate.address))
    except FatalSearchError as e:
        logging.error("Worker {} aborted: {}".format(worker_id, e))
        failures.put((worker_id, e))
        state.stop()
    except Exception:
        logging.exception("Worker {} crashed".format(worker_id))
        state.stop()
        raise
    finally:
        if pool is not None:
            pool.shutdown(wait=True)


def _worker_main(worker_id: int, spec, state: SearchState, channel: ResultChannel, failures) -> None:
    # Ctrl-C is handled by the supervisor, which sets the stop signal
    signal.signal(signal.SIGINT, signal.SIG_IGN)
    search_worker(worker_id, spec, state, channel, failures)


@dataclass
class SearchSummary:
    generated: int
    found: int
    written: int
    elapsed: float
    interrupted: bool = False


class Searcher:
    def __init__(self, setting: SearchSetting, echo: Callable[[str], None] = click.echo):
        self.setting = setting
        self.echo = echo
        self.ctx = multiprocessing.get_context(setting.start_method)
        self.state = SearchState(setting.limit, self.ctx)
        self.channel = ResultChannel(setting.queue_capacity, self.ctx)
        self.failures = self.ctx.SimpleQueue()

    def run(self) -> SearchSummary:
        """Run the search to completion and return its summary.

        Raises the first fatal error reported by a worker or the reporter,
        after every worker has stopped and the reporter has drained.
        """
        setting = self.setting
        reporter = Reporter(self.channel, setting.output_file, on_failure=self.state.stop, echo=self.echo)
        reporter.open()

        start_time = time.time()
        reporter.start()
        status = None
        if setting.status_interval > 0:
            status = StatusEmitter(self.state, setting.status_interval, start_time, echo=self.echo)
            status.start()

        processes = [
            self.ctx.Process(
                target=_worker_main,
                args=(i, setting.spec, self.state, self.channel, self.failures),
                name="ethvanity-worker-{}".format(i),
            )
            for i in range(setting.workers)
        ]
        logging.info("Starting {} worker(s), limit {} match(es)".format(setting.workers, setting.limit))
        interrupted = False
        try:
            for p in processes:
                p.start()
            interrupted = self._supervise(processes, reporter)
        finally:
            self.state.stop()
            for p in processes:
                if p.pid is not None:
                    p.join()
            self.channel.close()
            reporter.join()
            if status is not None:
                status.halt()
                status.join()

        errors = self._collect_errors(processes, reporter)
        if errors:
            raise errors[0]
        return SearchSummary(
            generated=self.state.generated,
            found=self.state.found,
            written=reporter.written,
            elapsed=time.time() - start_time,
            interrupted=interrupted,
        )

    def _supervise(self, processes: List[multiprocessing.Process], reporter: Reporter) -> bool:
        try:
            while any(p.is_alive() for p in processes):
                wait([p.sentinel for p in processes], timeout=SUPERVISE_INTERVAL)
                crashed = any(p.exitcode not in (None, 0) for p in processes)
                if crashed or reporter.error is not None or not self.failures.empty():
                    self.state.stop()
        except KeyboardInterrupt:
            logging.info("Interrupted, waiting for workers to stop...")
            self.state.stop()
            return True
        return False

    def _collect_errors(self, processes: List[multiprocessing.Process], reporter: Reporter) -> List[FatalSearchError]:
        errors: List[FatalSearchError] = []
        while not self.failures.empty():
            _, error = self.failures.get()
            errors.append(error)
        if reporter.error is not None:
            errors.append(reporter.error)
        for p in processes:
            if p.exitcode not in (None, 0):
                errors.append(FatalSearchError("{} exited with code {}".format(p.name, p.exitcode)))
        return errors
