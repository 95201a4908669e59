# -*- coding: utf-8 -*-
import logging
import threading
import time
from typing import Callable

import click

from ethvanity.utils.helpers import format_count, format_duration, format_rate


def format_status(elapsed: float, generated: int, found: int) -> str:
    return "[{}] Running for: {} | Addresses Generated: {} | Addresses Found: {} | Rate: {} keys/s".format(
        time.strftime("%H:%M:%S"),
        format_duration(elapsed),
        format_count(generated),
        format_count(found),
        format_rate(generated, elapsed),
    )


class StatusEmitter(threading.Thread):
    """Prints a progress line every ``interval`` seconds until halted.

    Only reads the search counters; a failing echo is logged and skipped.
    """

    def __init__(self, state, interval: float, start_time: float, echo: Callable[[str], None] = click.echo):
        super().__init__(name="status", daemon=True)
        self.state = state
        self.interval = interval
        self.start_time = start_time
        self.echo = echo
        self._halt = threading.Event()

    def run(self) -> None:
        while not self._halt.wait(self.interval):
            try:
                self.echo(format_status(time.time() - self.start_time, self.state.generated, self.state.found))
            except Exception as e:
                logging.warning("Status report failed: {}".format(e))

    def halt(self) -> None:
        self._halt.set()
