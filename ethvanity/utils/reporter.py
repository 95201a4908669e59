# -*- coding: utf-8 -*-
import logging
import os
import threading
from dataclasses import dataclass
from typing import Callable, Optional

import click

from ethvanity.errors import LogWriteFailure


@dataclass(frozen=True)
class MatchRecord:
    seed_hex: str
    address: str

    def line(self) -> str:
        return "Private Key: {}, Address: {}".format(self.seed_hex, self.address)


class Reporter(threading.Thread):
    """Single consumer of the result channel and single writer of the result log.

    Lines are appended in the order records come off the channel. After a
    write failure the reporter stops writing, fires ``on_failure`` and keeps
    draining so that workers blocked on a full channel can exit.
    """

    def __init__(
        self,
        channel,
        path: str,
        on_failure: Optional[Callable[[], None]] = None,
        echo: Callable[[str], None] = click.echo,
    ):
        super().__init__(name="reporter", daemon=True)
        self.channel = channel
        self.path = path
        self.on_failure = on_failure
        self.echo = echo
        self.written = 0
        self.error: Optional[LogWriteFailure] = None
        self._file = None

    def open(self) -> None:
        try:
            self._file = open(self.path, "a", encoding="utf-8")
        except OSError as e:
            raise LogWriteFailure("Cannot open result log {}: {}".format(self.path, e)) from e

    def append(self, record: MatchRecord) -> None:
        try:
            self._file.write(record.line() + "\n")
            self._file.flush()
            os.fsync(self._file.fileno())
        except (OSError, ValueError) as e:
            raise LogWriteFailure("Cannot append to result log {}: {}".format(self.path, e)) from e
        self.written += 1

    def run(self) -> None:
        if self._file is None:
            try:
                self.open()
            except LogWriteFailure as e:
                self._fail(e)
        try:
            while True:
                record = self.channel.get()
                if record is None:
                    break
                if self.error is not None:
                    continue
                try:
                    self.append(record)
                except LogWriteFailure as e:
                    self._fail(e)
                    continue
                try:
                    self.echo("Found and saved: {}".format(record.line()))
                except Exception as e:
                    logging.warning("Could not echo saved match: {}".format(e))
        finally:
            self.close()

    def close(self) -> None:
        if self._file is not None:
            try:
                self._file.close()
            except OSError as e:
                logging.error("Closing result log {} failed: {}".format(self.path, e))
            self._file = None

    def _fail(self, error: LogWriteFailure) -> None:
        logging.error(str(error))
        self.error = error
        if self.on_failure is not None:
            self.on_failure()
