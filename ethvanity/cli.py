# -*- coding: utf-8 -*-
import logging
import sys
import time

import click

from ethvanity.config import (
    DEFAULT_ADJACENT_LENGTH,
    DEFAULT_LIMIT,
    DEFAULT_OUTPUT_FILE,
    DEFAULT_START_METHOD,
    DEFAULT_STATUS_INTERVAL,
    MODES,
    START_METHODS,
    SearchSetting,
    load_config_file,
)
from ethvanity.errors import FatalSearchError
from ethvanity.searcher import Searcher
from ethvanity.utils.crypto import derive_address, next_seed
from ethvanity.utils.helpers import format_count, format_duration
from ethvanity.utils.matcher import build_match_spec

logging.basicConfig(level=logging.INFO, format="[%(levelname)s %(asctime)s] %(message)s")


@click.group()
def cli():
    """Ethereum Vanity Address Searcher"""
    pass


@cli.command(context_settings={"show_default": True})
@click.option(
    "--config", "-c", type=click.Path(exists=True, dir_okay=False),
    help="Read parameters from a JSON file; command-line values fill the gaps."
)
@click.option(
    "--mode", type=click.Choice(MODES), default="prefix-suffix",
    help="Match policy."
)
@click.option(
    "--starts-with", type=str, default=[], multiple=True,
    help="Address prefix, 0x optional (repeatable)."
)
@click.option(
    "--ends-with", type=str, default=[], multiple=True,
    help="Address suffix (repeatable)."
)
@click.option(
    "--repeat-prefix", type=click.IntRange(min=1, max=40), default=None,
    help="Add the 16 prefixes made of one hex digit repeated N times."
)
@click.option(
    "--repeat-suffix", type=click.IntRange(min=1, max=40), default=None,
    help="Add the 16 suffixes made of one hex digit repeated N times."
)
@click.option(
    "--alphabet", type=str, default=None,
    help="Order of last-digit substitutions in mutation mode (all 16 hex digits)."
)
@click.option(
    "--adjacent-length", type=click.IntRange(min=1, max=40), default=DEFAULT_ADJACENT_LENGTH,
    help="Run length of identical characters after 0x in adjacent mode."
)
@click.option(
    "--count", type=click.IntRange(min=1), default=DEFAULT_LIMIT,
    help="How many matches to record before stopping."
)
@click.option(
    "--workers", type=click.IntRange(min=1), default=None,
    help="Worker processes (default: CPU count)."
)
@click.option(
    "--output", type=click.Path(dir_okay=False), default=DEFAULT_OUTPUT_FILE,
    help="Result log, appended to."
)
@click.option(
    "--status-interval", type=click.FloatRange(min=0), default=DEFAULT_STATUS_INTERVAL,
    help="Seconds between progress lines (0 disables)."
)
@click.option(
    "--queue-capacity", type=click.IntRange(min=1), default=None,
    help="Matches that may wait for the log writer (default: worker count)."
)
@click.option(
    "--start-method", type=click.Choice(START_METHODS), default=DEFAULT_START_METHOD,
    help="multiprocessing start method for workers."
)
def search(
    config,
    mode,
    starts_with,
    ends_with,
    repeat_prefix,
    repeat_suffix,
    alphabet,
    adjacent_length,
    count,
    workers,
    output,
    status_interval,
    queue_capacity,
    start_method,
):
    """Search for Ethereum vanity addresses."""
    params = {
        "mode": mode,
        "starts_with": tuple(starts_with),
        "ends_with": tuple(ends_with),
        "repeat_prefix": repeat_prefix,
        "repeat_suffix": repeat_suffix,
        "alphabet": alphabet,
        "adjacent_length": adjacent_length,
        "count": count,
        "workers": workers,
        "output": output,
        "status_interval": status_interval,
        "queue_capacity": queue_capacity,
        "start_method": start_method,
    }
    if config:
        try:
            params = load_config_file(config, params)
        except (OSError, ValueError) as e:
            logging.error("Failed to load {}: {}".format(config, e))
            sys.exit(1)

    try:
        spec = build_match_spec(
            params["mode"],
            starts_with=params["starts_with"],
            ends_with=params["ends_with"],
            repeat_prefix=params["repeat_prefix"],
            repeat_suffix=params["repeat_suffix"],
            alphabet=params["alphabet"],
            adjacent_length=params["adjacent_length"],
        )
        setting = SearchSetting(
            spec,
            limit=params["count"],
            workers=params["workers"],
            output_file=params["output"],
            status_interval=params["status_interval"],
            queue_capacity=params["queue_capacity"],
            start_method=params["start_method"],
        )
    except (TypeError, ValueError) as e:
        raise click.UsageError(str(e))

    logging.info("Match policy: {!r}".format(spec))
    logging.info("Results go to {}".format(setting.output_file))
    try:
        summary = Searcher(setting).run()
    except FatalSearchError as e:
        logging.error("Search aborted: {}".format(e))
        sys.exit(1)

    logging.info("=== Summary ===")
    logging.info("Total runtime: {} ({:.1f} s)".format(format_duration(summary.elapsed), summary.elapsed))
    logging.info("Total keys tested: {}".format(format_count(summary.generated)))
    logging.info("Total matches saved: {}".format(summary.written))
    if summary.written > 0 and summary.elapsed > 0:
        avg_time_per_find = summary.elapsed / summary.written
        logging.info("Efficiency: avg {:.2f}s per match ({:.2f} matches/hour)".format(
            avg_time_per_find, 3600.0 / avg_time_per_find
        ))
    if summary.interrupted:
        logging.info("Stopped by user.")
    click.echo("Address generation completed. Results saved to {}".format(setting.output_file))


@cli.command()
@click.argument("private_key", required=False)
def derive(private_key):
    """Print the address of a hex private key (prompted when omitted)."""
    if private_key is None:
        private_key = click.prompt("Private key (hex)", type=str)
    key_hex = private_key.strip().lower()
    if key_hex.startswith("0x"):
        key_hex = key_hex[2:]
    try:
        seed = bytes.fromhex(key_hex)
    except ValueError:
        click.echo("Invalid hex private key: {}".format(private_key))
        raise SystemExit(1)
    try:
        click.echo(derive_address(seed))
    except FatalSearchError as e:
        click.echo(str(e))
        raise SystemExit(1)


@cli.command(context_settings={"show_default": True})
@click.option("--keys", type=click.IntRange(min=1), default=10000, help="Keys to derive.")
def benchmark(keys):
    """Measure single-process derivation speed."""
    logging.info("Deriving {} keys on one core".format(format_count(keys)))
    t0 = time.time()
    try:
        for _ in range(keys):
            derive_address(next_seed())
    except FatalSearchError as e:
        logging.error("Benchmark aborted: {}".format(e))
        sys.exit(1)
    elapsed = time.time() - t0
    rate = keys / elapsed if elapsed > 0 else 0
    logging.info("{:,} keys/s ({:.3f} s total)".format(int(rate), elapsed))


if __name__ == "__main__":
    cli()
