# -*- coding: utf-8 -*-
import time


def format_count(n: int) -> str:
    return "{:,}".format(int(n))


def format_duration(seconds: float) -> str:
    """Render elapsed seconds as H:MM:SS, with a day count past 24 hours."""
    seconds = max(int(seconds), 0)
    days, rest = divmod(seconds, 86400)
    hms = time.strftime("%H:%M:%S", time.gmtime(rest))
    if days:
        return "{}d {}".format(days, hms)
    return hms


def format_rate(count: int, seconds: float) -> str:
    rate = count / seconds if seconds > 0 else 0.0
    return "{:,}".format(int(rate))
