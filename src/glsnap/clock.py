"""
Timing helpers
"""

import time


system_clock = time.perf_counter


def elapsed_ms(start):
    return 1000 * (system_clock() - start)
