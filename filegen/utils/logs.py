import time


def log_event(logger, operation: str, key: str, phase: str, status: str, msg: str = ""):
    # Format: SERVICE, OPERATION, KEY, START/END, Status, MSG
    logger.debug(f"GENERATOR,{operation},{key},{phase},{status},{msg}")


def elapsed_ms(ns_start: int) -> float:
    return (time.perf_counter_ns() - ns_start) / 1e6
