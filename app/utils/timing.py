import time


def format_response_time(started: float) -> str:
    """Milliseconds since ``started`` (a time.perf_counter() value), e.g. '153ms'."""
    return f"{round((time.perf_counter() - started) * 1000)}ms"
