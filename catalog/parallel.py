"""
Run independent store queries side by side and join their results.
"""
from concurrent.futures import FIRST_EXCEPTION, wait


def gather(executor, **calls):
    """
    Submit every call to ``executor`` and wait for all of them.

    The first call to fail ends the wait: calls that have not started yet are
    cancelled, calls already running are left to finish on their own, and the
    failure is re-raised.

    Returns:
        dict: each call's result under the keyword it was passed as.
    """
    futures = {name: executor.submit(call) for name, call in calls.items()}
    done, pending = wait(futures.values(), return_when=FIRST_EXCEPTION)

    for future in done:
        error = future.exception()
        if error is not None:
            for other in pending:
                other.cancel()
            raise error

    return {name: future.result() for name, future in futures.items()}
