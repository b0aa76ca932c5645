"""
Fitness evaluation fan-out.

The fitness function is supplied by the caller (typically a full world
simulation scoring one controller network) and may return a float or an
awaitable resolving to one. These helpers call it once per network and only
return after every call has finished, so a generation is never observed
half-scored. Any exception propagates unchanged and no score is returned.
"""

import asyncio
import inspect
import logging
from multiprocessing.pool import ThreadPool
from typing import Awaitable, Callable, List, Optional, Sequence, Union

from ..core.network import NeuralNetwork

logger = logging.getLogger(__name__)

FitnessResult = Union[float, Awaitable[float]]
FitnessFunction = Callable[[NeuralNetwork], FitnessResult]


def _to_score(value) -> float:
    return float(value)


async def _gather(results: List[FitnessResult]) -> List[float]:
    resolved = []
    for result in results:
        if inspect.isawaitable(result):
            resolved.append(result)
        else:
            resolved.append(asyncio.sleep(0, result))
    values = await asyncio.gather(*resolved)
    return [_to_score(v) for v in values]


def evaluate_networks(
    networks: Sequence[NeuralNetwork],
    fitness_fn: FitnessFunction,
    n_workers: Optional[int] = None,
) -> List[float]:
    """
    Score every network with the fitness function.

    Args:
        networks: Networks to evaluate, in population order
        fitness_fn: Callable returning a float or an awaitable float
        n_workers: Thread count for the fan-out; None or 1 evaluates in-line

    Returns:
        Scores in the same order as `networks`

    Raises:
        RuntimeError: If the function returns awaitables while an event loop
            is already running in this thread; use evaluate_networks_async.
    """
    if n_workers is not None and n_workers > 1 and len(networks) > 1:
        logger.debug("Evaluating %d networks on %d threads", len(networks), n_workers)
        with ThreadPool(min(n_workers, len(networks))) as pool:
            results = pool.map(fitness_fn, networks)
    else:
        results = [fitness_fn(network) for network in networks]

    if not any(inspect.isawaitable(r) for r in results):
        return [_to_score(r) for r in results]

    try:
        asyncio.get_running_loop()
    except RuntimeError:
        return asyncio.run(_gather(results))

    for result in results:
        if inspect.iscoroutine(result):
            result.close()
    raise RuntimeError(
        "Fitness function returned awaitables inside a running event loop; "
        "use evaluate_networks_async instead"
    )


async def evaluate_networks_async(
    networks: Sequence[NeuralNetwork],
    fitness_fn: FitnessFunction,
    max_concurrency: Optional[int] = None,
) -> List[float]:
    """
    Async counterpart of evaluate_networks.

    Args:
        networks: Networks to evaluate, in population order
        fitness_fn: Callable returning a float or an awaitable float
        max_concurrency: Upper bound on evaluations in flight (None = unbounded)

    Returns:
        Scores in the same order as `networks`

    If any evaluation raises, the ones still pending are cancelled and every
    task has finished before the first error is re-raised.
    """
    semaphore = asyncio.Semaphore(max_concurrency) if max_concurrency else None

    async def score(network: NeuralNetwork) -> float:
        if semaphore is None:
            result = fitness_fn(network)
            return _to_score(await result if inspect.isawaitable(result) else result)
        async with semaphore:
            result = fitness_fn(network)
            return _to_score(await result if inspect.isawaitable(result) else result)

    tasks = [asyncio.ensure_future(score(network)) for network in networks]
    try:
        return list(await asyncio.gather(*tasks))
    except BaseException:
        pending = [task for task in tasks if not task.done()]
        for task in pending:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
        logger.debug("Fitness evaluation failed; cancelled %d pending evaluations", len(pending))
        raise
