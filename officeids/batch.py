"""Batch generation with bounded concurrency."""

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import List, Sequence

from .config import DEFAULT_MAX_CONCURRENT
from .errors import ErrorKind
from .generator import GenerationRequest, GenerationResult, IdentifierGenerator

logger = logging.getLogger(__name__)


class BatchCoordinator:
    """Runs independent generation requests on a thread pool."""

    def __init__(self, generator: IdentifierGenerator):
        self.generator = generator

    def generate_many(
        self,
        requests: Sequence[GenerationRequest],
        max_concurrent: int = DEFAULT_MAX_CONCURRENT,
    ) -> List[GenerationResult]:
        """
        Generate one result per request, in request order.

        At most max_concurrent requests run at once. A failure in one
        request never aborts the others.

        Args:
            requests: Generation requests
            max_concurrent: Upper bound on in-flight requests (>= 1)

        Returns:
            Results positionally aligned with requests
        """
        if max_concurrent < 1:
            raise ValueError(f"max_concurrent must be >= 1, got {max_concurrent}")
        requests = list(requests)
        if not requests:
            return []

        workers = min(max_concurrent, len(requests))
        with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="officeids") as pool:
            results = list(pool.map(self._generate_one, requests))

        failed = sum(1 for r in results if not r.success)
        logger.info(f"Batch finished: {len(results) - failed} allocated, {failed} failed")
        return results

    def _generate_one(self, request: GenerationRequest) -> GenerationResult:
        try:
            return self.generator.generate(request)
        except Exception as e:
            logger.error(f"Generation crashed for {request.country}/{request.city}: {e}")
            return GenerationResult.failure(
                ErrorKind.GENERATION_FAILED, 0, f"Generation failed: {e}"
            )
