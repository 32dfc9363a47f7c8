"""Build one verification query per answer of a query."""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Optional

from veritrace.answers import Answer
from veritrace.lookup.base import Lookup
from veritrace.pattern.model import Pattern, VerificationQuery
from veritrace.reconstruction.reconstructor import Reconstructor
from veritrace.settings import get_settings
from veritrace.utils import ReconstructionError

logger = logging.getLogger(__name__)


class BatchDriver:
    """Run a query and reconstruct a verification query for each answer.

    Answers are independent: each gets its own fresh variable namespace,
    so with ``max_workers > 1`` they are reconstructed in a thread pool.
    The lookup is then called from several threads and must be
    thread-safe. Output order always matches answer order.
    """

    def __init__(
        self,
        lookup: Lookup,
        reconstructor: Optional[Reconstructor] = None,
        max_workers: Optional[int] = None,
    ) -> None:
        self._lookup = lookup
        self._reconstructor = reconstructor or Reconstructor(lookup)
        if max_workers is None:
            max_workers = get_settings().max_workers
        if max_workers < 1:
            raise ValueError(f"max_workers must be at least 1, got {max_workers}")
        self._max_workers = max_workers

    def build_verification_queries(self, query: Any) -> list[VerificationQuery]:
        """Execute *query* and return one verification query per answer.

        Raises:
            ReconstructionError: reconstruction of an answer failed;
                ``answer_index`` identifies which one.
        """
        answers = list(self._lookup.execute(query))
        logger.info(
            "Reconstructing %d answer(s) with %d worker(s)",
            len(answers), self._max_workers,
        )

        if self._max_workers > 1 and len(answers) > 1:
            with ThreadPoolExecutor(max_workers=self._max_workers) as pool:
                patterns = list(pool.map(self._reconstruct_one, range(len(answers)), answers))
        else:
            patterns = [self._reconstruct_one(i, a) for i, a in enumerate(answers)]

        return [VerificationQuery(p) for p in patterns]

    def _reconstruct_one(self, index: int, answer: Answer) -> Pattern:
        try:
            return self._reconstructor.reconstruct(answer)
        except ReconstructionError as exc:
            exc.answer_index = index
            logger.error(
                "Reconstruction failed for answer %d at stage '%s': %s",
                index, exc.stage, exc.message,
            )
            raise
