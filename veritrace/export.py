"""
Verification query export

Writes reconstructed verification queries as JSON for a downstream
verifier: the original query, then one entry per answer with its
rendered match/get query and statement list.
"""
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Sequence

from veritrace.pattern.model import VerificationQuery
from veritrace.utils import get_logger, write_json

logger = get_logger(__name__)


def queries_to_dict(query: Any, queries: Sequence[VerificationQuery]) -> dict[str, Any]:
    return {
        "query": str(query),
        "generated_at": datetime.now(timezone.utc).isoformat(),
        "answer_count": len(queries),
        "verification_queries": [
            {"answer_index": i, **q.to_dict()} for i, q in enumerate(queries)
        ],
    }


def export_queries(
    query: Any,
    queries: Sequence[VerificationQuery],
    output_path: str | Path,
) -> Path:
    """
    Export verification queries to a JSON file

    Args:
        query: The original query the answers came from
        queries: One verification query per answer, in answer order
        output_path: Output file path

    Returns:
        The written path
    """
    output_path = Path(output_path)
    logger.info("Exporting %d verification queries to %s", len(queries), output_path)
    write_json(queries_to_dict(query, queries), output_path)
    return output_path
