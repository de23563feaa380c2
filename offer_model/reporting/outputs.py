# offer_model/reporting/outputs.py
"""
Writes an OfferResult to disk as CSV tables plus the JSON calculation data.
"""

import json
import logging
from pathlib import Path
from typing import Dict

from offer_model.models import OfferResult
from offer_model.reporting.metrics import comparison_frame, totals_frame

logger = logging.getLogger(__name__)

COMPARISON_FILE = "comparison.csv"
TOTALS_FILE = "totals.csv"
RESULT_FILE = "offer_result.json"


def save_results(result: OfferResult, output_path: Path) -> Dict[str, Path]:
    """Save the comparison table, the totals table and the full result.

    Returns:
        Mapping of output kind to written path.
    """
    output_path = Path(output_path)
    logger.info(f"Saving offer results to {output_path}...")
    output_path.mkdir(parents=True, exist_ok=True)

    paths = {
        "comparison": output_path / COMPARISON_FILE,
        "totals": output_path / TOTALS_FILE,
        "result": output_path / RESULT_FILE,
    }

    comparison_frame(result).to_csv(paths["comparison"])
    logger.info(f"Comparison table saved to {paths['comparison']}")

    totals_frame(result).to_csv(paths["totals"], index=False)
    logger.info(f"Totals table saved to {paths['totals']}")

    with open(paths["result"], "w", encoding="utf-8") as f:
        json.dump(result.to_dict(), f, indent=2)
    logger.info(f"Calculation data saved to {paths['result']}")

    return paths
