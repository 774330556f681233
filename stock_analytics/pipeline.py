import logging
from abc import ABC, abstractmethod
from typing import Any, Optional

logger = logging.getLogger(__name__)


class DataPipeline(ABC):
    """
    Abstract base class for report pipelines.
    Follows an Extract -> Transform -> Load (ETL) pattern.
    """

    def __init__(self, report_type: str, test_mode: bool = False):
        self.report_type = report_type
        self.test_mode = test_mode

    def run(self) -> Optional[Any]:
        """
        Orchestrates the pipeline execution. Returns the transformed result, or None
        when extraction or transformation did not produce anything usable.
        """
        logger.info(f"🚀 STEP: {self.report_type.upper()} REPORT")
        logger.info("-" * 30)

        # --- 1. EXTRACT ---
        raw_data = self.extract()
        if raw_data is None:
            logger.warning(f"⚠️ No data extracted for {self.report_type}. Stopping.")
            return None

        # --- 2. TRANSFORM ---
        result = self.transform(raw_data)
        if result is None:
            logger.error(f"❌ Transformation failed for {self.report_type}.")
            return None

        # --- 3. LOAD ---
        self.load(result)

        logger.info(f"✅ {self.report_type.capitalize()} Pipeline Finished.\n")
        logger.info("=" * 60)
        return result

    @abstractmethod
    def extract(self) -> Optional[Any]:
        """Finds and parses the input files. Returns None when a required source is missing."""

    @abstractmethod
    def transform(self, raw_data: Any) -> Optional[Any]:
        """Validates raw records and computes the report. Returns None on validation failure."""

    @abstractmethod
    def load(self, result: Any):
        """Saves outputs and hands the report to its destination."""
