"""JSON storage for extraction results and API exports."""

import json
from typing import Dict

from ..core.models import ExtractionResult


class JSONStorage:
    """Save and load storm data as JSON."""

    @staticmethod
    def save(data: Dict, filepath: str) -> str:
        """
        Save a JSON document.

        Args:
            data: ExtractionResult.to_dict() output or an API export
            filepath: Path to save the file

        Returns:
            The path written
        """
        with open(filepath, 'w', encoding='utf-8') as f:
            json.dump(data, f, indent=2, ensure_ascii=False)

        print(f"💾 Data saved to: {filepath}")
        return filepath

    @staticmethod
    def load(filepath: str) -> Dict:
        with open(filepath, 'r', encoding='utf-8') as f:
            return json.load(f)

    @classmethod
    def save_result(cls, result: ExtractionResult, filepath: str) -> str:
        return cls.save(result.to_dict(), filepath)

    @classmethod
    def load_result(cls, filepath: str) -> ExtractionResult:
        return ExtractionResult.from_dict(cls.load(filepath))
