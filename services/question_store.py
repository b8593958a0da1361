# services/question_store.py
from typing import Any, Dict, List


class QuestionStore:
    """Read-only view of the Questions collection used by the selection code."""

    def __init__(self, collection):
        self.collection = collection

    async def find(self, predicate: Dict[str, Any]) -> List[dict]:
        return await self.collection.find(predicate).to_list(None)

    async def count_documents(self, predicate: Dict[str, Any]) -> int:
        return await self.collection.count_documents(predicate)
