from typing import List, Optional

from motor.motor_asyncio import AsyncIOMotorDatabase

from tripsplit.models.expense import ExpenseRecord


class ExpenseRepository:
    """Expense collection operations. Records are stored flat, as modelled."""

    def __init__(self, db: AsyncIOMotorDatabase):
        self.db = db
        self.collection = db["expenses"]

    async def list_all(self) -> List[ExpenseRecord]:
        """List every expense, newest date first."""
        cursor = self.collection.find({}).sort([("date", -1), ("time", -1)])
        docs = await cursor.to_list(None)
        return [ExpenseRecord.from_doc(doc) for doc in docs]

    async def get(self, expense_id: str) -> Optional[ExpenseRecord]:
        doc = await self.collection.find_one({"_id": expense_id})
        if doc:
            return ExpenseRecord.from_doc(doc)
        return None

    async def create(self, expense: ExpenseRecord) -> ExpenseRecord:
        await self.collection.insert_one(expense.to_doc())
        return expense

    async def update(self, expense: ExpenseRecord) -> Optional[ExpenseRecord]:
        """Replace the stored record with `expense` (whole-document write)."""
        result = await self.collection.find_one_and_replace(
            {"_id": expense.id},
            expense.to_doc(),
            return_document=True
        )
        if result:
            return ExpenseRecord.from_doc(result)
        return None

    async def delete(self, expense_id: str) -> bool:
        """Permanently delete an expense."""
        result = await self.collection.delete_one({"_id": expense_id})
        return result.deleted_count > 0
