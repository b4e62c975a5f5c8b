from typing import List
from fastapi import APIRouter, HTTPException, Depends, status
from tripsplit.db.mongo import get_db
from tripsplit.repositories.expense_repo import ExpenseRepository
from tripsplit.schemas.expense import ExpenseCreate, ExpenseUpdate, ExpenseResponse, ExpenseDay
from tripsplit.services.expense_service import ExpenseService, group_by_date
from tripsplit.utils.expense_validation import ExpenseValidationError

router = APIRouter()

def _response(expense) -> ExpenseResponse:
    return ExpenseResponse.model_validate(expense.to_doc())

@router.get("/", response_model=List[ExpenseResponse])
async def list_expenses(db = Depends(get_db)):
    """List all expenses, newest first"""
    expenses = await ExpenseRepository(db).list_all()
    return [_response(e) for e in expenses]

@router.get("/timeline", response_model=List[ExpenseDay])
async def expense_timeline(db = Depends(get_db)):
    """Expenses grouped by date"""
    expenses = await ExpenseRepository(db).list_all()
    return [
        ExpenseDay(date=day, expenses=[_response(e) for e in day_expenses])
        for day, day_expenses in group_by_date(expenses)
    ]

@router.get("/{expense_id}", response_model=ExpenseResponse)
async def get_expense(expense_id: str, db = Depends(get_db)):
    """Get an expense by ID"""
    expense = await ExpenseRepository(db).get(expense_id)
    if not expense:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Expense not found")
    return _response(expense)

@router.post("/", response_model=ExpenseResponse, status_code=status.HTTP_201_CREATED)
async def create_expense(expense_in: ExpenseCreate, db = Depends(get_db)):
    """Log a new expense"""
    try:
        expense = await ExpenseService.create(db, expense_in)
    except ExpenseValidationError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc))
    return _response(expense)

@router.patch("/{expense_id}", response_model=ExpenseResponse)
async def update_expense(expense_id: str, expense_in: ExpenseUpdate, db = Depends(get_db)):
    """Edit an expense"""
    try:
        expense = await ExpenseService.update(db, expense_id, expense_in)
    except ExpenseValidationError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc))
    if not expense:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Expense not found")
    return _response(expense)

@router.delete("/{expense_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_expense(expense_id: str, db = Depends(get_db)):
    """Permanently delete an expense"""
    if not await ExpenseService.delete(db, expense_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Expense not found")
