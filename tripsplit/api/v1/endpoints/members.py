from typing import List
from fastapi import APIRouter, HTTPException, Depends, status
from tripsplit.db.mongo import get_db
from tripsplit.repositories.member_repo import MemberRepository
from tripsplit.schemas.member import MemberUpdate, MemberResponse

router = APIRouter()

@router.get("/", response_model=List[MemberResponse])
async def list_members(db = Depends(get_db)):
    """List the trip roster"""
    members = await MemberRepository(db).list_all()
    return [MemberResponse.model_validate(m.to_doc()) for m in members]

@router.patch("/{member_id}", response_model=MemberResponse)
async def update_member(
    member_id: str,
    member_in: MemberUpdate,
    db = Depends(get_db)
):
    """Rename a member or change their avatar"""
    member = await MemberRepository(db).update(member_id, member_in.model_dump(exclude_unset=True, exclude_none=True))
    if not member:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Member not found")
    return MemberResponse.model_validate(member.to_doc())
