from fastapi import APIRouter, Depends, HTTPException
from ...models.directory import BankAccountRecord
from ...services.storage import BankAccountStorageError, BankAccountStoreBase
from ..deps import get_store

router = APIRouter(prefix="/bank-accounts", tags=["bank-accounts"])


@router.get("", response_model=list[BankAccountRecord])
async def list_bank_accounts(store: BankAccountStoreBase = Depends(get_store)):
    """List all stored bank accounts (for debugging)"""
    try:
        return store.list_all()
    except BankAccountStorageError as e:
        raise HTTPException(status_code=503, detail=str(e))


@router.get("/{owner_id}", response_model=list[BankAccountRecord])
async def list_owner_bank_accounts(owner_id: str, store: BankAccountStoreBase = Depends(get_store)):
    """List bank accounts owned by one beneficiary"""
    try:
        return store.list_for_owner(owner_id)
    except BankAccountStorageError as e:
        raise HTTPException(status_code=503, detail=str(e))
