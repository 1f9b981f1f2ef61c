from ..services.reconciliation import ReconciliationOrchestrator, create_orchestrator
from ..services.storage import BankAccountStoreBase, get_bank_account_store


def get_store() -> BankAccountStoreBase:
    return get_bank_account_store()


def get_orchestrator() -> ReconciliationOrchestrator:
    return create_orchestrator(get_bank_account_store())
