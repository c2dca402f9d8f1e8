from papeleo.db.models.user import User
from papeleo.db.models.organization import Organization, ContractualProject
from papeleo.db.models.contract import Contract, RequiredDocument, GeneratedDocument
from papeleo.db.models.contract_member import (
    ContractMember,
    ContractualDocument,
    ContractualExtraDocument,
    ContractExtension,
)

__all__ = [
    "User",
    "Organization",
    "ContractualProject",
    "Contract",
    "RequiredDocument",
    "GeneratedDocument",
    "ContractMember",
    "ContractualDocument",
    "ContractualExtraDocument",
    "ContractExtension",
]
