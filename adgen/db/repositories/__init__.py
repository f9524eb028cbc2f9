from adgen.db.repositories.projects import ProjectRepository
from adgen.db.repositories.users import UserRepository
from adgen.db.repositories.ledger import CreditLedger

__all__ = ['ProjectRepository', 'UserRepository', 'CreditLedger']
