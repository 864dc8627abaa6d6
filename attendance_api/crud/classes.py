# attendance_api/crud/classes.py
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from attendance_api.core.exceptions import LookupFailure
from attendance_api.db.models.organization import Class
from attendance_api.services.scope import ScopeType

SCOPE_COLUMNS = {
    ScopeType.MAIN_BRANCH: Class.main_branch_id,
    ScopeType.SUB_BRANCH: Class.sub_branch_id,
    ScopeType.CLASSROOM: Class.classroom_id,
}


def get_class(db: Session, class_id: int):
    try:
        return db.query(Class).filter(Class.id == class_id).first()
    except SQLAlchemyError as e:
        raise LookupFailure(f"Failed to load class {class_id}") from e


class SqlClassLookup:
    def __init__(self, db: Session):
        self.db = db

    def class_ids_by(self, scope_type: ScopeType, scope_id: int):
        column = SCOPE_COLUMNS.get(scope_type)
        if column is None:
            raise ValueError(f"Classes can't be looked up by {scope_type}")
        try:
            rows = self.db.query(Class.id).filter(column == scope_id).all()
        except SQLAlchemyError as e:
            raise LookupFailure("Failed to resolve access scope") from e
        return [row[0] for row in rows]
