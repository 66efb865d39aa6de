from extensions import db
from .base import TimestampMixin


class Department(TimestampMixin, db.Model):
    __tablename__ = "departments"

    id = db.Column(db.Integer, primary_key=True)
    department_name = db.Column(db.String(255), unique=True, nullable=False)

    tbdrs_merges = db.relationship("TbdrsMerge", back_populates="department", passive_deletes="all")

    def __repr__(self):
        return f"<Department {self.department_name}>"
