from extensions import db
from .base import TimestampMixin


class StdTbdrsMerge(TimestampMixin, db.Model):
    """Assignment of a student user to a TBDRS combination."""
    __tablename__ = "std_tbdrs_merge"

    id = db.Column(db.Integer, primary_key=True)
    uusers_id = db.Column(db.Integer, db.ForeignKey("u_users.id", ondelete="CASCADE"), nullable=False, index=True)
    tbdrs_id = db.Column(db.Integer, db.ForeignKey("tbdrs_merge.id", ondelete="CASCADE"), nullable=False)

    user = db.relationship("UUser", back_populates="student_assignments")
    tbdrs_merge = db.relationship("TbdrsMerge", back_populates="student_assignments")

    __table_args__ = (
        db.UniqueConstraint("uusers_id", "tbdrs_id", name="uq_std_tbdrs_merge_user_tbdrs"),
    )
