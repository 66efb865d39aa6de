from extensions import db
from .base import TimestampMixin


class TbdrsMerge(TimestampMixin, db.Model):
    """One Track + Building + Department + Section combination."""
    __tablename__ = "tbdrs_merge"

    id = db.Column(db.Integer, primary_key=True)
    track_id = db.Column(db.Integer, db.ForeignKey("tracks.id", ondelete="RESTRICT"), nullable=False)
    building_id = db.Column(db.Integer, db.ForeignKey("buildings.id", ondelete="RESTRICT"), nullable=False)
    department_id = db.Column(db.Integer, db.ForeignKey("departments.id", ondelete="RESTRICT"), nullable=False)
    section_id = db.Column(db.Integer, db.ForeignKey("sections.id", ondelete="RESTRICT"), nullable=False)

    track = db.relationship("Track", back_populates="tbdrs_merges")
    building = db.relationship("Building", back_populates="tbdrs_merges")
    department = db.relationship("Department", back_populates="tbdrs_merges")
    section = db.relationship("Section", back_populates="tbdrs_merges")
    student_assignments = db.relationship(
        "StdTbdrsMerge", back_populates="tbdrs_merge",
        cascade="all, delete-orphan", passive_deletes=True,
    )

    __table_args__ = (
        db.UniqueConstraint("track_id", "building_id", "department_id", "section_id",
                            name="uq_tbdrs_merge_combination"),
    )
