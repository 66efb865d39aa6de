from extensions import db
from .base import TimestampMixin


class Section(TimestampMixin, db.Model):
    __tablename__ = "sections"

    id = db.Column(db.Integer, primary_key=True)
    section_name = db.Column(db.String(255), unique=True, nullable=False)

    tbdrs_merges = db.relationship("TbdrsMerge", back_populates="section", passive_deletes="all")

    def __repr__(self):
        return f"<Section {self.section_name}>"
