from extensions import db
from .base import TimestampMixin


class Building(TimestampMixin, db.Model):
    __tablename__ = "buildings"

    id = db.Column(db.Integer, primary_key=True)
    building_name = db.Column(db.String(255), unique=True, nullable=False)

    # passive_deletes="all": never null out children, the FK is RESTRICT
    rooms = db.relationship("Room", back_populates="building", order_by="Room.id", passive_deletes="all")
    tbdrs_merges = db.relationship("TbdrsMerge", back_populates="building", passive_deletes="all")

    def __repr__(self):
        return f"<Building {self.building_name}>"
