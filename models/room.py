from extensions import db
from .base import TimestampMixin


class Room(TimestampMixin, db.Model):
    __tablename__ = "rooms"

    id = db.Column(db.Integer, primary_key=True)
    room_name = db.Column(db.String(255), nullable=False)
    room_number = db.Column(db.String(50), nullable=False)
    building_id = db.Column(db.Integer, db.ForeignKey("buildings.id", ondelete="RESTRICT"),
                            nullable=False, index=True)

    building = db.relationship("Building", back_populates="rooms")

    def __repr__(self):
        return f"<Room {self.room_number} {self.room_name}>"
