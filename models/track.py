from extensions import db
from .base import TimestampMixin


class Track(TimestampMixin, db.Model):
    __tablename__ = "tracks"

    id = db.Column(db.Integer, primary_key=True)
    track_name = db.Column(db.String(255), unique=True, nullable=False)

    tbdrs_merges = db.relationship("TbdrsMerge", back_populates="track", passive_deletes="all")

    def __repr__(self):
        return f"<Track {self.track_name}>"
