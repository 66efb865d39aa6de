from enum import Enum
from flask_login import UserMixin
from werkzeug.security import generate_password_hash, check_password_hash
from extensions import db
from .base import TimestampMixin


class UserRole(str, Enum):
    STUDENT = "student"
    TEACHER = "teacher"


class UUser(UserMixin, TimestampMixin, db.Model):
    __tablename__ = "u_users"

    id = db.Column(db.Integer, primary_key=True)
    firstname = db.Column(db.String(255), nullable=False)
    lastname = db.Column(db.String(255), nullable=False)
    email = db.Column(db.String(255), unique=True, index=True, nullable=False)
    # one-way hash only; never serialized
    password = db.Column(db.String(255), nullable=False)
    # plain string column so the schema does not depend on a DB enum type
    role = db.Column(db.String(16), index=True, nullable=False, default=UserRole.STUDENT.value)
    activate = db.Column(db.Boolean, default=True, nullable=False)

    student_assignments = db.relationship(
        "StdTbdrsMerge", back_populates="user",
        cascade="all, delete-orphan", passive_deletes=True,
    )
    access_tokens = db.relationship(
        "PersonalAccessToken", back_populates="user",
        cascade="all, delete-orphan", passive_deletes=True,
    )

    # helpers
    def set_password(self, raw: str):
        self.password = generate_password_hash(raw)

    def check_password(self, raw: str) -> bool:
        return check_password_hash(self.password, raw)

    @property
    def is_student(self) -> bool:
        return self.role == UserRole.STUDENT.value

    # Flask-Login expects .is_active
    @property
    def is_active(self):
        return bool(self.activate)

    def __repr__(self):
        return f"<UUser {self.email}>"


class PersonalAccessToken(TimestampMixin, db.Model):
    __tablename__ = "personal_access_tokens"

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey("u_users.id", ondelete="CASCADE"), nullable=False, index=True)
    name = db.Column(db.String(255), nullable=False)
    # sha256 hex of the secret half of the plain-text token
    token = db.Column(db.String(64), unique=True, nullable=False)
    last_used_at = db.Column(db.DateTime, nullable=True)
    expires_at = db.Column(db.DateTime, nullable=True)

    user = db.relationship("UUser", back_populates="access_tokens")
