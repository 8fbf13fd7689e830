from sqlalchemy import Column, Integer, String, Date, DateTime, ForeignKey, and_, or_
from sqlalchemy.ext.hybrid import hybrid_property
from coachtrack.database import Base
from sqlalchemy.orm import relationship, validates
from datetime import date, datetime

from coachtrack.utils.dates import local_now

ROLE_CLIENT = "client"
ROLE_TRAINER = "trainer"
ROLE_GYM_OWNER = "gym_owner"
VALID_ROLES = (ROLE_CLIENT, ROLE_TRAINER, ROLE_GYM_OWNER)
TRAINER_ROLES = (ROLE_TRAINER, ROLE_GYM_OWNER)


class User(Base):
    """
    Clients, trainers and gym owners share one table.
    Clients carry a session package: total/completed credits and an
    optional validity expiry (NULL = unlimited).
    """
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String(100), unique=True, nullable=False)
    password = Column(String(200), nullable=False)
    name = Column(String(100))
    role = Column(String(20), nullable=False, default=ROLE_CLIENT)
    trainer_id = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True, index=True)

    phone = Column(String(30))
    dob = Column(Date)
    gender = Column(String(10))
    age = Column(Integer)
    goal = Column(String(200))
    profile_image_url = Column(String(255))

    # Session package
    total_sessions = Column(Integer, nullable=False, default=0)
    completed_sessions = Column(Integer, nullable=False, default=0)
    validity_expires_at = Column(DateTime, nullable=True)

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    trainer = relationship("User", remote_side=[id], backref="clients")

    @validates('dob')
    def update_age(self, key, dob_value):
        if dob_value:
            today = date.today()
            self.age = today.year - dob_value.year - ((today.month, today.day) < (dob_value.month, dob_value.day))
        return dob_value

    @hybrid_property
    def remaining_sessions(self):
        return (self.total_sessions or 0) - (self.completed_sessions or 0)

    @remaining_sessions.expression
    def remaining_sessions(cls):
        return cls.total_sessions - cls.completed_sessions

    @hybrid_property
    def is_active(self):
        if self.remaining_sessions <= 0:
            return False
        return self.validity_expires_at is None or self.validity_expires_at > local_now()

    @is_active.expression
    def is_active(cls):
        return and_(
            cls.total_sessions - cls.completed_sessions > 0,
            or_(cls.validity_expires_at.is_(None), cls.validity_expires_at > local_now()),
        )

    @property
    def status(self) -> str:
        return "Active" if self.is_active else "Inactive"
