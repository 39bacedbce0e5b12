from datetime import datetime, timezone

from sqlalchemy import JSON, Column, DateTime, Float, Integer, String

from api.config import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def default_preferences() -> dict:
    return {"theme": "light", "notifications": True, "difficulty": "medium"}


def empty_quiz_progress() -> dict:
    return {"currentQuestion": 0, "score": 0}


class User(Base):
    __tablename__ = "users"
    id = Column(Integer, primary_key=True, index=True)
    username = Column(String, nullable=False)
    email = Column(String, unique=True, index=True, nullable=False)
    hashed_password = Column(String, nullable=False)
    role = Column(String, nullable=False, default="User")
    role_color = Column(String, nullable=False, default="#6C63FF")
    profile_image = Column(String, nullable=False, default="")
    selected_plan = Column(String, nullable=False, default="")
    preferences = Column(JSON, nullable=False, default=default_preferences)

    # Progress document. module_progress is canonical; the two completed_*
    # columns are legacy mirrors rebuilt by learning.reconciler on every write.
    module_progress = Column(JSON, nullable=False, default=dict)
    completed_modules = Column(JSON, nullable=False, default=list)
    completed_modules_with_score = Column(JSON, nullable=False, default=list)
    quiz_progress = Column(JSON, nullable=False, default=empty_quiz_progress)
    total_time_spent = Column(Float, nullable=False, default=0)  # seconds

    created_at = Column(DateTime(timezone=True), default=_utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=_utcnow, onupdate=_utcnow, nullable=False)
    last_login_at = Column(DateTime(timezone=True), default=_utcnow, nullable=False)

    # optimistic concurrency: concurrent writers to the same row raise StaleDataError
    version_id = Column(Integer, nullable=False)
    __mapper_args__ = {"version_id_col": version_id}
