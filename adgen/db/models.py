"""
Database Models using SQLAlchemy.

These define the database schema for users, their credit reservations and
the generation projects they own. They are NOT related to:
- API schemas (see adgen.schemas.api_schemas)
- The generated assets themselves (which live in the asset store)
"""
from sqlalchemy import Boolean, CheckConstraint, Column, ForeignKey, Integer, String, DateTime, Text, JSON
from sqlalchemy.orm import declarative_base, relationship
import datetime
import uuid

Base = declarative_base()

def generate_uuid():
    return str(uuid.uuid4())

class User(Base):
    __tablename__ = "users"
    __table_args__ = (CheckConstraint("credits >= 0", name="ck_users_credits_non_negative"),)

    id = Column(String, primary_key=True, default=generate_uuid)
    email = Column(String, nullable=True)
    name = Column(String, nullable=True)
    credits = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime, default=datetime.datetime.utcnow)

    # Relationships
    projects = relationship("Project", back_populates="user", cascade="all, delete-orphan")
    reservations = relationship("CreditReservation", back_populates="user", cascade="all, delete-orphan")

class Project(Base):
    __tablename__ = "projects"

    id = Column(String, primary_key=True, default=generate_uuid)
    user_id = Column(String, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    name = Column(String, nullable=False, default="New Project")
    product_name = Column(String, nullable=False)
    product_description = Column(Text, nullable=True)
    user_prompt = Column(Text, nullable=True)
    aspect_ratio = Column(String, nullable=True)
    target_length = Column(Integer, nullable=False, default=5)
    uploaded_images = Column(JSON, default=list)
    generated_image = Column(String, nullable=True)
    generated_video = Column(String, nullable=True)
    is_generating = Column(Boolean, nullable=False, default=False)
    is_published = Column(Boolean, nullable=False, default=False)
    error = Column(Text, nullable=True)
    created_at = Column(DateTime, default=datetime.datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.datetime.utcnow, onupdate=datetime.datetime.utcnow)

    # Relationships
    user = relationship("User", back_populates="projects")

class CreditReservation(Base):
    """Credits taken from a user for one paid action, until captured or refunded."""
    __tablename__ = "credit_reservations"

    id = Column(String, primary_key=True, default=generate_uuid)
    user_id = Column(String, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    amount = Column(Integer, nullable=False)
    action = Column(String, nullable=False)  # "image" or "video"
    status = Column(String, nullable=False, default="reserved")  # "reserved", "captured" or "refunded"
    created_at = Column(DateTime, default=datetime.datetime.utcnow)
    settled_at = Column(DateTime, nullable=True)

    # Relationships
    user = relationship("User", back_populates="reservations")
