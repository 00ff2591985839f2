from sqlalchemy import Column, String, DateTime, Boolean, Date, ForeignKey, Table
from sqlalchemy.orm import relationship
from app.core.database import Base
from datetime import datetime


user_roles = Table(
    "user_roles",
    Base.metadata,
    Column("user_id", String(450), ForeignKey("users.id", ondelete="CASCADE"), primary_key=True),
    Column("role_id", String(36), ForeignKey("roles.id", ondelete="CASCADE"), primary_key=True),
)


class Role(Base):
    __tablename__ = "roles"

    id = Column(String(36), primary_key=True)
    name = Column(String(50), unique=True, nullable=False, index=True)  # 'Admin', 'Instructor', 'User'
    created_at = Column(DateTime, default=datetime.utcnow)


class User(Base):
    __tablename__ = "users"

    id = Column(String(450), primary_key=True, index=True)  # Firebase UID
    email = Column(String(256), unique=True, index=True, nullable=False)
    first_name = Column(String(100), nullable=False)
    last_name = Column(String(100), nullable=False)
    profile_picture_url = Column(String(500), nullable=True)
    bio = Column(String(1000), nullable=True)
    specializations = Column(String(1000), nullable=True)  # instructors only
    certifications = Column(String(1000), nullable=True)  # instructors only
    date_of_birth = Column(Date, nullable=True)
    stripe_customer_id = Column(String(100), unique=True, nullable=True, index=True)
    is_active = Column(Boolean, default=True)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    roles = relationship("Role", secondary=user_roles, lazy="selectin")
    bookings = relationship("ClassBooking", back_populates="user", cascade="all, delete-orphan")
    subscriptions = relationship("UserSubscription", back_populates="user", cascade="all, delete-orphan")
    payments = relationship("PaymentTransaction", back_populates="user", cascade="all, delete-orphan")
    instructed_classes = relationship("FitnessClass", back_populates="instructor")

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"

    @property
    def role_names(self) -> set:
        return {role.name for role in self.roles}
