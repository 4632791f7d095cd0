"""
SQLAlchemy ORM Models
Database table definitions using SQLAlchemy ORM.
"""

from __future__ import annotations

import uuid
from datetime import datetime

from sqlalchemy import (
    Column, String, Integer, Boolean, TIMESTAMP,
    ForeignKey, Text, Index, JSON, Uuid
)
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import declarative_base, relationship
from sqlalchemy.sql import func

Base = declarative_base()

# JSONB on Postgres, plain JSON elsewhere (SQLite in tests)
JSONType = JSON().with_variant(JSONB(), "postgresql")


class Profile(Base):
    """
    Account profile.

    One row per login: agents, FSBO owners, landlords, owners, buyers and admins.
    """
    __tablename__ = 'profiles'

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    email = Column(String(255), unique=True, index=True, nullable=False)
    password_hash = Column(String(255), nullable=False,
                          comment='Bcrypt hashed password')

    first_name = Column(String(100), nullable=True)
    last_name = Column(String(100), nullable=True)
    phone = Column(String(50), nullable=True)

    # Role
    user_type = Column(String(20), nullable=False, index=True,
                      comment='admin, agent, fsbo, landlord, owner, buyer')
    admin_level = Column(String(20), nullable=True,
                        comment='super, owner, basic (admins only)')
    country_id = Column(String(8), nullable=True, index=True,
                       comment='Assigned country / territory code')

    is_active = Column(Boolean, nullable=False, default=True)

    # Account approval (FSBO / landlord / owner / agent)
    approval_status = Column(String(20), nullable=False, default='pending', index=True,
                            comment='pending, approved, rejected')
    approval_date = Column(TIMESTAMP, nullable=True)
    approved_by = Column(Uuid, nullable=True)
    approval_notes = Column(Text, nullable=True)
    rejection_reason = Column(Text, nullable=True)

    # Agent verification badge
    is_verified_agent = Column(Boolean, nullable=False, default=False)
    verified_by = Column(Uuid, nullable=True)
    verified_at = Column(TIMESTAMP, nullable=True)

    last_login = Column(TIMESTAMP, nullable=True)
    created_at = Column(TIMESTAMP, nullable=False, default=datetime.utcnow, server_default=func.now())
    updated_at = Column(TIMESTAMP, nullable=False, default=datetime.utcnow,
                       server_default=func.now(), onupdate=datetime.utcnow)

    # Relationships
    properties = relationship("Property", back_populates="owner", cascade="all, delete-orphan")
    drafts = relationship("PropertyDraft", back_populates="owner", cascade="all, delete-orphan")

    def __repr__(self):
        return f"<Profile(id={self.id}, email={self.email}, type={self.user_type})>"


class Property(Base):
    """
    Property listing.

    Rentals and sales share one table; `status` drives the review lifecycle.
    """
    __tablename__ = 'properties'

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = Column(Uuid, ForeignKey('profiles.id', ondelete='CASCADE'),
                    nullable=False, index=True)

    # Basic info
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    price = Column(Integer, nullable=False)
    currency = Column(String(8), nullable=False, default='USD')
    property_type = Column(String(100), nullable=True)
    listing_type = Column(String(10), nullable=False, index=True,
                         comment='sale or rent')
    listed_by_type = Column(String(20), nullable=False,
                           comment='agent, owner, landlord, admin')
    property_category = Column(String(10), nullable=False, comment='sale or rental')
    rental_type = Column(String(20), nullable=True)

    # Details
    bedrooms = Column(Integer, nullable=True)
    bathrooms = Column(Integer, nullable=True)
    house_size_value = Column(Integer, nullable=True)
    house_size_unit = Column(String(10), nullable=True)
    land_size_value = Column(Integer, nullable=True)
    land_size_unit = Column(String(10), nullable=True)
    year_built = Column(Integer, nullable=True)
    amenities = Column(JSONType, nullable=False, default=list)

    # Location
    location = Column(String(255), nullable=True)
    country = Column(String(100), nullable=True)
    region = Column(String(100), nullable=True)
    city = Column(String(100), nullable=True, index=True)
    neighborhood = Column(String(100), nullable=True)
    site_id = Column(String(20), nullable=False, default='portal', index=True)
    country_id = Column(String(8), nullable=True, index=True)

    # Contact
    owner_email = Column(String(255), nullable=True)
    owner_whatsapp = Column(String(50), nullable=True)

    # Lifecycle
    status = Column(String(20), nullable=False, default='pending', index=True,
                   comment='draft, pending, active, rejected, under_contract, sold, rented, off_market')
    rejection_reason = Column(Text, nullable=True)
    reviewed_by = Column(Uuid, nullable=True)
    reviewed_at = Column(TIMESTAMP, nullable=True)
    is_featured = Column(Boolean, nullable=False, default=False)

    created_at = Column(TIMESTAMP, nullable=False, default=datetime.utcnow,
                       server_default=func.now(), index=True)
    updated_at = Column(TIMESTAMP, nullable=False, default=datetime.utcnow,
                       server_default=func.now(), onupdate=datetime.utcnow)

    # Relationships
    owner = relationship("Profile", back_populates="properties")
    media = relationship("PropertyMedia", back_populates="property", cascade="all, delete-orphan",
                        order_by="PropertyMedia.display_order")

    __table_args__ = (
        Index('idx_properties_status_created', 'status', 'created_at'),
        Index('idx_properties_user_status', 'user_id', 'status'),
    )

    def __repr__(self):
        return f"<Property(id={self.id}, title={self.title[:30]}, status={self.status})>"


class PropertyMedia(Base):
    """Image attached to a listing."""
    __tablename__ = 'property_media'

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    property_id = Column(Uuid, ForeignKey('properties.id', ondelete='CASCADE'),
                        nullable=False, index=True)
    media_url = Column(Text, nullable=False)
    storage_path = Column(Text, nullable=True,
                         comment='Path relative to the media root, when stored locally')
    media_type = Column(String(20), nullable=False, default='image')
    alt_text = Column(String(255), nullable=True)
    is_primary = Column(Boolean, nullable=False, default=False)
    display_order = Column(Integer, nullable=False, default=0)
    created_at = Column(TIMESTAMP, nullable=False, default=datetime.utcnow, server_default=func.now())

    property = relationship("Property", back_populates="media")

    def __repr__(self):
        return f"<PropertyMedia(id={self.id}, property_id={self.property_id}, primary={self.is_primary})>"


class PropertyDraft(Base):
    """
    Work-in-progress listing form.

    `draft_data` holds the raw form state so a reload gets back exactly what was saved.
    """
    __tablename__ = 'property_drafts'

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = Column(Uuid, ForeignKey('profiles.id', ondelete='CASCADE'),
                    nullable=False, index=True)
    title = Column(String(255), nullable=False)
    draft_type = Column(String(10), nullable=False, default='sale', comment='sale or rent')
    draft_data = Column(JSONType, nullable=False, default=dict)
    country_id = Column(String(8), nullable=True, index=True)
    save_count = Column(Integer, nullable=False, default=1)
    expires_at = Column(TIMESTAMP, nullable=False, index=True)

    created_at = Column(TIMESTAMP, nullable=False, default=datetime.utcnow, server_default=func.now())
    updated_at = Column(TIMESTAMP, nullable=False, default=datetime.utcnow,
                       server_default=func.now(), onupdate=datetime.utcnow)

    owner = relationship("Profile", back_populates="drafts")

    def __repr__(self):
        return f"<PropertyDraft(id={self.id}, user_id={self.user_id}, saves={self.save_count})>"


class AgentVetting(Base):
    """
    Agent application.

    Reviewed by admins before the agent gets an approved profile.
    """
    __tablename__ = 'agent_vetting'

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = Column(Uuid, ForeignKey('profiles.id', ondelete='SET NULL'), nullable=True, index=True)

    first_name = Column(String(100), nullable=False)
    last_name = Column(String(100), nullable=False)
    email = Column(String(255), nullable=False, index=True)
    phone = Column(String(50), nullable=True)
    country = Column(String(8), nullable=True, index=True)

    license_number = Column(String(100), nullable=True)
    company_name = Column(String(255), nullable=True)
    years_experience = Column(Integer, nullable=True)
    specialties = Column(JSONType, nullable=False, default=list)
    references = Column(JSONType, nullable=False, default=list)

    status = Column(String(20), nullable=False, default='pending_review', index=True,
                   comment='pending_review, needs_more_info, approved, rejected')
    admin_notes = Column(Text, nullable=True)
    rejection_reason = Column(Text, nullable=True)
    reviewed_by = Column(Uuid, nullable=True)

    submitted_at = Column(TIMESTAMP, nullable=False, default=datetime.utcnow, server_default=func.now())
    reviewed_at = Column(TIMESTAMP, nullable=True)

    def __repr__(self):
        return f"<AgentVetting(id={self.id}, email={self.email}, status={self.status})>"


class AdminAction(Base):
    """Audit trail of admin decisions."""
    __tablename__ = 'admin_actions'

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    admin_id = Column(Uuid, ForeignKey('profiles.id', ondelete='SET NULL'), nullable=True, index=True)
    action_type = Column(String(50), nullable=False, index=True,
                        comment='property_approved, property_rejected, agent_approved, ...')
    target_type = Column(String(30), nullable=False)
    target_id = Column(String(64), nullable=False, index=True)
    details = Column(JSONType, nullable=False, default=dict)
    created_at = Column(TIMESTAMP, nullable=False, default=datetime.utcnow,
                       server_default=func.now(), index=True)

    def __repr__(self):
        return f"<AdminAction(id={self.id}, type={self.action_type}, target={self.target_id})>"
