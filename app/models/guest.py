"""
Guest model
"""

from datetime import datetime
from sqlalchemy import Column, Integer, String, Text, DateTime

from app.core.db import Base

class Guest(Base):
    __tablename__ = "guests"

    id = Column(Integer, primary_key=True, index=True)
    number = Column(Integer, nullable=False, index=True)
    name = Column(String(255), nullable=False)
    relation_cs = Column(String(255), nullable=False)
    relation_en = Column(String(255), nullable=False)
    about_cs = Column(Text, nullable=True)
    about_en = Column(Text, nullable=True)

    # Storage keys inside the photos / audio-official / audio-funny buckets
    photo_path = Column(String(255), nullable=True)
    audio_official_cs_path = Column(String(255), nullable=True)
    audio_official_en_path = Column(String(255), nullable=True)
    audio_funny_cs_path = Column(String(255), nullable=True)
    audio_funny_en_path = Column(String(255), nullable=True)

    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)
