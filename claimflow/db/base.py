"""Declarative base shared by all claimflow models."""

from sqlalchemy.orm import declarative_base

Base = declarative_base()
