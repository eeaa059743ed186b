"""
Peptide Calculator Database Models
SQLAlchemy ORM models for saved calculator configurations and state
"""

from datetime import datetime
from sqlalchemy import (
    create_engine, Column, String, Float, Text, DateTime, Integer
)
from sqlalchemy.orm import declarative_base, sessionmaker

Base = declarative_base()


class SavedConfiguration(Base):
    """A named set of calculator inputs (raw inputs only, never derived values)"""
    __tablename__ = 'saved_configurations'

    id = Column(String(64), primary_key=True)
    position = Column(Integer, nullable=False, default=0)  # insertion order
    name = Column(String(200), nullable=False)

    # Peptide selection
    peptide_id = Column(String(50), nullable=False)  # preset id or "custom"
    custom_peptide_name = Column(String(100), default="")

    # Vial
    mg_in_vial = Column(Float)
    water_ml = Column(Float)

    # Dose
    dose_amount = Column(Float)
    dose_unit = Column(String(10))  # "mg" or "mcg"
    syringe_size = Column(String(10))  # "0.5" or "1.0"

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    def to_dict(self):
        """Nested record shape used by the API and the CLI"""
        return {
            "id": self.id,
            "name": self.name,
            "peptide": {
                "id": self.peptide_id,
                "customName": self.custom_peptide_name or "",
            },
            "vial": {
                "mgInVial": self.mg_in_vial,
                "waterMl": self.water_ml,
            },
            "dose": {
                "amount": self.dose_amount,
                "unit": self.dose_unit,
                "syringeSize": self.syringe_size,
            },
            "createdAt": self.created_at.isoformat() if self.created_at else None,
            "updatedAt": self.updated_at.isoformat() if self.updated_at else None,
        }

    def __repr__(self):
        return f"<SavedConfiguration(name='{self.name}', peptide='{self.peptide_id}')>"


class AppState(Base):
    """Key-value slot holding a JSON snapshot of calculator inputs"""
    __tablename__ = 'app_state'

    key = Column(String(50), primary_key=True)
    payload = Column(Text, nullable=False)  # JSON
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    def __repr__(self):
        return f"<AppState(key='{self.key}')>"


# Database initialization functions
def create_database(db_url="sqlite:///peptide_calculator.db"):
    """Create all tables in the database"""
    engine = create_engine(db_url)
    Base.metadata.create_all(engine)
    return engine


def get_session(db_url="sqlite:///peptide_calculator.db", engine=None):
    """Get a database session, creating tables on first use"""
    if engine is None:
        engine = create_database(db_url)
    Session = sessionmaker(bind=engine)
    return Session()


if __name__ == "__main__":
    print("Creating database tables...")
    engine = create_database()
    print("Database tables created successfully!")
