from sqlalchemy import ARRAY, JSON, Column, Integer

from traindb.core.db import Base


class CarMarriage(Base):
    __tablename__ = "car_marriages"
    marriage_id = Column(Integer, primary_key=True)
    batch_id = Column(Integer, nullable=False)
    # Ordered member vehicle ids; stored as JSON where the dialect has no arrays
    cars = Column(ARRAY(Integer).with_variant(JSON(), "sqlite"), nullable=False, default=[])
    marriage_size = Column(Integer, nullable=False)
