from sqlalchemy import Column, Integer, String, Float, Date, ForeignKey, DateTime, Text, JSON
from datetime import datetime, date
from coachtrack.database import Base

class MealLog(Base):
    __tablename__ = "meal_logs"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    date = Column(Date, default=date.today)
    time = Column(String(20), nullable=True) # e.g. "13:45"

    # Logged Item
    meal_type = Column(String(50), nullable=False) # e.g. Breakfast, Lunch, Dinner
    foods_detected = Column(JSON, nullable=True) # ["Steamed Rice (150g)", "Dal Tadka (1 bowl)"]
    calories_est = Column(Float, nullable=False)
    protein = Column(Float, default=0.0)
    carbs = Column(Float, default=0.0)
    fat = Column(Float, default=0.0)

    notes = Column(Text, nullable=True)
    image_url = Column(String(255), nullable=True)

    created_at = Column(DateTime, default=datetime.now)
