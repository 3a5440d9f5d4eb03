"""
Shared base for domain models built from store rows

Author: TM3
Date: 2025-10-17
"""
from datetime import date, datetime
from decimal import Decimal
from enum import Enum

from pydantic import BaseModel, ConfigDict


class RecordModel(BaseModel):
    """Pydantic model that serializes Decimal as float and dates as ISO strings"""

    model_config = ConfigDict(
        from_attributes=True,
        coerce_numbers_to_str=True,
        extra="ignore",
    )

    def to_dict(self) -> dict:
        """Convert to a JSON-friendly dictionary"""
        data = self.model_dump()
        for key, value in data.items():
            if isinstance(value, Decimal):
                data[key] = float(value)
            elif isinstance(value, (date, datetime)):
                data[key] = value.isoformat()
            elif isinstance(value, Enum):
                data[key] = value.value
        return data
