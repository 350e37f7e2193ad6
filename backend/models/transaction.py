"""
Transaction Model - Maps DLD open-data columns to the transactions table

DLD Column Mapping (Dubai Pulse dld_transactions):
  Store column            → Domain field          Notes
  ─────────────────────────────────────────────────────────────
  transaction_id          → transaction_id        Primary key
  instance_date           → instance_date         Text; ISO or DD-MM-YYYY
  area_name_en            → area_name             Required for every query
  building_name_en        → building_name
  project_name_en         → project_name
  master_project_en       → master_project_name
  property_type_en        → property_type         Unit / Villa / Land / Building
  property_sub_type_en    → property_sub_type     e.g., "Flat", "Office"
  property_usage_en       → property_usage        Residential / Commercial
  reg_type_en             → reg_type              Ready / Off-plan
  trans_group_en          → trans_group           Sales / Mortgage / Gift
  procedure_name_en       → procedure_name        e.g., "Sell"
  rooms_en                → rooms                 Opaque label: "2 B/R", "Studio"
  has_parking             → has_parking           0 / 1
  procedure_area          → procedure_area        m²
  actual_worth            → actual_worth          AED
  meter_sale_price        → meter_sale_price      AED per m²
  nearest_metro_en        → nearest_metro
  nearest_mall_en         → nearest_mall
  nearest_landmark_en     → nearest_landmark
  (computed)              → area_sqft             procedure_area * 10.764
  (computed)              → price_per_sqft        meter_sale_price / 10.764
"""
from dataclasses import dataclass
from datetime import date
from typing import Any, Dict, Mapping, Optional

from sqlalchemy import Column, Float, Integer, String, Text

from models.database import Base
from utils.normalize import parse_instance_date
from utils.units import price_per_sqm_to_sqft, sqm_to_sqft


class Transaction(Base):
    __tablename__ = 'transactions'

    # === Primary Key ===
    transaction_id = Column(String(64), primary_key=True)

    # === Date (text in SQLite; see db.sql.SORTABLE_DATE_SQL) ===
    instance_date = Column(String(32), index=True)

    # === Location ===
    area_name_en = Column(Text, index=True)
    building_name_en = Column(Text, index=True)
    project_name_en = Column(Text)
    master_project_en = Column(Text)

    # === Categorical ===
    property_type_en = Column(Text)
    property_sub_type_en = Column(Text)
    property_usage_en = Column(Text)
    reg_type_en = Column(Text)
    trans_group_en = Column(Text)
    procedure_name_en = Column(Text)
    rooms_en = Column(Text)
    has_parking = Column(Integer)

    # === Measures (m² / AED) ===
    procedure_area = Column(Float)
    actual_worth = Column(Integer)
    meter_sale_price = Column(Float)

    # === Nearby ===
    nearest_metro_en = Column(Text)
    nearest_mall_en = Column(Text)
    nearest_landmark_en = Column(Text)

    def __repr__(self):
        return f"<Transaction {self.transaction_id} {self.instance_date} {self.building_name_en}>"


# Columns selected by every row-returning query, in output order
ROW_COLUMNS = (
    'transaction_id',
    'instance_date',
    'area_name_en',
    'building_name_en',
    'project_name_en',
    'master_project_en',
    'property_type_en',
    'property_sub_type_en',
    'property_usage_en',
    'reg_type_en',
    'trans_group_en',
    'procedure_name_en',
    'rooms_en',
    'has_parking',
    'procedure_area',
    'actual_worth',
    'meter_sale_price',
    'nearest_metro_en',
    'nearest_mall_en',
    'nearest_landmark_en',
)

ROW_SELECT_SQL = ", ".join(ROW_COLUMNS)


@dataclass(frozen=True)
class TransactionRow:
    """One immutable transaction as read from the store."""
    transaction_id: str
    instance_date: Optional[date]
    area_name: Optional[str]
    building_name: Optional[str]
    project_name: Optional[str]
    master_project_name: Optional[str]
    property_type: Optional[str]
    property_sub_type: Optional[str]
    property_usage: Optional[str]
    reg_type: Optional[str]
    trans_group: Optional[str]
    rooms: Optional[str]
    procedure_area: Optional[float]
    actual_worth: Optional[int]
    meter_sale_price: Optional[float]
    procedure_name: Optional[str] = None
    has_parking: Optional[bool] = None
    nearest_metro: Optional[str] = None
    nearest_mall: Optional[str] = None
    nearest_landmark: Optional[str] = None

    @property
    def area_sqft(self) -> Optional[float]:
        return sqm_to_sqft(self.procedure_area)

    @property
    def price_per_sqft(self) -> Optional[float]:
        return price_per_sqm_to_sqft(self.meter_sale_price)

    @classmethod
    def from_mapping(cls, row: Mapping[str, Any]) -> "TransactionRow":
        """Build from a store row keyed by column name."""
        worth = row.get('actual_worth')
        parking = row.get('has_parking')
        return cls(
            transaction_id=str(row['transaction_id']),
            instance_date=parse_instance_date(row.get('instance_date')),
            area_name=row.get('area_name_en'),
            building_name=row.get('building_name_en'),
            project_name=row.get('project_name_en'),
            master_project_name=row.get('master_project_en'),
            property_type=row.get('property_type_en'),
            property_sub_type=row.get('property_sub_type_en'),
            property_usage=row.get('property_usage_en'),
            reg_type=row.get('reg_type_en'),
            trans_group=row.get('trans_group_en'),
            rooms=row.get('rooms_en'),
            procedure_area=row.get('procedure_area'),
            actual_worth=int(worth) if worth is not None else None,
            meter_sale_price=row.get('meter_sale_price'),
            procedure_name=row.get('procedure_name_en'),
            has_parking=bool(parking) if parking is not None else None,
            nearest_metro=row.get('nearest_metro_en'),
            nearest_mall=row.get('nearest_mall_en'),
            nearest_landmark=row.get('nearest_landmark_en'),
        )

    def to_dict(self) -> Dict[str, Any]:
        """Raw stored fields (DLD column names) plus the derived sqft fields."""
        return {
            'transaction_id': self.transaction_id,
            'instance_date': self.instance_date.isoformat() if self.instance_date else None,
            'area_name_en': self.area_name,
            'building_name_en': self.building_name,
            'project_name_en': self.project_name,
            'master_project_en': self.master_project_name,
            'property_type_en': self.property_type,
            'property_sub_type_en': self.property_sub_type,
            'property_usage_en': self.property_usage,
            'reg_type_en': self.reg_type,
            'trans_group_en': self.trans_group,
            'procedure_name_en': self.procedure_name,
            'rooms_en': self.rooms,
            'has_parking': self.has_parking,
            'procedure_area': self.procedure_area,
            'actual_worth': self.actual_worth,
            'meter_sale_price': self.meter_sale_price,
            'nearest_metro_en': self.nearest_metro,
            'nearest_mall_en': self.nearest_mall,
            'nearest_landmark_en': self.nearest_landmark,
            'area_sqft': self.area_sqft,
            'price_per_sqft': self.price_per_sqft,
        }
