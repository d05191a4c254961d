from sqlalchemy import Column, Integer, String, Float, Date, DateTime, Text, ForeignKey, Enum, Boolean
from sqlalchemy.orm import relationship
from datetime import datetime
from .database import Base
import enum


# --- Enums ---

class BoardRole(str, enum.Enum):
    BOX_TREAD = "box_tread"
    OPEN_LEFT_TREAD = "open_left_tread"
    OPEN_RIGHT_TREAD = "open_right_tread"
    DOUBLE_OPEN_TREAD = "double_open_tread"
    RISER = "riser"
    STRINGER = "stringer"
    CENTER_HORSE = "center_horse"


class TreadType(str, enum.Enum):
    BOX = "box"
    OPEN_LEFT = "open_left"
    OPEN_RIGHT = "open_right"
    DOUBLE_OPEN = "double_open"


# Tread type -> board type used to price it
TREAD_BOARD_ROLES = {
    TreadType.BOX: BoardRole.BOX_TREAD,
    TreadType.OPEN_LEFT: BoardRole.OPEN_LEFT_TREAD,
    TreadType.OPEN_RIGHT: BoardRole.OPEN_RIGHT_TREAD,
    TreadType.DOUBLE_OPEN: BoardRole.DOUBLE_OPEN_TREAD,
}


class ProductType(str, enum.Enum):
    HANDRAIL = "handrail"
    LANDING_TREAD = "landing_tread"
    RAIL_PARTS = "rail_parts"


class JobStatus(str, enum.Enum):
    QUOTE = "quote"
    ORDER = "order"
    INVOICE = "invoice"


class ConfigItemType(str, enum.Enum):
    TREAD = "tread"
    LANDING_TREAD = "landing_tread"
    RISER = "riser"
    STRINGER = "stringer"
    SPECIAL_PART = "special_part"


# --- Catalog tables (administrator-maintained, read-only during pricing) ---

class Material(Base):
    """Wood/finish species with a price multiplier against base unit costs."""
    __tablename__ = "material_multipliers"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, unique=True, nullable=False)
    multiplier = Column(Float, nullable=False, default=1.0)
    display_order = Column(Integer, default=0)
    is_active = Column(Boolean, default=True)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)


class BoardType(Base):
    __tablename__ = "stair_board_types"

    id = Column(Integer, primary_key=True, index=True)
    code = Column(Enum(BoardRole), unique=True, nullable=False)
    description = Column(String, nullable=False)
    purpose = Column(String, nullable=True)
    priced_per_riser = Column(Boolean, default=False)  # stringers/horses price per riser, boards per piece
    is_active = Column(Boolean, default=True)

    price_rules = relationship("PriceRule", back_populates="board_type")


class PriceRule(Base):
    """
    Unit cost + dimensional surcharges for a board type in a dimension band.

    A null material_id applies to every material; a null *_max is unbounded;
    a null end_date is open-ended.
    """
    __tablename__ = "stair_price_rules"

    id = Column(Integer, primary_key=True, index=True)
    board_type_id = Column(Integer, ForeignKey("stair_board_types.id"), nullable=False)
    material_id = Column(Integer, ForeignKey("material_multipliers.id"), nullable=True)

    # Dimension bands (inches)
    length_min = Column(Float, default=0.0)
    length_max = Column(Float, nullable=True)
    width_min = Column(Float, default=0.0)
    width_max = Column(Float, nullable=True)
    thickness_min = Column(Float, default=0.0)
    thickness_max = Column(Float, nullable=True)

    # Validity window
    begin_date = Column(Date, nullable=False)
    end_date = Column(Date, nullable=True)

    # Pricing
    unit_cost = Column(Float, nullable=False)
    full_mitre_cost = Column(Float, default=0.0)
    base_length = Column(Float, default=36.0)
    base_width = Column(Float, default=9.0)
    base_thickness = Column(Float, default=1.0)
    length_increment = Column(Float, default=6.0)
    length_increment_cost = Column(Float, default=0.0)
    width_increment = Column(Float, default=1.0)
    width_increment_cost = Column(Float, default=0.0)
    thickness_increment = Column(Float, default=0.25)
    thickness_increment_cost = Column(Float, default=0.0)

    is_active = Column(Boolean, default=True)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    board_type = relationship("BoardType", back_populates="price_rules")
    material = relationship("Material")


class SpecialPart(Base):
    """Optional stair add-ons (brackets, newels, volutes) priced per material."""
    __tablename__ = "stair_special_parts"

    id = Column(Integer, primary_key=True, index=True)
    part_id = Column(Integer, nullable=False, index=True)
    material_id = Column(Integer, ForeignKey("material_multipliers.id"), nullable=False)
    description = Column(String, nullable=False)
    unit_cost = Column(Float, nullable=False)
    labor_cost = Column(Float, default=0.0)
    is_active = Column(Boolean, default=True)

    material = relationship("Material")


class Product(Base):
    """Non-stair catalog products priced by length or by piece."""
    __tablename__ = "products"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False)
    product_type = Column(Enum(ProductType), nullable=False)
    cost_per_6_inches = Column(Float, nullable=True)
    base_price = Column(Float, nullable=True)
    labor_install_cost = Column(Float, default=0.0)
    is_active = Column(Boolean, default=True)


class TaxRate(Base):
    __tablename__ = "tax_rates"

    id = Column(Integer, primary_key=True, index=True)
    state_code = Column(String(2), unique=True, nullable=False)
    rate = Column(Float, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)


# --- Job records ---

class Job(Base):
    __tablename__ = "jobs"

    id = Column(Integer, primary_key=True, index=True)
    job_number = Column(String, unique=True, nullable=False)
    title = Column(String, nullable=True)
    customer_name = Column(String, nullable=True)
    status = Column(Enum(JobStatus), default=JobStatus.QUOTE)
    state_code = Column(String(2), nullable=True)
    tax_rate = Column(Float, nullable=True)  # null -> look up by state
    notes = Column(Text)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    sections = relationship("JobSection", back_populates="job", cascade="all, delete-orphan",
                            order_by="JobSection.display_order")
    stair_configurations = relationship("StairConfiguration", back_populates="job",
                                        cascade="all, delete-orphan")


class JobSection(Base):
    __tablename__ = "job_sections"

    id = Column(Integer, primary_key=True, index=True)
    job_id = Column(Integer, ForeignKey("jobs.id"), nullable=False)
    name = Column(String, nullable=False)
    is_labor_section = Column(Boolean, default=False)
    display_order = Column(Integer, default=0)

    job = relationship("Job", back_populates="sections")
    items = relationship("QuoteItem", back_populates="section", cascade="all, delete-orphan")


class QuoteItem(Base):
    __tablename__ = "quote_items"

    id = Column(Integer, primary_key=True, index=True)
    section_id = Column(Integer, ForeignKey("job_sections.id"), nullable=False)
    description = Column(String, nullable=False)
    product_id = Column(Integer, ForeignKey("products.id"), nullable=True)
    stair_configuration_id = Column(Integer, ForeignKey("stair_configurations.id"), nullable=True)
    quantity = Column(Float, default=1.0)
    unit_price = Column(Float, default=0.0)
    line_total = Column(Float, default=0.0)
    is_taxable = Column(Boolean, default=True)

    section = relationship("JobSection", back_populates="items")


# --- Saved stair configurations ---

class StairConfiguration(Base):
    """A priced stair request saved against a job. Replaced, never edited in place."""
    __tablename__ = "stair_configurations"

    id = Column(Integer, primary_key=True, index=True)
    job_id = Column(Integer, ForeignKey("jobs.id"), nullable=True)
    config_name = Column(String, nullable=True)
    floor_to_floor = Column(Float, nullable=False)
    num_risers = Column(Integer, nullable=False)
    riser_height = Column(Float, nullable=False)
    tread_material_id = Column(Integer, nullable=False)
    riser_material_id = Column(Integer, nullable=False)
    rough_cut_width = Column(Float, nullable=True)
    nose_size = Column(Float, nullable=True)
    stringer_type = Column(String, nullable=True)
    num_stringers = Column(Integer, default=2)
    center_horses = Column(Integer, default=0)
    left_stringer_width = Column(Float, nullable=True)
    left_stringer_thickness = Column(Float, nullable=True)
    left_stringer_material_id = Column(Integer, nullable=True)
    right_stringer_width = Column(Float, nullable=True)
    right_stringer_thickness = Column(Float, nullable=True)
    right_stringer_material_id = Column(Integer, nullable=True)
    center_stringer_width = Column(Float, nullable=True)
    center_stringer_thickness = Column(Float, nullable=True)
    center_stringer_material_id = Column(Integer, nullable=True)
    full_mitre = Column(Boolean, default=False)
    bracket_type = Column(String, nullable=True)
    has_landing_tread = Column(Boolean, default=False)
    tax_rate = Column(Float, nullable=False)
    subtotal = Column(Float, default=0.0)
    labor_total = Column(Float, default=0.0)
    tax_amount = Column(Float, default=0.0)
    total_amount = Column(Float, default=0.0)
    special_notes = Column(Text)
    created_at = Column(DateTime, default=datetime.utcnow)

    job = relationship("Job", back_populates="stair_configurations")
    items = relationship("StairConfigItem", back_populates="configuration",
                         cascade="all, delete-orphan", order_by="StairConfigItem.id")


class StairConfigItem(Base):
    __tablename__ = "stair_config_items"

    id = Column(Integer, primary_key=True, index=True)
    config_id = Column(Integer, ForeignKey("stair_configurations.id"), nullable=False)
    item_type = Column(Enum(ConfigItemType), nullable=False)
    description = Column(String, nullable=True)
    riser_number = Column(Integer, nullable=True)
    tread_type = Column(String, nullable=True)
    width = Column(Float, nullable=True)
    length = Column(Float, nullable=True)
    thickness = Column(Float, nullable=True)
    board_type = Column(String, nullable=True)
    material_id = Column(Integer, nullable=True)
    special_part_id = Column(Integer, nullable=True)
    quantity = Column(Float, default=1)
    unit_price = Column(Float, default=0.0)
    labor_price = Column(Float, default=0.0)
    total_price = Column(Float, default=0.0)

    configuration = relationship("StairConfiguration", back_populates="items")
