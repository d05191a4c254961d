from pydantic import BaseModel
from typing import Optional, List
from datetime import date, datetime
from .models import BoardRole, TreadType, ProductType, JobStatus, ConfigItemType


# --- Stair pricing requests ---

class TreadSpec(BaseModel):
    riser_number: int
    type: TreadType = TreadType.BOX
    stair_width: float


class StringerSide(BaseModel):
    width: float
    thickness: float
    material_id: Optional[int] = None  # defaults to the configured stringer material
    count: int = 1


class StringerSet(BaseModel):
    left: StringerSide
    right: StringerSide
    center: Optional[StringerSide] = None


class SpecialPartRequest(BaseModel):
    part_id: int
    quantity: int = 1
    material_id: Optional[int] = None  # defaults to the tread material


class StairPriceRequest(BaseModel):
    floor_to_floor: float
    num_risers: int
    treads: List[TreadSpec] = []
    tread_material_id: Optional[int] = None
    riser_material_id: Optional[int] = None
    rough_cut_width: Optional[float] = None
    nose_size: Optional[float] = None
    # Per-side stringers; when absent the legacy single label is used, then shop defaults
    stringers: Optional[StringerSet] = None
    stringer_type: Optional[str] = None     # "1x9.25" = thickness x width
    stringer_material_id: Optional[int] = None
    num_stringers: int = 2
    center_horses: int = 0
    full_mitre: bool = False
    bracket_type: Optional[str] = None
    special_parts: List[SpecialPartRequest] = []
    # Tax context: first one present wins
    tax_rate: Optional[float] = None
    job_id: Optional[int] = None
    state_code: Optional[str] = None
    hide_labor_and_tax: bool = False
    as_of: Optional[date] = None


# --- Tread bulk configuration ---

class TreadBulkConfig(BaseModel):
    box_tread_count: int = 0
    box_tread_width: float = 0.0
    open_tread_count: int = 0
    open_tread_width: float = 0.0
    open_tread_direction: str = "left"  # 'left' | 'right'
    double_open_count: int = 0
    double_open_width: float = 0.0


class TreadBulkUpdate(BaseModel):
    type: Optional[TreadType] = None
    stair_width: Optional[float] = None
    riser_numbers: Optional[List[int]] = None  # None -> every tread


class TreadBulkRequest(BaseModel):
    num_risers: int
    bulk: Optional[TreadBulkConfig] = None
    treads: List[TreadSpec] = []
    update: Optional[TreadBulkUpdate] = None
    locked_riser_numbers: List[int] = []


# --- Linear products ---

class LinearPriceRequest(BaseModel):
    product_id: int
    material_id: int
    length: Optional[float] = None  # inches; ignored for rail parts
    quantity: int = 1
    include_labor: bool = False


# --- Catalog ---

class MaterialBase(BaseModel):
    name: str
    multiplier: float = 1.0
    display_order: int = 0
    is_active: bool = True


class MaterialCreate(MaterialBase):
    pass


class MaterialUpdate(BaseModel):
    name: Optional[str] = None
    multiplier: Optional[float] = None
    display_order: Optional[int] = None
    is_active: Optional[bool] = None


class Material(MaterialBase):
    id: int
    class Config:
        from_attributes = True


class BoardType(BaseModel):
    id: int
    code: BoardRole
    description: str
    purpose: Optional[str] = None
    priced_per_riser: bool = False
    is_active: bool = True
    class Config:
        from_attributes = True


class PriceRuleBase(BaseModel):
    board_type_id: int
    material_id: Optional[int] = None
    length_min: float = 0.0
    length_max: Optional[float] = None
    width_min: float = 0.0
    width_max: Optional[float] = None
    thickness_min: float = 0.0
    thickness_max: Optional[float] = None
    begin_date: date
    end_date: Optional[date] = None
    unit_cost: float
    full_mitre_cost: float = 0.0
    base_length: float = 36.0
    base_width: float = 9.0
    base_thickness: float = 1.0
    length_increment: float = 6.0
    length_increment_cost: float = 0.0
    width_increment: float = 1.0
    width_increment_cost: float = 0.0
    thickness_increment: float = 0.25
    thickness_increment_cost: float = 0.0
    is_active: bool = True


class PriceRuleCreate(PriceRuleBase):
    pass


class PriceRuleUpdate(BaseModel):
    length_min: Optional[float] = None
    length_max: Optional[float] = None
    width_min: Optional[float] = None
    width_max: Optional[float] = None
    thickness_min: Optional[float] = None
    thickness_max: Optional[float] = None
    begin_date: Optional[date] = None
    end_date: Optional[date] = None
    unit_cost: Optional[float] = None
    full_mitre_cost: Optional[float] = None
    base_length: Optional[float] = None
    base_width: Optional[float] = None
    base_thickness: Optional[float] = None
    length_increment: Optional[float] = None
    length_increment_cost: Optional[float] = None
    width_increment: Optional[float] = None
    width_increment_cost: Optional[float] = None
    thickness_increment: Optional[float] = None
    thickness_increment_cost: Optional[float] = None
    is_active: Optional[bool] = None


class PriceRule(PriceRuleBase):
    id: int
    class Config:
        from_attributes = True


class SpecialPart(BaseModel):
    id: int
    part_id: int
    material_id: int
    description: str
    unit_cost: float
    labor_cost: float = 0.0
    class Config:
        from_attributes = True


class Product(BaseModel):
    id: int
    name: str
    product_type: ProductType
    cost_per_6_inches: Optional[float] = None
    base_price: Optional[float] = None
    labor_install_cost: float = 0.0
    class Config:
        from_attributes = True


# --- Jobs ---

class QuoteItemBase(BaseModel):
    description: str
    product_id: Optional[int] = None
    quantity: float = 1.0
    unit_price: float = 0.0
    is_taxable: bool = True


class QuoteItemCreate(QuoteItemBase):
    pass


class QuoteItem(QuoteItemBase):
    id: int
    line_total: float
    stair_configuration_id: Optional[int] = None
    class Config:
        from_attributes = True


class JobSectionBase(BaseModel):
    name: str
    is_labor_section: bool = False
    display_order: int = 0


class JobSectionCreate(JobSectionBase):
    items: List[QuoteItemCreate] = []


class JobSection(JobSectionBase):
    id: int
    items: List[QuoteItem] = []
    class Config:
        from_attributes = True


class JobBase(BaseModel):
    title: Optional[str] = None
    customer_name: Optional[str] = None
    state_code: Optional[str] = None
    tax_rate: Optional[float] = None
    notes: Optional[str] = None


class JobCreate(JobBase):
    sections: List[JobSectionCreate] = []


class Job(JobBase):
    id: int
    job_number: str
    status: JobStatus
    created_at: datetime
    sections: List[JobSection] = []
    class Config:
        from_attributes = True


# --- Saved stair configurations ---

class StairConfigurationCreate(BaseModel):
    job_id: Optional[int] = None
    config_name: Optional[str] = None
    special_notes: Optional[str] = None
    # Adds a line item for the stair to this section of the job
    section_id: Optional[int] = None
    request: StairPriceRequest


class StairConfigItem(BaseModel):
    id: int
    item_type: ConfigItemType
    description: Optional[str] = None
    riser_number: Optional[int] = None
    tread_type: Optional[str] = None
    width: Optional[float] = None
    length: Optional[float] = None
    thickness: Optional[float] = None
    board_type: Optional[str] = None
    material_id: Optional[int] = None
    special_part_id: Optional[int] = None
    quantity: float
    unit_price: float
    labor_price: float
    total_price: float
    class Config:
        from_attributes = True


class StairConfiguration(BaseModel):
    id: int
    job_id: Optional[int] = None
    config_name: Optional[str] = None
    floor_to_floor: float
    num_risers: int
    riser_height: float
    tread_material_id: int
    riser_material_id: int
    rough_cut_width: Optional[float] = None
    nose_size: Optional[float] = None
    stringer_type: Optional[str] = None
    num_stringers: int
    center_horses: int
    left_stringer_width: Optional[float] = None
    left_stringer_thickness: Optional[float] = None
    left_stringer_material_id: Optional[int] = None
    right_stringer_width: Optional[float] = None
    right_stringer_thickness: Optional[float] = None
    right_stringer_material_id: Optional[int] = None
    center_stringer_width: Optional[float] = None
    center_stringer_thickness: Optional[float] = None
    center_stringer_material_id: Optional[int] = None
    full_mitre: bool
    bracket_type: Optional[str] = None
    has_landing_tread: bool
    tax_rate: float
    subtotal: float
    labor_total: float
    tax_amount: float
    total_amount: float
    special_notes: Optional[str] = None
    created_at: datetime
    items: List[StairConfigItem] = []
    class Config:
        from_attributes = True
