"""create pricing catalog and job tables

Revision ID: 4f1c2a9b7d30
Revises:
Create Date: 2026-10-19 09:12:44.103215

Base schema: material multipliers, stair board types, price rules, special
parts, linear products, tax rates, jobs/sections/items and saved stair
configurations. Tables that already exist (create_all) are skipped.
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '4f1c2a9b7d30'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

BOARD_ROLES = ("BOX_TREAD", "OPEN_LEFT_TREAD", "OPEN_RIGHT_TREAD", "DOUBLE_OPEN_TREAD",
               "RISER", "STRINGER", "CENTER_HORSE")
PRODUCT_TYPES = ("HANDRAIL", "LANDING_TREAD", "RAIL_PARTS")
JOB_STATUSES = ("QUOTE", "ORDER", "INVOICE")
CONFIG_ITEM_TYPES = ("TREAD", "LANDING_TREAD", "RISER", "STRINGER", "SPECIAL_PART")


def _table_exists(table_name):
    """Check if a table exists."""
    bind = op.get_bind()
    insp = sa.inspect(bind)
    return table_name in insp.get_table_names()


def upgrade() -> None:
    if not _table_exists("material_multipliers"):
        op.create_table(
            "material_multipliers",
            sa.Column("id", sa.Integer(), primary_key=True, index=True),
            sa.Column("name", sa.String(), nullable=False, unique=True),
            sa.Column("multiplier", sa.Float(), nullable=False),
            sa.Column("display_order", sa.Integer(), nullable=True),
            sa.Column("is_active", sa.Boolean(), nullable=True),
            sa.Column("updated_at", sa.DateTime(), nullable=True),
        )

    if not _table_exists("stair_board_types"):
        op.create_table(
            "stair_board_types",
            sa.Column("id", sa.Integer(), primary_key=True, index=True),
            sa.Column("code", sa.Enum(*BOARD_ROLES, name="boardrole"), nullable=False, unique=True),
            sa.Column("description", sa.String(), nullable=False),
            sa.Column("purpose", sa.String(), nullable=True),
            sa.Column("priced_per_riser", sa.Boolean(), nullable=True),
            sa.Column("is_active", sa.Boolean(), nullable=True),
        )

    if not _table_exists("stair_price_rules"):
        op.create_table(
            "stair_price_rules",
            sa.Column("id", sa.Integer(), primary_key=True, index=True),
            sa.Column("board_type_id", sa.Integer(), sa.ForeignKey("stair_board_types.id"), nullable=False),
            sa.Column("material_id", sa.Integer(), sa.ForeignKey("material_multipliers.id"), nullable=True),
            sa.Column("length_min", sa.Float(), nullable=True),
            sa.Column("length_max", sa.Float(), nullable=True),
            sa.Column("width_min", sa.Float(), nullable=True),
            sa.Column("width_max", sa.Float(), nullable=True),
            sa.Column("thickness_min", sa.Float(), nullable=True),
            sa.Column("thickness_max", sa.Float(), nullable=True),
            sa.Column("begin_date", sa.Date(), nullable=False),
            sa.Column("end_date", sa.Date(), nullable=True),
            sa.Column("unit_cost", sa.Float(), nullable=False),
            sa.Column("full_mitre_cost", sa.Float(), nullable=True),
            sa.Column("base_length", sa.Float(), nullable=True),
            sa.Column("base_width", sa.Float(), nullable=True),
            sa.Column("base_thickness", sa.Float(), nullable=True),
            sa.Column("length_increment", sa.Float(), nullable=True),
            sa.Column("length_increment_cost", sa.Float(), nullable=True),
            sa.Column("width_increment", sa.Float(), nullable=True),
            sa.Column("width_increment_cost", sa.Float(), nullable=True),
            sa.Column("thickness_increment", sa.Float(), nullable=True),
            sa.Column("thickness_increment_cost", sa.Float(), nullable=True),
            sa.Column("is_active", sa.Boolean(), nullable=True),
            sa.Column("created_at", sa.DateTime(), nullable=True),
            sa.Column("updated_at", sa.DateTime(), nullable=True),
        )

    if not _table_exists("stair_special_parts"):
        op.create_table(
            "stair_special_parts",
            sa.Column("id", sa.Integer(), primary_key=True, index=True),
            sa.Column("part_id", sa.Integer(), nullable=False, index=True),
            sa.Column("material_id", sa.Integer(), sa.ForeignKey("material_multipliers.id"), nullable=False),
            sa.Column("description", sa.String(), nullable=False),
            sa.Column("unit_cost", sa.Float(), nullable=False),
            sa.Column("labor_cost", sa.Float(), nullable=True),
            sa.Column("is_active", sa.Boolean(), nullable=True),
        )

    if not _table_exists("products"):
        op.create_table(
            "products",
            sa.Column("id", sa.Integer(), primary_key=True, index=True),
            sa.Column("name", sa.String(), nullable=False),
            sa.Column("product_type", sa.Enum(*PRODUCT_TYPES, name="producttype"), nullable=False),
            sa.Column("cost_per_6_inches", sa.Float(), nullable=True),
            sa.Column("base_price", sa.Float(), nullable=True),
            sa.Column("labor_install_cost", sa.Float(), nullable=True),
            sa.Column("is_active", sa.Boolean(), nullable=True),
        )

    if not _table_exists("tax_rates"):
        op.create_table(
            "tax_rates",
            sa.Column("id", sa.Integer(), primary_key=True, index=True),
            sa.Column("state_code", sa.String(length=2), nullable=False, unique=True),
            sa.Column("rate", sa.Float(), nullable=False),
            sa.Column("updated_at", sa.DateTime(), nullable=True),
        )

    if not _table_exists("jobs"):
        op.create_table(
            "jobs",
            sa.Column("id", sa.Integer(), primary_key=True, index=True),
            sa.Column("job_number", sa.String(), nullable=False, unique=True),
            sa.Column("title", sa.String(), nullable=True),
            sa.Column("customer_name", sa.String(), nullable=True),
            sa.Column("status", sa.Enum(*JOB_STATUSES, name="jobstatus"), nullable=True),
            sa.Column("state_code", sa.String(length=2), nullable=True),
            sa.Column("tax_rate", sa.Float(), nullable=True),
            sa.Column("notes", sa.Text(), nullable=True),
            sa.Column("created_at", sa.DateTime(), nullable=True),
            sa.Column("updated_at", sa.DateTime(), nullable=True),
        )

    if not _table_exists("job_sections"):
        op.create_table(
            "job_sections",
            sa.Column("id", sa.Integer(), primary_key=True, index=True),
            sa.Column("job_id", sa.Integer(), sa.ForeignKey("jobs.id"), nullable=False),
            sa.Column("name", sa.String(), nullable=False),
            sa.Column("is_labor_section", sa.Boolean(), nullable=True),
            sa.Column("display_order", sa.Integer(), nullable=True),
        )

    if not _table_exists("stair_configurations"):
        op.create_table(
            "stair_configurations",
            sa.Column("id", sa.Integer(), primary_key=True, index=True),
            sa.Column("job_id", sa.Integer(), sa.ForeignKey("jobs.id"), nullable=True),
            sa.Column("config_name", sa.String(), nullable=True),
            sa.Column("floor_to_floor", sa.Float(), nullable=False),
            sa.Column("num_risers", sa.Integer(), nullable=False),
            sa.Column("riser_height", sa.Float(), nullable=False),
            sa.Column("tread_material_id", sa.Integer(), nullable=False),
            sa.Column("riser_material_id", sa.Integer(), nullable=False),
            sa.Column("rough_cut_width", sa.Float(), nullable=True),
            sa.Column("nose_size", sa.Float(), nullable=True),
            sa.Column("stringer_type", sa.String(), nullable=True),
            sa.Column("num_stringers", sa.Integer(), nullable=True),
            sa.Column("center_horses", sa.Integer(), nullable=True),
            *[
                sa.Column(f"{side}_stringer_{field}", col_type, nullable=True)
                for side in ("left", "right", "center")
                for field, col_type in (("width", sa.Float()), ("thickness", sa.Float()),
                                        ("material_id", sa.Integer()))
            ],
            sa.Column("full_mitre", sa.Boolean(), nullable=True),
            sa.Column("bracket_type", sa.String(), nullable=True),
            sa.Column("has_landing_tread", sa.Boolean(), nullable=True),
            sa.Column("tax_rate", sa.Float(), nullable=False),
            sa.Column("subtotal", sa.Float(), nullable=True),
            sa.Column("labor_total", sa.Float(), nullable=True),
            sa.Column("tax_amount", sa.Float(), nullable=True),
            sa.Column("total_amount", sa.Float(), nullable=True),
            sa.Column("special_notes", sa.Text(), nullable=True),
            sa.Column("created_at", sa.DateTime(), nullable=True),
        )

    if not _table_exists("stair_config_items"):
        op.create_table(
            "stair_config_items",
            sa.Column("id", sa.Integer(), primary_key=True, index=True),
            sa.Column("config_id", sa.Integer(), sa.ForeignKey("stair_configurations.id"), nullable=False),
            sa.Column("item_type", sa.Enum(*CONFIG_ITEM_TYPES, name="configitemtype"), nullable=False),
            sa.Column("description", sa.String(), nullable=True),
            sa.Column("riser_number", sa.Integer(), nullable=True),
            sa.Column("tread_type", sa.String(), nullable=True),
            sa.Column("width", sa.Float(), nullable=True),
            sa.Column("length", sa.Float(), nullable=True),
            sa.Column("thickness", sa.Float(), nullable=True),
            sa.Column("board_type", sa.String(), nullable=True),
            sa.Column("material_id", sa.Integer(), nullable=True),
            sa.Column("special_part_id", sa.Integer(), nullable=True),
            sa.Column("quantity", sa.Float(), nullable=True),
            sa.Column("unit_price", sa.Float(), nullable=True),
            sa.Column("labor_price", sa.Float(), nullable=True),
            sa.Column("total_price", sa.Float(), nullable=True),
        )

    if not _table_exists("quote_items"):
        op.create_table(
            "quote_items",
            sa.Column("id", sa.Integer(), primary_key=True, index=True),
            sa.Column("section_id", sa.Integer(), sa.ForeignKey("job_sections.id"), nullable=False),
            sa.Column("description", sa.String(), nullable=False),
            sa.Column("product_id", sa.Integer(), sa.ForeignKey("products.id"), nullable=True),
            sa.Column("stair_configuration_id", sa.Integer(),
                      sa.ForeignKey("stair_configurations.id"), nullable=True),
            sa.Column("quantity", sa.Float(), nullable=True),
            sa.Column("unit_price", sa.Float(), nullable=True),
            sa.Column("line_total", sa.Float(), nullable=True),
            sa.Column("is_taxable", sa.Boolean(), nullable=True),
        )


def downgrade() -> None:
    for table in ("quote_items", "stair_config_items", "stair_configurations", "job_sections", "jobs",
                  "tax_rates", "products", "stair_special_parts", "stair_price_rules",
                  "stair_board_types", "material_multipliers"):
        if _table_exists(table):
            op.drop_table(table)
