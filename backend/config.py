from pydantic import BaseModel
from pydantic_settings import BaseSettings


class PricingDefaults(BaseModel):
    """Shop defaults the stair pricer falls back to when a request leaves a value out."""
    nose_size: float = 1.25
    rough_cut_width: float = 10.25
    stair_width: float = 38.0
    landing_tread_width: float = 3.5
    riser_board_width: float = 8.0
    tread_thickness: float = 1.0
    stringer_thickness: float = 1.0
    stringer_width: float = 9.25
    tread_material_id: int = 20
    riser_material_id: int = 20
    stringer_material_id: int = 20


class Settings(BaseSettings):
    DATABASE_URL: str = "sqlite:///./millwork.db"
    COMPANY_NAME: str = "Millwork Stair Parts"
    COMPANY_EMAIL: str = "office@millworkstairs.com"
    COMPANY_PHONE: str = ""
    LOG_LEVEL: str = "INFO"

    # Fallback when neither the request, the job nor the state table supplies one
    DEFAULT_TAX_RATE: float = 0.06
    SEED_CATALOG_ON_STARTUP: bool = True

    # Pricing defaults; override per shop via env (PRICING_STAIR_WIDTH=42 etc.)
    PRICING_NOSE_SIZE: float = 1.25
    PRICING_ROUGH_CUT_WIDTH: float = 10.25
    PRICING_STAIR_WIDTH: float = 38.0
    PRICING_LANDING_TREAD_WIDTH: float = 3.5
    PRICING_RISER_BOARD_WIDTH: float = 8.0
    PRICING_TREAD_THICKNESS: float = 1.0
    PRICING_STRINGER_THICKNESS: float = 1.0
    PRICING_STRINGER_WIDTH: float = 9.25
    PRICING_TREAD_MATERIAL_ID: int = 20
    PRICING_RISER_MATERIAL_ID: int = 20
    PRICING_STRINGER_MATERIAL_ID: int = 20

    class Config:
        env_file = ".env"

    def pricing_defaults(self) -> PricingDefaults:
        return PricingDefaults(
            nose_size=self.PRICING_NOSE_SIZE,
            rough_cut_width=self.PRICING_ROUGH_CUT_WIDTH,
            stair_width=self.PRICING_STAIR_WIDTH,
            landing_tread_width=self.PRICING_LANDING_TREAD_WIDTH,
            riser_board_width=self.PRICING_RISER_BOARD_WIDTH,
            tread_thickness=self.PRICING_TREAD_THICKNESS,
            stringer_thickness=self.PRICING_STRINGER_THICKNESS,
            stringer_width=self.PRICING_STRINGER_WIDTH,
            tread_material_id=self.PRICING_TREAD_MATERIAL_ID,
            riser_material_id=self.PRICING_RISER_MATERIAL_ID,
            stringer_material_id=self.PRICING_STRINGER_MATERIAL_ID,
        )


settings = Settings()
