from typing import Optional

from pydantic import BaseModel, computed_field

from cookingdb.schemas.recipe import Recipe
from cookingdb.schemas.state import RenderState


class RenderedEntry(BaseModel):
    token: str = ""
    option_key: str = ""
    ingredient_id: Optional[str] = None
    text: str
    scalable: bool = False
    amount: Optional[float] = None
    amount_text: str = ""
    unit: Optional[str] = None
    unit_label: str = ""
    base_amount: Optional[float] = None
    base_amount_text: str = ""
    base_unit: Optional[str] = None
    base_unit_label: str = ""
    conversion_factor: Optional[float] = None  # 1 base unit in display units, when converted

    @property
    def converted(self) -> bool:
        return self.conversion_factor is not None


class RenderedLine(BaseModel):
    text: str
    alternatives: list[str] = []
    entries: list[RenderedEntry] = []
    section: Optional[str] = None
    line_group: Optional[str] = None

    @computed_field
    @property
    def display_text(self) -> str:
        unique = list(dict.fromkeys(alt for alt in self.alternatives if alt))
        if not unique:
            return self.text
        return f"{self.text} (or {' / '.join(unique)})"


class LineSection(BaseModel):
    section: Optional[str] = None
    lines: list[RenderedLine] = []


class RenderRequest(BaseModel):
    recipe: Recipe
    state: Optional[RenderState] = None
    requested_restrictions: Optional[dict[str, Optional[bool]]] = None
    pan_id: Optional[str] = None


class RenderResponse(BaseModel):
    recipe_id: str
    effective_multiplier: float
    ingredients: list[LineSection]
    steps: list[LineSection]
    state: RenderState
    restriction_status: dict[str, dict]
