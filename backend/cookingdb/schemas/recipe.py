"""
Normalized recipe documents as produced by the offline build step.

Field aliases mirror the built JSON (``token_order``, ``isChoice``, ``option``);
attribute names are snake_case and either form is accepted on input.
"""

import math
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class DietaryFlags(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    gluten_free: bool = False
    egg_free: bool = False
    dairy_free: bool = False


class Dependency(BaseModel):
    token: str
    option: Optional[str] = None  # None: visible whenever the controlling token resolves


class NutritionVariant(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    serving_qty: float = 1.0
    serving_unit: Optional[str] = None
    kcal: Optional[float] = None
    protein_g: Optional[float] = None
    fat_g: Optional[float] = None
    sat_fat_g: Optional[float] = None
    carbs_g: Optional[float] = None
    sugars_g: Optional[float] = None
    fiber_g: Optional[float] = None
    sodium_mg: Optional[float] = None
    added_sugar_g: Optional[float] = None

    @field_validator("serving_qty", mode="before")
    @classmethod
    def _default_serving_qty(cls, value: object) -> object:
        if value is None:
            return 1.0
        try:
            qty = float(value)
        except (TypeError, ValueError):
            return 1.0
        return qty if math.isfinite(qty) and qty > 0 else 1.0


class Option(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    option_key: str = Field(default="", alias="option")
    display: str = ""
    ratio: Optional[str] = None
    unit: Optional[str] = None
    ingredient_id: Optional[str] = None
    dietary: Optional[DietaryFlags] = None
    depends_on: Optional[Dependency] = None
    line_group: Optional[str] = None
    section: Optional[str] = None
    nutrition: list[NutritionVariant] = []

    @field_validator("option_key", mode="before")
    @classmethod
    def _blank_option_key(cls, value: object) -> object:
        return "" if value is None else value


class TokenData(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    token: str
    is_choice: bool = Field(default=False, alias="isChoice")
    options: list[Option] = Field(min_length=1)
    depends_on: Optional[Dependency] = None
    line_group: Optional[str] = None
    section: Optional[str] = None

    def choice_options(self) -> list[Option]:
        """Options that carry a key, i.e. the members a user can swap between."""
        return [opt for opt in self.options if opt.option_key]


class Choice(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    token: Optional[str] = None
    label: str = ""
    default_option: Optional[str] = None


class StepEntry(BaseModel):
    section: Optional[str] = None
    text: str = ""


class PanSize(BaseModel):
    id: str
    label: Optional[str] = None
    shape: str = "rectangle"  # rectangle | square | round | muffin
    width: Optional[float] = None
    height: Optional[float] = None
    cups: Optional[float] = None


class Recipe(BaseModel):
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    id: str
    title: str = ""
    default_base: float = 1.0
    servings_per_batch: Optional[float] = None
    token_order: list[str] = []
    ingredients: dict[str, TokenData] = {}
    choices: dict[str, Choice] = {}
    ingredient_sections: list[str] = []
    step_sections: list[str] = []
    steps_raw: str = ""
    steps: list[StepEntry] = []
    compatibility_possible: Optional[DietaryFlags] = None
    pan_sizes: list[PanSize] = []
    default_pan: Optional[str] = None

    @field_validator("default_base", mode="before")
    @classmethod
    def _default_base(cls, value: object) -> object:
        try:
            base = float(value)
        except (TypeError, ValueError):
            return 1.0
        return base if math.isfinite(base) and base > 0 else 1.0

    def token_data(self, token: str) -> TokenData:
        """Look up a token; a miss is an upstream contract violation."""
        try:
            return self.ingredients[token]
        except KeyError:
            raise KeyError(f"recipe {self.id!r} has no ingredient token {token!r}") from None

    def default_option_key(self, token: str) -> Optional[str]:
        choice = self.choices.get(token)
        return choice.default_option if choice else None
