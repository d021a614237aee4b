from cookingdb.services.nutrition.targets import meal_targets, normalize_meal_fractions
from cookingdb.services.nutrition.totals import (
    compute_batch_totals,
    match_nutrition_variant,
    scale_nutrition_totals,
    variant_is_complete,
)
