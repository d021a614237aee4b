"""Unit table lookup and ad-hoc conversion for the scaling controls."""

from fastapi import APIRouter, HTTPException, Query

from cookingdb.services.units.registry import (
    convert_unit_amount,
    format_unit_label,
    normalize_unit,
    unit_definition,
    unit_groups,
    unit_options_for,
)

router = APIRouter(prefix="/units")


@router.get("")
def list_units():
    """Return unit groups as {group: {label, base, units: {id: {label, plural, to_base}}}}."""
    return {"groups": unit_groups()}


@router.get("/options")
def list_unit_options(unit: str):
    """Units the given unit can be displayed in (same group only)."""
    if unit_definition(unit) is None:
        raise HTTPException(status_code=400, detail=f"unknown unit: {unit}")
    return {"unit": normalize_unit(unit), "options": [o._asdict() for o in unit_options_for(unit)]}


@router.get("/convert")
def convert(amount: float = Query(...), from_unit: str = Query(...), to_unit: str = Query(...)):
    converted = convert_unit_amount(amount, from_unit, to_unit)
    if converted is None:
        raise HTTPException(
            status_code=400, detail=f"cannot convert {from_unit} to {to_unit} without bridging data"
        )
    return {
        "amount": converted.amount,
        "unit": converted.unit,
        "label": format_unit_label(converted.unit, converted.amount),
    }
