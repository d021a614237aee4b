"""
Pick the active option for each ingredient token.

Resolution is two-phase: every token is resolved first, then dependent entries
are checked against the resolved controlling tokens. Dependencies are one
level deep; a controlling token that is itself dependent is reported, not
followed.
"""

from dataclasses import dataclass
from typing import Optional

from cookingdb.logging import get_logger
from cookingdb.schemas.recipe import Dependency, Option, Recipe, TokenData
from cookingdb.schemas.state import RenderState
from cookingdb.services.dietary import option_meets_restrictions, restrictions_active

logger = get_logger(__name__)


@dataclass
class ResolvedToken:
    token: str
    token_data: TokenData
    option: Optional[Option]
    dependency: Optional[Dependency]
    visible: bool = True


def default_option_for_token(token: str, recipe: Recipe) -> Optional[Option]:
    """The option used when nobody has chosen anything and no restriction applies."""
    token_data = recipe.token_data(token)
    if not token_data.is_choice:
        return token_data.options[0]
    members = token_data.choice_options()
    preferred = recipe.default_option_key(token)
    for opt in members:
        if opt.option_key == preferred:
            return opt
    return members[0] if members else token_data.options[0]


def select_option_for_token(token: str, recipe: Recipe, state: RenderState) -> Optional[Option]:
    token_data = recipe.token_data(token)
    if not token_data.is_choice:
        return token_data.options[0]

    members = token_data.choice_options()
    if not members:
        return token_data.options[0]

    stored_key = state.selected_options.get(token)
    default_key = recipe.default_option_key(token)
    selected = _find(members, stored_key) or _find(members, default_key) or members[0]

    if restrictions_active(state.restrictions):
        compatible = [opt for opt in members if option_meets_restrictions(opt, state.restrictions)]
        if compatible and not option_meets_restrictions(selected, state.restrictions):
            replacement = _find(compatible, stored_key) or _find(compatible, default_key) or compatible[0]
            logger.debug(
                "resolver.restriction_override token=%s from=%s to=%s",
                token,
                selected.option_key,
                replacement.option_key,
            )
            selected = replacement

    if state.selected_options.get(token) != selected.option_key:
        state.selected_options[token] = selected.option_key
    return selected


def alternative_options(
    token_data: TokenData, state: RenderState, selected: Optional[Option]
) -> list[Option]:
    """Swappable siblings of ``selected`` that satisfy the active restrictions."""
    if not token_data.is_choice:
        return []
    members = token_data.choice_options()
    if restrictions_active(state.restrictions):
        members = [opt for opt in members if option_meets_restrictions(opt, state.restrictions)]
    selected_key = selected.option_key if selected else None
    return [opt for opt in members if opt.option_key != selected_key]


def dependency_for(token_data: TokenData, option: Optional[Option]) -> Optional[Dependency]:
    if option is not None and option.depends_on is not None:
        return option.depends_on
    return token_data.depends_on


def sync_selections(recipe: Recipe, state: RenderState) -> None:
    """Resolve every choice token once so ``state.selected_options`` is fully primed."""
    for token in recipe.choices:
        if token in recipe.ingredients:
            select_option_for_token(token, recipe, state)


def resolve_tokens(recipe: Recipe, state: RenderState) -> list[ResolvedToken]:
    resolved: dict[str, ResolvedToken] = {}

    # Phase 1: every token, controllers included, before any visibility check.
    for token in recipe.token_order:
        token_data = recipe.token_data(token)
        option = select_option_for_token(token, recipe, state)
        resolved[token] = ResolvedToken(token, token_data, option, dependency_for(token_data, option))

    # Phase 2: filter dependents against phase-1 results.
    for entry in resolved.values():
        if entry.dependency is None:
            continue
        controller = resolved.get(entry.dependency.token)
        if controller is None:
            controller_data = recipe.token_data(entry.dependency.token)
            controller_option = select_option_for_token(entry.dependency.token, recipe, state)
            controller = ResolvedToken(
                entry.dependency.token,
                controller_data,
                controller_option,
                dependency_for(controller_data, controller_option),
            )
        if controller.dependency is not None:
            logger.warning(
                "resolver.nested_dependency recipe=%s token=%s controller=%s controller_depends_on=%s",
                recipe.id,
                entry.token,
                controller.token,
                controller.dependency.token,
            )
        entry.visible = dependency_satisfied(entry.dependency, controller.option)

    return [resolved[token] for token in recipe.token_order]


def dependency_satisfied(dependency: Dependency, controller_option: Optional[Option]) -> bool:
    if controller_option is None:
        return False
    if dependency.option is None:
        return True
    return controller_option.option_key == dependency.option


def _find(options: list[Option], key: Optional[str]) -> Optional[Option]:
    if not key:
        return None
    for opt in options:
        if opt.option_key == key:
            return opt
    return None
